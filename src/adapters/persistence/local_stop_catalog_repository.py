from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from src.app.ports.output import IStopCatalogRepository
from src.domain.models import GeoPoint, RoadLink, Stop, StopCatalog, TrafficLevel


def _stop(raw: Mapping[str, Any]) -> Stop:
    stop_id = str(raw.get("id") or "").strip()
    if not stop_id:
        raise ValueError("Catalog stop without id")
    position = raw.get("position")
    if not isinstance(position, (list, tuple)) or len(position) != 2:
        raise ValueError(f"Catalog stop {stop_id!r} has no [lat, lon] position")
    description = (raw.get("description") or "").strip() or None
    return Stop(
        id=stop_id,
        name=(raw.get("name") or stop_id).strip(),
        location=GeoPoint(lat=float(position[0]), lon=float(position[1])),
        description=description,
    )


@dataclass(slots=True)
class LocalStopCatalogRepository(IStopCatalogRepository):
    """Loads the static stop catalog from a JSON file.

    Env vars:
      - STOP_CATALOG_PATH: path to the catalog (default data/catalog.json)

    File shape:
      {"base": {...stop}, "stops": [{...stop}], "road_network":
       [{"from": id, "to": id, "traffic": "light|moderate|heavy"}]}
    where a stop is {"id", "name", "description"?, "position": [lat, lon]}.
    """

    path: str | Path | None = None

    def _path(self) -> Path:
        value = self.path or os.getenv("STOP_CATALOG_PATH") or "data/catalog.json"
        return Path(value)

    def load_catalog(self) -> StopCatalog:
        with self._path().open("r", encoding="utf-8") as fp:
            raw = json.load(fp)

        base = _stop(raw["base"])
        stops = tuple(_stop(s) for s in raw.get("stops") or ())

        known = {base.id, *(s.id for s in stops)}
        links: list[RoadLink] = []
        for entry in raw.get("road_network") or ():
            from_id = str(entry.get("from") or "")
            to_id = str(entry.get("to") or "")
            # Links to unknown stops would never be looked up.
            if from_id not in known or to_id not in known:
                continue
            links.append(
                RoadLink(
                    from_id=from_id,
                    to_id=to_id,
                    level=TrafficLevel(entry.get("traffic") or TrafficLevel.MODERATE.value),
                )
            )

        return StopCatalog(base=base, stops=stops, road_network=tuple(links))
