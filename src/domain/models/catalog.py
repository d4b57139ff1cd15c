from __future__ import annotations

from dataclasses import dataclass

from .stop import Stop
from .traffic import RoadLink


@dataclass(frozen=True, slots=True)
class StopCatalog:
    """Static stops known at startup.

    The base stop is the map's reference point; it can be routed but is not
    a candidate for nearest-stop lookups.
    """

    base: Stop
    stops: tuple[Stop, ...] = ()
    road_network: tuple[RoadLink, ...] = ()
