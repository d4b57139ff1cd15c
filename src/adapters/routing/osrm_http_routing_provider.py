from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import httpx

from src.adapters.osrm import OsrmRuntimeConfig
from src.app.ports.output import IRoutingProvider
from src.domain.algorithms.coordinates import format_waypoints
from src.domain.exceptions import NoRouteFound, RoutingServiceError
from src.domain.models import (
    GeoPoint,
    Maneuver,
    ManeuverModifier,
    ManeuverType,
    RouteCandidate,
    RoutingLeg,
    RoutingResponse,
    RoutingStep,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OsrmHttpRoutingProvider(IRoutingProvider):
    """OSRM /route client over httpx.

    Env vars (see OsrmRuntimeConfig):
      - ROUTING_BASE_URL (default https://router.project-osrm.org)
      - ROUTING_PROFILE (default driving)
      - ROUTING_TIMEOUT_S (default 10)

    Notes:
      - No retries: any failure is reported once to the caller.
      - An empty `routes` array is returned as-is; deciding that it is a
        failure belongs to the caller.
      - OSRM `NoRoute` / `NoSegment` error codes raise NoRouteFound.
    """

    config: OsrmRuntimeConfig = field(default_factory=OsrmRuntimeConfig.from_env)
    transport: httpx.AsyncBaseTransport | None = None

    async def fetch_route(
        self, waypoints: Sequence[GeoPoint], *, annotations: bool = True
    ) -> RoutingResponse:
        if len(waypoints) < 2:
            raise ValueError("At least two waypoints are required for a route.")

        url = self.config.route_url(format_waypoints(waypoints))
        params = {
            "overview": "full",
            "steps": "true",
            "geometries": "geojson",
        }
        if annotations:
            params["annotations"] = "duration,distance"

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_s, transport=self.transport
            ) as client:
                resp = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise RoutingServiceError(
                f"Unable to reach the routing service: {exc.__class__.__name__}"
            ) from exc

        if resp.is_error:
            if _error_code(resp) in {"NoRoute", "NoSegment"}:
                raise NoRouteFound("No suitable route found")
            raise RoutingServiceError(f"Routing service returned status {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise RoutingServiceError("Routing service returned malformed JSON") from exc

        if not isinstance(payload, dict):
            raise RoutingServiceError("Routing service returned an unexpected payload")

        response = parse_routing_response(payload)
        logger.debug(
            "Routing service answered with %d route(s) for %d waypoints",
            len(response.routes),
            len(waypoints),
        )
        return response


def _error_code(resp: httpx.Response) -> str | None:
    try:
        payload = resp.json()
    except ValueError:
        return None
    if isinstance(payload, Mapping) and isinstance(payload.get("code"), str):
        return payload["code"]
    return None


def _number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _coords(geometry: Any) -> tuple[tuple[float, float], ...]:
    if not isinstance(geometry, Mapping):
        return ()
    out: list[tuple[float, float]] = []
    for pair in geometry.get("coordinates") or ():
        try:
            lon, lat = float(pair[0]), float(pair[1])
        except (TypeError, ValueError, IndexError):
            continue
        out.append((lon, lat))
    return tuple(out)


def _maneuver(raw: Any) -> Maneuver:
    if not isinstance(raw, Mapping):
        return Maneuver()
    exit_raw = raw.get("exit")
    exit_number = int(exit_raw) if isinstance(exit_raw, (int, float)) and exit_raw > 0 else None
    raw_type = raw.get("type") if isinstance(raw.get("type"), str) else None
    return Maneuver(
        type=ManeuverType.parse(raw_type),
        modifier=ManeuverModifier.parse(raw.get("modifier")),
        exit=exit_number,
        raw_type=raw_type,
    )


def _step(raw: Mapping[str, Any]) -> RoutingStep:
    maneuver_raw = raw.get("maneuver")
    instruction = raw.get("instruction")
    if not instruction and isinstance(maneuver_raw, Mapping):
        instruction = maneuver_raw.get("instruction")
    return RoutingStep(
        maneuver=_maneuver(maneuver_raw),
        name=str(raw.get("name") or ""),
        distance_m=_number(raw.get("distance")),
        duration_s=_number(raw.get("duration")),
        geometry=_coords(raw.get("geometry")),
        instruction=instruction if isinstance(instruction, str) and instruction else None,
    )


def _leg(raw: Mapping[str, Any]) -> RoutingLeg:
    return RoutingLeg(
        distance_m=_number(raw.get("distance")),
        duration_s=_number(raw.get("duration")),
        steps=tuple(_step(s) for s in raw.get("steps") or () if isinstance(s, Mapping)),
        geometry=_coords(raw.get("geometry")),
    )


def parse_routing_response(payload: Mapping[str, Any]) -> RoutingResponse:
    """Decode an OSRM GeoJSON route response into domain types."""

    routes: list[RouteCandidate] = []
    for raw in payload.get("routes") or ():
        if not isinstance(raw, Mapping):
            continue
        routes.append(
            RouteCandidate(
                distance_m=_number(raw.get("distance")),
                duration_s=_number(raw.get("duration")),
                geometry=_coords(raw.get("geometry")),
                legs=tuple(
                    _leg(leg) for leg in raw.get("legs") or () if isinstance(leg, Mapping)
                ),
            )
        )
    return RoutingResponse(routes=tuple(routes))
