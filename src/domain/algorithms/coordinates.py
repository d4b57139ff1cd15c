from __future__ import annotations

from typing import Iterable, Sequence

from src.domain.models import GeoPoint, RouteCandidate, RoutingLeg, RoutingStep


def to_local_order(lon_lat_pairs: Iterable[Sequence[float]]) -> tuple[GeoPoint, ...]:
    """Convert routing-service (lon, lat) pairs into GeoPoints."""

    return tuple(GeoPoint(lat=float(pair[1]), lon=float(pair[0])) for pair in lon_lat_pairs)


def merge_step_geometries(steps: Iterable[RoutingStep]) -> tuple[GeoPoint, ...]:
    """Join per-step polylines into one continuous path.

    Consecutive steps share their boundary vertex, so every step after the
    first one drops its leading point.
    """

    merged: list[GeoPoint] = []
    for index, step in enumerate(steps):
        coords = to_local_order(step.geometry)
        if not coords:
            continue
        merged.extend(coords if index == 0 else coords[1:])
    return tuple(merged)


def leg_geometry(
    leg: RoutingLeg | None, fallback: tuple[GeoPoint, ...]
) -> tuple[GeoPoint, ...]:
    if leg is None:
        return fallback
    if leg.steps:
        coords = merge_step_geometries(leg.steps)
        if coords:
            return coords
    if leg.geometry:
        coords = to_local_order(leg.geometry)
        if coords:
            return coords
    return fallback


def route_geometry(candidate: RouteCandidate | None) -> tuple[GeoPoint, ...]:
    if candidate is None:
        return ()
    return to_local_order(candidate.geometry)


def format_waypoints(points: Iterable[GeoPoint]) -> str:
    """Routing-service path parameter: 'lon,lat;lon,lat;...'."""

    return ";".join(f"{p.lon},{p.lat}" for p in points)
