from __future__ import annotations

import math
from typing import Iterable

from src.domain.models import GeoPoint, Stop

EARTH_RADIUS_KM = 6371.0


def haversine_distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in kilometers."""

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlat = lat2 - lat1
    dlon = math.radians(b.lon - a.lon)

    s = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    )
    return EARTH_RADIUS_KM * 2.0 * math.atan2(math.sqrt(s), math.sqrt(1.0 - s))


def haversine_distance_m(a: GeoPoint, b: GeoPoint) -> float:
    return haversine_distance_km(a, b) * 1000.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def format_distance(km: float) -> str:
    if km < 1:
        return f"{_round_half_up(km * 1000)} m"
    return f"{_round_half_up(km * 10) / 10:.1f} km"


def format_duration(minutes: float) -> str:
    if minutes < 1:
        return "< 1 minute"
    if minutes < 60:
        return _plural(_round_half_up(minutes), "minute")

    hours = int(minutes // 60)
    mins = _round_half_up(minutes - hours * 60)
    if mins == 60:
        hours, mins = hours + 1, 0
    if mins == 0:
        return _plural(hours, "hour")
    return f"{_plural(hours, 'hour')} {_plural(mins, 'minute')}"


def nearest_stop(
    point: GeoPoint, stops: Iterable[Stop]
) -> tuple[Stop, float] | None:
    """Closest non-ephemeral stop to a point, with its distance in km.

    Ties keep the stop encountered first.
    """

    best: tuple[Stop, float] | None = None
    for stop in stops:
        if stop.ephemeral:
            continue
        d = haversine_distance_km(point, stop.location)
        if not math.isfinite(d):
            continue
        if best is None or d < best[1]:
            best = (stop, d)
    return best
