from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .geo import GeoPoint
from .routing import RoutingLeg


class RouteStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class RouteState:
    """Snapshot of one routing target (main route or manual session)."""

    status: RouteStatus = RouteStatus.IDLE
    coordinates: tuple[GeoPoint, ...] = ()
    legs: tuple[RoutingLeg, ...] = ()
    distance_km: float = 0.0
    duration_minutes: float = 0.0
    error: str | None = None

    @staticmethod
    def idle() -> "RouteState":
        return RouteState()

    @staticmethod
    def loading() -> "RouteState":
        return RouteState(status=RouteStatus.LOADING)

    @staticmethod
    def succeeded(
        *,
        coordinates: tuple[GeoPoint, ...],
        legs: tuple[RoutingLeg, ...],
        distance_km: float,
        duration_minutes: float,
    ) -> "RouteState":
        return RouteState(
            status=RouteStatus.SUCCESS,
            coordinates=coordinates,
            legs=legs,
            distance_km=distance_km,
            duration_minutes=duration_minutes,
        )

    @staticmethod
    def failed(message: str) -> "RouteState":
        return RouteState(status=RouteStatus.ERROR, error=message)

    @property
    def is_success(self) -> bool:
        return self.status is RouteStatus.SUCCESS
