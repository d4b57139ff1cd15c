from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

LonLat = tuple[float, float]


class ManeuverType(str, Enum):
    DEPART = "depart"
    ARRIVE = "arrive"
    TURN = "turn"
    CONTINUE = "continue"
    MERGE = "merge"
    FORK = "fork"
    ROUNDABOUT = "roundabout"
    ROTARY = "rotary"
    END_OF_ROAD = "end of road"
    ON_RAMP = "on ramp"
    OFF_RAMP = "off ramp"
    NEW_NAME = "new name"
    UTURN = "uturn"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: object) -> "ManeuverType":
        if not isinstance(raw, str):
            return cls.UNKNOWN
        key = raw.strip().lower().replace("-", " ").replace("_", " ")
        return _MANEUVER_ALIASES.get(key, cls.UNKNOWN)


_MANEUVER_ALIASES: dict[str, ManeuverType] = {
    **{m.value: m for m in ManeuverType},
    "u turn": ManeuverType.UTURN,
    "roundabout turn": ManeuverType.ROUNDABOUT,
    "exit roundabout": ManeuverType.ROUNDABOUT,
    "exit rotary": ManeuverType.ROTARY,
    "use lane": ManeuverType.CONTINUE,
    "notification": ManeuverType.CONTINUE,
    "ramp": ManeuverType.ON_RAMP,
}


class ManeuverModifier(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    STRAIGHT = "straight"
    SLIGHT_LEFT = "slight left"
    SLIGHT_RIGHT = "slight right"
    SHARP_LEFT = "sharp left"
    SHARP_RIGHT = "sharp right"
    UTURN = "uturn"

    @classmethod
    def parse(cls, raw: object) -> "ManeuverModifier | None":
        if not isinstance(raw, str):
            return None
        key = raw.strip().lower().replace("-", " ").replace("_", " ")
        if key == "u turn":
            key = "uturn"
        try:
            return cls(key)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class Maneuver:
    type: ManeuverType = ManeuverType.UNKNOWN
    modifier: ManeuverModifier | None = None
    exit: int | None = None
    raw_type: str | None = None


@dataclass(frozen=True, slots=True)
class RoutingStep:
    """One maneuver of a leg. Geometry is in the service's (lon, lat) order."""

    maneuver: Maneuver = field(default_factory=Maneuver)
    name: str = ""
    distance_m: float = 0.0
    duration_s: float = 0.0
    geometry: tuple[LonLat, ...] = ()
    instruction: str | None = None


@dataclass(frozen=True, slots=True)
class RoutingLeg:
    distance_m: float = 0.0
    duration_s: float = 0.0
    steps: tuple[RoutingStep, ...] = ()
    geometry: tuple[LonLat, ...] = ()


@dataclass(frozen=True, slots=True)
class RouteCandidate:
    distance_m: float = 0.0
    duration_s: float = 0.0
    geometry: tuple[LonLat, ...] = ()
    legs: tuple[RoutingLeg, ...] = ()


@dataclass(frozen=True, slots=True)
class RoutingResponse:
    routes: tuple[RouteCandidate, ...] = ()

    @property
    def best(self) -> RouteCandidate | None:
        return self.routes[0] if self.routes else None
