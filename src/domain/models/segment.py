from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .geo import GeoPoint
from .routing import ManeuverModifier, ManeuverType
from .stop import Stop
from .traffic import TrafficLevel


class InstructionKind(str, Enum):
    DEPART = "depart"
    ARRIVE = "arrive"
    MANEUVER = "maneuver"


class InstructionSymbol(str, Enum):
    """Icon-selection tag for an instruction."""

    DEPART = "depart"
    ARRIVE = "arrive"
    STRAIGHT = "straight"
    CONTINUE = "continue"
    LEFT = "left"
    RIGHT = "right"
    SLIGHT_LEFT = "slight_left"
    SLIGHT_RIGHT = "slight_right"
    SHARP_LEFT = "sharp_left"
    SHARP_RIGHT = "sharp_right"
    MERGE = "merge"
    FORK = "fork"
    UTURN_LEFT = "uturn_left"
    UTURN_RIGHT = "uturn_right"
    ROUNDABOUT = "roundabout"


@dataclass(frozen=True, slots=True)
class Instruction:
    id: str
    text: str
    kind: InstructionKind
    symbol: InstructionSymbol
    distance_label: str | None = None
    maneuver_type: ManeuverType | None = None
    maneuver_modifier: ManeuverModifier | None = None


@dataclass(frozen=True, slots=True)
class Segment:
    """Travel between two consecutive stops of the route.

    Geometry is never empty: without richer data it is the straight line
    between both stops.
    """

    id: str
    from_stop: Stop
    to_stop: Stop
    distance_km: float
    duration_minutes: float
    geometry: tuple[GeoPoint, ...]
    color: str
    label: str
    speed_kmh: float
    traffic_level: TrafficLevel | None = None
    instructions: tuple[Instruction, ...] = ()


@dataclass(frozen=True, slots=True)
class RouteTotals:
    distance_km: float = 0.0
    duration_minutes: float = 0.0

    def __add__(self, other: "RouteTotals") -> "RouteTotals":
        return RouteTotals(
            distance_km=self.distance_km + other.distance_km,
            duration_minutes=self.duration_minutes + other.duration_minutes,
        )
