from .catalog import StopCatalog
from .geo import GeoPoint
from .route_state import RouteState, RouteStatus
from .routing import (
    Maneuver,
    ManeuverModifier,
    ManeuverType,
    RouteCandidate,
    RoutingLeg,
    RoutingResponse,
    RoutingStep,
)
from .segment import (
    Instruction,
    InstructionKind,
    InstructionSymbol,
    RouteTotals,
    Segment,
)
from .stop import Stop
from .traffic import (
    DEFAULT_TRAFFIC_PRESETS,
    TRAFFIC_SEQUENCE,
    RoadLink,
    TrafficLevel,
    TrafficPreset,
)

__all__ = [
    "DEFAULT_TRAFFIC_PRESETS",
    "GeoPoint",
    "Instruction",
    "InstructionKind",
    "InstructionSymbol",
    "Maneuver",
    "ManeuverModifier",
    "ManeuverType",
    "RoadLink",
    "RouteCandidate",
    "RouteState",
    "RouteStatus",
    "RouteTotals",
    "RoutingLeg",
    "RoutingResponse",
    "RoutingStep",
    "Segment",
    "Stop",
    "StopCatalog",
    "TRAFFIC_SEQUENCE",
    "TrafficLevel",
    "TrafficPreset",
]
