from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TrafficLevel(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"


# Ordered from least to most congested.
TRAFFIC_SEQUENCE: tuple[TrafficLevel, ...] = (
    TrafficLevel.LIGHT,
    TrafficLevel.MODERATE,
    TrafficLevel.HEAVY,
)


@dataclass(frozen=True, slots=True)
class TrafficPreset:
    label: str
    color: str  # css hex with '#'
    speed_kmh: float


DEFAULT_TRAFFIC_PRESETS: dict[TrafficLevel, TrafficPreset] = {
    TrafficLevel.LIGHT: TrafficPreset(label="Light traffic", color="#2e7d32", speed_kmh=45.0),
    TrafficLevel.MODERATE: TrafficPreset(
        label="Moderate traffic", color="#f9a825", speed_kmh=30.0
    ),
    TrafficLevel.HEAVY: TrafficPreset(label="Heavy traffic", color="#c62828", speed_kmh=15.0),
}


@dataclass(frozen=True, slots=True)
class RoadLink:
    """Static road-network entry used to seed the traffic overlay."""

    from_id: str
    to_id: str
    level: TrafficLevel = TrafficLevel.MODERATE
