from __future__ import annotations

import random
from typing import Iterable, Mapping

from src.domain.models import TRAFFIC_SEQUENCE, RoadLink, TrafficLevel

TrafficMap = Mapping[str, TrafficLevel]

DRIFT_PROBABILITY = 0.2


def segment_key(a: str, b: str) -> str:
    """Order-independent key for the road between two stops."""

    return "__".join(sorted((a, b)))


def seed_traffic_map(road_network: Iterable[RoadLink]) -> dict[str, TrafficLevel]:
    return {segment_key(link.from_id, link.to_id): link.level for link in road_network}


def ensure_traffic_entries(
    traffic: TrafficMap,
    new_stop_id: str,
    existing_ids: Iterable[str],
    default_level: TrafficLevel = TrafficLevel.MODERATE,
) -> dict[str, TrafficLevel]:
    """Pair a new stop with every existing stop. Existing entries are kept."""

    updated = dict(traffic)
    for other_id in existing_ids:
        if other_id == new_stop_id:
            continue
        updated.setdefault(segment_key(new_stop_id, other_id), default_level)
    return updated


def shift_level(level: TrafficLevel, step: int) -> TrafficLevel:
    if level not in TRAFFIC_SEQUENCE:
        return level
    idx = TRAFFIC_SEQUENCE.index(level)
    idx = max(0, min(len(TRAFFIC_SEQUENCE) - 1, idx + step))
    return TRAFFIC_SEQUENCE[idx]


def drift_traffic(
    traffic: TrafficMap, rng: random.Random | None = None
) -> dict[str, TrafficLevel]:
    """Simulated congestion change: each entry may ease or worsen by one step."""

    roll = (rng or random).random
    updated = dict(traffic)
    for key, level in traffic.items():
        r = roll()
        if r < DRIFT_PROBABILITY:
            updated[key] = shift_level(level, -1)
        elif r > 1.0 - DRIFT_PROBABILITY:
            updated[key] = shift_level(level, 1)
    return updated


def traffic_level_for(
    traffic: TrafficMap | None,
    a: str,
    b: str,
    default: TrafficLevel = TrafficLevel.MODERATE,
) -> TrafficLevel:
    if not traffic:
        return default
    return traffic.get(segment_key(a, b), default)
