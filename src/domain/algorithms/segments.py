from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from src.domain.algorithms.coordinates import leg_geometry
from src.domain.algorithms.geo_utils import haversine_distance_km
from src.domain.algorithms.instructions import InstructionSynthesizer
from src.domain.algorithms.traffic import TrafficMap, traffic_level_for
from src.domain.models import (
    DEFAULT_TRAFFIC_PRESETS,
    GeoPoint,
    Instruction,
    RouteTotals,
    RoutingLeg,
    Segment,
    Stop,
    TrafficLevel,
    TrafficPreset,
)

DEFAULT_SPEED_KMH = 45.0
DEFAULT_SEGMENT_COLOR = "#1976d2"
DEFAULT_SEGMENT_LABEL = "Updating"

# Callers must pass sequences whose ids all exist in `stops_by_id`.


def _edge(
    from_stop: Stop,
    to_stop: Stop,
    *,
    distance_km: float,
    duration_minutes: float,
    geometry: tuple[GeoPoint, ...],
    traffic: TrafficMap | None,
    presets: Mapping[TrafficLevel, TrafficPreset],
    instructions: Iterable[Instruction] = (),
) -> Segment:
    level = traffic_level_for(traffic, from_stop.id, to_stop.id)
    preset = presets.get(level)
    return Segment(
        id=f"{from_stop.id}-{to_stop.id}",
        from_stop=from_stop,
        to_stop=to_stop,
        distance_km=distance_km,
        duration_minutes=duration_minutes,
        geometry=geometry,
        color=preset.color if preset else DEFAULT_SEGMENT_COLOR,
        label=preset.label if preset else DEFAULT_SEGMENT_LABEL,
        speed_kmh=preset.speed_kmh if preset else DEFAULT_SPEED_KMH,
        traffic_level=level,
        instructions=tuple(instructions),
    )


def build_segments_from_legs(
    legs: Sequence[RoutingLeg],
    stop_sequence: Sequence[str],
    stops_by_id: Mapping[str, Stop],
    traffic: TrafficMap | None = None,
    presets: Mapping[TrafficLevel, TrafficPreset] | None = None,
    *,
    synthesizer: InstructionSynthesizer | None = None,
) -> tuple[Segment, ...]:
    """Segments for a routed sequence.

    Legs are positional: leg i belongs to edge (stop i, stop i+1). Edges
    without a leg get the straight-line estimate.
    """

    if len(stop_sequence) < 2:
        return ()

    presets = DEFAULT_TRAFFIC_PRESETS if presets is None else presets
    synthesizer = synthesizer or InstructionSynthesizer()
    edge_count = len(stop_sequence) - 1

    segments: list[Segment] = []
    for index, (from_id, to_id) in enumerate(zip(stop_sequence, stop_sequence[1:])):
        from_stop = stops_by_id[from_id]
        to_stop = stops_by_id[to_id]
        leg = legs[index] if index < len(legs) else None

        straight_km = haversine_distance_km(from_stop.location, to_stop.location)
        distance_km = leg.distance_m / 1000.0 if leg and leg.distance_m else straight_km
        duration_minutes = (
            leg.duration_s / 60.0
            if leg and leg.duration_s
            else distance_km / DEFAULT_SPEED_KMH * 60.0
        )
        instructions = (
            synthesizer.instructions_for_leg(
                leg, from_stop, to_stop, leg_index=index, leg_count=edge_count
            )
            if leg
            else ()
        )

        segments.append(
            _edge(
                from_stop,
                to_stop,
                distance_km=distance_km,
                duration_minutes=duration_minutes,
                geometry=leg_geometry(leg, (from_stop.location, to_stop.location)),
                traffic=traffic,
                presets=presets,
                instructions=instructions,
            )
        )
    return tuple(segments)


def build_fallback_segments(
    stop_sequence: Sequence[str],
    stops_by_id: Mapping[str, Stop],
    traffic: TrafficMap | None = None,
    presets: Mapping[TrafficLevel, TrafficPreset] | None = None,
) -> tuple[Segment, ...]:
    """Straight-line segments used when no routing data is available."""

    if len(stop_sequence) < 2:
        return ()

    presets = DEFAULT_TRAFFIC_PRESETS if presets is None else presets

    segments: list[Segment] = []
    for from_id, to_id in zip(stop_sequence, stop_sequence[1:]):
        from_stop = stops_by_id[from_id]
        to_stop = stops_by_id[to_id]
        distance_km = haversine_distance_km(from_stop.location, to_stop.location)
        segments.append(
            _edge(
                from_stop,
                to_stop,
                distance_km=distance_km,
                duration_minutes=distance_km / DEFAULT_SPEED_KMH * 60.0,
                geometry=(from_stop.location, to_stop.location),
                traffic=traffic,
                presets=presets,
            )
        )
    return tuple(segments)


def route_totals(segments: Iterable[Segment]) -> RouteTotals:
    totals = RouteTotals()
    for segment in segments:
        totals = totals + RouteTotals(
            distance_km=segment.distance_km, duration_minutes=segment.duration_minutes
        )
    return totals
