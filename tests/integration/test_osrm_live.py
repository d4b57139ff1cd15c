from __future__ import annotations

import pytest

from src.adapters.osrm import OsrmRuntimeConfig
from src.adapters.routing import OsrmHttpRoutingProvider
from src.domain.algorithms.instructions import InstructionSynthesizer
from src.domain.algorithms.segments import build_segments_from_legs
from src.domain.models import GeoPoint, InstructionKind, Stop

DEPOT = Stop(id="base-cantho", name="City centre", location=GeoPoint(lat=10.039128, lon=105.769949))
STORE_A = Stop(id="store-a", name="Store A", location=GeoPoint(lat=10.042891, lon=105.773601))
STORE_D = Stop(id="store-d", name="Store D", location=GeoPoint(lat=10.043725, lon=105.778793))


@pytest.mark.integration
@pytest.mark.anyio
async def test_live_route_through_three_stops(require_osrm: OsrmRuntimeConfig) -> None:
    provider = OsrmHttpRoutingProvider(config=require_osrm)
    stops = (DEPOT, STORE_A, STORE_D)

    response = await provider.fetch_route([s.location for s in stops])

    best = response.best
    assert best is not None
    assert best.distance_m > 0
    assert len(best.legs) == 2
    assert best.geometry

    segments = build_segments_from_legs(
        best.legs,
        [s.id for s in stops],
        {s.id: s for s in stops},
        synthesizer=InstructionSynthesizer(),
    )
    assert len(segments) == 2
    for segment in segments:
        assert len(segment.geometry) >= 2
        assert segment.instructions[0].kind is InstructionKind.DEPART
        assert segment.instructions[-1].kind is InstructionKind.ARRIVE
