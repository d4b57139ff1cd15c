from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Sequence

import pytest

from src.app.services.route_planner_service import RoutePlannerService
from src.domain.exceptions import InvalidStopError, RoutingServiceError
from src.domain.models import (
    GeoPoint,
    RoadLink,
    RouteCandidate,
    RouteStatus,
    RoutingLeg,
    RoutingResponse,
    Stop,
    StopCatalog,
    TrafficLevel,
)

BASE = Stop(id="base", name="City centre", location=GeoPoint(lat=10.039128, lon=105.769949))
STORE_A = Stop(id="store-a", name="Store A", location=GeoPoint(lat=10.042891, lon=105.773601))
STORE_B = Stop(id="store-b", name="Store B", location=GeoPoint(lat=10.04363, lon=105.765455))


@dataclass(slots=True)
class FakeCatalogRepository:
    def load_catalog(self) -> StopCatalog:
        return StopCatalog(
            base=BASE,
            stops=(STORE_A, STORE_B),
            road_network=(
                RoadLink(from_id="base", to_id="store-a", level=TrafficLevel.HEAVY),
                RoadLink(from_id="store-a", to_id="store-b", level=TrafficLevel.LIGHT),
            ),
        )


@dataclass(slots=True)
class FakeRoutingProvider:
    fail: bool = False
    calls: list[tuple[tuple[GeoPoint, ...], bool]] = field(default_factory=list)

    async def fetch_route(
        self, waypoints: Sequence[GeoPoint], *, annotations: bool = True
    ) -> RoutingResponse:
        self.calls.append((tuple(waypoints), annotations))
        if self.fail:
            raise RoutingServiceError("Unable to reach the routing service")
        legs = tuple(
            RoutingLeg(distance_m=1000.0, duration_s=180.0) for _ in range(len(waypoints) - 1)
        )
        return RoutingResponse(
            routes=(
                RouteCandidate(
                    distance_m=1000.0 * len(legs),
                    duration_s=180.0 * len(legs),
                    geometry=tuple(p.as_lon_lat() for p in waypoints),
                    legs=legs,
                ),
            )
        )


def _service(provider: FakeRoutingProvider | None = None) -> RoutePlannerService:
    return RoutePlannerService(
        catalog_repository=FakeCatalogRepository(),
        routing_provider=provider or FakeRoutingProvider(),
        rng=random.Random(7),
    )


def test_catalog_is_loaded_and_traffic_seeded() -> None:
    service = _service()

    assert service.base == BASE
    assert [s.id for s in service.stops()] == ["store-a", "store-b"]
    assert [s.id for s in service.available_stops()] == ["store-a", "store-b"]
    assert service.base not in service.available_stops()
    assert service.traffic_entries() == {
        "base__store-a": TrafficLevel.HEAVY,
        "store-a__store-b": TrafficLevel.LIGHT,
    }
    assert service.state.status is RouteStatus.IDLE
    assert service.segments() == ()


@pytest.mark.unit
@pytest.mark.anyio
async def test_adding_stops_routes_the_sequence() -> None:
    provider = FakeRoutingProvider()
    service = _service(provider)

    assert service.add_stop("base") is None
    assert service.add_stop("store-a") is not None
    assert service.add_stop("store-a") is None
    assert service.add_stop("nope") is None
    await service.orchestrator.settle()

    assert service.route_stop_ids == ("base", "store-a")
    assert [s.id for s in service.available_stops()] == ["store-b"]
    assert provider.calls == [((BASE.location, STORE_A.location), True)]

    segments = service.segments()
    assert len(segments) == 1
    assert segments[0].distance_km == pytest.approx(1.0)
    assert segments[0].traffic_level is TrafficLevel.HEAVY
    assert service.totals().duration_minutes == pytest.approx(3.0)
    assert service.warning() is None


@pytest.mark.unit
@pytest.mark.anyio
async def test_move_and_remove_stops() -> None:
    service = _service()
    for stop_id in ("base", "store-a", "store-b"):
        service.add_stop(stop_id)

    service.move_stop(2, 0)
    assert service.route_stop_ids == ("store-b", "base", "store-a")
    assert service.move_stop(0, 5) is None
    assert service.route_stop_ids == ("store-b", "base", "store-a")

    service.remove_stop("base")
    await service.orchestrator.settle()
    assert service.route_stop_ids == ("store-b", "store-a")
    assert service.state.status is RouteStatus.SUCCESS

    service.clear_route()
    assert service.route_stop_ids == ()
    assert service.state.status is RouteStatus.IDLE


@pytest.mark.unit
@pytest.mark.anyio
async def test_routing_failure_falls_back_to_straight_lines() -> None:
    service = _service(FakeRoutingProvider(fail=True))
    service.add_stop("base")
    service.add_stop("store-a")
    await service.orchestrator.settle()

    assert service.state.status is RouteStatus.ERROR
    assert service.warning() == (
        "Unable to reach the routing service. Showing straight-line estimates."
    )
    segments = service.segments()
    assert segments[0].geometry == (BASE.location, STORE_A.location)
    assert service.totals().distance_km == pytest.approx(segments[0].distance_km)
    assert service.instructions() == ()


@pytest.mark.unit
@pytest.mark.anyio
async def test_create_stop_validates_and_appends() -> None:
    service = _service()
    service.add_stop("store-a")

    stop = service.create_stop(
        name="  Warehouse ",
        lat=10.05,
        lon=105.75,
        description=" ",
        traffic_level=TrafficLevel.LIGHT,
    )

    assert stop.id.startswith("custom-")
    assert stop.name == "Warehouse"
    assert stop.description is None
    assert service.route_stop_ids == ("store-a", stop.id)
    assert service.traffic_entries()[f"{stop.id}__store-a"] is TrafficLevel.LIGHT

    with pytest.raises(InvalidStopError):
        service.create_stop(name=" ", lat=10.0, lon=105.0)
    with pytest.raises(InvalidStopError):
        service.create_stop(name="Nowhere", lat=91.0, lon=105.0)


@pytest.mark.unit
@pytest.mark.anyio
async def test_ephemeral_stops_are_pruned_when_unrouted() -> None:
    service = _service()
    point = service.add_point_stop(lat=10.041, lon=105.771)

    assert point.ephemeral
    assert point.name == "Point 10.04100, 105.77100"
    assert point.id in service.stops_by_id
    assert point not in service.available_stops()

    service.remove_stop(point.id)
    assert point.id not in service.stops_by_id


@pytest.mark.unit
@pytest.mark.anyio
async def test_build_nearest_route_replaces_sequence() -> None:
    service = _service()
    service.add_stop("store-b")
    old_point = service.add_point_stop(lat=10.041, lon=105.771)

    service.build_nearest_route(lat=10.04, lon=105.77, stop_id="store-a")
    await service.orchestrator.settle()

    origin_id, target_id = service.route_stop_ids
    assert target_id == "store-a"
    assert service.stops_by_id[origin_id].ephemeral
    assert old_point.id not in service.stops_by_id
    assert [i.id for i in service.instructions()] == []
    assert service.state.status is RouteStatus.SUCCESS


def test_traffic_refresh_and_reset() -> None:
    service = _service()
    seeded = service.traffic_entries()

    for _ in range(20):
        refreshed = service.refresh_traffic()
        assert refreshed.keys() == seeded.keys()

    assert service.reset_traffic() == seeded


@pytest.mark.unit
@pytest.mark.anyio
async def test_manual_click_uses_catalog_stops() -> None:
    provider = FakeRoutingProvider()
    service = _service(provider)

    service.manual_click(lat=10.0428, lon=105.7735)
    await service.manual.orchestrator.settle()

    assert service.manual.destination is not None
    assert service.manual.destination.stop_id == "store-a"
    assert provider.calls[-1][1] is False
    assert service.state.status is RouteStatus.IDLE

    service.manual_switch_mode("custom")
    assert service.manual.points == ()
