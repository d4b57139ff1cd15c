from __future__ import annotations

from src.domain.algorithms.coordinates import (
    format_waypoints,
    leg_geometry,
    merge_step_geometries,
    route_geometry,
    to_local_order,
)
from src.domain.models import GeoPoint, RouteCandidate, RoutingLeg, RoutingStep


def test_to_local_order_swaps_pairs() -> None:
    assert to_local_order([(105.77, 10.04), (105.78, 10.05)]) == (
        GeoPoint(lat=10.04, lon=105.77),
        GeoPoint(lat=10.05, lon=105.78),
    )


def test_merge_step_geometries_drops_shared_vertices() -> None:
    steps = (
        RoutingStep(geometry=((1.0, 1.0), (2.0, 2.0))),
        RoutingStep(geometry=((2.0, 2.0), (3.0, 3.0))),
        RoutingStep(geometry=((3.0, 3.0), (4.0, 4.0))),
    )
    merged = merge_step_geometries(steps)
    assert [p.as_lon_lat() for p in merged] == [(1.0, 1.0), (2.0, 2.0), (3.0, 3.0), (4.0, 4.0)]


def test_merge_step_geometries_drops_leading_point_by_position() -> None:
    steps = (
        RoutingStep(geometry=()),
        RoutingStep(geometry=((1.0, 1.0), (2.0, 2.0))),
    )
    merged = merge_step_geometries(steps)
    assert [p.as_lon_lat() for p in merged] == [(2.0, 2.0)]
    assert merge_step_geometries(()) == ()


def test_leg_geometry_falls_back_in_order() -> None:
    fallback = (GeoPoint(lat=0.0, lon=0.0), GeoPoint(lat=1.0, lon=1.0))

    assert leg_geometry(None, fallback) == fallback
    assert leg_geometry(RoutingLeg(), fallback) == fallback

    from_leg = leg_geometry(RoutingLeg(geometry=((5.0, 6.0), (7.0, 8.0))), fallback)
    assert [p.as_lon_lat() for p in from_leg] == [(5.0, 6.0), (7.0, 8.0)]

    from_steps = leg_geometry(
        RoutingLeg(
            steps=(RoutingStep(geometry=((1.0, 2.0), (3.0, 4.0))),),
            geometry=((5.0, 6.0), (7.0, 8.0)),
        ),
        fallback,
    )
    assert [p.as_lon_lat() for p in from_steps] == [(1.0, 2.0), (3.0, 4.0)]


def test_route_geometry_and_waypoints() -> None:
    assert route_geometry(None) == ()
    candidate = RouteCandidate(geometry=((105.77, 10.04), (105.78, 10.05)))
    assert route_geometry(candidate)[0] == GeoPoint(lat=10.04, lon=105.77)

    points = [GeoPoint(lat=10.04, lon=105.77), GeoPoint(lat=10.05, lon=105.78)]
    assert format_waypoints(points) == "105.77,10.04;105.78,10.05"
