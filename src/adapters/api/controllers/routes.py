from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from src.adapters.api.dependencies import get_planner_service
from src.adapters.api.schemas.routes import (
    AddRouteStopSchema,
    GeoPointSchema,
    InstructionSchema,
    MoveRouteStopSchema,
    NearestRouteRequestSchema,
    RouteSchema,
    RouteTotalsSchema,
    SegmentSchema,
    StopSchema,
)
from src.app.services.route_planner_service import RoutePlannerService
from src.domain.algorithms.geo_utils import format_distance, format_duration
from src.domain.models import GeoPoint, Instruction, Segment, Stop

router = APIRouter(tags=["route"])


def point_to_schema(p: GeoPoint) -> GeoPointSchema:
    return GeoPointSchema(lat=p.lat, lon=p.lon)


def stop_to_schema(stop: Stop) -> StopSchema:
    return StopSchema(
        id=stop.id,
        name=stop.name,
        location=point_to_schema(stop.location),
        description=stop.description,
        ephemeral=stop.ephemeral,
    )


def instruction_to_schema(i: Instruction) -> InstructionSchema:
    return InstructionSchema(
        id=i.id,
        text=i.text,
        kind=i.kind.value,
        symbol=i.symbol.value,
        distance_label=i.distance_label,
        maneuver_type=i.maneuver_type.value if i.maneuver_type else None,
        maneuver_modifier=i.maneuver_modifier.value if i.maneuver_modifier else None,
    )


def _segment_to_schema(seg: Segment) -> SegmentSchema:
    return SegmentSchema(
        id=seg.id,
        from_stop_id=seg.from_stop.id,
        to_stop_id=seg.to_stop.id,
        distance_km=seg.distance_km,
        duration_minutes=seg.duration_minutes,
        geometry=[point_to_schema(p) for p in seg.geometry],
        color=seg.color,
        label=seg.label,
        speed_kmh=seg.speed_kmh,
        traffic_level=seg.traffic_level.value if seg.traffic_level else None,
        instructions=[instruction_to_schema(i) for i in seg.instructions],
    )


def _route_to_schema(service: RoutePlannerService) -> RouteSchema:
    state = service.state
    totals = service.totals()
    return RouteSchema(
        status=state.status.value,
        stops=[stop_to_schema(s) for s in service.route_stops()],
        coordinates=[point_to_schema(p) for p in state.coordinates],
        segments=[_segment_to_schema(s) for s in service.segments()],
        instructions=[instruction_to_schema(i) for i in service.instructions()],
        totals=RouteTotalsSchema(
            distance_km=totals.distance_km,
            duration_minutes=totals.duration_minutes,
            distance_text=format_distance(totals.distance_km),
            duration_text=format_duration(totals.duration_minutes),
        ),
        error=state.error,
        warning=service.warning(),
    )


@router.get("/route", response_model=RouteSchema)
async def get_route(
    wait: bool = Query(default=False),
    service: RoutePlannerService = Depends(get_planner_service),
) -> RouteSchema:
    if wait:
        await service.orchestrator.settle()
    return _route_to_schema(service)


@router.post("/route/stops", response_model=RouteSchema)
async def add_route_stop(
    req: AddRouteStopSchema,
    service: RoutePlannerService = Depends(get_planner_service),
) -> RouteSchema:
    service.add_stop(req.stop_id)
    return _route_to_schema(service)


@router.delete("/route/stops/{stop_id}", response_model=RouteSchema)
async def remove_route_stop(
    stop_id: str,
    service: RoutePlannerService = Depends(get_planner_service),
) -> RouteSchema:
    service.remove_stop(stop_id)
    return _route_to_schema(service)


@router.post("/route/move", response_model=RouteSchema)
async def move_route_stop(
    req: MoveRouteStopSchema,
    service: RoutePlannerService = Depends(get_planner_service),
) -> RouteSchema:
    service.move_stop(req.from_index, req.to_index)
    return _route_to_schema(service)


@router.delete("/route", response_model=RouteSchema)
async def clear_route(
    service: RoutePlannerService = Depends(get_planner_service),
) -> RouteSchema:
    service.clear_route()
    return _route_to_schema(service)


@router.post("/route/nearest", response_model=RouteSchema)
async def build_nearest_route(
    req: NearestRouteRequestSchema,
    service: RoutePlannerService = Depends(get_planner_service),
) -> RouteSchema:
    service.build_nearest_route(lat=req.origin.lat, lon=req.origin.lon, stop_id=req.stop_id)
    return _route_to_schema(service)
