from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from src.adapters.api.controllers.routes import instruction_to_schema, point_to_schema
from src.adapters.api.dependencies import get_planner_service
from src.adapters.api.schemas.manual import (
    ManualDestinationSchema,
    ManualModeSchema,
    ManualSessionSchema,
)
from src.adapters.api.schemas.routes import GeoPointSchema
from src.app.services.manual_routing_session import ManualRoutingSession
from src.app.services.route_planner_service import RoutePlannerService

router = APIRouter(prefix="/manual", tags=["manual"])


def _session_to_schema(session: ManualRoutingSession) -> ManualSessionSchema:
    state = session.state
    destination = session.destination
    return ManualSessionSchema(
        mode=session.mode.value,
        status=state.status.value,
        points=[point_to_schema(p) for p in session.points],
        destination=(
            ManualDestinationSchema(
                name=destination.name,
                location=point_to_schema(destination.location),
                stop_id=destination.stop_id,
            )
            if destination
            else None
        ),
        coordinates=[point_to_schema(p) for p in state.coordinates],
        distance_km=state.distance_km,
        duration_minutes=state.duration_minutes,
        instructions=[instruction_to_schema(i) for i in session.instructions],
        error=state.error,
    )


@router.get("", response_model=ManualSessionSchema)
async def get_session(
    wait: bool = Query(default=False),
    service: RoutePlannerService = Depends(get_planner_service),
) -> ManualSessionSchema:
    if wait:
        await service.manual.orchestrator.settle()
    return _session_to_schema(service.manual)


@router.post("/mode", response_model=ManualSessionSchema)
async def switch_mode(
    req: ManualModeSchema,
    service: RoutePlannerService = Depends(get_planner_service),
) -> ManualSessionSchema:
    service.manual_switch_mode(req.mode)
    return _session_to_schema(service.manual)


@router.post("/clicks", response_model=ManualSessionSchema)
async def click(
    req: GeoPointSchema,
    service: RoutePlannerService = Depends(get_planner_service),
) -> ManualSessionSchema:
    service.manual_click(lat=req.lat, lon=req.lon)
    return _session_to_schema(service.manual)


@router.delete("/points/{index}", response_model=ManualSessionSchema)
async def remove_point(
    index: int,
    service: RoutePlannerService = Depends(get_planner_service),
) -> ManualSessionSchema:
    service.manual_remove_point(index)
    return _session_to_schema(service.manual)


@router.delete("", response_model=ManualSessionSchema)
async def reset_session(
    service: RoutePlannerService = Depends(get_planner_service),
) -> ManualSessionSchema:
    service.manual_reset()
    return _session_to_schema(service.manual)
