from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from src.adapters.api.controllers.routes import stop_to_schema
from src.adapters.api.dependencies import get_planner_service
from src.adapters.api.schemas.routes import GeoPointSchema, StopSchema
from src.adapters.api.schemas.stops import CreateStopSchema, StopsResponseSchema
from src.app.services.route_planner_service import RoutePlannerService
from src.domain.exceptions import InvalidStopError
from src.domain.models import TrafficLevel

router = APIRouter(prefix="/stops", tags=["stops"])


@router.get("", response_model=StopsResponseSchema)
async def list_stops(
    service: RoutePlannerService = Depends(get_planner_service),
) -> StopsResponseSchema:
    return StopsResponseSchema(
        base=stop_to_schema(service.base),
        stops=[stop_to_schema(s) for s in service.stops()],
        available=[stop_to_schema(s) for s in service.available_stops()],
    )


@router.post("", response_model=StopSchema, status_code=201)
async def create_stop(
    req: CreateStopSchema,
    service: RoutePlannerService = Depends(get_planner_service),
) -> StopSchema:
    try:
        stop = service.create_stop(
            name=req.name,
            lat=req.location.lat,
            lon=req.location.lon,
            description=req.description,
            traffic_level=TrafficLevel(req.traffic_level) if req.traffic_level else None,
        )
    except InvalidStopError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return stop_to_schema(stop)


@router.post("/at-point", response_model=StopSchema, status_code=201)
async def create_point_stop(
    req: GeoPointSchema,
    service: RoutePlannerService = Depends(get_planner_service),
) -> StopSchema:
    return stop_to_schema(service.add_point_stop(lat=req.lat, lon=req.lon))
