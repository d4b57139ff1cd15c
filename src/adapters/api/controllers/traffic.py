from __future__ import annotations

from typing import Mapping

from fastapi import APIRouter, Depends

from src.adapters.api.dependencies import get_planner_service
from src.adapters.api.schemas.traffic import TrafficEntrySchema, TrafficResponseSchema
from src.app.services.route_planner_service import RoutePlannerService
from src.domain.models import TrafficLevel, TrafficPreset

router = APIRouter(prefix="/traffic", tags=["traffic"])


def _to_schema(
    entries: Mapping[str, TrafficLevel], presets: Mapping[TrafficLevel, TrafficPreset]
) -> TrafficResponseSchema:
    out: list[TrafficEntrySchema] = []
    for key in sorted(entries):
        level = entries[key]
        preset = presets[level]
        out.append(
            TrafficEntrySchema(
                key=key,
                level=level.value,
                label=preset.label,
                color=preset.color,
                speed_kmh=preset.speed_kmh,
            )
        )
    return TrafficResponseSchema(entries=out)


@router.get("", response_model=TrafficResponseSchema)
async def get_traffic(
    service: RoutePlannerService = Depends(get_planner_service),
) -> TrafficResponseSchema:
    return _to_schema(service.traffic_entries(), service.presets)


@router.post("/refresh", response_model=TrafficResponseSchema)
async def refresh_traffic(
    service: RoutePlannerService = Depends(get_planner_service),
) -> TrafficResponseSchema:
    return _to_schema(service.refresh_traffic(), service.presets)


@router.post("/reset", response_model=TrafficResponseSchema)
async def reset_traffic(
    service: RoutePlannerService = Depends(get_planner_service),
) -> TrafficResponseSchema:
    return _to_schema(service.reset_traffic(), service.presets)
