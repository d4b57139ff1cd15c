from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class GeoPointSchema(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)


class StopSchema(BaseModel):
    id: str
    name: str
    location: GeoPointSchema
    description: str | None = None
    ephemeral: bool = False


class InstructionSchema(BaseModel):
    id: str
    text: str
    kind: Literal["depart", "arrive", "maneuver"]
    symbol: str
    distance_label: str | None = None
    maneuver_type: str | None = None
    maneuver_modifier: str | None = None


class SegmentSchema(BaseModel):
    id: str
    from_stop_id: str
    to_stop_id: str
    distance_km: float
    duration_minutes: float
    geometry: list[GeoPointSchema] = []
    color: str
    label: str
    speed_kmh: float
    traffic_level: Literal["light", "moderate", "heavy"] | None = None
    instructions: list[InstructionSchema] = []


class RouteTotalsSchema(BaseModel):
    distance_km: float = 0.0
    duration_minutes: float = 0.0
    distance_text: str
    duration_text: str


class RouteSchema(BaseModel):
    status: Literal["idle", "loading", "success", "error"]
    stops: list[StopSchema] = []
    coordinates: list[GeoPointSchema] = []
    segments: list[SegmentSchema] = []
    instructions: list[InstructionSchema] = []
    totals: RouteTotalsSchema
    error: str | None = None
    warning: str | None = None


class AddRouteStopSchema(BaseModel):
    stop_id: str = Field(..., min_length=1)


class MoveRouteStopSchema(BaseModel):
    from_index: int = Field(..., ge=0)
    to_index: int = Field(..., ge=0)


class NearestRouteRequestSchema(BaseModel):
    origin: GeoPointSchema
    stop_id: str = Field(..., min_length=1)
