from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from .routes import GeoPointSchema, InstructionSchema


class ManualModeSchema(BaseModel):
    mode: Literal["nearest", "custom"]


class ManualDestinationSchema(BaseModel):
    name: str
    location: GeoPointSchema
    stop_id: str | None = None


class ManualSessionSchema(BaseModel):
    mode: Literal["nearest", "custom"]
    status: Literal["idle", "loading", "success", "error"]
    points: list[GeoPointSchema] = []
    destination: ManualDestinationSchema | None = None
    coordinates: list[GeoPointSchema] = []
    distance_km: float = 0.0
    duration_minutes: float = 0.0
    instructions: list[InstructionSchema] = []
    error: str | None = None
