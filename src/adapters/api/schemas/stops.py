from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .routes import GeoPointSchema, StopSchema


class CreateStopSchema(BaseModel):
    name: str = Field(..., min_length=1)
    location: GeoPointSchema
    description: str | None = None
    traffic_level: Literal["light", "moderate", "heavy"] | None = None


class StopsResponseSchema(BaseModel):
    base: StopSchema
    stops: list[StopSchema] = []
    available: list[StopSchema] = []
