from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class TrafficEntrySchema(BaseModel):
    key: str
    level: Literal["light", "moderate", "heavy"]
    label: str
    color: str
    speed_kmh: float


class TrafficResponseSchema(BaseModel):
    entries: list[TrafficEntrySchema] = []
