from __future__ import annotations

from dataclasses import dataclass

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class Stop:
    """A named place that can be part of the active route.

    Ephemeral stops come from transient map interactions and are pruned once
    the active route no longer references them.
    """

    id: str
    name: str
    location: GeoPoint
    description: str | None = None
    ephemeral: bool = False
