from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import RoutingStep


class IManeuverTextCompiler(ABC):
    """Port for a localized maneuver-to-sentence compiler (best effort)."""

    @abstractmethod
    def compile(
        self, language: str, step: RoutingStep, *, leg_index: int, leg_count: int
    ) -> str:
        raise NotImplementedError
