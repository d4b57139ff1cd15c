from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from src.domain.models import GeoPoint, RoutingResponse


class IRoutingProvider(ABC):
    """Port for the external driving-directions service."""

    @abstractmethod
    async def fetch_route(
        self, waypoints: Sequence[GeoPoint], *, annotations: bool = True
    ) -> RoutingResponse:
        """Return candidate routes through the waypoints, in order.

        Raises RoutingServiceError on transport or service failures.
        """
