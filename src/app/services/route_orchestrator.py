from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Sequence

from src.app.ports.output import IRoutingProvider
from src.domain.algorithms.coordinates import route_geometry, to_local_order
from src.domain.exceptions import RoutingError
from src.domain.models import GeoPoint, RouteState, RouteStatus, RoutingResponse, Stop

logger = logging.getLogger(__name__)

NO_ROUTE_MESSAGE = "No suitable route found"
UNREACHABLE_MESSAGE = "Unable to reach the routing service"
INVALID_RESPONSE_MESSAGE = "Routing service returned an invalid route"

RequestKey = tuple[tuple[str, float, float], ...]


@dataclass(slots=True)
class CancellationToken:
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


def _state_from_response(response: RoutingResponse) -> RouteState:
    best = response.best
    if best is None:
        return RouteState.failed(NO_ROUTE_MESSAGE)
    # Segment views convert leg and step geometry later; reject bad coordinates now.
    for leg in best.legs:
        to_local_order(leg.geometry)
        for step in leg.steps:
            to_local_order(step.geometry)
    return RouteState.succeeded(
        coordinates=route_geometry(best),
        legs=best.legs,
        distance_km=best.distance_m / 1000.0 if best.distance_m else 0.0,
        duration_minutes=best.duration_s / 60.0 if best.duration_s else 0.0,
    )


@dataclass(slots=True)
class RouteOrchestrator:
    """Owns the request lifecycle of one routing target.

    At most one request is live. Submitting a new stop sequence cancels the
    previous task and invalidates its token; a result arriving for an
    invalidated token is dropped without touching the state, even when the
    transport ignored the cancellation.
    """

    routing_provider: IRoutingProvider
    annotations: bool = True

    _state: RouteState = field(default_factory=RouteState.idle, init=False)
    _token: CancellationToken | None = field(default=None, init=False)
    _task: asyncio.Task[None] | None = field(default=None, init=False)
    _key: RequestKey | None = field(default=None, init=False)

    @property
    def state(self) -> RouteState:
        return self._state

    def submit(self, stops: Sequence[Stop]) -> asyncio.Task[None] | None:
        """Route through the stops in order. Must run inside an event loop."""

        if len(stops) < 2:
            self.reset()
            return None

        key: RequestKey = tuple((s.id, s.location.lat, s.location.lon) for s in stops)
        if key == self._key and self._state.status in (
            RouteStatus.LOADING,
            RouteStatus.SUCCESS,
        ):
            return self._task

        loop = asyncio.get_running_loop()
        self.cancel()

        token = CancellationToken()
        self._token = token
        self._key = key
        self._state = RouteState.loading()
        waypoints = tuple(s.location for s in stops)
        self._task = loop.create_task(self._run(token, waypoints))
        return self._task

    def cancel(self) -> None:
        if self._token is not None:
            self._token.cancel()
            self._token = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def reset(self) -> None:
        self.cancel()
        self._key = None
        self._state = RouteState.idle()

    def reject(self, message: str) -> None:
        """Enter the error state without issuing a request."""

        self.cancel()
        self._key = None
        self._state = RouteState.failed(message)

    async def settle(self) -> RouteState:
        """Wait for the live request (if any) and return the resulting state."""

        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self._state

    async def _run(self, token: CancellationToken, waypoints: tuple[GeoPoint, ...]) -> None:
        try:
            response = await self.routing_provider.fetch_route(
                waypoints, annotations=self.annotations
            )
        except RoutingError as exc:
            if token.cancelled:
                logger.debug("Dropping failure of superseded routing request: %s", exc)
                return
            logger.warning("Routing request failed: %s", exc)
            self._state = RouteState.failed(str(exc) or UNREACHABLE_MESSAGE)
            return
        except Exception:
            if token.cancelled:
                return
            logger.exception("Unexpected routing provider failure")
            self._state = RouteState.failed(UNREACHABLE_MESSAGE)
            return

        if token.cancelled:
            logger.debug("Dropping result of superseded routing request")
            return

        try:
            self._state = _state_from_response(response)
        except ValueError:
            logger.warning("Routing response carried invalid coordinates", exc_info=True)
            self._state = RouteState.failed(INVALID_RESPONSE_MESSAGE)
