from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from src.app.services.route_orchestrator import RouteOrchestrator
from src.domain.algorithms.geo_utils import nearest_stop
from src.domain.algorithms.instructions import InstructionSynthesizer
from src.domain.models import GeoPoint, Instruction, RouteState, RouteStatus, Stop

MANUAL_START_ID = "manual-start"
MANUAL_END_ID = "manual-end"

NEAREST_ORIGIN_NAME = "Your location"
NEAREST_DESTINATION_NAME = "Nearest store"
CUSTOM_ORIGIN_NAME = "Start point"
CUSTOM_DESTINATION_NAME = "End point"
NO_NEAREST_STOP_MESSAGE = "No store found nearby"


class ManualMode(str, Enum):
    NEAREST = "nearest"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class ManualDestination:
    name: str
    location: GeoPoint
    stop_id: str | None = None


@dataclass(slots=True)
class ManualRoutingSession:
    """Interactive two-point routing on top of its own RouteOrchestrator.

    Nearest mode: each click is an origin routed to the closest known stop.
    Custom mode: clicks cycle origin -> destination -> new origin.
    """

    orchestrator: RouteOrchestrator
    synthesizer: InstructionSynthesizer = field(default_factory=InstructionSynthesizer)
    mode: ManualMode = ManualMode.NEAREST

    _points: tuple[GeoPoint, ...] = field(default=(), init=False)
    _destination: ManualDestination | None = field(default=None, init=False)

    @property
    def points(self) -> tuple[GeoPoint, ...]:
        return self._points

    @property
    def state(self) -> RouteState:
        return self.orchestrator.state

    @property
    def destination(self) -> ManualDestination | None:
        if self.state.status is RouteStatus.ERROR:
            return None
        return self._destination

    @property
    def instructions(self) -> tuple[Instruction, ...]:
        state = self.state
        if not state.is_success or self._destination is None or len(self._points) < 2:
            return ()
        stops = self._placeholder_stops()
        return self.synthesizer.build_turn_instructions(
            state.legs,
            [s.id for s in stops],
            {s.id: s for s in stops},
        )

    def switch_mode(self, mode: ManualMode | str) -> None:
        mode = ManualMode(mode)
        if mode is self.mode:
            return
        self.mode = mode
        self.reset()

    def reset(self) -> None:
        self.orchestrator.reset()
        self._points = ()
        self._destination = None

    def click(
        self, point: GeoPoint, stops: Iterable[Stop] = ()
    ) -> asyncio.Task[None] | None:
        if self.mode is ManualMode.NEAREST:
            found = nearest_stop(point, stops)
            if found is None:
                self._points = (point,)
                self._destination = None
                self.orchestrator.reject(NO_NEAREST_STOP_MESSAGE)
                return None
            stop, _ = found
            return self._request(
                point,
                ManualDestination(name=stop.name, location=stop.location, stop_id=stop.id),
            )

        if len(self._points) == 1:
            return self._request(
                self._points[0],
                ManualDestination(name=CUSTOM_DESTINATION_NAME, location=point),
            )

        # No origin yet, or a finished pair: start over from this click.
        self.orchestrator.reset()
        self._destination = None
        self._points = (point,)
        return None

    def remove_point(self, index: int) -> None:
        if index < 0 or index >= len(self._points):
            return
        self.orchestrator.reset()
        self._destination = None
        if self.mode is ManualMode.NEAREST or index == 0:
            self._points = ()
        else:
            self._points = tuple(p for i, p in enumerate(self._points) if i != index)

    def _request(
        self, origin: GeoPoint, destination: ManualDestination
    ) -> asyncio.Task[None] | None:
        self._points = (origin, destination.location)
        self._destination = destination
        return self.orchestrator.submit(self._placeholder_stops())

    def _placeholder_stops(self) -> tuple[Stop, Stop]:
        nearest = self.mode is ManualMode.NEAREST
        destination = self._destination
        end_name = destination.name if destination else (
            NEAREST_DESTINATION_NAME if nearest else CUSTOM_DESTINATION_NAME
        )
        return (
            Stop(
                id=MANUAL_START_ID,
                name=NEAREST_ORIGIN_NAME if nearest else CUSTOM_ORIGIN_NAME,
                location=self._points[0],
                ephemeral=True,
            ),
            Stop(
                id=MANUAL_END_ID,
                name=end_name,
                location=self._points[1],
                ephemeral=True,
            ),
        )
