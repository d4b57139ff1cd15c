from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from typing import Mapping
from uuid import uuid4

from src.app.ports.output import IRoutingProvider, IStopCatalogRepository
from src.app.services.manual_routing_session import ManualMode, ManualRoutingSession
from src.app.services.route_orchestrator import RouteOrchestrator
from src.domain.algorithms.instructions import InstructionSynthesizer
from src.domain.algorithms.segments import (
    build_fallback_segments,
    build_segments_from_legs,
    route_totals,
)
from src.domain.algorithms.traffic import (
    drift_traffic,
    ensure_traffic_entries,
    seed_traffic_map,
)
from src.domain.exceptions import InvalidStopError
from src.domain.models import (
    DEFAULT_TRAFFIC_PRESETS,
    GeoPoint,
    Instruction,
    RouteState,
    RouteStatus,
    RouteTotals,
    Segment,
    Stop,
    StopCatalog,
    TrafficLevel,
    TrafficPreset,
)

FALLBACK_NOTICE = "Showing straight-line estimates"

PendingRequest = asyncio.Task[None] | None


@dataclass(slots=True)
class RoutePlannerService:
    """Application service owning the stops, the route and the traffic overlay.

    Every edit of the stop sequence re-submits the routed stops to the main
    orchestrator, so calls that change the route must run inside an event
    loop. Views (segments, totals, instructions) are recomputed on demand
    from the current state and fall back to straight-line estimates whenever
    no routing result is available.
    """

    catalog_repository: IStopCatalogRepository
    routing_provider: IRoutingProvider
    synthesizer: InstructionSynthesizer = field(default_factory=InstructionSynthesizer)
    presets: Mapping[TrafficLevel, TrafficPreset] = field(
        default_factory=lambda: dict(DEFAULT_TRAFFIC_PRESETS)
    )
    rng: random.Random = field(default_factory=random.Random)

    orchestrator: RouteOrchestrator = field(init=False)
    manual: ManualRoutingSession = field(init=False)
    _catalog: StopCatalog = field(init=False)
    _stops: dict[str, Stop] = field(init=False)
    _route_ids: list[str] = field(default_factory=list, init=False)
    _traffic: dict[str, TrafficLevel] = field(init=False)

    def __post_init__(self) -> None:
        self._catalog = self.catalog_repository.load_catalog()
        self._stops = {s.id: s for s in self._catalog.stops}
        self._traffic = seed_traffic_map(self._catalog.road_network)
        self.orchestrator = RouteOrchestrator(self.routing_provider, annotations=True)
        self.manual = ManualRoutingSession(
            orchestrator=RouteOrchestrator(self.routing_provider, annotations=False),
            synthesizer=self.synthesizer,
        )

    # Stops

    @property
    def base(self) -> Stop:
        return self._catalog.base

    @property
    def stops_by_id(self) -> dict[str, Stop]:
        return {self.base.id: self.base, **self._stops}

    def stops(self) -> tuple[Stop, ...]:
        """Known stops, base stop excluded."""

        return tuple(self._stops.values())

    def available_stops(self) -> tuple[Stop, ...]:
        routed = set(self._route_ids)
        return tuple(
            s for s in self._stops.values() if s.id not in routed and not s.ephemeral
        )

    def create_stop(
        self,
        *,
        name: str,
        lat: float,
        lon: float,
        description: str | None = None,
        traffic_level: TrafficLevel | None = None,
    ) -> Stop:
        """Create a stop from a form payload and append it to the route."""

        name = (name or "").strip()
        if not name:
            raise InvalidStopError("Stop name is required")
        try:
            location = GeoPoint(lat=float(lat), lon=float(lon))
        except (TypeError, ValueError) as exc:
            raise InvalidStopError(str(exc)) from exc

        stop = Stop(
            id=f"custom-{uuid4().hex[:12]}",
            name=name,
            location=location,
            description=(description or "").strip() or None,
        )
        self._register(stop, traffic_level or TrafficLevel.MODERATE)
        return stop

    def add_point_stop(self, *, lat: float, lon: float) -> Stop:
        """Ephemeral stop at a clicked map coordinate, appended to the route."""

        stop = self._ephemeral_stop(GeoPoint(lat=lat, lon=lon))
        self._register(stop, TrafficLevel.MODERATE)
        return stop

    # Route sequence

    @property
    def route_stop_ids(self) -> tuple[str, ...]:
        return tuple(self._route_ids)

    def route_stops(self) -> tuple[Stop, ...]:
        by_id = self.stops_by_id
        return tuple(by_id[i] for i in self._route_ids if i in by_id)

    def add_stop(self, stop_id: str) -> PendingRequest:
        if stop_id not in self.stops_by_id or stop_id in self._route_ids:
            return None
        self._route_ids.append(stop_id)
        return self._sync_route()

    def remove_stop(self, stop_id: str) -> PendingRequest:
        if stop_id not in self._route_ids:
            return None
        self._route_ids = [i for i in self._route_ids if i != stop_id]
        self._prune_ephemeral()
        return self._sync_route()

    def move_stop(self, from_index: int, to_index: int) -> PendingRequest:
        size = len(self._route_ids)
        if not (0 <= from_index < size) or not (0 <= to_index < size):
            return None
        moved = self._route_ids.pop(from_index)
        self._route_ids.insert(to_index, moved)
        return self._sync_route()

    def clear_route(self) -> PendingRequest:
        if not self._route_ids:
            return None
        self._route_ids = []
        self._prune_ephemeral()
        return self._sync_route()

    def build_nearest_route(self, *, lat: float, lon: float, stop_id: str) -> PendingRequest:
        """Replace the route with [clicked point, stop_id]."""

        if stop_id not in self.stops_by_id:
            return None
        origin = self._ephemeral_stop(GeoPoint(lat=lat, lon=lon))
        self._stops[origin.id] = origin
        self._route_ids = [origin.id, stop_id]
        self._prune_ephemeral()
        return self._sync_route()

    # Traffic

    def traffic_entries(self) -> dict[str, TrafficLevel]:
        return dict(self._traffic)

    def refresh_traffic(self) -> dict[str, TrafficLevel]:
        self._traffic = drift_traffic(self._traffic, self.rng)
        return dict(self._traffic)

    def reset_traffic(self) -> dict[str, TrafficLevel]:
        self._traffic = seed_traffic_map(self._catalog.road_network)
        return dict(self._traffic)

    # Derived views

    @property
    def state(self) -> RouteState:
        return self.orchestrator.state

    def segments(self) -> tuple[Segment, ...]:
        ids = [s.id for s in self.route_stops()]
        by_id = self.stops_by_id
        state = self.state
        if state.is_success:
            return build_segments_from_legs(
                state.legs,
                ids,
                by_id,
                self._traffic,
                self.presets,
                synthesizer=self.synthesizer,
            )
        return build_fallback_segments(ids, by_id, self._traffic, self.presets)

    def totals(self) -> RouteTotals:
        state = self.state
        if state.is_success:
            return RouteTotals(
                distance_km=state.distance_km, duration_minutes=state.duration_minutes
            )
        return route_totals(self.segments())

    def instructions(self) -> tuple[Instruction, ...]:
        state = self.state
        if not state.is_success:
            return ()
        ids = [s.id for s in self.route_stops()]
        return self.synthesizer.build_turn_instructions(state.legs, ids, self.stops_by_id)

    def warning(self) -> str | None:
        state = self.state
        if state.status is not RouteStatus.ERROR:
            return None
        return f"{state.error}. {FALLBACK_NOTICE}."

    # Manual routing

    def manual_click(self, *, lat: float, lon: float) -> PendingRequest:
        return self.manual.click(GeoPoint(lat=lat, lon=lon), self._stops.values())

    def manual_remove_point(self, index: int) -> None:
        self.manual.remove_point(index)

    def manual_switch_mode(self, mode: ManualMode | str) -> None:
        self.manual.switch_mode(mode)

    def manual_reset(self) -> None:
        self.manual.reset()

    # Internals

    def _ephemeral_stop(self, location: GeoPoint) -> Stop:
        return Stop(
            id=f"point-{uuid4().hex[:12]}",
            name=f"Point {location.lat:.5f}, {location.lon:.5f}",
            location=location,
            ephemeral=True,
        )

    def _register(self, stop: Stop, level: TrafficLevel) -> None:
        self._traffic = ensure_traffic_entries(
            self._traffic, stop.id, self._route_ids, default_level=level
        )
        self._stops[stop.id] = stop
        self._route_ids.append(stop.id)
        self._sync_route()

    def _prune_ephemeral(self) -> None:
        routed = set(self._route_ids)
        self._stops = {
            sid: s for sid, s in self._stops.items() if not s.ephemeral or sid in routed
        }

    def _sync_route(self) -> PendingRequest:
        return self.orchestrator.submit(self.route_stops())
