from __future__ import annotations

import os
from functools import lru_cache

from src.adapters.osrm import OsrmRuntimeConfig
from src.adapters.persistence import LocalStopCatalogRepository
from src.adapters.routing import OsrmHttpRoutingProvider
from src.app.services.route_planner_service import RoutePlannerService
from src.domain.algorithms.instructions import InstructionSynthesizer


@lru_cache(maxsize=1)
def get_planner_service() -> RoutePlannerService:
    # The planner holds the live route state, so every request shares one.
    provider = OsrmHttpRoutingProvider(config=OsrmRuntimeConfig.from_env())
    synthesizer = InstructionSynthesizer(
        language=(os.getenv("INSTRUCTION_LANGUAGE") or "en").strip() or "en"
    )
    return RoutePlannerService(
        catalog_repository=LocalStopCatalogRepository(),
        routing_provider=provider,
        synthesizer=synthesizer,
    )
