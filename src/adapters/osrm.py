from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BASE_URL = "https://router.project-osrm.org"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


@dataclass(frozen=True, slots=True)
class OsrmRuntimeConfig:
    base_url: str
    profile: str
    timeout_s: float

    @staticmethod
    def from_env() -> "OsrmRuntimeConfig":
        base_url = (os.getenv("ROUTING_BASE_URL") or "").strip() or DEFAULT_BASE_URL
        profile = (os.getenv("ROUTING_PROFILE") or "").strip() or "driving"

        return OsrmRuntimeConfig(
            base_url=base_url.rstrip("/"),
            profile=profile,
            timeout_s=_env_float("ROUTING_TIMEOUT_S", 10.0),
        )

    def route_url(self, waypoints: str) -> str:
        return f"{self.base_url}/route/v1/{self.profile}/{waypoints}"
