from __future__ import annotations

import os
import urllib.request

import pytest

from src.adapters.osrm import OsrmRuntimeConfig


def _osrm_reachable(config: OsrmRuntimeConfig) -> bool:
    # A one-leg route is the cheapest request every OSRM server answers.
    url = config.route_url("105.769949,10.039128;105.773601,10.042891") + "?overview=false"
    try:
        with urllib.request.urlopen(url, timeout=3) as resp:  # nosec B310
            return 200 <= resp.status < 300
    except Exception:
        return False


@pytest.fixture(scope="session")
def require_osrm() -> OsrmRuntimeConfig:
    config = OsrmRuntimeConfig.from_env()
    if not _osrm_reachable(config):
        msg = f"OSRM not reachable at {config.base_url}"

        if os.getenv("REQUIRE_OSRM"):
            pytest.fail(msg, pytrace=False)

        pytest.skip(f"{msg}; skipping integration tests")
    return config
