import pytest


@pytest.fixture
def anyio_backend() -> str:
    # The code under test is asyncio-based; don't run async tests on trio.
    return "asyncio"
