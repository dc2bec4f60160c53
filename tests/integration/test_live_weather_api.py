import os

import pytest

from weatherflow.config import Settings
from weatherflow.orchestrator import Fetched, WeatherOrchestrator
from weatherflow.state import Success
from weatherflow.transport import AiohttpTransport, HttpxTransport

pytestmark = pytest.mark.integration


def _live_settings() -> Settings:
    if os.getenv("RUN_INTEGRATION_TESTS") != "1":
        pytest.skip("Integration test skipped (set RUN_INTEGRATION_TESTS=1 to run)")
    api_key = os.getenv("OPENWEATHER_API_KEY")
    if not api_key or api_key == "test-key":
        pytest.skip("OPENWEATHER_API_KEY with a real key is required")
    return Settings(api_key=api_key, lookup_keys=("London", "Paris"))


@pytest.mark.asyncio
async def test_httpx_transport_against_openweather():
    settings = _live_settings()
    orchestrator = WeatherOrchestrator(settings, HttpxTransport())

    outcome = await orchestrator.request("London")

    assert isinstance(outcome, Fetched)
    assert isinstance(orchestrator.state, Success)
    assert orchestrator.state.record.city_name


@pytest.mark.asyncio
async def test_aiohttp_transport_rotation_against_openweather():
    settings = _live_settings()
    transport = AiohttpTransport()
    orchestrator = WeatherOrchestrator(settings, transport)
    try:
        await orchestrator.request("London")
        outcome = await orchestrator.select_next_key()
    finally:
        await transport.close()

    assert isinstance(outcome, Fetched)
    assert orchestrator.active_key == "paris"
