import asyncio
import json
import os
import sys
from pathlib import Path
from urllib.parse import parse_qs, urlparse

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from weatherflow.clock import ManualClock  # noqa: E402
from weatherflow.config import Settings  # noqa: E402


@pytest.fixture(autouse=True)
def _test_env(monkeypatch):
    monkeypatch.setenv("OPENWEATHER_API_KEY", os.getenv("OPENWEATHER_API_KEY", "test-key"))


@pytest.fixture(autouse=True)
def _block_network(monkeypatch, request):
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("network"):
        return

    import aiohttp
    import httpx

    def _boom(*args, **kwargs):
        raise RuntimeError(
            "Network is blocked in unit tests. "
            "Inject a fake transport/client or mark the test with @pytest.mark.network"
        )

    monkeypatch.setattr(httpx.Client, "request", _boom, raising=True)
    monkeypatch.setattr(httpx.AsyncClient, "request", _boom, raising=True)
    monkeypatch.setattr(aiohttp.ClientSession, "_request", _boom, raising=True)


def weather_payload(temp=22.5, *, name="London", description="clear sky", icon="01d",
                    humidity=65, pressure=1013, wind=3.5, feels_like=21.0) -> bytes:
    return json.dumps({
        "name": name,
        "main": {"temp": temp, "feels_like": feels_like, "humidity": humidity, "pressure": pressure},
        "weather": [{"description": description, "icon": icon}],
        "wind": {"speed": wind},
    }).encode()


def city_of(url: str) -> str:
    return parse_qs(urlparse(url).query)["q"][0]


class FakeTransport:
    """Replies from a queue; an Exception in the queue is raised instead of returned."""

    def __init__(self, *responses):
        self._responses = list(responses)
        self.calls = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def queue(self, *responses):
        self._responses.extend(responses)

    async def fetch(self, url, timeout_seconds):
        self.calls.append((url, timeout_seconds))
        item = self._responses.pop(0) if self._responses else weather_payload()
        if isinstance(item, BaseException):
            raise item
        return item


class GatedTransport:
    """Holds each request until the test releases the gate for its city."""

    def __init__(self):
        self.gates = {}
        self.replies = {}
        self.calls = []

    def reply(self, city, response):
        self.replies[city] = response
        self.gates.setdefault(city, asyncio.Event())

    def release(self, city):
        self.gates[city].set()

    async def fetch(self, url, timeout_seconds):
        city = city_of(url)
        self.calls.append(city)
        await self.gates.setdefault(city, asyncio.Event()).wait()
        item = self.replies[city]
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def make_payload():
    return weather_payload


@pytest.fixture
def clock():
    return ManualClock(0.0)


@pytest.fixture
def settings():
    return Settings(api_key="test-key", lookup_keys=("London", "Paris"), ttl_seconds=300)


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def gated_transport():
    return GatedTransport()
