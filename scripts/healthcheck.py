import asyncio

from weatherflow.config import get_settings
from weatherflow.orchestrator import Fetched, WeatherOrchestrator
from weatherflow.transport import HttpxTransport


async def main():
    ok = True
    try:
        settings = get_settings()
        orchestrator = WeatherOrchestrator(settings, HttpxTransport())
        outcome = await orchestrator.request(settings.default_key)
        ok = isinstance(outcome, Fetched)
    except Exception:
        ok = False
    print("OK" if ok else "NOT OK")

if __name__ == "__main__":
    asyncio.run(main())
