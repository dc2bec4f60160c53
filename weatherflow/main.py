import asyncio
import logging
import os
import sys

from .advice import generate_weather_advice
from .config import get_settings
from .errors import ConfigError
from .orchestrator import WeatherOrchestrator
from .state import Error, Success
from .transport import AiohttpTransport
from .units import (
    TemperatureUnit,
    capitalize_description,
    feels_like_string,
    humidity_string,
    last_updated_string,
    pressure_string,
    wind_speed_string,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    handlers = [logging.StreamHandler()]
    log_file = os.getenv("WEATHER_LOG_FILE")
    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        handlers=handlers,
    )


def format_weather_message(orchestrator: WeatherOrchestrator) -> str:
    state = orchestrator.state
    if isinstance(state, Error):
        return f"{orchestrator.active_key}: {state.message}"
    if not isinstance(state, Success):
        return f"{orchestrator.active_key}: N/A"

    record = state.record
    unit = orchestrator.unit
    lines = [
        f"{record.city_name or record.key} - {capitalize_description(record.description)}",
        f"  Temperature: {orchestrator.temperature_string()} ({feels_like_string(record, unit)})",
        f"  Humidity: {humidity_string(record)}  Wind: {wind_speed_string(record)}  Pressure: {pressure_string(record)}",
        f"  {generate_weather_advice(record)}",
        f"  {last_updated_string(record.fetched_at)}",
    ]
    return "\n".join(lines)


async def run(fahrenheit: bool = False) -> int:
    settings = get_settings()
    configure_logging(settings.log_level)

    transport = AiohttpTransport()
    orchestrator = WeatherOrchestrator(settings, transport)
    if fahrenheit:
        orchestrator.set_unit(TemperatureUnit.FAHRENHEIT)

    failures = 0
    try:
        for i in range(len(settings.lookup_keys)):
            if i == 0:
                await orchestrator.request(settings.default_key)
            else:
                await orchestrator.select_next_key()
            print(format_weather_message(orchestrator))
            if isinstance(orchestrator.state, Error):
                failures += 1
    finally:
        await transport.close()
    return 1 if failures else 0


def main() -> None:
    try:
        code = asyncio.run(run(fahrenheit="--fahrenheit" in sys.argv[1:]))
    except ConfigError as e:
        raise SystemExit(f"Configuration error: {e}")
    raise SystemExit(code)


if __name__ == "__main__":
    main()
