import json
import logging
import math
from typing import Any, Dict, Optional

from .errors import MalformedResponse
from .models import WeatherRecord

logger = logging.getLogger(__name__)

UNKNOWN_DESCRIPTION = "Unknown"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name)
    if not isinstance(section, dict):
        raise MalformedResponse(f"'{name}' must be an object, got {type(section).__name__}")
    return section


def _number(section: Dict[str, Any], path: str, name: str) -> float:
    value = section.get(name)
    if not _is_number(value):
        raise MalformedResponse(f"'{path}.{name}' must be a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError as e:
        raise MalformedResponse(f"'{path}.{name}' is out of range") from e
    if not math.isfinite(number):
        raise MalformedResponse(f"'{path}.{name}' must be finite, got {value!r}")
    return number


def _integer(section: Dict[str, Any], path: str, name: str) -> int:
    number = _number(section, path, name)
    value = section[name]
    if isinstance(value, int):
        return value
    if not number.is_integer():
        raise MalformedResponse(f"'{path}.{name}' must be an integer, got {value!r}")
    return int(number)


def decode_weather(payload: bytes, *, key: str, fetched_at: float) -> WeatherRecord:
    """Parse an OpenWeatherMap ``/weather`` response body.

    Raises MalformedResponse for anything that is not a complete document.
    Numeric fields never get defaults; only an empty ``weather`` list is
    tolerated and yields the "Unknown" description.
    """
    try:
        data = json.loads(payload)
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedResponse(f"response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedResponse(f"expected a JSON object, got {type(data).__name__}")

    main = _section(data, "main")
    wind = _section(data, "wind")
    temperature = _number(main, "main", "temp")
    humidity = _integer(main, "main", "humidity")
    pressure = _integer(main, "main", "pressure")
    wind_speed = _number(wind, "wind", "speed")

    feels_like: Optional[float] = None
    if main.get("feels_like") is not None:
        feels_like = _number(main, "main", "feels_like")

    conditions = data.get("weather")
    if not isinstance(conditions, list):
        raise MalformedResponse(f"'weather' must be a list, got {type(conditions).__name__}")

    description = UNKNOWN_DESCRIPTION
    icon = ""
    if conditions:
        first = conditions[0]
        if not isinstance(first, dict):
            raise MalformedResponse("'weather[0]' must be an object")
        raw_description = first.get("description")
        if not isinstance(raw_description, str):
            raise MalformedResponse(f"'weather[0].description' must be a string, got {raw_description!r}")
        description = raw_description
        icon = first.get("icon") if isinstance(first.get("icon"), str) else ""

    city_name = data.get("name") if isinstance(data.get("name"), str) else ""

    logger.debug("Decoded weather for %s: %.1f°C, %s", key, temperature, description)
    return WeatherRecord(
        key=key,
        temperature_c=temperature,
        description=description,
        humidity=humidity,
        wind_speed=wind_speed,
        pressure=pressure,
        fetched_at=fetched_at,
        city_name=city_name,
        feels_like_c=feels_like,
        icon=icon,
    )
