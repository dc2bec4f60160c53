from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

from .models import WeatherRecord

NOT_AVAILABLE = "N/A"
DEGREE = "°"


class TemperatureUnit(Enum):
    CELSIUS = "C"
    FAHRENHEIT = "F"

    @property
    def symbol(self) -> str:
        return f"{DEGREE}{self.value}"

    def toggled(self) -> "TemperatureUnit":
        return TemperatureUnit.FAHRENHEIT if self is TemperatureUnit.CELSIUS else TemperatureUnit.CELSIUS


def to_display_unit(celsius: float, unit: TemperatureUnit) -> float:
    if unit is TemperatureUnit.FAHRENHEIT:
        return celsius * 9 / 5 + 32
    return celsius


def round_half_away_from_zero(value: float) -> int:
    # repr() keeps the shortest decimal form, so 22.5 stays 22.5 rather than a binary neighbour
    return int(Decimal(repr(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_temperature(value: Optional[float], unit: TemperatureUnit) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{round_half_away_from_zero(value)}{unit.symbol}"


def temperature_string(record: Optional[WeatherRecord], unit: TemperatureUnit) -> str:
    if record is None:
        return NOT_AVAILABLE
    return format_temperature(to_display_unit(record.temperature_c, unit), unit)


def feels_like_string(record: Optional[WeatherRecord], unit: TemperatureUnit) -> str:
    if record is None or record.feels_like_c is None:
        return NOT_AVAILABLE
    return f"Feels like {format_temperature(to_display_unit(record.feels_like_c, unit), unit)}"


def humidity_string(record: Optional[WeatherRecord]) -> str:
    if record is None:
        return NOT_AVAILABLE
    return f"{record.humidity}%"


def wind_speed_string(record: Optional[WeatherRecord]) -> str:
    if record is None:
        return NOT_AVAILABLE
    return f"{record.wind_speed:g} m/s"


def pressure_string(record: Optional[WeatherRecord]) -> str:
    if record is None:
        return NOT_AVAILABLE
    return f"{record.pressure} hPa"


def capitalize_description(description: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in description.split(" "))


def last_updated_string(instant: float) -> str:
    stamp = datetime.fromtimestamp(instant, tz=timezone.utc)
    return f"Last updated: {stamp:%H:%M}"
