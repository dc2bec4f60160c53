from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class WeatherRecord:
    """Current conditions for one city.

    Temperatures are kept in Celsius only; display units are derived on demand.
    Wind speed is in m/s and pressure in hPa, as reported with ``units=metric``.
    """

    key: str
    temperature_c: float
    description: str
    humidity: int
    wind_speed: float
    pressure: int
    fetched_at: float
    city_name: str = ""
    feels_like_c: Optional[float] = None
    icon: str = ""


@dataclass(frozen=True)
class CacheEntry:
    key: str
    record: WeatherRecord
    cached_at: float
