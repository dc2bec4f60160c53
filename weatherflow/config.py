import os
from dataclasses import dataclass, field
from typing import Tuple

from dotenv import load_dotenv

from .errors import ConfigError
from .keys import is_valid_city_name, normalize_key

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5/weather"
DEFAULT_CITIES = ("London", "New York", "Tokyo", "Sydney", "Paris")
DEFAULT_TTL_SECONDS = 300
DEFAULT_REQUEST_TIMEOUT = 10


@dataclass(frozen=True)
class Settings:
    api_key: str
    lookup_keys: Tuple[str, ...] = DEFAULT_CITIES
    default_key: str = ""
    ttl_seconds: int = DEFAULT_TTL_SECONDS
    request_timeout_seconds: int = DEFAULT_REQUEST_TIMEOUT
    base_url: str = DEFAULT_BASE_URL
    invalidate_on_rotate: bool = False
    log_level: str = field(default="INFO", compare=False)

    def __post_init__(self) -> None:
        keys = tuple(self.lookup_keys)
        object.__setattr__(self, "lookup_keys", keys)
        if self.ttl_seconds <= 0:
            raise ConfigError(f"ttl_seconds must be positive, got {self.ttl_seconds}")
        if self.request_timeout_seconds <= 0:
            raise ConfigError(f"request_timeout_seconds must be positive, got {self.request_timeout_seconds}")
        if not keys:
            raise ConfigError("lookup_keys must not be empty")
        normalized = [normalize_key(k) for k in keys]
        if any(not k for k in normalized):
            raise ConfigError("lookup_keys must not contain blank entries")
        invalid = [k for k in keys if not is_valid_city_name(k)]
        if invalid:
            raise ConfigError(f"lookup_keys contains invalid city names: {invalid}")
        if len(set(normalized)) != len(normalized):
            raise ConfigError(f"lookup_keys must be unique, got {list(keys)}")
        if not self.default_key:
            object.__setattr__(self, "default_key", keys[0])
        if normalize_key(self.default_key) not in normalized:
            raise ConfigError(f"default_key {self.default_key!r} is not one of lookup_keys")
        if not self.base_url:
            raise ConfigError("base_url must not be empty")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _bool_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def get_settings() -> Settings:
    load_dotenv()

    api_key = os.getenv("OPENWEATHER_API_KEY") or os.getenv("OWM_KEY")
    if not api_key:
        raise ConfigError("OPENWEATHER_API_KEY is not set in environment")

    raw_cities = os.getenv("WEATHER_CITIES")
    cities = tuple(c.strip() for c in raw_cities.split(",") if c.strip()) if raw_cities else DEFAULT_CITIES

    return Settings(
        api_key=api_key,
        lookup_keys=cities,
        default_key=os.getenv("WEATHER_DEFAULT_CITY", ""),
        ttl_seconds=_int_env("WEATHER_CACHE_TTL", DEFAULT_TTL_SECONDS),
        request_timeout_seconds=_int_env("WEATHER_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        base_url=os.getenv("WEATHER_BASE_URL", DEFAULT_BASE_URL),
        invalidate_on_rotate=_bool_env("WEATHER_INVALIDATE_ON_ROTATE"),
        log_level=os.getenv("WEATHER_LOG_LEVEL", "INFO"),
    )
