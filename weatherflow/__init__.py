from .clock import ClockSource, ManualClock, SystemClock
from .config import Settings, get_settings
from .errors import ClassifiedError, ErrorKind
from .models import CacheEntry, WeatherRecord
from .orchestrator import Failed, Fetched, Superseded, WeatherOrchestrator
from .state import Error, Idle, Loading, Success
from .units import TemperatureUnit

__all__ = [
    "CacheEntry",
    "ClassifiedError",
    "ClockSource",
    "Error",
    "ErrorKind",
    "Failed",
    "Fetched",
    "Idle",
    "Loading",
    "ManualClock",
    "Settings",
    "Success",
    "Superseded",
    "SystemClock",
    "TemperatureUnit",
    "WeatherOrchestrator",
    "WeatherRecord",
    "get_settings",
]
