import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union
from urllib.parse import quote, urlencode

from .cache import TtlCache
from .clock import ClockSource, SystemClock
from .config import Settings
from .decoder import decode_weather
from .errors import ClassifiedError, ErrorKind, classify
from .keys import KeyRotator, normalize_key
from .models import WeatherRecord
from .state import Error, Idle, Listener, Loading, OrchestratorState, StateStore, Success
from .transport import Transport
from .units import TemperatureUnit, temperature_string

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fetched:
    record: WeatherRecord
    from_cache: bool = False


@dataclass(frozen=True)
class Failed:
    error: ClassifiedError


@dataclass(frozen=True)
class Superseded:
    """A newer request was issued while this one was in flight; its result was not published."""

    key: str


FetchOutcome = Union[Fetched, Failed, Superseded]


class WeatherOrchestrator:
    """Fetches, caches and publishes current weather for one active city at a time.

    State moves Idle -> Loading -> Success | Error. Only the most recently issued
    request may publish; results of superseded requests still land in the cache
    but never replace the state. Transport and decoder failures are turned into
    an Error state and a Failed outcome, they are never raised to the caller.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Transport,
        *,
        clock: Optional[ClockSource] = None,
        rotator: Optional[KeyRotator] = None,
        cache: Optional[TtlCache] = None,
    ) -> None:
        self.settings = settings
        self._transport = transport
        self._clock = clock or SystemClock()
        if rotator is None:
            rotator = KeyRotator(settings.lookup_keys)
            rotator.select(settings.default_key)
        self._rotator = rotator
        self._cache = cache or TtlCache(settings.ttl_seconds)
        self._store = StateStore(Idle())
        self._unit = TemperatureUnit.CELSIUS
        self._seq = 0
        self._active_key = rotator.current()

    # Public state -------------------------------------------------------
    @property
    def state(self) -> OrchestratorState:
        return self._store.value

    @property
    def active_key(self) -> str:
        return self._active_key

    @property
    def unit(self) -> TemperatureUnit:
        return self._unit

    @property
    def cache(self) -> TtlCache:
        return self._cache

    @property
    def current_record(self) -> Optional[WeatherRecord]:
        state = self._store.value
        return state.record if isinstance(state, Success) else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._store.subscribe(listener)

    def temperature_string(self) -> str:
        return temperature_string(self.current_record, self._unit)

    # Operations ---------------------------------------------------------
    def build_url(self, key: str) -> str:
        query = urlencode(
            {"q": key, "appid": self.settings.api_key, "units": "metric"},
            quote_via=quote,
        )
        separator = "&" if "?" in self.settings.base_url else "?"
        return f"{self.settings.base_url}{separator}{query}"

    async def request(self, key: str) -> FetchOutcome:
        normalized = normalize_key(key)
        if not normalized:
            raise ValueError("weather lookup key must not be blank")

        self._seq += 1
        seq = self._seq
        self._active_key = normalized
        try:
            self._rotator.select(normalized)
        except KeyError:
            pass
        self._store.set(Loading(normalized))

        entry = self._cache.get(normalized, self._clock.now())
        if entry is not None:
            logger.info("Using cached weather for %s", normalized)
            self._store.set(Success(entry.record))
            return Fetched(entry.record, from_cache=True)

        url = self.build_url(normalized)
        logger.info("Fetching weather for %s (request #%s)", normalized, seq)
        try:
            payload = await self._transport.fetch(url, self.settings.request_timeout_seconds)
            record = decode_weather(payload, key=normalized, fetched_at=self._clock.now())
        except Exception as e:
            error = classify(e)
            if error.kind is ErrorKind.UNKNOWN:
                logger.exception("Unexpected error fetching weather for %s", normalized)
            else:
                logger.warning("Fetching weather for %s failed: %s (%s)", normalized, error.message, e)
            if seq != self._seq:
                logger.debug("Discarding failure of superseded request #%s for %s", seq, normalized)
                return Superseded(normalized)
            self._store.set(Error(error.kind, error.message))
            return Failed(error)

        self._cache.put(normalized, record, record.fetched_at)
        if seq != self._seq:
            logger.debug("Discarding result of superseded request #%s for %s", seq, normalized)
            return Superseded(normalized)
        logger.info("Weather for %s updated: %.1f°C", normalized, record.temperature_c)
        self._store.set(Success(record))
        return Fetched(record)

    async def retry(self) -> FetchOutcome:
        return await self.request(self._active_key)

    async def refresh(self) -> FetchOutcome:
        self._cache.invalidate(self._active_key)
        return await self.request(self._active_key)

    async def select_next_key(self) -> FetchOutcome:
        old_key = self._active_key
        new_key = self._rotator.next()
        if self.settings.invalidate_on_rotate:
            self._cache.invalidate(old_key)
        logger.info("Switching city from %s to %s", old_key, new_key)
        return await self.request(new_key)

    def set_unit(self, unit: TemperatureUnit) -> None:
        if unit is self._unit:
            return
        self._unit = unit
        self._store.notify()

    def toggle_unit(self) -> TemperatureUnit:
        self.set_unit(self._unit.toggled())
        return self._unit

    def reset(self) -> None:
        # bumping the sequence drops whatever is still in flight
        self._seq += 1
        self._cache.clear()
        self._unit = TemperatureUnit.CELSIUS
        self._store.set(Idle())
