import logging
from dataclasses import dataclass
from typing import Callable, List, Union

from .errors import ErrorKind
from .models import WeatherRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Loading:
    key: str


@dataclass(frozen=True)
class Success:
    record: WeatherRecord


@dataclass(frozen=True)
class Error:
    kind: ErrorKind
    message: str


OrchestratorState = Union[Idle, Loading, Success, Error]
Listener = Callable[[OrchestratorState], None]


class StateStore:
    """Holds the current state and notifies subscribers on every change."""

    def __init__(self, initial: OrchestratorState = Idle()) -> None:
        self._state: OrchestratorState = initial
        self._listeners: List[Listener] = []

    @property
    def value(self) -> OrchestratorState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, state: OrchestratorState) -> None:
        self._state = state
        self.notify()

    def notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("State listener %r failed", listener)
