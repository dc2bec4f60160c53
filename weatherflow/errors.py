from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import Optional


class WeatherflowError(Exception):
    pass


class ConfigError(WeatherflowError):
    pass


class TransportError(WeatherflowError):
    pass


class Unreachable(TransportError):
    """No connectivity, DNS failure or refused connection."""


class TransportTimeout(TransportError):
    pass


class HttpStatusError(TransportError):
    def __init__(self, status: int, message: str = "") -> None:
        super().__init__(message or f"HTTP {status}")
        self.status = status


class MalformedResponse(WeatherflowError):
    pass


class ErrorKind(Enum):
    NETWORK_UNAVAILABLE = "network_unavailable"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    DECODING_FAILED = "decoding_failed"
    UNKNOWN = "unknown"


NETWORK_UNAVAILABLE_MESSAGE = "Network error: unable to reach the weather service"
TIMEOUT_MESSAGE = "Request timed out"
DECODING_FAILED_MESSAGE = "Failed to parse weather data"
UNKNOWN_MESSAGE = "Unexpected error"


@dataclass(frozen=True)
class ClassifiedError:
    kind: ErrorKind
    message: str
    status: Optional[int] = None


def http_error_message(status: int) -> str:
    try:
        phrase = HTTPStatus(status).phrase
    except ValueError:
        return f"Error: {status}"
    return f"Error: {status} - {phrase}"


def classify(exc: BaseException) -> ClassifiedError:
    """Map any failure raised by a transport or the decoder onto an ErrorKind.

    Only the kind, a fixed message and (for HTTP errors) the status code survive;
    the exception object itself is not kept.
    """
    if isinstance(exc, HttpStatusError):
        return ClassifiedError(ErrorKind.HTTP_ERROR, http_error_message(exc.status), exc.status)
    if isinstance(exc, TransportTimeout):
        return ClassifiedError(ErrorKind.TIMEOUT, TIMEOUT_MESSAGE)
    if isinstance(exc, Unreachable):
        return ClassifiedError(ErrorKind.NETWORK_UNAVAILABLE, NETWORK_UNAVAILABLE_MESSAGE)
    if isinstance(exc, MalformedResponse):
        return ClassifiedError(ErrorKind.DECODING_FAILED, DECODING_FAILED_MESSAGE)
    return ClassifiedError(ErrorKind.UNKNOWN, UNKNOWN_MESSAGE)
