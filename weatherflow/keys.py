import re
from typing import Iterable, List

from .errors import ConfigError

MIN_CITY_NAME_LENGTH = 2
MAX_CITY_NAME_LENGTH = 50
FORBIDDEN_CITY_WORDS = frozenset({"test", "admin", "null", "undefined"})

_CITY_NAME_RE = re.compile(r"^[^\W\d_]+(?:[\s\-'][^\W\d_]+)*$")
_WORD_SPLIT_RE = re.compile(r"[\s\-']+")


def normalize_key(key: str) -> str:
    return key.strip().casefold()


def is_valid_city_name(name: str | None) -> bool:
    if name is None:
        return False
    trimmed = name.strip()
    if not MIN_CITY_NAME_LENGTH <= len(trimmed) <= MAX_CITY_NAME_LENGTH:
        return False
    if not _CITY_NAME_RE.match(trimmed):
        return False
    # matched as whole words: "Nullarbor" is allowed, "Null Island" is not
    words = _WORD_SPLIT_RE.split(trimmed.casefold())
    return not FORBIDDEN_CITY_WORDS.intersection(words)


class KeyRotator:
    """Cycles through a fixed list of lookup keys, wrapping after the last one."""

    def __init__(self, keys: Iterable[str], start: int = 0) -> None:
        self._keys: List[str] = [normalize_key(k) for k in keys]
        if not self._keys:
            raise ConfigError("KeyRotator needs at least one lookup key")
        if any(not k for k in self._keys):
            raise ConfigError("lookup keys must not be blank")
        if len(set(self._keys)) != len(self._keys):
            raise ConfigError(f"lookup keys must be unique: {self._keys}")
        if not 0 <= start < len(self._keys):
            raise ConfigError(f"start index {start} out of range")
        self._index = start

    @property
    def keys(self) -> List[str]:
        return list(self._keys)

    @property
    def index(self) -> int:
        return self._index

    def current(self) -> str:
        return self._keys[self._index]

    def next(self) -> str:
        self._index = (self._index + 1) % len(self._keys)
        return self._keys[self._index]

    def select(self, key: str) -> str:
        normalized = normalize_key(key)
        try:
            self._index = self._keys.index(normalized)
        except ValueError:
            raise KeyError(key) from None
        return normalized

    def __len__(self) -> int:
        return len(self._keys)
