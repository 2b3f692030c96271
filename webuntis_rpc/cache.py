from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable
import logging
import time

logger = logging.getLogger(__name__)

DEFAULT_LENGTH_MAXIMUM = 20
DEFAULT_DISPOSE_TIME = 30  # minutes


@dataclass(frozen=True)
class CacheEntry:
    creation_time: float
    value: Any


class ResponseCache:
    """
    In-memory store of raw responses keyed by serialized request.\n
    Eviction is FIFO by insertion order, entries older than dispose_time minutes are dropped on lookup
    """

    def __init__(
        self,
        length_maximum: int = DEFAULT_LENGTH_MAXIMUM,
        dispose_time: float = DEFAULT_DISPOSE_TIME,
        clock: Callable[[], float] = time.monotonic
    ):
        self.length_maximum = length_maximum
        self.dispose_time = dispose_time
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    @property
    def length_maximum(self) -> int:
        return self._length_maximum

    @length_maximum.setter
    def length_maximum(self, value: int):
        if value <= 0:
            raise ValueError(f"Cache length maximum must be positive, got {value}")
        self._length_maximum = value

    @property
    def dispose_time(self) -> float:
        return self._dispose_time

    @dispose_time.setter
    def dispose_time(self, value: float):
        if value < 0:
            raise ValueError(f"Cache dispose time must not be negative, got {value}")
        self._dispose_time = value

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        age = self._clock() - entry.creation_time
        if age > self.dispose_time * 60:
            logger.debug(f"Cache entry expired after {age:.0f}s")
            del self._entries[key]
            return None

        return entry.value

    def put(self, key: str, value: Any):
        # Re-inserting an existing key keeps its original position
        self._entries[key] = CacheEntry(self._clock(), value)
        while len(self._entries) > self.length_maximum:
            self._entries.popitem(last=False)

    def clear(self):
        self._entries.clear()
