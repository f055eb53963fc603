"""In-process, TTL-bounded cache of lookup results keyed by city."""

import threading
import time
from typing import Callable, Optional

from cachetools import TTLCache

from weather_lookup.models import WeatherResult
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="cache")


class WeatherCache:
    """Thread-safe city -> WeatherResult cache.

    Entries expire `ttl_seconds` after they were written. When `max_size` is
    reached the least recently used entry is evicted. There is no per-key
    locking: two concurrent misses for the same city both compute a result and
    the later write wins.
    """

    def __init__(
        self,
        max_size: int = 100,
        ttl_seconds: float = 1800,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        logger.debug(f"Initializing WeatherCache (max_size={max_size}, ttl={ttl_seconds}s)")
        self.max_size = max_size
        self.ttl = ttl_seconds
        self._entries: TTLCache = TTLCache(maxsize=max_size, ttl=ttl_seconds, timer=timer)
        self._lock = threading.Lock()

    @staticmethod
    def key_for(city_name: str) -> str:
        """Cache key: trimmed, lower-cased city name."""
        return city_name.strip().lower()

    def get(self, city_name: str) -> Optional[WeatherResult]:
        """Return the stored result, or None if missing or expired."""
        key = self.key_for(city_name)
        with self._lock:
            return self._entries.get(key)

    def put(self, city_name: str, result: WeatherResult) -> None:
        key = self.key_for(city_name)
        with self._lock:
            self._entries[key] = result

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            self._entries.expire()
            return len(self._entries)
