"""
Memoization cache for the engine entry points.

This module provides the thread-safe LRU cache used to memoize the four
evaluation functions of ThermoEngine (substance, electro-solvent, solvent PVT
and reaction properties).

Техническое описание:
Ключ кэша - кортеж (температура, давление, символ). Настройки движка
(растворитель, конвенции) в ключ не входят, поэтому движок очищает кэш
целиком при их изменении.

Ключевые свойства:

- Вычисление выполняется вне блокировки: параллельные промахи по одному
  ключу могут повторить расчёт, но читатель никогда не увидит частично
  построенный результат
- Первое сохранённое значение выигрывает, последующие отбрасываются
- Исключение при вычислении не попадает в кэш
- Метрики попаданий, промахов и вычислений
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, NamedTuple, Optional, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


class CacheKey(NamedTuple):
    """Key of a memoized evaluation. Pressure is taken by value at call time."""

    temperature: float
    pressure: float
    symbol: str


@dataclass
class CacheMetrics:
    """Cache metrics for a single entry point."""

    hits: int = 0
    misses: int = 0
    evaluations: int = 0
    total_time: float = 0.0

    @property
    def hit_rate(self) -> float:
        total_requests = self.hits + self.misses
        return (self.hits / total_requests * 100) if total_requests > 0 else 0.0

    @property
    def average_time(self) -> float:
        return self.total_time / self.evaluations if self.evaluations > 0 else 0.0


class MemoCache(Generic[V]):
    """Thread-safe LRU cache with a get-or-compute operation."""

    def __init__(self, name: str, max_size: Optional[int] = 10_000):
        """
        Initialize cache.

        Args:
            name: Name used in log messages (usually the entry point)
            max_size: Maximum number of items in cache, None for unbounded
        """
        self.name = name
        self.max_size = max_size
        self.metrics = CacheMetrics()
        self._cache: "OrderedDict[CacheKey, V]" = OrderedDict()
        self._lock = threading.RLock()

    def get(self, key: CacheKey) -> Optional[V]:
        """Get item from cache, None on miss."""
        with self._lock:
            if key not in self._cache:
                return None

            # Move to end (most recently used)
            self._cache.move_to_end(key)
            return self._cache[key]

    def put(self, key: CacheKey, value: V) -> V:
        """
        Put item in cache unless the key is already present.

        Returns:
            The value stored for the key after the call
        """
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                return self._cache[key]

            if self.max_size is not None and len(self._cache) >= self.max_size:
                # Remove least recently used item
                self._cache.popitem(last=False)

            self._cache[key] = value
            return value

    def get_or_compute(self, key: CacheKey, compute: Callable[[], V]) -> V:
        """
        Return the cached value for `key`, computing and storing it on a miss.

        `compute` runs outside the lock. If it raises, nothing is stored and
        the exception propagates.
        """
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                self.metrics.hits += 1
                value = self._cache[key]
                logger.debug(f"Cache hit [{self.name}]: {key}")
                return value
            self.metrics.misses += 1

        start_time = time.perf_counter()
        value = compute()
        elapsed = time.perf_counter() - start_time

        with self._lock:
            self.metrics.evaluations += 1
            self.metrics.total_time += elapsed

        return self.put(key, value)

    def clear(self) -> None:
        """Clear cache."""
        with self._lock:
            self._cache.clear()

    def size(self) -> int:
        """Get current cache size."""
        with self._lock:
            return len(self._cache)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._cache

    def __len__(self) -> int:
        return self.size()
