"""Timing utilities for planner operations."""

import functools
import time
from collections import defaultdict
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Optional

from docmigrate.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class TimingStat:
    """Aggregate timings for one named operation."""

    count: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0

    def add(self, duration_ms: float) -> None:
        self.count += 1
        self.total_ms += duration_ms
        self.max_ms = max(self.max_ms, duration_ms)

    @property
    def mean_ms(self) -> float:
        return self.total_ms / self.count if self.count > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "total_ms": round(self.total_ms, 3),
            "mean_ms": round(self.mean_ms, 3),
            "max_ms": round(self.max_ms, 3),
        }


class LatencyTracker:
    """Thread-safe tracker of per-operation timings."""

    def __init__(self):
        self._stats: Dict[str, TimingStat] = defaultdict(TimingStat)
        self._lock = Lock()

    def record(self, operation: str, duration_ms: float) -> None:
        with self._lock:
            self._stats[operation].add(duration_ms)

    def get_stats(self, operation: Optional[str] = None) -> Dict[str, Any]:
        """Get statistics for one operation, or all when ``operation`` is None."""
        with self._lock:
            if operation:
                return {operation: self._stats[operation].to_dict()}
            return {op: stat.to_dict() for op, stat in self._stats.items()}

    def reset(self) -> None:
        with self._lock:
            self._stats.clear()


_global_tracker = LatencyTracker()


def get_latency_tracker() -> LatencyTracker:
    """Get the global latency tracker instance."""
    return _global_tracker


def timed(operation: Optional[str] = None, log_level: str = "debug"):
    """
    Decorator for timing function execution.

    Example:
        @timed("denormalize")
        def build(...):
            ...

    Args:
        operation: Name of the operation (defaults to function name)
        log_level: Logging level for the timing message
    """

    def decorator(func: Callable) -> Callable:
        op_name = operation or f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                duration_ms = (time.perf_counter() - start_time) * 1000
                _global_tracker.record(op_name, duration_ms)

                log_fn = getattr(logger, log_level, logger.debug)
                log_fn(f"{op_name} completed in {duration_ms:.3f}ms")

        return wrapper

    return decorator
