"""Run-level active thread statistics.

Every consumed sample result is recorded here, whether or not it is
exported, so the statistics reflect the full traffic of the run.
"""

from __future__ import annotations

import math
import threading
from typing import Optional

from jmeter_influx.lib.models import SampleResult

__all__ = ["UserMetric"]


class UserMetric:
    """Thread-safe running statistics over active thread counts.

    Batches may be handled concurrently by several worker threads; all
    reads and writes go through a single lock.

    Example:
        metric = UserMetric()
        metric.add(SampleResult(label="login", response_code="200", all_threads=4))
        metric.mean_active_threads  # 4
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._count = 0
        self._total = 0
        self._min: Optional[int] = None
        self._max: Optional[int] = None

    def add(self, result: SampleResult) -> None:
        """Record the active thread count carried by a result."""
        threads = int(result.all_threads or 0)
        with self._lock:
            self._count += 1
            self._total += threads
            if self._min is None or threads < self._min:
                self._min = threads
            if self._max is None or threads > self._max:
                self._max = threads

    @property
    def sample_count(self) -> int:
        """Number of results recorded since creation or last reset."""
        with self._lock:
            return self._count

    @property
    def mean_active_threads(self) -> int:
        """Mean active threads, rounded half up; 0 when nothing was recorded."""
        with self._lock:
            if not self._count:
                return 0
            return int(math.floor(self._total / self._count + 0.5))

    @property
    def min_active_threads(self) -> int:
        """Smallest active thread count seen; 0 when nothing was recorded."""
        with self._lock:
            return self._min or 0

    @property
    def max_active_threads(self) -> int:
        """Largest active thread count seen; 0 when nothing was recorded."""
        with self._lock:
            return self._max or 0

    def reset(self) -> None:
        """Clear all recorded statistics."""
        with self._lock:
            self._count = 0
            self._total = 0
            self._min = None
            self._max = None

    def __repr__(self) -> str:
        return (
            f"UserMetric(samples={self.sample_count}, "
            f"mean_active_threads={self.mean_active_threads})"
        )
