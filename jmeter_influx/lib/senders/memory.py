"""In-memory sender used for dry runs and tests."""

from __future__ import annotations

from typing import List, Optional

from jmeter_influx.lib.senders.base import MetricsSender
from jmeter_influx.lib.senders.registry import register_sender

__all__ = ["MemoryMetricsSender"]


@register_sender("memory")
class MemoryMetricsSender(MetricsSender):
    """Keeps every flushed line instead of sending it anywhere."""

    def __init__(self, token: Optional[str] = None) -> None:
        super().__init__(token)
        self.lines: List[str] = []
        self.flush_count = 0
        self.destroyed = False

    def _connect(self, endpoint: str) -> None:
        pass

    def _send(self, body: str, count: int) -> None:
        with self._lock:
            self.lines.extend(body.splitlines())

    def flush(self) -> int:
        with self._lock:
            self.flush_count += 1
        return super().flush()

    def _close(self) -> None:
        self.destroyed = True
