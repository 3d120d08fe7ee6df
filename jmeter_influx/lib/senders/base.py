"""Abstract base class for metrics senders.

Defines the sink contract used by the listener:

    setup(endpoint)                      acquire resources, validate endpoint
    add_metric(measurement, tags, fields)  buffer one point
    flush()                              deliver everything buffered so far
    destroy()                            release resources

Buffering is shared by all senders and is thread-safe; subclasses only
implement how a batch of lines is delivered.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)

__all__ = ["MetricsSender", "MetricTuple"]


@dataclass(frozen=True)
class MetricTuple:
    """A buffered point with the time it was added."""

    measurement: str
    tags: str
    fields: str
    timestamp_ns: int

    def to_line(self) -> str:
        """Line-protocol text: ``<measurement><tags> <fields> <timestamp>``."""
        return f"{self.measurement}{self.tags} {self.fields} {self.timestamp_ns}"


class MetricsSender(ABC):
    """Abstract base class for metrics senders.

    Subclasses must implement ``_connect`` and ``_send``.
    """

    #: Registry name, set by ``register_sender``
    name: str = ""

    def __init__(self, token: Optional[str] = None) -> None:
        # Credential for transports that authenticate; others ignore it
        self.token = token or ""
        self.endpoint: Optional[str] = None
        self._lock = threading.Lock()
        self._buffer: List[MetricTuple] = []
        self._destroyed = False

    def setup(self, endpoint: str) -> None:
        """Validate the endpoint and acquire resources.

        Raises:
            ConnectionError: If the endpoint is malformed or unreachable
        """
        self._connect(endpoint)
        self.endpoint = endpoint
        logger.info("%s ready for %s", self.__class__.__name__, endpoint)

    def add_metric(self, measurement: str, tags: str, fields: str) -> None:
        """Buffer one point, stamped with the current time."""
        metric = MetricTuple(measurement, tags, fields, time.time_ns())
        with self._lock:
            self._buffer.append(metric)

    def flush(self) -> int:
        """Send every buffered point.

        The buffer is swapped under the lock so points added concurrently
        go to the next flush.

        Returns:
            Number of points sent

        Raises:
            TransportError: If delivery fails
        """
        with self._lock:
            batch, self._buffer = self._buffer, []
        if not batch:
            return 0
        body = "\n".join(metric.to_line() for metric in batch) + "\n"
        self._send(body, len(batch))
        logger.debug("Flushed %d metrics to %s", len(batch), self.endpoint)
        return len(batch)

    def destroy(self) -> None:
        """Release resources. Safe to call more than once."""
        if self._destroyed:
            return
        self._destroyed = True
        with self._lock:
            dropped = len(self._buffer)
            self._buffer = []
        if dropped:
            logger.warning("Discarding %d unsent metrics", dropped)
        self._close()

    @property
    def pending(self) -> int:
        """Number of points waiting for the next flush."""
        with self._lock:
            return len(self._buffer)

    @abstractmethod
    def _connect(self, endpoint: str) -> None:
        """Parse the endpoint and open resources."""

    @abstractmethod
    def _send(self, body: str, count: int) -> None:
        """Deliver a newline-terminated block of ``count`` lines."""

    def _close(self) -> None:
        """Release resources opened by ``_connect``."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(endpoint={self.endpoint!r})"
