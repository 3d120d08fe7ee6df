"""Data types shared by the mapper, annotations and senders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

__all__ = ["SampleResult", "EncodedMetric", "ANNOTATION_MEASUREMENT"]

# Reserved measurement for start/end markers, never the data measurement
ANNOTATION_MEASUREMENT = "events"


@dataclass
class SampleResult:
    """One sample execution outcome reported by the load-testing engine.

    The exporter reads these but never modifies them.
    """

    label: Optional[str]
    response_code: Optional[str]
    elapsed: int = 0  # milliseconds
    all_threads: int = 0  # active threads across all thread groups
    timestamp: Optional[int] = None  # epoch milliseconds
    success: bool = True


@dataclass(frozen=True)
class EncodedMetric:
    """A line-protocol point without its timestamp.

    ``tags`` starts with a comma (``,key=value,...``) so it can be appended
    directly after the measurement; ``fields`` has no leading separator.
    """

    measurement: str
    tags: str
    fields: str

    def to_line(self, timestamp_ns: Optional[int] = None) -> str:
        """Assemble the line-protocol text for this point."""
        line = f"{self.measurement}{self.tags} {self.fields}"
        if timestamp_ns is not None:
            line = f"{line} {timestamp_ns}"
        return line
