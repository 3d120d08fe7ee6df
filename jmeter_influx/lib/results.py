"""Reading JMeter CSV result files (JTL).

Only the columns the exporter needs are read; others are ignored:

    timeStamp,elapsed,label,responseCode,responseMessage,threadName,...,success,...,allThreads
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, TypeVar, Union

from jmeter_influx.lib.errors import ConfigurationError
from jmeter_influx.lib.models import SampleResult

__all__ = ["read_jtl", "iter_batches", "parse_row"]

T = TypeVar("T")

REQUIRED_COLUMNS = ("label", "elapsed")


def _to_int(value: Optional[str]) -> int:
    if value is None or not value.strip():
        return 0
    try:
        return int(float(value))
    except ValueError:
        return 0


def parse_row(row: Dict[str, Optional[str]]) -> SampleResult:
    """Convert one JTL row to a SampleResult; blank numbers become 0."""
    timestamp = row.get("timeStamp")
    return SampleResult(
        label=row.get("label"),
        response_code=row.get("responseCode"),
        elapsed=_to_int(row.get("elapsed")),
        all_threads=_to_int(row.get("allThreads")),
        timestamp=_to_int(timestamp) if timestamp else None,
        success=(row.get("success") or "true").strip().lower() == "true",
    )


def read_jtl(path: Union[str, Path]) -> Iterator[SampleResult]:
    """Stream SampleResults from a CSV JTL file with a header row.

    Raises:
        ConfigurationError: If the header lacks the label or elapsed columns
    """
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            raise ConfigurationError(
                f"{path} is not a CSV JTL file: missing columns {', '.join(missing)}",
                suggestion="Save results as CSV with 'Save field names' enabled.",
            )
        for row in reader:
            yield parse_row(row)


def iter_batches(items: Iterable[T], size: int) -> Iterator[List[T]]:
    """Split an iterable into lists of at most ``size`` items."""
    if size < 1:
        raise ValueError("batch size must be at least 1")
    batch: List[T] = []
    for item in items:
        batch.append(item)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch
