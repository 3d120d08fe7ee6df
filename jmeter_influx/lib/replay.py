"""Replaying recorded results through a listener.

Acts as the host test-runner: one setup, batches handled by a pool of
worker threads, and a teardown that always runs.
"""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, as_completed, wait
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from jmeter_influx.lib.config import BackendListenerContext
from jmeter_influx.lib.errors import TransportError
from jmeter_influx.lib.listener import InfluxBackendListenerClient
from jmeter_influx.lib.models import SampleResult
from jmeter_influx.lib.results import iter_batches

logger = logging.getLogger(__name__)

__all__ = ["ReplaySummary", "run_replay"]


@dataclass
class ReplaySummary:
    """Outcome of a replay run."""

    batches: int = 0
    samples: int = 0  # results in batches that were delivered
    failed_batches: int = 0

    @property
    def success(self) -> bool:
        return self.failed_batches == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batches": self.batches,
            "samples": self.samples,
            "failed_batches": self.failed_batches,
        }


def _handle(listener: InfluxBackendListenerClient, batch: List[SampleResult], context: BackendListenerContext) -> int:
    listener.handle_sample_results(batch, context)
    return len(batch)


def _collect(future: Future, size: int, summary: ReplaySummary) -> None:
    try:
        summary.samples += future.result()
    except TransportError as e:
        summary.failed_batches += 1
        logger.error("Batch of %d results not delivered: %s", size, e.message)


def run_replay(
    listener: InfluxBackendListenerClient,
    context: BackendListenerContext,
    results: Iterable[SampleResult],
    *,
    batch_size: int = 100,
    workers: int = 1,
) -> ReplaySummary:
    """Drive a listener through setup, every batch and teardown.

    A batch whose flush fails is counted and logged; the run continues.
    Setup and teardown errors propagate.

    Args:
        listener: Listener to drive (not yet set up)
        context: Listener parameters
        results: Sample results in recorded order
        batch_size: Results per batch
        workers: Number of threads handling batches concurrently

    Returns:
        ReplaySummary with batch and sample counts
    """
    summary = ReplaySummary()
    listener.setup_test(context)
    try:
        batches = iter_batches(results, batch_size)
        if workers <= 1:
            for batch in batches:
                summary.batches += 1
                try:
                    summary.samples += _handle(listener, batch, context)
                except TransportError as e:
                    summary.failed_batches += 1
                    logger.error("Batch %d not delivered: %s", summary.batches, e.message)
        else:
            # At most two batches per worker are queued; the rest stay in the reader
            max_in_flight = workers * 2
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="replay") as pool:
                in_flight: Dict[Future, int] = {}
                for batch in batches:
                    if len(in_flight) >= max_in_flight:
                        done, _ = wait(in_flight, return_when=FIRST_COMPLETED)
                        for future in done:
                            _collect(future, in_flight.pop(future), summary)
                    in_flight[pool.submit(_handle, listener, batch, context)] = len(batch)
                    summary.batches += 1
                for future in as_completed(in_flight):
                    _collect(future, in_flight[future], summary)
    finally:
        listener.teardown_test(context)

    logger.info(
        "Replayed %d samples in %d batches (%d failed)",
        summary.samples,
        summary.batches,
        summary.failed_batches,
    )
    return summary
