"""Backend listener lifecycle.

The host test-runner drives a listener through three calls:

    listener.setup_test(context)                      once, before any sample
    listener.handle_sample_results(results, context)  per batch, maybe concurrently
    listener.teardown_test(context)                   once, at the end of the run

``InfluxBackendListenerClient`` turns those calls into line-protocol points
and an annotation at the start and end of the run.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Iterable, Optional

from jmeter_influx.lib.aggregate import UserMetric
from jmeter_influx.lib.annotations import build_annotation
from jmeter_influx.lib.config import BackendListenerContext, RunConfiguration, default_parameters
from jmeter_influx.lib.errors import LifecycleError
from jmeter_influx.lib.mapper import map_result
from jmeter_influx.lib.models import EncodedMetric, SampleResult
from jmeter_influx.lib.senders import MetricsSender, create_sender

logger = logging.getLogger(__name__)

__all__ = [
    "ListenerState",
    "AbstractBackendListenerClient",
    "InfluxBackendListenerClient",
]


class ListenerState(Enum):
    """Lifecycle states of a listener run."""

    UNINITIALIZED = "uninitialized"
    CONFIGURED = "configured"
    RUNNING = "running"
    TORN_DOWN = "torn_down"


class AbstractBackendListenerClient(ABC):
    """Base class for backend listeners.

    Owns the run's ``UserMetric`` and the lifecycle state machine; subclasses
    implement the three hook methods.
    """

    def __init__(self) -> None:
        self._user_metrics = UserMetric()
        self._state = ListenerState.UNINITIALIZED
        self._state_lock = threading.Lock()

    @property
    def state(self) -> ListenerState:
        return self._state

    def get_user_metrics(self) -> UserMetric:
        return self._user_metrics

    def get_default_parameters(self) -> Dict[str, str]:
        """Parameters shown to the operator, with their defaults."""
        return {}

    def setup_test(self, context: BackendListenerContext) -> None:
        """Prepare the run. Must be called once, before any batch."""
        self._require("setup_test", ListenerState.UNINITIALIZED)
        self._setup(context)
        self._state = ListenerState.CONFIGURED

    def handle_sample_results(
        self,
        results: Iterable[SampleResult],
        context: Optional[BackendListenerContext] = None,
    ) -> None:
        """Process one batch of results. Safe to call from several threads."""
        with self._state_lock:
            self._require("handle_sample_results", ListenerState.CONFIGURED, ListenerState.RUNNING)
            self._state = ListenerState.RUNNING
        self._handle(results, context)

    def teardown_test(self, context: Optional[BackendListenerContext] = None) -> None:
        """Finish the run. Runs once, even when no batch was handled."""
        with self._state_lock:
            self._require("teardown_test", ListenerState.CONFIGURED, ListenerState.RUNNING)
            self._state = ListenerState.TORN_DOWN
        self._teardown(context)

    def _require(self, operation: str, *allowed: ListenerState) -> None:
        if self._state not in allowed:
            raise LifecycleError(
                f"Cannot call {operation} while listener is {self._state.value}",
                state=self._state.value,
                operation=operation,
            )

    @abstractmethod
    def _setup(self, context: BackendListenerContext) -> None:
        """Subclass hook for setup_test."""

    @abstractmethod
    def _handle(
        self,
        results: Iterable[SampleResult],
        context: Optional[BackendListenerContext],
    ) -> None:
        """Subclass hook for handle_sample_results."""

    @abstractmethod
    def _teardown(self, context: Optional[BackendListenerContext]) -> None:
        """Subclass hook for teardown_test."""


class InfluxBackendListenerClient(AbstractBackendListenerClient):
    """Exports sample results as InfluxDB line-protocol points.

    Example:
        listener = InfluxBackendListenerClient()
        listener.setup_test(BackendListenerContext({
            "metricsSenderImplementation": "http",
            "endpointUrl": "http://influx:8086/write?db=jmeter",
            "application": "shop",
            "TAG_env": "prod",
        }))
        listener.handle_sample_results(results)
        listener.teardown_test()
    """

    def __init__(self) -> None:
        super().__init__()
        self.config: Optional[RunConfiguration] = None
        self.sender: Optional[MetricsSender] = None

    def get_default_parameters(self) -> Dict[str, str]:
        return default_parameters()

    def _setup(self, context: BackendListenerContext) -> None:
        config = RunConfiguration.from_context(context)
        logger.info(
            "Setting up listener: application=%s, measurement=%s, sender=%s, samplersRegex=%s",
            config.application_name,
            config.measurement_name,
            config.sender_name,
            config.sample_filter_pattern.pattern,
        )

        sender = create_sender(config.sender_name, token=config.auth_token)
        self.config = config
        self.sender = sender
        try:
            sender.setup(config.endpoint_url)
            self._send_annotation(is_start=True)
        except Exception:
            sender.destroy()
            self.sender = None
            raise

    def _handle(
        self,
        results: Iterable[SampleResult],
        context: Optional[BackendListenerContext],
    ) -> None:
        assert self.config is not None and self.sender is not None
        user_metrics = self.get_user_metrics()
        for result in results:
            metric = map_result(result, user_metrics, self.config)
            if metric is not None:
                self._add(metric)
        self.sender.flush()

    def _teardown(self, context: Optional[BackendListenerContext]) -> None:
        assert self.sender is not None
        logger.info("Sending end of test annotation metric")
        try:
            self._send_annotation(is_start=False)
        finally:
            self.sender.destroy()
        logger.info(
            "Listener finished: %d samples seen, mean active threads %d",
            self.get_user_metrics().sample_count,
            self.get_user_metrics().mean_active_threads,
        )

    def _send_annotation(self, is_start: bool) -> None:
        assert self.config is not None and self.sender is not None
        self._add(build_annotation(self.config, is_start))
        self.sender.flush()

    def _add(self, metric: EncodedMetric) -> None:
        assert self.sender is not None
        self.sender.add_metric(metric.measurement, metric.tags, metric.fields)
