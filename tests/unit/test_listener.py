"""Tests for jmeter_influx/lib/listener.py - the run lifecycle."""

import threading
from unittest.mock import MagicMock, patch

import pytest

from jmeter_influx.lib.config import BackendListenerContext
from jmeter_influx.lib.errors import ConfigurationError, ConnectionError, LifecycleError, TransportError
from jmeter_influx.lib.listener import InfluxBackendListenerClient, ListenerState
from jmeter_influx.lib.senders import MemoryMetricsSender


def _points(sender):
    """Strip timestamps from the lines a MemoryMetricsSender collected."""
    return [line.rsplit(" ", 1)[0] for line in sender.lines]


class TestSetup:
    """Tests for setup_test."""

    def test_start_annotation_flushed(self, memory_context):
        listener = InfluxBackendListenerClient()
        listener.setup_test(memory_context)

        assert listener.state is ListenerState.CONFIGURED
        assert isinstance(listener.sender, MemoryMetricsSender)
        assert listener.sender.flush_count == 1
        assert _points(listener.sender) == [
            'events,application=shop,title=ApacheJMeter text="Checkout started"'
        ]

    def test_invalid_regex_aborts_before_sender(self, memory_context):
        parameters = memory_context.parameters
        parameters["samplersRegex"] = "(bad"
        listener = InfluxBackendListenerClient()

        with patch("jmeter_influx.lib.listener.create_sender") as create_sender:
            with pytest.raises(ConfigurationError):
                listener.setup_test(BackendListenerContext(parameters))

        create_sender.assert_not_called()
        assert listener.state is ListenerState.UNINITIALIZED

    def test_unknown_sender(self, memory_context):
        parameters = memory_context.parameters
        parameters["metricsSenderImplementation"] = "carrier-pigeon"

        with pytest.raises(ConfigurationError) as exc_info:
            InfluxBackendListenerClient().setup_test(BackendListenerContext(parameters))

        assert "carrier-pigeon" in str(exc_info.value)

    def test_sender_setup_failure_releases_sender(self, memory_context):
        sender = MagicMock()
        sender.setup.side_effect = ConnectionError("unreachable")
        listener = InfluxBackendListenerClient()

        with patch("jmeter_influx.lib.listener.create_sender", return_value=sender):
            with pytest.raises(ConnectionError):
                listener.setup_test(memory_context)

        sender.destroy.assert_called_once()
        sender.add_metric.assert_not_called()
        assert listener.state is ListenerState.UNINITIALIZED

    def test_setup_twice_rejected(self, memory_context):
        listener = InfluxBackendListenerClient()
        listener.setup_test(memory_context)

        with pytest.raises(LifecycleError):
            listener.setup_test(memory_context)

    def test_token_passed_to_sender(self, memory_context):
        parameters = memory_context.parameters
        parameters["authToken"] = "secret"
        listener = InfluxBackendListenerClient()
        listener.setup_test(BackendListenerContext(parameters))
        assert listener.sender.token == "secret"


class TestHandleSampleResults:
    """Tests for handle_sample_results."""

    def test_batch_mapped_and_flushed_once(self, memory_context, make_result):
        listener = InfluxBackendListenerClient()
        listener.setup_test(memory_context)

        listener.handle_sample_results([make_result(), make_result(label="checkout", elapsed=20)])

        assert listener.state is ListenerState.RUNNING
        assert listener.sender.flush_count == 2
        assert _points(listener.sender)[1:] == [
            "jmeter,application=shop,transaction=login,responseCode=200 meanAT=4 responseTime=150",
            "jmeter,application=shop,transaction=checkout,responseCode=200 meanAT=4 responseTime=20",
        ]

    def test_filter_counts_all_results(self, memory_context, make_result):
        parameters = memory_context.parameters
        parameters["samplersRegex"] = "check"
        listener = InfluxBackendListenerClient()
        listener.setup_test(BackendListenerContext(parameters))

        results = [make_result(label="checkout")] * 3 + [make_result(label="login")] * 7
        listener.handle_sample_results(results)

        assert listener.get_user_metrics().sample_count == 10
        assert len(listener.sender.lines) == 1 + 3

    def test_flush_even_when_nothing_matches(self, memory_context, make_result):
        parameters = memory_context.parameters
        parameters["samplersRegex"] = "^none$"
        listener = InfluxBackendListenerClient()
        listener.setup_test(BackendListenerContext(parameters))

        listener.handle_sample_results([make_result()])

        assert listener.sender.flush_count == 2

    def test_before_setup_rejected(self, make_result):
        with pytest.raises(LifecycleError):
            InfluxBackendListenerClient().handle_sample_results([make_result()])

    def test_after_teardown_rejected(self, memory_context, make_result):
        listener = InfluxBackendListenerClient()
        listener.setup_test(memory_context)
        listener.teardown_test()

        with pytest.raises(LifecycleError):
            listener.handle_sample_results([make_result()])

    def test_flush_error_propagates(self, memory_context, make_result):
        listener = InfluxBackendListenerClient()
        listener.setup_test(memory_context)
        listener.sender._send = MagicMock(side_effect=TransportError("down"))

        with pytest.raises(TransportError):
            listener.handle_sample_results([make_result()])

    def test_concurrent_batches(self, memory_context, make_result):
        listener = InfluxBackendListenerClient()
        listener.setup_test(memory_context)

        def worker():
            for _ in range(20):
                listener.handle_sample_results([make_result()] * 5)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert listener.get_user_metrics().sample_count == 400
        assert len(listener.sender.lines) == 1 + 400
        assert listener.sender.flush_count == 1 + 80


class TestTeardown:
    """Tests for teardown_test."""

    def test_end_annotation_without_batches(self, memory_context):
        listener = InfluxBackendListenerClient()
        listener.setup_test(memory_context)
        listener.teardown_test(memory_context)

        points = _points(listener.sender)
        assert listener.state is ListenerState.TORN_DOWN
        assert points.count('events,application=shop,title=ApacheJMeter text="Checkout ended"') == 1
        assert len(points) == 2
        assert listener.sender.flush_count == 2
        assert listener.sender.destroyed is True

    def test_end_annotation_is_last(self, memory_context, make_result):
        listener = InfluxBackendListenerClient()
        listener.setup_test(memory_context)
        listener.handle_sample_results([make_result()])
        listener.teardown_test()

        assert _points(listener.sender)[-1].endswith('text="Checkout ended"')

    def test_teardown_twice_rejected(self, memory_context):
        listener = InfluxBackendListenerClient()
        listener.setup_test(memory_context)
        listener.teardown_test()

        with pytest.raises(LifecycleError):
            listener.teardown_test()

    def test_teardown_before_setup_rejected(self):
        with pytest.raises(LifecycleError):
            InfluxBackendListenerClient().teardown_test()

    def test_sender_destroyed_when_final_flush_fails(self, memory_context):
        listener = InfluxBackendListenerClient()
        listener.setup_test(memory_context)
        listener.sender._send = MagicMock(side_effect=TransportError("down"))

        with pytest.raises(TransportError):
            listener.teardown_test()

        assert listener.sender.destroyed is True
        assert listener.state is ListenerState.TORN_DOWN


class TestDefaults:
    """Tests for get_default_parameters."""

    def test_matches_config_defaults(self):
        defaults = InfluxBackendListenerClient().get_default_parameters()
        assert defaults["measurement"] == "jmeter"
        assert "metricsSenderImplementation" in defaults
