"""Tests for jmeter_influx/lib/errors.py - structured exception hierarchy."""

from jmeter_influx.lib.errors import (
    ConfigurationError,
    ConnectionError,
    ExporterError,
    LifecycleError,
    TransportError,
)


class TestExporterError:
    """Tests for base ExporterError class."""

    def test_basic_message(self):
        error = ExporterError("Something went wrong")
        assert str(error) == "Something went wrong"

    def test_with_details_and_suggestion(self):
        error = ExporterError(
            "Write failed",
            details={"endpoint": "http://influx:8086"},
            suggestion="Check the database exists",
        )
        assert "endpoint: http://influx:8086" in str(error)
        assert "Suggestion: Check the database exists" in str(error)

    def test_to_dict(self):
        error = ExporterError("Test error", details={"key": "value"}, suggestion="Fix it")
        d = error.to_dict()
        assert d["error_type"] == "ExporterError"
        assert d["message"] == "Test error"
        assert d["details"]["key"] == "value"
        assert d["suggestion"] == "Fix it"


class TestConfigurationError:
    """Tests for ConfigurationError."""

    def test_field_and_value(self):
        error = ConfigurationError("Invalid samplersRegex", field="samplersRegex", value="(x")
        assert error.field == "samplersRegex"
        assert "value: (x" in str(error)
        assert isinstance(error, ExporterError)


class TestTransportErrors:
    """Tests for TransportError and ConnectionError."""

    def test_cause_recorded(self):
        cause = OSError("refused")
        error = TransportError("Could not send", sender="udp", endpoint="influx:8089", cause=cause)
        assert error.details["cause_type"] == "OSError"
        assert error.details["sender"] == "udp"

    def test_connection_error_has_default_suggestion(self):
        error = ConnectionError("Invalid URL", endpoint="nope")
        assert isinstance(error, TransportError)
        assert "endpointUrl" in error.suggestion

    def test_connection_error_is_not_builtin(self):
        assert not issubclass(ConnectionError, OSError)


class TestLifecycleError:
    """Tests for LifecycleError."""

    def test_state_and_operation(self):
        error = LifecycleError("out of order", state="torn_down", operation="teardown_test")
        assert error.details == {"state": "torn_down", "operation": "teardown_test"}
