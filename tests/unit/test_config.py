"""Tests for jmeter_influx/lib/config.py - parameters and RunConfiguration."""

import re

import pytest

from jmeter_influx.lib.config import (
    RESERVED_PARAMETERS,
    BackendListenerContext,
    RunConfiguration,
    default_parameters,
)
from jmeter_influx.lib.errors import ConfigurationError


class TestDefaultParameters:
    """Tests for default_parameters."""

    def test_defaults(self):
        defaults = default_parameters()
        assert defaults["metricsSenderImplementation"] == "http"
        assert defaults["measurement"] == "jmeter"
        assert defaults["samplersRegex"] == ".*"
        assert defaults["testTitle"] == "Test name"
        assert defaults["eventTags"] == ""

    def test_fresh_copy_each_call(self):
        first = default_parameters()
        first["measurement"] = "changed"
        assert default_parameters()["measurement"] == "jmeter"

    def test_reserved_matches_defaults(self):
        assert tuple(default_parameters()) == RESERVED_PARAMETERS


class TestBackendListenerContext:
    """Tests for BackendListenerContext."""

    def test_get_parameter_default(self):
        context = BackendListenerContext({"application": "shop", "eventTags": None})
        assert context.get_parameter("application") == "shop"
        assert context.get_parameter("missing", "fallback") == "fallback"
        assert context.get_parameter("eventTags", "") == ""

    def test_parameter_names_in_order(self):
        context = BackendListenerContext({"b": "1", "a": "2", "TAG_x": "3"})
        assert list(context.parameter_names()) == ["b", "a", "TAG_x"]

    def test_parameters_is_a_copy(self):
        context = BackendListenerContext({"a": "1"})
        context.parameters["a"] = "2"
        assert context.get_parameter("a") == "1"


class TestRunConfiguration:
    """Tests for RunConfiguration.from_context."""

    def test_defaults_applied(self):
        config = RunConfiguration.from_context(BackendListenerContext())

        assert config.application_name == "application\\ name"
        assert config.measurement_name == "jmeter"
        assert config.sample_filter_pattern.pattern == ".*"
        assert config.test_title == "Test name"
        assert config.event_tags == ""
        assert config.extra_user_tags == []
        assert config.sender_name == "http"

    def test_values_encoded(self):
        config = RunConfiguration.from_context(
            BackendListenerContext({"application": "my shop", "eventTags": "a,b"})
        )
        assert config.application_name == "my\\ shop"
        assert config.event_tags == "a\\,b"

    def test_user_tags_collected(self):
        config = RunConfiguration.from_context(
            BackendListenerContext({"TAG_env": "prod", "TAG_dc": "eu1", "application": "shop"})
        )
        assert config.extra_user_tags == [("env", "prod"), ("dc", "eu1")]
        assert config.user_tag_string == ",env=prod,dc=eu1"

    def test_invalid_regex_is_fatal(self):
        with pytest.raises(ConfigurationError):
            RunConfiguration.from_context(BackendListenerContext({"samplersRegex": "[a-"}))

    def test_sample_filter_cached(self):
        config = RunConfiguration.from_context(BackendListenerContext({"samplersRegex": "^a"}))
        assert config.sample_filter is config.sample_filter
        assert config.sample_filter.matches("abc")

    def test_direct_construction(self):
        config = RunConfiguration(
            application_name="shop",
            sample_filter_pattern=re.compile("login"),
            extra_user_tags=[("env", "prod")],
        )
        assert config.measurement_name == "jmeter"
        assert config.user_tag_string == ",env=prod"
        assert config.sample_filter.matches("login")

    def test_frozen(self):
        config = RunConfiguration(application_name="shop")
        with pytest.raises(AttributeError):
            config.application_name = "other"
