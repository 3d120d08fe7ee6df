"""Listener parameters and the per-run configuration built from them.

Parameter names follow the backend listener GUI so existing test plans keep
working:

    metricsSenderImplementation  sender registry name ("http", "udp", "memory")
    endpointUrl                  sender target
    application                  value of the ``application`` tag
    measurement                  data measurement name
    samplersRegex                regex selecting exported samplers
    testTitle                    prefix of the start/end annotation text
    eventTags                    value of the ``tags`` annotation tag
    authToken                    token for the HTTP sender
    TAG_<name>                   extra tag ``<name>=<value>`` on every point
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Dict, Iterator, List, Mapping, Optional, Pattern, Tuple

from jmeter_influx.lib.encoding import encode_tag_value
from jmeter_influx.lib.sample_filter import MATCH_ALL, SampleFilter, compile_pattern
from jmeter_influx.lib.user_tags import build_user_tag_string, extract_user_tags

__all__ = [
    "BackendListenerContext",
    "RunConfiguration",
    "RESERVED_PARAMETERS",
    "DEFAULT_MEASUREMENT",
    "DEFAULT_SENDER",
    "default_parameters",
]

DEFAULT_MEASUREMENT = "jmeter"
DEFAULT_SENDER = "http"

PARAM_SENDER = "metricsSenderImplementation"
PARAM_ENDPOINT = "endpointUrl"
PARAM_APPLICATION = "application"
PARAM_MEASUREMENT = "measurement"
PARAM_SAMPLERS_REGEX = "samplersRegex"
PARAM_TEST_TITLE = "testTitle"
PARAM_EVENT_TAGS = "eventTags"
PARAM_AUTH_TOKEN = "authToken"

RESERVED_PARAMETERS: Tuple[str, ...] = (
    PARAM_SENDER,
    PARAM_ENDPOINT,
    PARAM_APPLICATION,
    PARAM_MEASUREMENT,
    PARAM_SAMPLERS_REGEX,
    PARAM_TEST_TITLE,
    PARAM_EVENT_TAGS,
    PARAM_AUTH_TOKEN,
)


def default_parameters() -> Dict[str, str]:
    """Return a fresh, ordered mapping of parameter names to defaults."""
    return {
        PARAM_SENDER: DEFAULT_SENDER,
        PARAM_ENDPOINT: "http://host_to_change:8086/write?db=jmeter",
        PARAM_APPLICATION: "application name",
        PARAM_MEASUREMENT: DEFAULT_MEASUREMENT,
        PARAM_SAMPLERS_REGEX: MATCH_ALL,
        PARAM_TEST_TITLE: "Test name",
        PARAM_EVENT_TAGS: "",
        PARAM_AUTH_TOKEN: "",
    }


class BackendListenerContext:
    """Ordered listener parameters as supplied by the host.

    Example:
        context = BackendListenerContext({"application": "shop", "TAG_env": "prod"})
        context.get_parameter("application")          # "shop"
        context.get_parameter("measurement", "jmeter")  # "jmeter"
    """

    def __init__(self, parameters: Optional[Mapping[str, Optional[str]]] = None) -> None:
        self._parameters: Dict[str, Optional[str]] = dict(parameters or {})

    def get_parameter(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return a parameter value, or ``default`` when it is absent or None."""
        value = self._parameters.get(name)
        return default if value is None else value

    def contains_parameter(self, name: str) -> bool:
        return name in self._parameters

    def parameter_names(self) -> Iterator[str]:
        """Iterate parameter names in the order they were supplied."""
        return iter(list(self._parameters))

    @property
    def parameters(self) -> Dict[str, Optional[str]]:
        """Copy of the raw parameters."""
        return dict(self._parameters)

    def __repr__(self) -> str:
        return f"BackendListenerContext({self._parameters!r})"


@dataclass(frozen=True)
class RunConfiguration:
    """Immutable settings for one listener run.

    ``application_name``, ``measurement_name`` and ``event_tags`` are held
    already tag-encoded; ``extra_user_tags`` holds encoded pairs.
    """

    application_name: str
    measurement_name: str = DEFAULT_MEASUREMENT
    sample_filter_pattern: Pattern[str] = field(default_factory=lambda: compile_pattern(MATCH_ALL))
    test_title: str = "Test name"
    event_tags: str = ""
    extra_user_tags: List[Tuple[str, str]] = field(default_factory=list)
    sender_name: str = DEFAULT_SENDER
    endpoint_url: str = ""
    auth_token: str = ""

    @cached_property
    def sample_filter(self) -> SampleFilter:
        """Filter built from ``sample_filter_pattern``, created once."""
        return SampleFilter(self.sample_filter_pattern)

    @cached_property
    def user_tag_string(self) -> str:
        """Precomputed ``,name=value,...`` suffix shared by every point."""
        return build_user_tag_string(self.extra_user_tags)

    @classmethod
    def from_context(cls, context: BackendListenerContext) -> "RunConfiguration":
        """Build the run configuration from listener parameters.

        Missing parameters fall back to ``default_parameters()``.

        Raises:
            ConfigurationError: If samplersRegex does not compile
        """
        defaults = default_parameters()

        def param(name: str) -> str:
            return context.get_parameter(name, defaults[name]) or ""

        return cls(
            application_name=encode_tag_value(param(PARAM_APPLICATION)),
            measurement_name=encode_tag_value(param(PARAM_MEASUREMENT)) or DEFAULT_MEASUREMENT,
            sample_filter_pattern=compile_pattern(param(PARAM_SAMPLERS_REGEX)),
            test_title=param(PARAM_TEST_TITLE),
            event_tags=encode_tag_value(param(PARAM_EVENT_TAGS)),
            extra_user_tags=extract_user_tags(context.parameters, RESERVED_PARAMETERS),
            sender_name=param(PARAM_SENDER).strip() or DEFAULT_SENDER,
            endpoint_url=param(PARAM_ENDPOINT).strip(),
            auth_token=param(PARAM_AUTH_TOKEN).strip(),
        )
