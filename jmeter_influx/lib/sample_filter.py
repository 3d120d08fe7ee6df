"""Sampler label filtering.

Decides which sample results become metrics, based on the ``samplersRegex``
listener parameter.
"""

from __future__ import annotations

import re
from typing import Optional, Pattern

from jmeter_influx.lib.errors import ConfigurationError

__all__ = ["SampleFilter", "MATCH_ALL"]

MATCH_ALL = ".*"


class SampleFilter:
    """Unanchored regex filter over sample labels.

    A label is exported when the pattern is found anywhere in it
    (``re.search`` semantics, not a full match).

    Example:
        sample_filter = SampleFilter.compile("check.*")
        sample_filter.matches("checkout")  # True
        sample_filter.matches("login")     # False
    """

    def __init__(self, pattern: Pattern[str]) -> None:
        self.pattern = pattern

    @classmethod
    def compile(cls, expression: Optional[str]) -> "SampleFilter":
        """Compile a filter from a regular expression string.

        Args:
            expression: Regex source; None or empty matches every label

        Returns:
            SampleFilter instance

        Raises:
            ConfigurationError: If the expression is not a valid regex
        """
        return cls(compile_pattern(expression))

    def matches(self, label: Optional[str]) -> bool:
        """Return True if the pattern occurs anywhere in the label."""
        return self.pattern.search(label or "") is not None

    def __repr__(self) -> str:
        return f"SampleFilter(pattern={self.pattern.pattern!r})"


def compile_pattern(expression: Optional[str]) -> Pattern[str]:
    """Compile a samplers regex, raising ConfigurationError when invalid."""
    try:
        return re.compile(expression or "")
    except re.error as e:
        raise ConfigurationError(
            f"Invalid samplersRegex: {e}",
            field="samplersRegex",
            value=expression,
            suggestion=f"Use a valid regular expression, or {MATCH_ALL!r} to export every sampler.",
        ) from e
