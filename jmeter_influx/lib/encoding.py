"""Line-protocol escaping for tag and field values.

Both encoders run once or more per exported sample and are pure string
transforms.

Example:
    >>> encode_tag_value("Home Page, v2")
    'Home\\\\ Page\\\\,\\\\ v2'
    >>> encode_field_value('Load "smoke" test')
    'Load \\\\"smoke\\\\" test'
"""

from __future__ import annotations

import re
from typing import Optional

__all__ = ["encode_tag_value", "encode_field_value"]

# Backslash runs that would otherwise escape a separator (or the one the
# caller appends after the value)
_TAG_TRAILING_BACKSLASHES = re.compile(r"(\\+)(?=[ ,=]|\Z)")

_TAG_ESCAPES = str.maketrans(
    {
        " ": "\\ ",
        ",": "\\,",
        "=": "\\=",
        "\n": "\\n",
        "\r": "\\r",
    }
)

_FIELD_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"'})


def encode_tag_value(raw: Optional[str]) -> str:
    """Escape a value for use as a tag key or tag value.

    Surrounding whitespace is trimmed. Backslash runs at the end of the value
    or in front of a space, comma or equals sign are doubled, then those
    characters are backslash-escaped. Line breaks are written as
    ``\\n``/``\\r`` so a tag can never terminate the line.

    Args:
        raw: Free text (None is treated as empty)

    Returns:
        Escaped text, empty for empty input
    """
    if not raw:
        return ""
    value = _TAG_TRAILING_BACKSLASHES.sub(lambda m: m.group(1) * 2, raw.strip())
    return value.translate(_TAG_ESCAPES)


def encode_field_value(raw: Optional[str]) -> str:
    """Escape a value for use inside a double-quoted string field.

    Surrounding whitespace is trimmed, then backslashes and double quotes
    are backslash-escaped. The caller adds the enclosing quotes.

    Args:
        raw: Free text (None is treated as empty)

    Returns:
        Escaped text, empty for empty input
    """
    if not raw:
        return ""
    return raw.strip().translate(_FIELD_ESCAPES)
