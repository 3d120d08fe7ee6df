"""Operator supplied tags from ``TAG_<name>`` listener parameters."""

from __future__ import annotations

import logging
from typing import Collection, Iterable, List, Mapping, Optional, Tuple

from jmeter_influx.lib.encoding import encode_tag_value

logger = logging.getLogger(__name__)

__all__ = ["USER_TAG_PREFIX", "extract_user_tags", "build_user_tag_string"]

USER_TAG_PREFIX = "TAG_"


def extract_user_tags(
    parameters: Mapping[str, Optional[str]],
    reserved: Collection[str] = (),
) -> List[Tuple[str, str]]:
    """Collect extra tags from ``TAG_*`` parameters.

    A parameter contributes a tag when its (stripped) name is not blank, is
    not one of the reserved option names, starts with ``TAG_`` and its value
    is not blank. Parameter order is preserved and duplicates are kept.

    Args:
        parameters: Ordered listener parameters
        reserved: Option names that are never treated as tags

    Returns:
        List of (tag_name, tag_value) pairs, both already tag-encoded
    """
    tags: List[Tuple[str, str]] = []
    for name, value in parameters.items():
        if not name or not name.strip():
            continue
        key = name.strip()
        if key in reserved or not name.startswith(USER_TAG_PREFIX):
            continue
        if value is None or not str(value).strip():
            continue

        tag_name = key[len(USER_TAG_PREFIX):]
        tag_value = str(value).strip()
        if not tag_name:
            logger.warning("Ignoring parameter %r: tag name is empty", name)
            continue

        logger.debug("Adding '%s' tag with '%s' value", tag_name, tag_value)
        tags.append((encode_tag_value(tag_name), encode_tag_value(tag_value)))
    return tags


def build_user_tag_string(tags: Iterable[Tuple[str, str]]) -> str:
    """Join encoded tag pairs as ``,name=value,name=value``."""
    return "".join(f",{name}={value}" for name, value in tags)
