"""Environment references in listener parameters.

Listener configs keep hosts and tokens out of version control by writing
``${INFLUX_TOKEN}`` or ``$INFLUX_HOST`` instead of the value. A ``.env``
file next to the config can supply them (loaded with python-dotenv).
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import List, Union

from dotenv import load_dotenv

__all__ = ["expand_env_vars", "load_env_file", "unset_env_vars"]

ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def load_env_file(path: Union[str, Path]) -> bool:
    """Load ``path`` into ``os.environ`` without overriding set variables.

    Returns:
        False when the file does not exist
    """
    path = Path(path)
    if not path.is_file():
        return False
    return load_dotenv(dotenv_path=path, override=False)


def unset_env_vars(value: str) -> List[str]:
    """Names referenced in ``value`` that are not set, in order of appearance."""
    names = (m.group(1) or m.group(2) for m in ENV_VAR_PATTERN.finditer(value))
    return [name for name in dict.fromkeys(names) if name not in os.environ]


def expand_env_vars(value: str, *, strict: bool = False) -> str:
    """Replace ``${NAME}``/``$NAME`` with the variable's value.

    Unset references are kept verbatim, so a literal ``$`` in a regex or
    title survives. With ``strict`` an unset reference raises ``KeyError``
    naming every missing variable instead.

    Example:
        >>> os.environ["INFLUX_HOST"] = "influx"
        >>> expand_env_vars("http://${INFLUX_HOST}:8086/write?db=jmeter")
        'http://influx:8086/write?db=jmeter'
    """
    if strict:
        missing = unset_env_vars(value)
        if missing:
            raise KeyError(", ".join(missing))

    def replace(match: re.Match[str]) -> str:
        return os.environ.get(match.group(1) or match.group(2), match.group(0))

    return ENV_VAR_PATTERN.sub(replace, value)
