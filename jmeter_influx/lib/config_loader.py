"""YAML loader for listener parameters.

Lets a replay run, or any host, keep its listener parameters in a file.

Example YAML (listener.yaml):
    env_file: .env             # optional, loaded before expansion
    parameters:
      metricsSenderImplementation: http
      endpointUrl: "http://${INFLUX_HOST}:8086/write?db=jmeter"
      authToken: "${INFLUX_TOKEN}"
      application: shop
      samplersRegex: "^(login|checkout)"
      testTitle: Nightly soak
      TAG_env: prod

Usage:
    from jmeter_influx.lib.config_loader import load_listener_context
    context = load_listener_context("./listener.yaml")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from jmeter_influx.lib.config import PARAM_AUTH_TOKEN, PARAM_ENDPOINT, BackendListenerContext
from jmeter_influx.lib.env import expand_env_vars, load_env_file
from jmeter_influx.lib.errors import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = ["load_listener_context", "context_from_mapping"]


# An unset ${VAR} here would otherwise reach the sender as literal text
STRICT_PARAMETERS = frozenset({PARAM_ENDPOINT, PARAM_AUTH_TOKEN})


def _to_parameter(name: str, value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        try:
            return expand_env_vars(str(value), strict=name in STRICT_PARAMETERS)
        except KeyError as e:
            raise ConfigurationError(
                f"Parameter '{name}' references unset environment variables: {e.args[0]}",
                field=name,
                value=value,
                suggestion="Export the variables or list them in the config's env_file.",
            ) from e
    raise ConfigurationError(
        f"Parameter '{name}' must be a scalar value",
        field=name,
        value=value,
    )


def context_from_mapping(parameters: Mapping[str, Any]) -> BackendListenerContext:
    """Build a context from a mapping, expanding ${VAR} references.

    Raises:
        ConfigurationError: If a value is a list or mapping, or if
            endpointUrl or authToken references an unset variable
    """
    converted: Dict[str, Optional[str]] = {}
    for name, value in parameters.items():
        converted[str(name)] = _to_parameter(str(name), value)
    return BackendListenerContext(converted)


def load_listener_context(path: Union[str, Path]) -> BackendListenerContext:
    """Load listener parameters from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        BackendListenerContext with parameters in file order

    Raises:
        ConfigurationError: If the file is missing, unparseable or has no
            ``parameters`` mapping
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read listener config: {e}", value=str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}", value=str(path)) from e

    if not isinstance(data, dict) or not isinstance(data.get("parameters"), dict):
        raise ConfigurationError(
            f"{path} must contain a 'parameters' mapping",
            field="parameters",
            suggestion="Add a top-level 'parameters:' section with the listener options.",
        )

    env_file = data.get("env_file")
    if env_file:
        env_path = Path(env_file)
        if not env_path.is_absolute():
            env_path = path.parent / env_path
        if not load_env_file(env_path):
            logger.warning("env_file %s not found", env_path)

    context = context_from_mapping(data["parameters"])
    logger.debug("Loaded %d listener parameters from %s", len(data["parameters"]), path)
    return context
