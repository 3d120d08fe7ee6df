"""Registry mapping ``metricsSenderImplementation`` names to sender classes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Type

from jmeter_influx.lib.errors import ConfigurationError

if TYPE_CHECKING:
    from jmeter_influx.lib.senders.base import MetricsSender

__all__ = [
    "SENDER_REGISTRY",
    "register_sender",
    "get_sender_class",
    "create_sender",
    "list_sender_types",
]

SENDER_REGISTRY: Dict[str, Type["MetricsSender"]] = {}


def register_sender(name: str) -> Callable[[Type["MetricsSender"]], Type["MetricsSender"]]:
    """Decorator to register a sender class under a name.

    Example:
        @register_sender("http")
        class HttpMetricsSender(MetricsSender):
            ...
    """

    def decorator(cls: Type["MetricsSender"]) -> Type["MetricsSender"]:
        cls.name = name.lower()
        SENDER_REGISTRY[name.lower()] = cls
        return cls

    return decorator


def get_sender_class(name: str) -> Optional[Type["MetricsSender"]]:
    """Get the sender class registered under a name (case-insensitive)."""
    return SENDER_REGISTRY.get(name.strip().lower())


def list_sender_types() -> List[str]:
    """List all registered sender names."""
    return sorted(SENDER_REGISTRY)


def create_sender(name: str, token: Optional[str] = None) -> "MetricsSender":
    """Instantiate the sender registered under a name.

    Args:
        name: Registry name, e.g. "http"
        token: Optional endpoint credential passed to the sender

    Raises:
        ConfigurationError: If no sender is registered under that name
    """
    cls = get_sender_class(name)
    if cls is None:
        valid = ", ".join(list_sender_types())
        raise ConfigurationError(
            f"Unknown metrics sender '{name}'",
            field="metricsSenderImplementation",
            value=name,
            suggestion=f"Valid options: {valid}",
        )
    return cls(token=token)
