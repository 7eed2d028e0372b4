"""
Exchange adapter registry.

Maps venue identifiers to adapter classes so call sites never branch on
venue names.
"""

from typing import TYPE_CHECKING, Any, TypeVar

from orderflow.core.exceptions import UnknownExchangeError
from orderflow.core.types import Transport


if TYPE_CHECKING:
    from orderflow.exchange.adapters import ExchangeAdapter


A = TypeVar("A", bound="type[ExchangeAdapter]")

_REGISTRY: dict[str, "type[ExchangeAdapter]"] = {}


def register_adapter(cls: A) -> A:
    """Class decorator registering an adapter under its ``name``."""
    _REGISTRY[cls.name.lower()] = cls
    return cls


def get_adapter_class(name: str) -> "type[ExchangeAdapter]":
    """
    Look up an adapter class by venue identifier (case-insensitive).

    Raises:
        UnknownExchangeError: If no adapter is registered under ``name``.
    """
    try:
        return _REGISTRY[name.lower()]
    except KeyError:
        raise UnknownExchangeError(name) from None


def create_adapter(name: str, transport: Transport, **kwargs: Any) -> "ExchangeAdapter":
    """Instantiate the adapter registered under ``name``."""
    return get_adapter_class(name)(transport, **kwargs)


def available_exchanges() -> list[str]:
    """Registered venue identifiers in registration order."""
    return list(_REGISTRY)
