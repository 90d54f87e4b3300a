"""
apps.config_entries.kinds
~~~~~~~~~~~~~~~~~~~~~~~~~~
Kind registry: maps a kind identifier to the typed entry it denotes.

The table is built once at import time and never mutated afterwards, so it is
safe to read from any number of concurrent requests.
"""
from __future__ import annotations

from types import MappingProxyType

from .entries import (
    ConfigEntry,
    ProxyConfigEntry,
    ServiceConfigEntry,
    ServiceResolverConfigEntry,
)
from .errors import UnknownKindError

_REGISTRY = MappingProxyType({
    cls.kind: cls
    for cls in (ServiceConfigEntry, ProxyConfigEntry, ServiceResolverConfigEntry)
})


def make_config_entry(kind: str, name: str = "") -> ConfigEntry:
    """
    Return a fresh zero-valued entry of *kind* with its name set to *name*.

    Kind matching is exact; any case folding happens before this call.

    Raises:
        UnknownKindError: If *kind* is not registered.
    """
    try:
        entry_cls = _REGISTRY[kind]
    except KeyError:
        raise UnknownKindError(kind) from None
    return entry_cls(name=name)


def registered_kinds() -> tuple[str, ...]:
    return tuple(sorted(_REGISTRY))
