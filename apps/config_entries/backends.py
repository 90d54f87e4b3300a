"""
apps.config_entries.backends
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
The authoritative store as seen by the gateway: one opaque RPC entry point.

Verbs issued by the dispatcher:

=====================  ========================  ==========================
Verb                   Argument                  Reply
=====================  ========================  ==========================
``ConfigEntry.Get``    ``ConfigEntryQuery``      ``IndexedConfigEntries``
``ConfigEntry.List``   ``ConfigEntryQuery``      ``IndexedConfigEntries``
``ConfigEntry.Delete`` ``ConfigEntryRequest``    ``None``
``ConfigEntry.Apply``  ``ConfigEntryRequest``    ``None``
=====================  ========================  ==========================

Failures are raised as :class:`~common.exceptions.BackendError` (or another
:class:`~common.exceptions.AppError`) and reach the client unchanged.
"""
from __future__ import annotations

import abc
from typing import Any

from django.conf import settings
from django.utils.module_loading import import_string

GET = "ConfigEntry.Get"
LIST = "ConfigEntry.List"
DELETE = "ConfigEntry.Delete"
APPLY = "ConfigEntry.Apply"


class ConfigEntryBackend(abc.ABC):
    """Interface every config entry store adapter implements."""

    @abc.abstractmethod
    def rpc(self, method: str, args: Any) -> Any:
        """Issue *method* with *args* and block until the store replies."""


def get_backend() -> ConfigEntryBackend:
    """Instantiate the backend named by ``settings.CONFIG_GATEWAY_BACKEND``."""
    backend_cls = import_string(settings.CONFIG_GATEWAY_BACKEND)
    return backend_cls()
