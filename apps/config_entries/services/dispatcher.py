"""
apps.config_entries.services.dispatcher
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
CRUD operations on config entries.

Each operation validates its input completely (path shape, discriminator,
field types) before making exactly one backend call, so malformed requests
never reach the store.  Backend failures propagate unchanged; nothing is
retried.

The dispatcher holds no per-request state and one instance may serve any
number of requests.

Public API
----------
ConfigEntryDispatcher.route(method)                  -> operation
ConfigEntryDispatcher.dispatch(method, suffix, scope) -> reply
ConfigEntryDispatcher.get(suffix, scope)     -> IndexedConfigEntries
ConfigEntryDispatcher.delete(suffix, scope)  -> None
ConfigEntryDispatcher.apply(raw, scope)      -> None
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import structlog

from apps.config_entries import backends
from apps.config_entries.backends import ConfigEntryBackend
from apps.config_entries.errors import DecodeError, UnknownKindError
from apps.config_entries.kinds import make_config_entry
from apps.config_entries.structs import (
    ConfigEntryOp,
    ConfigEntryQuery,
    ConfigEntryRequest,
    IndexedConfigEntries,
    RequestScope,
)
from common.exceptions import BadRequestError, MethodNotAllowedError

from .decoder import decode_config_entry
from .path_resolver import resolve_delete, resolve_get, split_path

logger = structlog.get_logger(__name__)


class ConfigEntryDispatcher:
    """
    Routes config entry operations to the backend.

    Usage::

        dispatcher = ConfigEntryDispatcher(get_backend())
        reply = dispatcher.dispatch("GET", "service-defaults/web", scope)
    """

    #: HTTP verb -> name of the operation serving it on ``{kind}[/{name}]``.
    ROUTES: Mapping[str, str] = {"GET": "get", "DELETE": "delete"}

    def __init__(self, backend: ConfigEntryBackend) -> None:
        self.backend = backend

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def route(self, method: str) -> Callable[[str, RequestScope], Any]:
        """
        Return the operation serving *method*.

        Raises:
            MethodNotAllowedError: For any verb other than GET or DELETE.
        """
        try:
            return getattr(self, self.ROUTES[method])
        except KeyError:
            raise MethodNotAllowedError(method, self.ROUTES) from None

    def dispatch(self, method: str, path_suffix: str, scope: RequestScope) -> Any:
        return self.route(method)(path_suffix, scope)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def get(self, path_suffix: str, scope: RequestScope) -> IndexedConfigEntries:
        """
        Fetch one entry (``kind/name``) or list every entry of a kind
        (``kind``).

        Args:
            path_suffix: The URL remainder after the config prefix.
            scope: Datacenter and query options for the read.

        Returns:
            The backend's :class:`IndexedConfigEntries` reply.

        Raises:
            BadRequestError: If the path has neither one nor two segments.
        """
        kind, name = resolve_get(split_path(path_suffix))
        query = ConfigEntryQuery(
            kind=kind,
            name=name or "",
            datacenter=scope.datacenter,
            options=scope.options,
        )
        verb = backends.LIST if name is None else backends.GET
        logger.debug("config_entry_read", verb=verb, kind=kind, name=name, datacenter=scope.datacenter)
        return self.backend.rpc(verb, query)

    def delete(self, path_suffix: str, scope: RequestScope) -> None:
        """
        Delete the entry named by ``kind/name``.

        Raises:
            BadRequestError: If the path is not exactly ``kind/name`` or the
                kind is not registered.
        """
        kind, name = resolve_delete(split_path(path_suffix))
        try:
            entry = make_config_entry(kind, name)
        except UnknownKindError as exc:
            raise BadRequestError(str(exc)) from exc

        request = ConfigEntryRequest(
            entry=entry,
            op=ConfigEntryOp.DELETE,
            datacenter=scope.datacenter,
            token=scope.token,
        )
        self.backend.rpc(backends.DELETE, request)
        logger.info("config_entry_deleted", kind=kind, name=name, datacenter=scope.datacenter)

    def apply(self, raw: Any, scope: RequestScope) -> None:
        """
        Decode *raw* and upsert the resulting entry.

        Args:
            raw: The parsed JSON request body.
            scope: Datacenter and token for the write.

        Raises:
            BadRequestError: Wrapping any decode failure; the backend is not
                called in that case.
        """
        try:
            entry = decode_config_entry(raw)
        except DecodeError as exc:
            logger.warning("config_entry_decode_failed", error=str(exc))
            raise BadRequestError(f"Request decoding failed: {exc}") from exc

        request = ConfigEntryRequest(
            entry=entry,
            op=ConfigEntryOp.UPSERT,
            datacenter=scope.datacenter,
            token=scope.token,
        )
        self.backend.rpc(backends.APPLY, request)
        logger.info(
            "config_entry_applied",
            kind=entry.kind,
            name=entry.name,
            datacenter=scope.datacenter,
        )
