"""
apps.config_store.backend
~~~~~~~~~~~~~~~~~~~~~~~~~~
Django ORM implementation of the config entry backend.

Serves the four ``ConfigEntry.*`` verbs against :class:`StoredConfigEntry`.
Every write, upsert or delete, advances the store-wide :class:`StoreIndex`;
an upserted entry is stamped with the value it took.  Tokens are carried
through but not enforced.
"""
from __future__ import annotations

from typing import Any

import structlog
from django.conf import settings
from django.db import transaction

from apps.config_entries import backends
from apps.config_entries.backends import ConfigEntryBackend
from apps.config_entries.structs import (
    ConfigEntryQuery,
    ConfigEntryRequest,
    IndexedConfigEntries,
)
from common.exceptions import BackendError

from .models import StoreIndex, StoredConfigEntry

logger = structlog.get_logger(__name__)

NO_DC_PATH = "No path to datacenter"


class ORMConfigEntryBackend(ConfigEntryBackend):
    """Config entry store persisted through the Django ORM."""

    def __init__(self) -> None:
        self._methods = {
            backends.GET: self._get,
            backends.LIST: self._list,
            backends.DELETE: self._delete,
            backends.APPLY: self._apply,
        }

    def rpc(self, method: str, args: Any) -> Any:
        try:
            handler = self._methods[method]
        except KeyError:
            raise BackendError(f"rpc: can't find method {method}") from None

        if args.datacenter not in settings.CONFIG_STORE_DATACENTERS:
            raise BackendError(NO_DC_PATH)
        return handler(args)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _get(self, query: ConfigEntryQuery) -> IndexedConfigEntries:
        rows = StoredConfigEntry.objects.filter(
            datacenter=query.datacenter,
            kind=query.kind,
            name=query.name,
        )
        return self._reply(query, rows)

    def _list(self, query: ConfigEntryQuery) -> IndexedConfigEntries:
        rows = StoredConfigEntry.objects.filter(
            datacenter=query.datacenter,
            kind=query.kind,
        ).order_by("name")
        return self._reply(query, rows)

    def _reply(self, query: ConfigEntryQuery, rows) -> IndexedConfigEntries:
        return IndexedConfigEntries(
            kind=query.kind,
            entries=[row.to_entry() for row in rows],
            index=self._current_index(),
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _apply(self, request: ConfigEntryRequest) -> None:
        entry = request.entry
        payload = entry.to_dict()
        payload.pop("CreateIndex", None)
        payload.pop("ModifyIndex", None)

        with transaction.atomic():
            next_index = StoreIndex.advance()
            row, created = StoredConfigEntry.objects.select_for_update().get_or_create(
                datacenter=request.datacenter,
                kind=entry.kind,
                name=entry.name,
                defaults={
                    "payload": payload,
                    "create_index": next_index,
                    "modify_index": next_index,
                },
            )
            if not created:
                row.payload = payload
                row.modify_index = next_index
                row.save(update_fields=["payload", "modify_index", "updated_at"])

        logger.info(
            "config_entry_stored",
            datacenter=request.datacenter,
            kind=entry.kind,
            name=entry.name,
            index=next_index,
            created=created,
        )

    def _delete(self, request: ConfigEntryRequest) -> None:
        entry = request.entry
        with transaction.atomic():
            index = StoreIndex.advance()
            deleted, _ = StoredConfigEntry.objects.filter(
                datacenter=request.datacenter,
                kind=entry.kind,
                name=entry.name,
            ).delete()
        logger.info(
            "config_entry_removed",
            datacenter=request.datacenter,
            kind=entry.kind,
            name=entry.name,
            index=index,
            existed=bool(deleted),
        )

    @staticmethod
    def _current_index() -> int:
        return StoreIndex.current()
