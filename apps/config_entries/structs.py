"""
apps.config_entries.structs
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Request, query and reply envelopes exchanged with the backend.

Envelopes are built fresh by the dispatcher for a single request and are not
touched again once the backend call has been issued.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .entries import ConfigEntry


class ConfigEntryOp(str, Enum):
    UPSERT = "upsert"
    DELETE = "delete"


@dataclass
class QueryOptions:
    """
    Read options passed through to the backend untouched.

    Attributes:
        token: Opaque ACL token.
        min_query_index: Block until the store index exceeds this value.
        max_query_time: Upper bound on blocking, in nanoseconds.
        allow_stale: Any server may answer, possibly with stale data.
        require_consistent: Leader must verify leadership before answering.
    """

    token: str = ""
    min_query_index: int = 0
    max_query_time: int = 0
    allow_stale: bool = False
    require_consistent: bool = False


@dataclass
class RequestScope:
    """Per-request routing metadata extracted by the HTTP layer."""

    datacenter: str = ""
    token: str = ""
    options: QueryOptions = field(default_factory=QueryOptions)


@dataclass
class ConfigEntryRequest:
    """Write envelope for ``ConfigEntry.Apply`` and ``ConfigEntry.Delete``."""

    entry: ConfigEntry | None = None
    op: ConfigEntryOp = ConfigEntryOp.UPSERT
    datacenter: str = ""
    token: str = ""


@dataclass
class ConfigEntryQuery:
    """Read envelope for ``ConfigEntry.Get`` and ``ConfigEntry.List``."""

    kind: str = ""
    name: str = ""
    datacenter: str = ""
    options: QueryOptions = field(default_factory=QueryOptions)


@dataclass
class IndexedConfigEntries:
    kind: str = ""
    entries: list[ConfigEntry] = field(default_factory=list)
    index: int = 0
    known_leader: bool = True
