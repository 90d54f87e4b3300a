"""
apps.config_entries.services.path_resolver
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Splits the ``{kind}[/{name}]`` suffix of a config entry URL and checks that
the number of segments suits the operation.

Only the first ``/`` separates kind from name, so a name may itself contain
slashes.  No trimming or further decoding is applied.
"""
from __future__ import annotations

from common.exceptions import BadRequestError

GET_CARDINALITY_ERROR = "Must provide either a kind or both kind and name"
DELETE_CARDINALITY_ERROR = "Must provide both a kind and name to delete"


def split_path(suffix: str) -> list[str]:
    """Return the segments of *suffix*: ``[]``, ``[kind]`` or ``[kind, name]``."""
    if not suffix:
        return []
    return suffix.split("/", 1)


def resolve_get(segments: list[str]) -> tuple[str, str | None]:
    """
    Return ``(kind, name)`` for a read; ``name`` is ``None`` for a listing.

    Raises:
        BadRequestError: Unless there are one or two segments.
    """
    if len(segments) == 2:
        return segments[0], segments[1]
    if len(segments) == 1:
        return segments[0], None
    raise BadRequestError(GET_CARDINALITY_ERROR)


def resolve_delete(segments: list[str]) -> tuple[str, str]:
    """
    Return ``(kind, name)`` for a delete.

    Raises:
        BadRequestError: Unless there are exactly two segments.
    """
    if len(segments) != 2:
        raise BadRequestError(DELETE_CARDINALITY_ERROR)
    return segments[0], segments[1]
