"""
apps.config_entries.services.decoder
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Turns an untyped JSON object into a typed config entry.

This module is **pure Python**; it has zero Django view, serializer, or ORM
imports and can be exercised in plain ``pytest`` tests without any Django
setup.

Decoding is discriminator-first:

1. Read the kind from ``"Kind"``, falling back to ``"kind"``.
2. Ask the kind registry for a zero-valued entry of that kind.
3. Copy every other key onto the entry through the kind's field table.

Extra keys are ignored so that payloads written for newer or older versions
of a kind still decode.  Decoding stops at the first error.

Public API
----------
decode_config_entry(raw) -> ConfigEntry
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from apps.config_entries.entries import ConfigEntry
from apps.config_entries.errors import (
    DecodeError,
    InvalidKindTypeError,
    MissingKindError,
)
from apps.config_entries.fields import decode_fields
from apps.config_entries.kinds import make_config_entry

#: Discriminator keys in lookup order.
KIND_KEYS: tuple[str, ...] = ("Kind", "kind")


def decode_config_entry(raw: Mapping[str, Any]) -> ConfigEntry:
    """
    Decode *raw* into the typed entry its discriminator names.

    Args:
        raw: A JSON object as produced by ``json.loads``.  It is never
            mutated.

    Returns:
        A new :class:`~apps.config_entries.entries.ConfigEntry` subclass
        instance.  Decoding the same mapping twice yields equal entries.

    Raises:
        DecodeError: If *raw* is not a mapping.
        MissingKindError: If neither ``Kind`` nor ``kind`` is present.
        InvalidKindTypeError: If the discriminator value is not a string.
        UnknownKindError: If the kind is not registered.
        DecodeMismatchError: If a field value cannot be coerced.
    """
    if not isinstance(raw, Mapping):
        raise DecodeError("Payload must be a JSON object")

    kind = _discriminator(raw)
    entry = make_config_entry(kind, "")
    decode_fields(entry, entry.FIELDS, raw, skip=frozenset(KIND_KEYS))
    return entry


def _discriminator(raw: Mapping[str, Any]) -> str:
    for key in KIND_KEYS:
        if key in raw:
            value = raw[key]
            break
    else:
        raise MissingKindError()

    if not isinstance(value, str):
        raise InvalidKindTypeError(value)
    return value
