"""
apps.config_entries.fields
~~~~~~~~~~~~~~~~~~~~~~~~~~~
Data-driven field tables for typed config entries.

Every entry (and every nested structure inside one) declares a ``FIELDS``
tuple of :class:`FieldSpec`.  Each spec pairs the JSON wire name with the
Python attribute and a *field type* that knows how to decode a raw JSON value
into the attribute's Python value and how to encode it back.

Decoding rules shared by all structures:

- keys are matched against wire names case-insensitively;
- keys that match no field are ignored;
- ``null`` leaves the attribute at its zero value;
- the first value that cannot be coerced raises
  :class:`~apps.config_entries.errors.DecodeMismatchError`.
"""
from __future__ import annotations

import copy
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .duration import (
    MAX_DURATION,
    MIN_DURATION,
    DurationError,
    format_duration,
    parse_duration,
)
from .errors import DecodeMismatchError


def json_type_name(value: object) -> str:
    """Describe *value* using JSON vocabulary for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


# ---------------------------------------------------------------------------
# Field types
# ---------------------------------------------------------------------------

class FieldType:
    """Converts one field between its JSON form and its Python form."""

    #: Name used in mismatch errors.
    expected: str = "value"

    def decode(self, value: Any, path: str) -> Any:
        raise NotImplementedError

    def encode(self, value: Any) -> Any:
        return value

    def mismatch(self, value: Any, path: str, reason: str | None = None) -> DecodeMismatchError:
        return DecodeMismatchError(path, self.expected, json_type_name(value), reason)


class String(FieldType):
    expected = "string"

    def decode(self, value: Any, path: str) -> str:
        if not isinstance(value, str):
            raise self.mismatch(value, path)
        return value


class Boolean(FieldType):
    expected = "boolean"

    def decode(self, value: Any, path: str) -> bool:
        if not isinstance(value, bool):
            raise self.mismatch(value, path)
        return value


class Integer(FieldType):
    expected = "integer"

    def decode(self, value: Any, path: str) -> int:
        if isinstance(value, bool):
            raise self.mismatch(value, path)
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise self.mismatch(value, path)


class Duration(FieldType):
    """Nanosecond count from either a number or a duration string."""

    expected = "duration"

    def decode(self, value: Any, path: str) -> int:
        if isinstance(value, bool):
            raise self.mismatch(value, path)
        if isinstance(value, (int, float)):
            if isinstance(value, float) and not math.isfinite(value):
                raise self.mismatch(value, path, "duration out of range")
            nanoseconds = int(value)
            if not MIN_DURATION <= nanoseconds <= MAX_DURATION:
                raise self.mismatch(value, path, "duration out of range")
            return nanoseconds
        if isinstance(value, str):
            try:
                return parse_duration(value)
            except DurationError as exc:
                raise self.mismatch(value, path, str(exc)) from exc
        raise self.mismatch(value, path)

    def encode(self, value: int) -> str:
        return format_duration(value)


class FreeformObject(FieldType):
    """An arbitrary JSON object kept as-is (deep-copied)."""

    expected = "object"

    def decode(self, value: Any, path: str) -> dict:
        if not isinstance(value, Mapping):
            raise self.mismatch(value, path)
        return copy.deepcopy(dict(value))

    def encode(self, value: dict) -> dict:
        return copy.deepcopy(value)


class ListOf(FieldType):
    expected = "array"

    def __init__(self, item: FieldType) -> None:
        self.item = item

    def decode(self, value: Any, path: str) -> list:
        if not isinstance(value, (list, tuple)):
            raise self.mismatch(value, path)
        return [self.item.decode(v, f"{path}[{i}]") for i, v in enumerate(value)]

    def encode(self, value: list) -> list:
        return [self.item.encode(v) for v in value]


class MapOf(FieldType):
    """Object with string keys whose values share one field type."""

    expected = "object"

    def __init__(self, item: FieldType) -> None:
        self.item = item

    def decode(self, value: Any, path: str) -> dict:
        if not isinstance(value, Mapping):
            raise self.mismatch(value, path)
        result = {}
        for key, item in value.items():
            if item is None:
                continue
            result[str(key)] = self.item.decode(item, _join(path, str(key)))
        return result

    def encode(self, value: dict) -> dict:
        return {k: self.item.encode(v) for k, v in value.items()}


class Struct(FieldType):
    """A nested structure described by its own ``FIELDS`` table."""

    expected = "object"

    def __init__(self, cls: type) -> None:
        self.cls = cls

    def decode(self, value: Any, path: str) -> Any:
        if not isinstance(value, Mapping):
            raise self.mismatch(value, path)
        target = self.cls()
        decode_fields(target, self.cls.FIELDS, value, path)
        return target

    def encode(self, value: Any) -> dict | None:
        if value is None:
            return None
        return encode_fields(value, self.cls.FIELDS)


# ---------------------------------------------------------------------------
# Field tables
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldSpec:
    """One row of a ``FIELDS`` table."""

    wire_name: str
    attr: str
    field_type: FieldType


def decode_fields(
    target: Any,
    fields: Iterable[FieldSpec],
    raw: Mapping[str, Any],
    path: str = "",
    skip: frozenset[str] = frozenset(),
) -> None:
    """
    Populate *target* from *raw* using *fields*.

    Args:
        target: Object whose attributes are assigned in place.
        fields: The target's field table.
        raw: Untyped key/value mapping.
        path: Dotted prefix used in error keys for nested structures.
        skip: Raw keys to leave alone (e.g. the discriminator).

    Raises:
        DecodeMismatchError: On the first value that cannot be coerced.

    A key spelled exactly like the wire name wins over a key that only
    matches it case-insensitively.
    """
    by_name = {spec.wire_name.lower(): spec for spec in fields}
    for key, value in raw.items():
        if key in skip or value is None:
            continue
        spec = by_name.get(str(key).lower())
        if spec is None:
            continue
        if key != spec.wire_name and spec.wire_name in raw:
            continue
        setattr(target, spec.attr, spec.field_type.decode(value, _join(path, spec.wire_name)))


def encode_fields(source: Any, fields: Iterable[FieldSpec]) -> dict[str, Any]:
    """Inverse of :func:`decode_fields`: build a wire dict from *source*."""
    return {
        spec.wire_name: spec.field_type.encode(getattr(source, spec.attr))
        for spec in fields
    }
