"""
apps.config_entries.errors
~~~~~~~~~~~~~~~~~~~~~~~~~~~
Decode-time errors raised by the kind registry and the payload decoder.

These are pure-Python exceptions with no HTTP meaning of their own; the
dispatcher translates them into :class:`~common.exceptions.BadRequestError`.
"""
from __future__ import annotations


class DecodeError(ValueError):
    """Base class for every failure to turn a raw payload into an entry."""


class MissingKindError(DecodeError):
    def __init__(self) -> None:
        super().__init__("Payload does not contain a kind/Kind key at the top level")


class InvalidKindTypeError(DecodeError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__("Kind value in payload is not a string")


class UnknownKindError(DecodeError):
    """Raised when a kind identifier has no registered constructor."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"invalid config entry kind: {kind}")


class DecodeMismatchError(DecodeError):
    """
    A value could not be coerced into the type its field requires.

    Attributes:
        key: Dotted path of the offending field, e.g. ``"Subsets.v1.Filter"``.
        expected: Description of the type the field requires.
        actual: Description of the JSON type that was supplied.
        reason: Optional extra detail (e.g. a duration parse failure).
    """

    def __init__(
        self,
        key: str,
        expected: str,
        actual: str,
        reason: str | None = None,
    ) -> None:
        self.key = key
        self.expected = expected
        self.actual = actual
        self.reason = reason
        message = f"'{key}' expected type '{expected}', got '{actual}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
