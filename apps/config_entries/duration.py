"""
apps.config_entries.duration
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Human-readable duration strings <-> integer nanoseconds.

The grammar is the one used by Go's ``time.ParseDuration``: an optional sign
followed by one or more ``<number><unit>`` components, e.g. ``"10s"``,
``"2h30m"``, ``"1.5ms"``.  Valid units are ``ns``, ``us`` (or ``µs`` /
``μs``), ``ms``, ``s``, ``m`` and ``h``.  The bare string ``"0"`` is also
accepted.

Durations are represented as plain ``int`` nanosecond counts everywhere in
this project so that no precision is lost below the microsecond.
"""
from __future__ import annotations

import re

NANOSECOND = 1
MICROSECOND = 1_000 * NANOSECOND
MILLISECOND = 1_000 * MICROSECOND
SECOND = 1_000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

_UNITS: dict[str, int] = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # micro sign
    "μs": MICROSECOND,  # greek small letter mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

MAX_DURATION = 2**63 - 1
MIN_DURATION = -(2**63)

_COMPONENT = re.compile(r"(\d*)(?:\.(\d*))?([^\d.]*)")


class DurationError(ValueError):
    """Raised when a string cannot be parsed as a duration."""


def parse_duration(text: str) -> int:
    """
    Parse *text* into a signed number of nanoseconds.

    Args:
        text: A duration string such as ``"1h"`` or ``"-1.5s"``.

    Returns:
        The duration in nanoseconds.

    Raises:
        DurationError: If *text* does not follow the duration grammar, uses an
            unknown unit, or overflows a signed 64-bit nanosecond count.
    """
    original = text
    negative = False
    if text[:1] in ("-", "+"):
        negative = text[0] == "-"
        text = text[1:]

    if text == "0":
        return 0
    if not text:
        raise DurationError(f'invalid duration "{original}"')

    limit = -MIN_DURATION if negative else MAX_DURATION
    total = 0
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        whole, frac, unit = match.groups()
        if not whole and not frac:
            raise DurationError(f'invalid duration "{original}"')
        if not unit:
            raise DurationError(f'missing unit in duration "{original}"')
        scale = _UNITS.get(unit)
        if scale is None:
            raise DurationError(f'unknown unit "{unit}" in duration "{original}"')

        value = int(whole or "0") * scale
        if frac:
            value += int(frac) * scale // 10 ** len(frac)
        total += value
        if total > limit:
            raise DurationError(f'invalid duration "{original}"')
        pos = match.end()

    return -total if negative else total


def format_duration(nanoseconds: int) -> str:
    """
    Render *nanoseconds* the way Go's ``Duration.String`` does.

    Examples: ``0`` -> ``"0s"``, ``1_500`` -> ``"1.5µs"``,
    ``3_600_000_000_000`` -> ``"1h0m0s"``.
    """
    if nanoseconds == 0:
        return "0s"

    sign = "-" if nanoseconds < 0 else ""
    value = abs(nanoseconds)

    if value < MICROSECOND:
        return f"{sign}{value}ns"
    if value < MILLISECOND:
        return f"{sign}{_with_fraction(value, MICROSECOND)}µs"
    if value < SECOND:
        return f"{sign}{_with_fraction(value, MILLISECOND)}ms"

    hours, rest = divmod(value, HOUR)
    minutes, rest = divmod(rest, MINUTE)
    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return f"{out}{_with_fraction(rest, SECOND)}s"


def _with_fraction(value: int, scale: int) -> str:
    whole, frac = divmod(value, scale)
    if not frac:
        return str(whole)
    width = len(str(scale)) - 1
    return f"{whole}.{str(frac).rjust(width, '0').rstrip('0')}"
