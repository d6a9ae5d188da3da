"""Value normalization helpers for the relationship extraction XML.

The service serializes its XML through a converter that collapses a
container with exactly one child into a bare object, prefixes every id with
a throwaway ``-``, and carries all numbers as strings. These helpers undo
those quirks so the rest of the package can treat every record the same way.
"""

from __future__ import annotations

import math
import re
from typing import Any

ID_SENTINEL = "-"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")


def as_list(value: Any) -> list[Any]:
    """Return ``value`` as a list.

    A missing value becomes an empty list, a single object becomes a
    one-element list, and a list is returned as-is.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def clean_id(raw_id: str | None) -> str | None:
    """Strip one leading ``-`` from a service identifier."""
    if raw_id and raw_id.startswith(ID_SENTINEL):
        return raw_id[len(ID_SENTINEL):]
    return raw_id


def parse_score(value: Any) -> float:
    """Parse a confidence score sent as a string, reading its leading number.

    Trailing junk is ignored (``"0.9x"`` gives 0.9). Missing or unparseable
    values give NaN rather than an error.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, str):
        return math.nan
    match = _LEADING_FLOAT.match(value)
    if match is None:
        return math.nan
    return float(match.group(1))


def parse_offset(value: Any) -> int | float:
    """Parse a character offset, reading the leading integer of the string.

    Returns NaN when there is no leading integer, so a bad offset never
    raises.
    """
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return math.nan
    match = _LEADING_INT.match(value)
    if match is None:
        return math.nan
    return int(match.group(1))
