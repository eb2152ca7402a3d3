"""Record identifier normalization.

Remote and locally-created records do not agree on the name of their id
field. Every overlay table is keyed by the string returned from
:func:`normalize_id`; callers must never mix raw and normalized ids.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

#: Id field aliases, highest priority first.
ID_FIELDS: tuple[str, ...] = ("imdbID", "imdbId", "id")


def _usable(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return isinstance(value, (int, float))


def _render(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def first_present(record: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    """Return the value of the first alias holding something other than ``None`` or blank text."""
    for key in aliases:
        value = record.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def normalize_id(value: Any) -> str:
    """Extract the canonical id from a record or a raw id-like scalar.

    Returns ``""`` when no usable id is present. Never raises.
    """
    if isinstance(value, Mapping):
        for key in ID_FIELDS:
            candidate = value.get(key)
            if _usable(candidate):
                return _render(candidate)
        return ""
    if _usable(value):
        return _render(value)
    return ""
