"""Read-time merge of remote payloads with the overlay tables.

Both functions are pure apart from reading the store: they never mutate
their inputs or the store, and identical inputs give identical outputs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from pycartelera.identity import first_present, normalize_id
from pycartelera.models.movie import UBICATION_FIELDS
from pycartelera.overlay.store import OverlayStore

_logger = logging.getLogger(__name__)

#: Title aliases the list filter searches. Narrower than the view model's.
FILTER_TITLE_FIELDS: tuple[str, ...] = ("Title", "title")


def _contains(record: Mapping[str, Any], aliases: tuple[str, ...], needle: str) -> bool:
    if not needle:
        return True
    value = first_present(record, aliases)
    haystack = "" if value is None else str(value)
    return needle in haystack.lower()


class ListFilter(BaseModel):
    """Title/ubication criteria of a list query.

    Matching is a case-insensitive substring test; an empty criterion
    matches everything.
    """

    model_config = ConfigDict(frozen=True)

    title: str = ""
    ubication: str = ""

    @field_validator("title", "ubication", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    def matches(self, record: Mapping[str, Any]) -> bool:
        return _contains(record, FILTER_TITLE_FIELDS, self.title.lower()) and _contains(
            record, UBICATION_FIELDS, self.ubication.lower()
        )


def _apply_override(record: Mapping[str, Any], override: Mapping[str, Any] | None) -> dict[str, Any]:
    # Shallow: override wins per field, never removes fields.
    if not override:
        return dict(record)
    return {**record, **override}


def compose_list(
    store: OverlayStore,
    remote_records: Any,
    list_filter: ListFilter | None = None,
    *,
    refilter_remote: bool = False,
) -> list[dict[str, Any]]:
    """Merge a remote list with the overlay.

    Local adds that match *list_filter* come first, in table order,
    followed by the surviving remote records in remote order. Remote
    records are assumed to be filtered by the remote already unless
    *refilter_remote* is set.
    """
    list_filter = list_filter or ListFilter()
    deletes = store.get_deletes()
    overrides = store.get_overrides()
    adds = store.get_adds()

    items = remote_records if isinstance(remote_records, (list, tuple)) else []

    remote: list[dict[str, Any]] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        movie_id = normalize_id(item)
        if movie_id and movie_id in deletes:
            continue
        merged = _apply_override(item, overrides.get(movie_id) if movie_id else None)
        if refilter_remote and not list_filter.matches(merged):
            continue
        remote.append(merged)

    local: list[dict[str, Any]] = []
    for movie_id, record in adds.items():
        if movie_id in deletes:
            continue
        merged = _apply_override(record, overrides.get(movie_id))
        if list_filter.matches(merged):
            local.append(merged)

    _logger.debug(
        "Composed list: %d local add(s), %d remote record(s) of %d",
        len(local),
        len(remote),
        len(items),
    )
    return [*local, *remote]


def compose_detail(
    store: OverlayStore,
    remote_record: Mapping[str, Any] | None,
    movie_id: Any = None,
) -> dict[str, Any] | None:
    """Merge a single remote record (or its absence) with the overlay.

    Tombstones win over everything; a missing remote record falls back to
    the matching local add.
    """
    key = normalize_id(movie_id)
    if not key and remote_record is not None:
        key = normalize_id(remote_record)
    if not key:
        return dict(remote_record) if remote_record is not None else None

    if store.is_deleted(key):
        return None

    base: Mapping[str, Any] | None = remote_record
    if base is None:
        base = store.get_add(key)
        if base is None:
            return None

    return _apply_override(base, store.get_overrides().get(key))
