"""Durable overlay store: overrides, local adds and tombstones.

Each table is a self-contained JSON document under its own backend key.
Every operation is a read-modify-write of one table; there are no
cross-table transactions because merging happens at read time.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from pycartelera._constants import ADDS_KEY, DELETES_KEY, OVERRIDES_KEY
from pycartelera.exceptions import CarteleraValidationError
from pycartelera.identity import normalize_id
from pycartelera.overlay.backend import MemoryBackend, StorageBackend

_logger = logging.getLogger(__name__)

_RECORD_TABLE = TypeAdapter(dict[str, Any])
_ID_LIST = TypeAdapter(list[Any])


def _require_id(value: Any, action: str) -> str:
    movie_id = normalize_id(value)
    if not movie_id:
        raise CarteleraValidationError(f"{action} requires a non-empty imdbID")
    return movie_id


class OverlayStore:
    """Local mutation tables on top of a :class:`StorageBackend`.

    All methods are synchronous and commit before returning. Values handed
    out are copies; mutating them never changes stored state.
    """

    def __init__(self, backend: StorageBackend | None = None) -> None:
        self._backend: StorageBackend = backend if backend is not None else MemoryBackend()

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    # ------------------------------------------------------------------
    # Table I/O
    # ------------------------------------------------------------------

    def _load_records(self, key: str) -> dict[str, dict[str, Any]]:
        text = self._backend.get_item(key)
        if text is None:
            return {}
        try:
            table = _RECORD_TABLE.validate_json(text)
        except ValidationError:
            _logger.warning("Overlay table %s is corrupt; treating it as empty", key)
            return {}
        records: dict[str, dict[str, Any]] = {}
        for raw_id, record in table.items():
            movie_id = normalize_id(raw_id)
            if movie_id and isinstance(record, dict):
                records[movie_id] = record
            else:
                _logger.debug("Skipping malformed entry %r in %s", raw_id, key)
        return records

    def _load_ids(self, key: str) -> list[str]:
        text = self._backend.get_item(key)
        if text is None:
            return []
        try:
            items = _ID_LIST.validate_json(text)
        except ValidationError:
            _logger.warning("Overlay table %s is corrupt; treating it as empty", key)
            return []
        ids = (normalize_id(item) for item in items)
        return list(dict.fromkeys(movie_id for movie_id in ids if movie_id))

    def _save(self, key: str, adapter: TypeAdapter[Any], value: Any) -> None:
        try:
            encoded = adapter.dump_json(value).decode("utf-8")
        except PydanticSerializationError as exc:
            raise CarteleraValidationError(f"Cannot persist {key}: {exc}") from exc
        self._backend.set_item(key, encoded)

    # ------------------------------------------------------------------
    # Overrides
    # ------------------------------------------------------------------

    def get_overrides(self) -> dict[str, dict[str, Any]]:
        return self._load_records(OVERRIDES_KEY)

    def get_override(self, movie_id: Any) -> dict[str, Any] | None:
        return self.get_overrides().get(normalize_id(movie_id))

    def set_override(self, movie_id: Any, partial: Mapping[str, Any]) -> None:
        """Shallow-merge *partial* onto the stored override for *movie_id*."""
        key = _require_id(movie_id, "set_override")
        current = self._load_records(OVERRIDES_KEY)
        current[key] = {**current.get(key, {}), **copy.deepcopy(dict(partial))}
        self._save(OVERRIDES_KEY, _RECORD_TABLE, current)

    def remove_override(self, movie_id: Any) -> None:
        key = normalize_id(movie_id)
        current = self._load_records(OVERRIDES_KEY)
        if current.pop(key, None) is not None:
            self._save(OVERRIDES_KEY, _RECORD_TABLE, current)

    # ------------------------------------------------------------------
    # Adds
    # ------------------------------------------------------------------

    def get_adds(self) -> dict[str, dict[str, Any]]:
        return self._load_records(ADDS_KEY)

    def get_add(self, movie_id: Any) -> dict[str, Any] | None:
        return self.get_adds().get(normalize_id(movie_id))

    def add_movie(self, record: Mapping[str, Any]) -> str:
        """Insert or replace a locally-created record; returns its id."""
        key = _require_id(record, "add_movie")
        current = self._load_records(ADDS_KEY)
        current[key] = copy.deepcopy(dict(record))
        self._save(ADDS_KEY, _RECORD_TABLE, current)
        return key

    def update_add(self, movie_id: Any, partial: Mapping[str, Any]) -> None:
        """Shallow-merge *partial* onto an existing local add."""
        key = _require_id(movie_id, "update_add")
        current = self._load_records(ADDS_KEY)
        if key not in current:
            raise CarteleraValidationError(f"No locally added movie with imdbID {key}")
        current[key] = {**current[key], **copy.deepcopy(dict(partial))}
        self._save(ADDS_KEY, _RECORD_TABLE, current)

    def remove_add(self, movie_id: Any) -> None:
        key = normalize_id(movie_id)
        current = self._load_records(ADDS_KEY)
        if current.pop(key, None) is not None:
            self._save(ADDS_KEY, _RECORD_TABLE, current)

    # ------------------------------------------------------------------
    # Tombstones
    # ------------------------------------------------------------------

    def get_deletes(self) -> set[str]:
        return set(self._load_ids(DELETES_KEY))

    def delete(self, movie_id: Any) -> None:
        key = _require_id(movie_id, "delete")
        current = self._load_ids(DELETES_KEY)
        if key not in current:
            current.append(key)
            self._save(DELETES_KEY, _ID_LIST, current)

    def undelete(self, movie_id: Any) -> None:
        key = normalize_id(movie_id)
        current = self._load_ids(DELETES_KEY)
        if key in current:
            current.remove(key)
            self._save(DELETES_KEY, _ID_LIST, current)

    def is_deleted(self, movie_id: Any) -> bool:
        key = normalize_id(movie_id)
        return bool(key) and key in self._load_ids(DELETES_KEY)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset_all(self) -> None:
        """Forget every local mutation."""
        for key in (OVERRIDES_KEY, ADDS_KEY, DELETES_KEY):
            self._backend.remove_item(key)
        _logger.debug("Overlay reset")
