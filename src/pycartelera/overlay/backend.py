"""Key-value persistence backends for the overlay store.

Backends deal in opaque strings only; (de)serialization and corruption
handling live in :mod:`pycartelera.overlay.store`.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol

_logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """Structural interface of a durable string key-value store.

    Every ``set_item``/``remove_item`` must be committed when it returns.
    """

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemoryBackend:
    """Process-local backend. Contents vanish with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileBackend:
    """One ``<key>.json`` file per key inside *directory*.

    Writes land in a sibling temp file first and are moved into place with
    :func:`os.replace`, so a reader never observes a half-written table.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError):
            # Unreadable counts as missing; the store falls back to the empty table.
            _logger.warning("Could not read overlay table %s", path, exc_info=True)
            return None

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            tmp.write_text(value, encoding="utf-8")
            os.replace(tmp, path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        _logger.debug("Wrote overlay table %s (%d bytes)", path, len(value))

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return
