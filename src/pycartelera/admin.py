"""Local-only admin operations on the overlay.

These back the "edit without touching the API" flows: they read and
write the overlay store directly and never call the remote catalog.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pycartelera.exceptions import CarteleraNotFoundError, CarteleraValidationError
from pycartelera.identity import normalize_id
from pycartelera.models.movie import Movie
from pycartelera.overlay.reconcile import compose_detail
from pycartelera.overlay.store import OverlayStore


class OverlayAdmin:
    """Read-modify-write helpers over an :class:`OverlayStore`.

    Every mutating method returns a confirmation message for display.
    """

    def __init__(self, store: OverlayStore) -> None:
        self._store = store

    def add(self, record: Mapping[str, Any]) -> str:
        movie_id = self._store.add_movie(record)
        return f"Movie added locally: {movie_id}"

    def load_for_edit(self, movie_id: Any, remote_record: Mapping[str, Any] | None = None) -> dict[str, str]:
        """Return the edit form for *movie_id*, overlay applied.

        *remote_record* is the remote lookup result, if any; a local add is
        used when it is missing.

        Raises
        ------
        CarteleraValidationError
            If *movie_id* is empty.
        CarteleraNotFoundError
            If the movie exists neither remotely nor locally, or is deleted.
        """
        key = normalize_id(movie_id)
        if not key:
            raise CarteleraValidationError("Enter an imdbID to edit")
        merged = compose_detail(self._store, remote_record, key)
        if merged is None:
            raise CarteleraNotFoundError(f"{key} not found (or deleted locally)")
        form = Movie.from_record(merged).to_form()
        if not form["imdbID"]:
            form["imdbID"] = key
        return form

    def save_edit(self, form: Mapping[str, Any]) -> str:
        """Persist an edit form: local adds are updated, remote movies get an override."""
        movie_id = normalize_id(form)
        if not movie_id:
            raise CarteleraValidationError("imdbID is required")
        if self._store.get_add(movie_id) is not None:
            self._store.update_add(movie_id, form)
        else:
            self._store.set_override(movie_id, form)
        return f"Changes saved for {movie_id}"

    def delete(self, movie_id: Any) -> str:
        """Remove a local add outright; tombstone anything else."""
        key = normalize_id(movie_id)
        if not key:
            raise CarteleraValidationError("Enter an imdbID to delete")
        if self._store.get_add(key) is not None:
            self._store.remove_add(key)
            return f"Removed from local storage: {key}"
        self._store.delete(key)
        return f"Marked as deleted: {key}"

    def undo_delete(self, movie_id: Any) -> str:
        key = normalize_id(movie_id)
        if not key:
            raise CarteleraValidationError("Enter an imdbID to restore")
        self._store.undelete(key)
        return f"Deletion reverted: {key}"

    def reset(self) -> str:
        self._store.reset_all()
        return "Local overrides, additions and deletions cleared."
