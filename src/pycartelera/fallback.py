"""Remote-first writes with a local overlay fallback.

Each write is attempted against the remote catalog. A failure the
classification policy deems "blocked" (network-level failure, or a
method-specific status such as 403/405) is redirected into the overlay
store and reported as a degraded success; every other failure propagates
unchanged and leaves the store untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pycartelera._api import catalog as _catalog_api
from pycartelera._constants import ID_PARAM
from pycartelera._transport import Transport
from pycartelera.exceptions import BlockedWriteError, CarteleraTransportError, CarteleraValidationError
from pycartelera.identity import normalize_id
from pycartelera.models.results import WriteOperation, WriteOutcome, WriteResult
from pycartelera.overlay.policy import describe_block, is_blocked_write
from pycartelera.overlay.store import OverlayStore

_logger = logging.getLogger(__name__)

_REMOTE_MESSAGES: dict[WriteOperation, str] = {
    WriteOperation.CREATE: "Movie {id} created in the catalog.",
    WriteOperation.UPDATE: "Changes to {id} saved in the catalog.",
    WriteOperation.DELETE: "Movie {id} deleted from the catalog.",
}

_LOCAL_MESSAGES: dict[WriteOperation, str] = {
    WriteOperation.CREATE: "Movie {id} added locally ({reason}).",
    WriteOperation.UPDATE: "Changes to {id} saved locally ({reason}).",
    WriteOperation.DELETE: "Movie {id} marked as deleted locally ({reason}).",
}


class FallbackRouter:
    """Wraps remote create/update/delete with the local fallback policy.

    This is the only component that decides whether a remote failure is
    recoverable; the store and reconciler know nothing about it.
    """

    def __init__(self, transport: Transport, store: OverlayStore, *, id_param: str = ID_PARAM) -> None:
        self._transport = transport
        self._store = store
        self._id_param = id_param

    async def create(self, record: Mapping[str, Any]) -> WriteResult:
        movie_id = normalize_id(record)
        if not movie_id:
            raise CarteleraValidationError("A new movie needs an imdbID")
        payload = dict(record)
        return await self._route(
            WriteOperation.CREATE,
            movie_id,
            lambda: _catalog_api.create(self._transport, payload),
            lambda: self._store.add_movie(payload),
        )

    async def update(self, movie_id: Any, record: Mapping[str, Any]) -> WriteResult:
        key = normalize_id(movie_id)
        if not key:
            raise CarteleraValidationError("Updating a movie needs an imdbID")
        payload = dict(record)
        return await self._route(
            WriteOperation.UPDATE,
            key,
            lambda: _catalog_api.update_by_id(self._transport, key, payload, id_param=self._id_param),
            lambda: self._store.set_override(key, payload),
        )

    async def delete(self, movie_id: Any) -> WriteResult:
        key = normalize_id(movie_id)
        if not key:
            raise CarteleraValidationError("Deleting a movie needs an imdbID")
        return await self._route(
            WriteOperation.DELETE,
            key,
            lambda: _catalog_api.delete_by_id(self._transport, key, id_param=self._id_param),
            lambda: self._store.delete(key),
        )

    async def _route(
        self,
        operation: WriteOperation,
        movie_id: str,
        remote_call: Callable[[], Awaitable[dict[str, Any] | bool]],
        local_mutation: Callable[[], object],
    ) -> WriteResult:
        try:
            remote = await remote_call()
        except CarteleraTransportError as exc:
            if not is_blocked_write(operation, exc):
                raise
            reason = describe_block(exc)
            local_mutation()
            _logger.info("Remote %s of %s blocked (%s); applied locally", operation, movie_id, reason)
            return WriteResult(
                outcome=WriteOutcome.LOCAL_FALLBACK,
                operation=operation,
                movie_id=movie_id,
                message=_LOCAL_MESSAGES[operation].format(id=movie_id, reason=reason),
                error=BlockedWriteError(
                    f"{operation} of {movie_id} blocked: {reason}",
                    operation=operation,
                    cause=exc,
                ),
            )

        _logger.debug("Remote %s of %s succeeded", operation, movie_id)
        return WriteResult(
            outcome=WriteOutcome.REMOTE_SUCCESS,
            operation=operation,
            movie_id=movie_id,
            message=_REMOTE_MESSAGES[operation].format(id=movie_id),
            remote=remote,
        )
