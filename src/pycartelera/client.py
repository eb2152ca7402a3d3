"""High-level async client for the movie catalog API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from pycartelera._api import catalog as _catalog_api
from pycartelera._transport import HttpTransport, Transport
from pycartelera.admin import OverlayAdmin
from pycartelera.config import CarteleraConfig
from pycartelera.exceptions import CarteleraError, CarteleraTransportError, CarteleraValidationError
from pycartelera.fallback import FallbackRouter
from pycartelera.identity import normalize_id
from pycartelera.models.results import WriteResult
from pycartelera.overlay.reconcile import ListFilter, compose_detail, compose_list
from pycartelera.overlay.store import OverlayStore

_logger = logging.getLogger(__name__)


class CarteleraClient:
    """Async client merging the remote catalog with the local overlay.

    Usage::

        async with CarteleraClient(CarteleraConfig.from_env()) as client:
            movies = await client.list_movies(ubication="OKLAN")
            result = await client.update_movie("80001", {"Title": "New"})
            print(result.message)
    """

    def __init__(
        self,
        config: CarteleraConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        store: OverlayStore | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or CarteleraConfig()
        self._external_session = session is not None
        self._http_session = session
        self._store = store if store is not None else OverlayStore(self._config.storage_backend())
        self._injected_transport = transport
        self._transport: Transport | None = None
        self._router: FallbackRouter | None = None
        self._admin = OverlayAdmin(self._store)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CarteleraClient:
        if self._injected_transport is not None:
            self._transport = self._injected_transport
        else:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        self._router = FallbackRouter(self._transport, self._store, id_param=self._config.id_param)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._router = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> CarteleraConfig:
        return self._config

    @property
    def store(self) -> OverlayStore:
        return self._store

    @property
    def admin(self) -> OverlayAdmin:
        return self._admin

    @property
    def router(self) -> FallbackRouter:
        if self._router is None:
            raise CarteleraError("Client not initialized. Use 'async with CarteleraClient(...) as client:'")
        return self._router

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise CarteleraError("Client not initialized. Use 'async with CarteleraClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_movies(self, title: str = "", ubication: str = "") -> list[dict[str, Any]]:
        """Remote list merged with the overlay.

        Remote failures propagate (an error state); an empty list is a
        "no results" state.
        """
        list_filter = ListFilter(title=title, ubication=ubication)
        remote = await _catalog_api.list_query(self._require_transport(), list_filter.title, list_filter.ubication)
        return compose_list(
            self._store,
            remote,
            list_filter,
            refilter_remote=self._config.refilter_remote,
        )

    async def _fetch_remote(self, movie_id: str) -> dict[str, Any] | None:
        try:
            return await _catalog_api.get_by_id(self._require_transport(), movie_id, id_param=self._config.id_param)
        except CarteleraTransportError:
            # Unreachable remote still lets local adds show up.
            _logger.warning("Detail fetch for %s failed; using local data only", movie_id, exc_info=True)
            return None

    async def get_movie(self, movie_id: Any) -> dict[str, Any] | None:
        """Remote record merged with the overlay; ``None`` when not found or deleted."""
        key = normalize_id(movie_id)
        if not key:
            raise CarteleraValidationError("get_movie requires an imdbID")
        remote = await self._fetch_remote(key)
        return compose_detail(self._store, remote, key)

    async def load_for_edit(self, movie_id: Any) -> dict[str, str]:
        """Edit form for *movie_id*: remote record first, local add otherwise."""
        key = normalize_id(movie_id)
        if not key:
            raise CarteleraValidationError("Enter an imdbID to edit")
        remote = await self._fetch_remote(key)
        return self._admin.load_for_edit(key, remote)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_movie(self, record: Mapping[str, Any]) -> WriteResult:
        return await self.router.create(record)

    async def update_movie(self, movie_id: Any, record: Mapping[str, Any]) -> WriteResult:
        return await self.router.update(movie_id, record)

    async def delete_movie(self, movie_id: Any) -> WriteResult:
        return await self.router.delete(movie_id)
