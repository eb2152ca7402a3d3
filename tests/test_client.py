from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pycartelera.client import CarteleraClient
from pycartelera.config import CarteleraConfig
from pycartelera.exceptions import (
    CarteleraError,
    CarteleraHttpError,
    CarteleraNotFoundError,
    CarteleraValidationError,
)
from pycartelera.models.results import WriteOutcome
from pycartelera.overlay.store import OverlayStore

if TYPE_CHECKING:
    from conftest import FakeCatalogBackend


def _client(backend: FakeCatalogBackend, store: OverlayStore, **config: bool) -> CarteleraClient:
    return CarteleraClient(CarteleraConfig(**config), transport=backend, store=store)


@pytest.mark.asyncio
async def test_list_merges_overlay(backend: FakeCatalogBackend, store: OverlayStore) -> None:
    store.add_movie({"imdbID": "L1", "Title": "Local Batman", "Ubication": "OKLAN"})
    store.set_override("80001", {"Title": "Batman (1989)"})
    store.delete("80002")

    async with _client(backend, store) as client:
        movies = await client.list_movies()
        filtered = await client.list_movies(title=" batman ")

    assert [m["imdbID"] for m in movies] == ["L1", "80001"]
    assert movies[1]["Title"] == "Batman (1989)"
    assert [m["imdbID"] for m in filtered] == ["L1", "80001"]
    assert backend.calls[-1] == ("GET", {"title": "batman", "ubication": ""}, None)


@pytest.mark.asyncio
async def test_list_remote_failure_propagates(backend: FakeCatalogBackend, store: OverlayStore) -> None:
    backend.fail["GET"] = 500
    async with _client(backend, store) as client:
        with pytest.raises(CarteleraHttpError):
            await client.list_movies()


@pytest.mark.asyncio
async def test_get_movie_composes_detail(backend: FakeCatalogBackend, store: OverlayStore) -> None:
    store.add_movie({"imdbID": "L1", "Title": "Local"})
    store.set_override("80001", {"Year": "1990"})
    store.delete("80002")

    async with _client(backend, store) as client:
        assert (await client.get_movie("80001"))["Year"] == "1990"
        assert await client.get_movie("L1") == {"imdbID": "L1", "Title": "Local"}
        assert await client.get_movie("80002") is None
        assert await client.get_movie("nope") is None
        with pytest.raises(CarteleraValidationError):
            await client.get_movie("")


@pytest.mark.asyncio
async def test_get_movie_survives_unreachable_remote(backend: FakeCatalogBackend, store: OverlayStore) -> None:
    backend.fail["GET"] = None
    store.add_movie({"imdbID": "L1", "Title": "Local"})

    async with _client(backend, store) as client:
        assert await client.get_movie("L1") == {"imdbID": "L1", "Title": "Local"}
        assert await client.get_movie("80001") is None


@pytest.mark.asyncio
async def test_blocked_writes_show_up_on_next_read(backend: FakeCatalogBackend, store: OverlayStore) -> None:
    backend.fail.update({"POST": 405, "PUT": None, "DELETE": 403})

    async with _client(backend, store) as client:
        created = await client.create_movie({"imdbID": "L1", "Title": "Local", "Ubication": "OKLAN"})
        updated = await client.update_movie("80001", {"Title": "Edited"})
        deleted = await client.delete_movie("80002")
        assert all(r.outcome == WriteOutcome.LOCAL_FALLBACK for r in (created, updated, deleted))

        backend.fail.clear()
        movies = await client.list_movies()

    assert [m["imdbID"] for m in movies] == ["L1", "80001"]
    assert movies[1]["Title"] == "Edited"
    assert backend.movies["80001"]["Title"] == "Batman"


@pytest.mark.asyncio
async def test_load_for_edit(backend: FakeCatalogBackend, store: OverlayStore) -> None:
    async with _client(backend, store) as client:
        form = await client.load_for_edit("80001")
        assert form["Title"] == "Batman"
        with pytest.raises(CarteleraNotFoundError):
            await client.load_for_edit("nope")


@pytest.mark.asyncio
async def test_refilter_remote_option(backend: FakeCatalogBackend, store: OverlayStore) -> None:
    store.set_override("80001", {"Title": "Renamed"})

    async with _client(backend, store, refilter_remote=True) as client:
        assert await client.list_movies(title="batman") == []

    async with _client(backend, store) as client:
        assert [m["Title"] for m in await client.list_movies(title="batman")] == ["Renamed"]


@pytest.mark.asyncio
async def test_client_requires_context_manager(backend: FakeCatalogBackend, store: OverlayStore) -> None:
    client = _client(backend, store)
    with pytest.raises(CarteleraError, match="not initialized"):
        await client.list_movies()
    with pytest.raises(CarteleraError, match="not initialized"):
        await client.delete_movie("80001")
