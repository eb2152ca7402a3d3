from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from pycartelera._transport import TransportResponse
from pycartelera.exceptions import CarteleraTransportError
from pycartelera.overlay.backend import MemoryBackend
from pycartelera.overlay.store import OverlayStore


@dataclass
class FakeCatalogBackend:
    """In-memory stand-in for the remote catalog, speaking the transport protocol.

    ``fail[method]`` forces a failure for that HTTP method: an ``int`` is
    answered as that status, ``None`` simulates a network-level failure.
    """

    movies: dict[str, dict[str, Any]] = field(default_factory=dict)
    fail: dict[str, int | None] = field(default_factory=dict)
    calls: list[tuple[str, dict[str, str], str | None]] = field(default_factory=list)

    def _json(self, payload: Any, status: int = 200) -> TransportResponse:
        return TransportResponse(status, json.dumps(payload))

    async def request(
        self,
        method: str,
        *,
        params: Mapping[str, str] | None = None,
        body: str | None = None,
    ) -> TransportResponse:
        query = dict(params or {})
        self.calls.append((method, query, body))

        if method in self.fail:
            status = self.fail[method]
            if status is None:
                raise CarteleraTransportError(f"{method} failed: Failed to fetch")
            return TransportResponse(status, f"error {status}")

        if method == "GET" and "imdbID" in query:
            movie = self.movies.get(query["imdbID"])
            if movie is None:
                return TransportResponse(404, "not found")
            return self._json([movie])

        if method == "GET":
            title = query.get("title", "").lower()
            ubication = query.get("ubication", "").lower()
            return self._json(
                [
                    m
                    for m in self.movies.values()
                    if title in str(m.get("Title", "")).lower() and ubication in str(m.get("Ubication", "")).lower()
                ]
            )

        if method == "POST":
            record = json.loads(body or "{}")
            self.movies[record["imdbID"]] = record
            return self._json(record, status=201)

        if method == "PUT":
            record = json.loads(body or "{}")
            self.movies[query["imdbID"]] = {**self.movies.get(query["imdbID"], {}), **record}
            return TransportResponse(204, "")

        if method == "DELETE":
            self.movies.pop(query["imdbID"], None)
            return TransportResponse(200, "")

        raise AssertionError(f"Unexpected request: {method} {query}")

    def count(self, method: str) -> int:
        return sum(1 for call in self.calls if call[0] == method)


@pytest.fixture
def backend() -> FakeCatalogBackend:
    return FakeCatalogBackend(
        movies={
            "80001": {"imdbID": "80001", "Title": "Batman", "Year": "1989", "Ubication": "OKLAN"},
            "80002": {"imdbID": "80002", "Title": "Coco", "Year": "2017", "Ubication": "MIRAFLORES"},
        }
    )


@pytest.fixture
def store() -> OverlayStore:
    return OverlayStore(MemoryBackend())
