from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import pytest

from pycartelera._api import catalog
from pycartelera._transport import TransportResponse
from pycartelera.exceptions import (
    CarteleraHttpError,
    CarteleraRequestError,
    CarteleraResponseError,
    CarteleraTransportError,
)


class _StaticTransport:
    def __init__(self, status: int = 200, text: str = "") -> None:
        self._response = TransportResponse(status, text)
        self.calls: list[tuple[str, dict[str, str], str | None]] = []

    async def request(
        self,
        method: str,
        *,
        params: Mapping[str, str] | None = None,
        body: str | None = None,
    ) -> TransportResponse:
        self.calls.append((method, dict(params or {}), body))
        return self._response


class _NetworkDownTransport:
    async def request(self, method: str, **_kwargs: Any) -> TransportResponse:
        raise CarteleraTransportError(f"{method} failed: Failed to fetch")


@pytest.mark.asyncio
async def test_list_query_strips_and_sends_filters() -> None:
    transport = _StaticTransport(text=json.dumps([{"imdbID": "1"}, "junk"]))
    result = await catalog.list_query(transport, "  Batman ", " OKLAN")
    assert result == [{"imdbID": "1"}]
    assert transport.calls == [("GET", {"title": "Batman", "ubication": "OKLAN"}, None)]


@pytest.mark.asyncio
async def test_list_query_non_list_payload_is_empty() -> None:
    assert await catalog.list_query(_StaticTransport(text='{"message": "none"}')) == []


@pytest.mark.asyncio
async def test_list_query_http_error_raises() -> None:
    with pytest.raises(CarteleraHttpError) as exc_info:
        await catalog.list_query(_StaticTransport(500, "boom"))
    assert exc_info.value.status_code == 500
    assert exc_info.value.body == "boom"
    assert not exc_info.value.network_failure


@pytest.mark.asyncio
async def test_list_query_invalid_json_raises() -> None:
    with pytest.raises(CarteleraResponseError):
        await catalog.list_query(_StaticTransport(text="<html>"))


@pytest.mark.asyncio
async def test_list_query_network_failure_propagates() -> None:
    with pytest.raises(CarteleraTransportError) as exc_info:
        await catalog.list_query(_NetworkDownTransport())
    assert exc_info.value.network_failure


@pytest.mark.asyncio
async def test_get_by_id_unwraps_list() -> None:
    transport = _StaticTransport(text=json.dumps([{"imdbID": "1", "Title": "X"}]))
    assert await catalog.get_by_id(transport, "1") == {"imdbID": "1", "Title": "X"}
    assert transport.calls == [("GET", {"imdbID": "1"}, None)]


@pytest.mark.asyncio
async def test_get_by_id_custom_id_param() -> None:
    transport = _StaticTransport(text=json.dumps({"id": "1"}))
    assert await catalog.get_by_id(transport, "1", id_param="id") == {"id": "1"}
    assert transport.calls[0][1] == {"id": "1"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "text"),
    [(404, "not found"), (500, "oops"), (200, "[]"), (200, "not json"), (200, '"string"')],
)
async def test_get_by_id_not_found_cases(status: int, text: str) -> None:
    assert await catalog.get_by_id(_StaticTransport(status, text), "1") is None


@pytest.mark.asyncio
async def test_create_posts_json_and_returns_record() -> None:
    transport = _StaticTransport(201, json.dumps({"imdbID": "9", "Title": "Ñ"}))
    result = await catalog.create(transport, {"imdbID": "9", "Title": "Ñ"})
    assert result == {"imdbID": "9", "Title": "Ñ"}
    method, params, body = transport.calls[0]
    assert method == "POST"
    assert params == {}
    assert json.loads(body or "") == {"imdbID": "9", "Title": "Ñ"}


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "OK", "[1]"])
async def test_write_without_json_record_returns_true(text: str) -> None:
    assert await catalog.update_by_id(_StaticTransport(200, text), "9", {"Title": "x"}) is True


@pytest.mark.asyncio
async def test_update_and_delete_send_id_param() -> None:
    transport = _StaticTransport(204, "")
    await catalog.update_by_id(transport, "9", {"Title": "x"})
    assert await catalog.delete_by_id(transport, "9") is True
    assert [(m, p) for m, p, _ in transport.calls] == [("PUT", {"imdbID": "9"}), ("DELETE", {"imdbID": "9"})]


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 403, 405, 500])
async def test_writes_raise_with_status_and_body(status: int) -> None:
    transport = _StaticTransport(status, "nope")
    for call in (
        catalog.create(transport, {"imdbID": "9"}),
        catalog.update_by_id(transport, "9", {}),
        catalog.delete_by_id(transport, "9"),
    ):
        with pytest.raises(CarteleraHttpError) as exc_info:
            await call
        assert exc_info.value.status_code == status
        assert exc_info.value.body == "nope"


@pytest.mark.asyncio
async def test_unserializable_record_fails_before_request() -> None:
    transport = _StaticTransport(200, "{}")
    with pytest.raises(CarteleraRequestError):
        await catalog.update_by_id(transport, "9", {"blob": object()})
    assert transport.calls == []
