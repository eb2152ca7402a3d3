"""Catalog endpoint: list/filter, get-by-id, create, update, delete.

Every operation targets the same URL and is distinguished by HTTP method
and query parameters. The id travels in the same query parameter
(``imdbID`` by default) for get, update and delete.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pycartelera._constants import BODY_EXCERPT, ID_PARAM
from pycartelera._transport import Transport, TransportResponse
from pycartelera.exceptions import (
    CarteleraHttpError,
    CarteleraRequestError,
    CarteleraResponseError,
)


def _excerpt(text: str) -> str:
    return text[:BODY_EXCERPT]


def _decode(text: str) -> Any:
    """JSON-decode *text*; raises ``ValueError`` on anything unparsable."""
    if not text.strip():
        raise ValueError("empty body")
    return json.loads(text)


def _encode_record(record: Mapping[str, Any]) -> str:
    try:
        return json.dumps(dict(record), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise CarteleraRequestError(f"Record is not JSON-serializable: {exc}") from exc


def _raise_for_status(operation: str, response: TransportResponse) -> None:
    if response.ok:
        return
    raise CarteleraHttpError(
        f"{operation} failed: HTTP {response.status}: {_excerpt(response.text)}",
        status_code=response.status,
        endpoint=operation,
        body=response.text,
    )


def _write_result(response: TransportResponse) -> dict[str, Any] | bool:
    # Writes may answer with the stored record, something else, or nothing.
    try:
        payload = _decode(response.text)
    except ValueError:
        return True
    return payload if isinstance(payload, dict) else True


async def list_query(transport: Transport, title: str = "", ubication: str = "") -> list[dict[str, Any]]:
    """Fetch the records matching *title*/*ubication*, as filtered by the remote."""
    params = {"title": (title or "").strip(), "ubication": (ubication or "").strip()}
    response = await transport.request("GET", params=params)
    _raise_for_status("list", response)
    try:
        payload = _decode(response.text)
    except ValueError as exc:
        raise CarteleraResponseError(
            f"list returned a non-JSON body: {_excerpt(response.text)}",
            endpoint="list",
            body=response.text,
        ) from exc
    if not isinstance(payload, list):
        return []
    return [item for item in payload if isinstance(item, dict)]


async def get_by_id(transport: Transport, movie_id: str, *, id_param: str = ID_PARAM) -> dict[str, Any] | None:
    """Fetch one record. Non-2xx and undecodable answers mean "not found"."""
    response = await transport.request("GET", params={id_param: movie_id})
    if not response.ok:
        return None
    try:
        payload = _decode(response.text)
    except ValueError:
        return None
    if isinstance(payload, list):
        payload = payload[0] if payload else None
    return payload if isinstance(payload, dict) else None


async def create(transport: Transport, record: Mapping[str, Any]) -> dict[str, Any] | bool:
    body = _encode_record(record)
    response = await transport.request("POST", body=body)
    _raise_for_status("create", response)
    return _write_result(response)


async def update_by_id(
    transport: Transport,
    movie_id: str,
    record: Mapping[str, Any],
    *,
    id_param: str = ID_PARAM,
) -> dict[str, Any] | bool:
    body = _encode_record(record)
    response = await transport.request("PUT", params={id_param: movie_id}, body=body)
    _raise_for_status("update", response)
    return _write_result(response)


async def delete_by_id(transport: Transport, movie_id: str, *, id_param: str = ID_PARAM) -> bool:
    response = await transport.request("DELETE", params={id_param: movie_id})
    _raise_for_status("delete", response)
    return True
