"""HTTP transport for the catalog endpoint."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import NamedTuple, Protocol

import aiohttp

from pycartelera.config import CarteleraConfig
from pycartelera.exceptions import CarteleraTransportError

_logger = logging.getLogger(__name__)


class TransportResponse(NamedTuple):
    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Structural transport interface used by the gateway functions.

    Implementations return every HTTP response, whatever its status, and
    raise :class:`CarteleraTransportError` (without a status) only when no
    response was received at all.
    """

    async def request(
        self,
        method: str,
        *,
        params: Mapping[str, str] | None = None,
        body: str | None = None,
    ) -> TransportResponse:
        ...


class HttpTransport:
    """aiohttp-backed transport talking to ``config.base_url``."""

    def __init__(self, config: CarteleraConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def request(
        self,
        method: str,
        *,
        params: Mapping[str, str] | None = None,
        body: str | None = None,
    ) -> TransportResponse:
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": self._config.user_agent,
        }
        if body is not None:
            headers["content-type"] = "application/json; charset=UTF-8"

        url = self._config.base_url
        _logger.debug("%s %s params=%s", method, url, dict(params or {}))

        try:
            async with self._http.request(method, url, params=params, data=body, headers=headers) as resp:
                # Non-UTF-8 bodies still come back as a response.
                text = await resp.text(errors="replace")
                _logger.debug("%s %s -> HTTP %d", method, url, resp.status)
                return TransportResponse(resp.status, text)
        except (aiohttp.ClientError, OSError) as exc:
            raise CarteleraTransportError(
                f"{method} {url} failed: {exc}",
                endpoint=url,
            ) from exc
