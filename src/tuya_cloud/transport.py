"""HTTP transport used by the client to reach the Tuya Cloud API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from tuya_cloud.errors import TuyaTransportError

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class TransportResponse:
    status: int
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Anything that can send one HTTP request and return the raw response."""

    async def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes = b"",
    ) -> TransportResponse: ...

    async def aclose(self) -> None: ...


class HttpxTransport:
    """Transport backed by ``httpx.AsyncClient``.

    Connection failures, timeouts and other request errors surface as
    ``TuyaTransportError``.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._http = client or httpx.AsyncClient(timeout=timeout)

    async def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes = b"",
    ) -> TransportResponse:
        try:
            resp = await self._http.request(
                method, url, headers=dict(headers), content=body or None,
            )
        except httpx.RequestError as exc:
            raise TuyaTransportError(f"{method} {url} failed: {exc}") from exc
        return TransportResponse(
            status=resp.status_code,
            body=resp.content,
            headers=dict(resp.headers),
        )

    async def aclose(self) -> None:
        await self._http.aclose()
