"""Core HTTP client for the Tuya Cloud API with automatic token management."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from tuya_cloud.auth import SignatureOptions, check_method, encode_query, sign_request
from tuya_cloud.cache import MemoryTokenCache, TokenCache
from tuya_cloud.config import TuyaConfig
from tuya_cloud.envelope import parse_envelope
from tuya_cloud.errors import TuyaAPIError
from tuya_cloud.tokens import TokenManager
from tuya_cloud.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)


def encode_path(path: str) -> str:
    """Percent-encode a request path the same way httpx does when sending it."""
    return httpx.URL(path).raw_path.decode("ascii")


def encode_body(body: Any) -> bytes:
    """Serialize a request body; an empty body is signed as zero bytes."""
    if not body:
        return b""
    return json.dumps(body, separators=(",", ":")).encode()


class TuyaClient:
    """Async client for the Tuya Cloud API.

    Handles authentication, token lifecycle, and request signing
    automatically.  The transport and token cache are injectable; by
    default an ``httpx`` transport and a process-local cache are used.
    Device operations live on the ``devices`` attribute.
    """

    def __init__(
        self,
        config: TuyaConfig | None = None,
        *,
        transport: Transport | None = None,
        cache: TokenCache | None = None,
        clock: Callable[[], float] = time.time,
        options: SignatureOptions | None = None,
    ) -> None:
        self.config = config or TuyaConfig()  # type: ignore[call-arg]
        self.options = options or SignatureOptions(uppercase=self.config.uppercase_sign)
        self._transport = transport or HttpxTransport()
        self._clock = clock
        self.tokens = TokenManager(
            self.config,
            self._transport,
            cache if cache is not None else MemoryTokenCache(clock=clock),
            clock=clock,
            options=self.options,
        )

        from tuya_cloud.devices import DevicesMixin

        self.devices = DevicesMixin(self)

    async def __aenter__(self) -> TuyaClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._transport.aclose()

    # -- Token management ----------------------------------------------------

    async def get_access_token(self) -> str:
        return await self.tokens.get_access_token()

    def invalidate_token(self) -> None:
        self.tokens.invalidate_token()

    # -- Generic request -----------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> dict[str, Any]:
        """Make a signed API request and return the full response envelope.

        The envelope is returned as decoded, so ``result`` and any fields this
        client does not know about are left to the caller.
        """
        method = check_method(method)
        if not path.startswith("/"):
            path = "/" + path

        # Sign the path exactly as it goes on the wire, percent-encoding included.
        path = encode_path(path)

        token = await self.tokens.get_access_token()

        body_bytes = encode_body(body)
        headers = sign_request(
            self.config,
            method,
            path,
            params=params,
            body=body_bytes,
            access_token=token,
            t=int(self._clock() * 1000),
            options=self.options,
        )
        if body_bytes:
            headers["Content-Type"] = "application/json"

        query = encode_query(params, sort=self.options.sort_params)
        url = f"{self.config.base_url}{path}"
        if query:
            url += f"?{query}"

        logger.debug("API request %s %s body=%r", method, url, body_bytes)
        resp = await self._transport.send(method, url, headers, body_bytes)
        logger.debug("API response %s %s -> %d", method, path, resp.status)

        data, envelope = parse_envelope(resp, TuyaAPIError)
        if envelope.success is False:
            raise TuyaAPIError(envelope.code, envelope.msg, status=resp.status)
        return data

    async def get(
        self, path: str, params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await self.request("GET", path, params)

    async def post(
        self, path: str, body: Any = None, params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await self.request("POST", path, params, body)

    async def put(
        self, path: str, body: Any = None, params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await self.request("PUT", path, params, body)

    async def delete(
        self, path: str, body: Any = None, params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await self.request("DELETE", path, params, body)
