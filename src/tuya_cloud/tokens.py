"""Access token acquisition for the Tuya Cloud API."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any

from tuya_cloud.auth import SignatureOptions, encode_query, sign_request
from tuya_cloud.cache import TokenCache, token_cache_key
from tuya_cloud.config import MAX_TOKEN_LIFETIME, TuyaConfig
from tuya_cloud.envelope import parse_envelope
from tuya_cloud.errors import TuyaAuthError
from tuya_cloud.transport import Transport

logger = logging.getLogger(__name__)

TOKEN_PATH = "/v1.0/token"
TOKEN_PARAMS = {"grant_type": "1"}


class TokenManager:
    """Hands out a valid access token, bootstrapping a new one when needed.

    Tokens live in the injected ``TokenCache`` under a key derived from the
    access id.  Concurrent callers that miss the cache wait on a single
    bootstrap instead of each issuing their own.
    """

    def __init__(
        self,
        config: TuyaConfig,
        transport: Transport,
        cache: TokenCache,
        *,
        clock: Callable[[], float] = time.time,
        options: SignatureOptions | None = None,
    ) -> None:
        self.config = config
        self.cache_key = token_cache_key(config.access_id)
        self._transport = transport
        self._cache = cache
        self._clock = clock
        self._options = options or SignatureOptions()
        self._lock = asyncio.Lock()

    async def get_access_token(self) -> str:
        """Return a valid access token, fetching a new one on a cache miss."""
        cached = self._cache.get(self.cache_key)
        if cached is not None:
            logger.debug("Using cached token")
            return cached.access_token

        async with self._lock:
            # Another caller may have refreshed while we waited.
            cached = self._cache.get(self.cache_key)
            if cached is not None:
                return cached.access_token
            return await self._fetch_token()

    def invalidate_token(self) -> None:
        """Drop the cached token so the next call bootstraps a fresh one."""
        logger.debug("Invalidating cached token")
        self._cache.forget(self.cache_key)

    async def _fetch_token(self) -> str:
        logger.debug("Requesting new token")
        signed_params = TOKEN_PARAMS if self._options.sign_token_query else None
        headers = sign_request(
            self.config,
            "GET",
            TOKEN_PATH,
            params=signed_params,
            t=int(self._clock() * 1000),
            options=self._options,
        )
        url = f"{self.config.base_url}{TOKEN_PATH}?{encode_query(TOKEN_PARAMS)}"
        resp = await self._transport.send("GET", url, headers)
        logger.debug("Token response status %d", resp.status)

        _, envelope = parse_envelope(resp, TuyaAuthError)
        if envelope.success is not True:
            raise TuyaAuthError(envelope.code, envelope.msg, status=resp.status)

        result = envelope.result if isinstance(envelope.result, dict) else {}
        access_token = result.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise TuyaAuthError(msg="Token not found in response", status=resp.status)

        ttl = self._token_ttl(result.get("expire_time"))
        self._cache.put(self.cache_key, access_token, ttl)
        logger.info("Obtained new access token (ttl=%.0fs)", ttl)
        return access_token

    def _token_ttl(self, expire_time: Any) -> float:
        """Seconds to cache a token whose envelope declared ``expire_time``.

        ``expire_time`` is read as an absolute epoch in milliseconds.  A value
        that is missing, or yields a TTL outside the remote's hard token
        lifetime, falls back to the configured cache time.
        """
        fallback = float(self.config.token_cache_time)
        if not isinstance(expire_time, (int, float)) or isinstance(expire_time, bool):
            return fallback
        ttl = expire_time / 1000 - self._clock() - self.config.token_safety_margin
        if 0 < ttl <= MAX_TOKEN_LIFETIME:
            return ttl
        logger.debug(
            "expire_time %r gives ttl %.0fs, using default %.0fs", expire_time, ttl, fallback,
        )
        return fallback
