"""Access token storage with read-time TTL expiry."""

from __future__ import annotations

import hashlib
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "tuya_access_token"


@dataclass(frozen=True)
class TokenInfo:
    access_token: str
    expires_at: float


class TokenCache(Protocol):
    """Key/value store for access tokens.

    ``get`` must return ``None`` once the TTL given to ``put`` has elapsed.
    """

    def get(self, key: str) -> TokenInfo | None: ...

    def put(self, key: str, token: str, ttl: float) -> None: ...

    def forget(self, key: str) -> None: ...


def token_cache_key(access_id: str) -> str:
    """Cache key for one credential set; the access id itself is not stored."""
    digest = hashlib.sha256(access_id.encode()).hexdigest()[:16]
    return f"{CACHE_KEY_PREFIX}:{digest}"


class MemoryTokenCache:
    """Process-local token cache.

    Expiry is checked on every ``get`` against ``clock`` (seconds since the
    epoch), so tests can drive time explicitly.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, TokenInfo] = {}

    def get(self, key: str) -> TokenInfo | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            logger.debug("Cached token for %s expired", key)
            self._entries.pop(key, None)
            return None
        return entry

    def put(self, key: str, token: str, ttl: float) -> None:
        if ttl <= 0:
            self._entries.pop(key, None)
            return
        self._entries[key] = TokenInfo(access_token=token, expires_at=self._clock() + ttl)

    def forget(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
