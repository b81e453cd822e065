"""Exception hierarchy for the Tuya Cloud client."""

from __future__ import annotations

from typing import Any


class TuyaError(Exception):
    """Base class for every error raised by this package."""


class TuyaContractError(TuyaError, ValueError):
    """Raised when a caller passes an argument the API cannot accept."""


class TuyaTransportError(TuyaError):
    """Raised when an HTTP call could not be completed at all."""


class TuyaAPIError(TuyaError):
    """Raised when the Tuya API returns a non-success response."""

    def __init__(
        self,
        code: Any = None,
        msg: Any = None,
        *,
        status: int | None = None,
    ) -> None:
        self.code = code if code is not None else "unknown"
        self.msg = str(msg) if msg not in (None, "") else "unknown error"
        self.status = status
        super().__init__(f"Tuya API error {self.code}: {self.msg}")


class TuyaAuthError(TuyaAPIError):
    """Raised when an access token cannot be obtained."""
