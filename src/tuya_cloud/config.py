"""Configuration for connecting to the Tuya Cloud API."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Tuya invalidates access tokens after 8 hours regardless of what we cache.
MAX_TOKEN_LIFETIME = 8 * 60 * 60

_BASE_URLS: dict[str, str] = {
    "cn": "https://openapi.tuyacn.com",
    "us": "https://openapi.tuyaus.com",
    "us-e": "https://openapi-us-e.tuyaus.com",
    "eu": "https://openapi.tuyaeu.com",
    "in": "https://openapi.tuyain.com",
}


class TuyaConfig(BaseSettings):
    """Tuya Cloud API configuration loaded from environment variables.

    ``api_host`` takes precedence over ``api_region`` when both are set.
    """

    model_config = {"env_prefix": "TUYA_", "env_file": ".env", "frozen": True}

    access_id: str
    access_secret: str
    api_region: str = "us"
    api_host: str | None = None
    token_cache_time: int = Field(default=7200, gt=0, le=MAX_TOKEN_LIFETIME)
    token_safety_margin: int = Field(default=60, ge=0)
    uppercase_sign: bool = False

    @field_validator("api_host")
    @classmethod
    def _strip_trailing_slash(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.rstrip("/") or None

    @property
    def base_url(self) -> str:
        if self.api_host:
            return self.api_host
        url = _BASE_URLS.get(self.api_region)
        if url is None:
            raise ValueError(
                f"Unknown region '{self.api_region}'. Valid regions: {', '.join(_BASE_URLS)}"
            )
        return url
