"""Tuya Cloud - signed REST client for the Tuya IoT cloud API."""

from tuya_cloud.auth import SignatureOptions, build_string_to_sign, sign, sign_request
from tuya_cloud.cache import MemoryTokenCache, TokenCache, TokenInfo
from tuya_cloud.client import TuyaClient
from tuya_cloud.config import TuyaConfig
from tuya_cloud.errors import (
    TuyaAPIError,
    TuyaAuthError,
    TuyaContractError,
    TuyaError,
    TuyaTransportError,
)
from tuya_cloud.tokens import TokenManager
from tuya_cloud.transport import HttpxTransport, Transport, TransportResponse

__all__ = [
    "HttpxTransport",
    "MemoryTokenCache",
    "SignatureOptions",
    "TokenCache",
    "TokenInfo",
    "TokenManager",
    "Transport",
    "TransportResponse",
    "TuyaAPIError",
    "TuyaAuthError",
    "TuyaClient",
    "TuyaConfig",
    "TuyaContractError",
    "TuyaError",
    "TuyaTransportError",
    "build_string_to_sign",
    "sign",
    "sign_request",
]
