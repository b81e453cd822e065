"""HMAC-SHA256 request signing for the Tuya Cloud API.

Every request carries a signature over a canonical string built from the
method, the SHA-256 of the body, and the path with its sorted query::

    METHOD \\n sha256(body) \\n <headers, always empty> \\n /path?a=1&b=2

The HMAC key is the access secret, followed by the access token on
token-bearing calls.  Everything here is pure: no clocks beyond the
defaults for ``t``, no I/O.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

from tuya_cloud.config import TuyaConfig
from tuya_cloud.errors import TuyaContractError

logger = logging.getLogger(__name__)

SIGN_METHOD = "HMAC-SHA256"
SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})
NONCE_LENGTH = 16


@dataclass(frozen=True)
class SignatureOptions:
    """Knobs for the canonicalization variants seen across Tuya clients.

    The defaults produce a lowercase signature over sorted query parameters,
    with the ``grant_type`` query included when signing the token request.
    """

    uppercase: bool = False
    sort_params: bool = True
    sign_token_query: bool = True


def check_method(method: str) -> str:
    """Return ``method`` upper-cased, or raise if Tuya does not accept it."""
    normalized = method.upper()
    if normalized not in SUPPORTED_METHODS:
        raise TuyaContractError(
            f"Unsupported HTTP method '{method}'. "
            f"Expected one of: {', '.join(sorted(SUPPORTED_METHODS))}"
        )
    return normalized


def encode_query(params: Mapping[str, Any] | None, *, sort: bool = True) -> str:
    """URL-encode query parameters, ordered by key unless ``sort`` is off.

    ``None`` values are dropped so optional parameters can be passed through,
    and booleans are written as ``true``/``false``.
    """
    if not params:
        return ""
    items = [(k, _query_value(v)) for k, v in params.items() if v is not None]
    if sort:
        items.sort(key=lambda item: item[0])
    return urlencode(items)


def _query_value(value: Any) -> Any:
    # Tuya expects JSON-style booleans in query strings.
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def content_hash(body: bytes) -> str:
    return hashlib.sha256(body).hexdigest()


def build_string_to_sign(
    method: str,
    path: str,
    params: Mapping[str, Any] | None = None,
    body: bytes = b"",
    *,
    sort_params: bool = True,
) -> str:
    """Build the canonical string the Tuya verifier reconstructs server-side."""
    method = check_method(method)
    string_to_sign = f"{method}\n{content_hash(body)}\n\n{path}"
    query = encode_query(params, sort=sort_params)
    if query:
        string_to_sign += f"?{query}"
    return string_to_sign


def sign(
    string_to_sign: str,
    secret: str,
    token: str | None = None,
    *,
    uppercase: bool = False,
) -> str:
    """HMAC-SHA256 of ``string_to_sign`` keyed by ``secret`` (+ ``token``)."""
    key = secret + token if token else secret
    digest = hmac.new(key.encode(), string_to_sign.encode(), hashlib.sha256).hexdigest()
    return digest.upper() if uppercase else digest


def make_nonce() -> str:
    return uuid.uuid4().hex[:NONCE_LENGTH]


def sign_request(
    config: TuyaConfig,
    method: str,
    path: str,
    *,
    params: Mapping[str, Any] | None = None,
    body: bytes = b"",
    access_token: str = "",
    t: int | None = None,
    nonce: str | None = None,
    options: SignatureOptions | None = None,
) -> dict[str, str]:
    """Build the signed headers required for a Tuya Cloud API request.

    Returns a dict of headers to merge into the HTTP request.  The
    ``access_token`` header is only present when a token is given.
    """
    options = options or SignatureOptions()
    t = t if t is not None else int(time.time() * 1000)
    nonce = nonce or make_nonce()

    string_to_sign = build_string_to_sign(
        method, path, params, body, sort_params=options.sort_params,
    )
    logger.debug("String to sign for %s %s: %r", method, path, string_to_sign)
    signature = sign(
        string_to_sign,
        config.access_secret,
        access_token or None,
        uppercase=options.uppercase,
    )

    return {
        "client_id": config.access_id,
        "sign": signature,
        "t": str(t),
        "sign_method": SIGN_METHOD,
        "nonce": nonce,
        **({"access_token": access_token} if access_token else {}),
    }
