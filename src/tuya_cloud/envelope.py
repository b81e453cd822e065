"""The ``{success, result, msg, code}`` wrapper around every Tuya response."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ValidationError

from tuya_cloud.errors import TuyaAPIError
from tuya_cloud.transport import TransportResponse


class Envelope(BaseModel):
    """Typed view of a response envelope.

    Only ``success`` is validated; everything else, unknown fields included,
    is kept as sent.
    """

    model_config = {"extra": "allow"}

    success: bool | None = None
    result: Any = None
    msg: Any = None
    code: Any = None
    t: Any = None


def parse_envelope(
    response: TransportResponse,
    error: type[TuyaAPIError] = TuyaAPIError,
) -> tuple[dict[str, Any], Envelope]:
    """Decode and validate a response body.

    Returns the raw decoded dict alongside its validated ``Envelope``.
    Non-2xx statuses and bodies that are not a JSON object raise ``error``,
    carrying the remote ``msg``/``code`` when the body has them.
    """
    try:
        data = json.loads(response.body)
    except ValueError:
        data = None

    envelope: Envelope | None = None
    if isinstance(data, dict):
        try:
            envelope = Envelope.model_validate(data)
        except ValidationError:
            envelope = None

    if not response.ok:
        code = envelope.code if envelope and envelope.code is not None else response.status
        msg = envelope.msg if envelope and envelope.msg else _snippet(response.body)
        raise error(code, msg, status=response.status)
    if envelope is None:
        raise error(
            msg=f"Malformed response: {_snippet(response.body)}",
            status=response.status,
        )
    return data, envelope


def _snippet(body: bytes, limit: int = 200) -> str:
    text = body.decode(errors="replace").strip()
    return text[:limit] if text else "empty response body"
