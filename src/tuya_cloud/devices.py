"""Device access and control operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tuya_cloud.client import TuyaClient


class DevicesMixin:
    """Methods for listing, inspecting, and controlling Tuya devices.

    Each method returns the response envelope; the payload is under
    ``result``.
    """

    def __init__(self, client: TuyaClient) -> None:
        self._client = client

    async def list(self) -> dict[str, Any]:
        """List devices under the cloud project."""
        return await self._client.get("/v1.0/devices")

    async def get(self, device_id: str) -> dict[str, Any]:
        """Get full details for a single device."""
        return await self._client.get(f"/v1.0/devices/{device_id}")

    async def get_status(self, device_id: str) -> dict[str, Any]:
        """Get the current data-point status of a device."""
        return await self._client.get(f"/v1.0/devices/{device_id}/status")

    async def send_commands(
        self,
        device_id: str,
        commands: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Send control commands to a device.

        ``commands`` is a list of dicts with ``code`` and ``value`` keys, e.g.::

            [{"code": "switch_1", "value": True}]
        """
        return await self._client.post(
            f"/v1.0/devices/{device_id}/commands",
            {"commands": commands},
        )
