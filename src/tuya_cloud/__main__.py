"""CLI entry point for the Tuya Cloud client.

Usage::

    python -m tuya_cloud token   [--refresh]
    python -m tuya_cloud devices
    python -m tuya_cloud device  DEVICE_ID
    python -m tuya_cloud status  DEVICE_ID
    python -m tuya_cloud control DEVICE_ID CODE=VALUE [CODE=VALUE ...]
    python -m tuya_cloud request METHOD PATH [--param KEY=VALUE ...] [--body JSON]

Credentials come from ``TUYA_*`` environment variables or a ``.env`` file.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from pydantic import ValidationError

from tuya_cloud.client import TuyaClient
from tuya_cloud.errors import TuyaError


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and dispatch to the appropriate subcommand."""
    parser = argparse.ArgumentParser(
        prog="tuya_cloud",
        description="Tuya Cloud API client CLI",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Log signing and HTTP details",
    )
    sub = parser.add_subparsers(dest="command")

    # -- token ---------------------------------------------------------------
    token_p = sub.add_parser("token", help="Print a valid access token")
    token_p.add_argument(
        "--refresh", action="store_true",
        help="Discard any cached token and request a new one",
    )

    # -- devices -------------------------------------------------------------
    sub.add_parser("devices", help="List devices in the cloud project")

    device_p = sub.add_parser("device", help="Show details for one device")
    device_p.add_argument("device_id")

    status_p = sub.add_parser("status", help="Show data-point status of a device")
    status_p.add_argument("device_id")

    control_p = sub.add_parser("control", help="Send commands to a device")
    control_p.add_argument("device_id")
    control_p.add_argument(
        "commands", nargs="+", metavar="CODE=VALUE",
        help="Data-point code and value, e.g. switch_1=true",
    )

    # -- request -------------------------------------------------------------
    request_p = sub.add_parser("request", help="Send an arbitrary signed request")
    request_p.add_argument("method", help="GET, POST, PUT or DELETE")
    request_p.add_argument("path", help="API path, e.g. /v1.0/devices")
    request_p.add_argument(
        "--param", action="append", default=[], metavar="KEY=VALUE",
        help="Query parameter (repeatable)",
    )
    request_p.add_argument("--body", type=str, default=None, help="JSON request body")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(1)
    if args.command == "request" and args.body:
        try:
            args.body = json.loads(args.body)
        except ValueError as exc:
            parser.error(f"--body is not valid JSON: {exc}")

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

    try:
        output = asyncio.run(_run(args))
    except (TuyaError, ValidationError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    if isinstance(output, str):
        print(output)
    else:
        print(json.dumps(output, indent=2, ensure_ascii=False))


async def _run(args: argparse.Namespace) -> Any:
    async with TuyaClient() as client:
        if args.command == "token":
            if args.refresh:
                client.invalidate_token()
            return await client.get_access_token()
        if args.command == "devices":
            return await client.devices.list()
        if args.command == "device":
            return await client.devices.get(args.device_id)
        if args.command == "status":
            return await client.devices.get_status(args.device_id)
        if args.command == "control":
            commands = [
                {"code": code, "value": value}
                for code, value in (_parse_pair(item) for item in args.commands)
            ]
            return await client.devices.send_commands(args.device_id, commands)
        if args.command == "request":
            params = dict(_parse_pair(item, raw=True) for item in args.param)
            return await client.request(args.method, args.path, params, args.body)
    raise ValueError(f"Unknown command {args.command!r}")


def _parse_pair(item: str, *, raw: bool = False) -> tuple[str, Any]:
    """Split ``KEY=VALUE``; the value is decoded as JSON unless ``raw``."""
    key, sep, value = item.partition("=")
    if not sep or not key:
        raise SystemExit(f"Expected KEY=VALUE, got {item!r}")
    if raw:
        return key, value
    try:
        return key, json.loads(value)
    except ValueError:
        return key, value


if __name__ == "__main__":
    main()
