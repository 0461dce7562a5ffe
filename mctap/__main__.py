"""Query a Minecraft server's status from the command line.

Usage::

    python -m mctap DOMAIN [--port N] [--timeout SECONDS] [--config PATH] [-v]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from mctap.config import TapConfig
from mctap.discovery.resolver import ServerLocation
from mctap.errors import TapError
from mctap.status.probe import ServerInfo
from mctap.tap import Tap


def format_info(info: ServerInfo) -> str:
    return "\n".join([
        f"Name: {info.name}",
        f"Player count: {'NaN' if info.player_count is None else info.player_count}",
        f"MOTD: {info.motd}",
        f"Supported versions: {info.version}",
    ])


async def _run(args: argparse.Namespace) -> ServerInfo:
    if args.config:
        config = TapConfig.load(args.config)
    else:
        config = TapConfig.from_env()
    if args.timeout is not None:
        config.resolve_timeout = config.io_timeout = args.timeout

    tap = Tap(args.domain, config=config)
    if args.port is not None:
        return await tap.probe(ServerLocation(args.domain, args.port))
    return await tap.fetch_server_info()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m mctap",
        description="Fetch a Minecraft server's status with the legacy ping",
    )
    parser.add_argument("domain", help="Server domain name or IP address")
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Skip DNS discovery and connect to this port directly",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Resolution deadline and I/O window (default: 5, or MCTAP_* env vars)",
    )
    parser.add_argument("--config", metavar="PATH", default=None, help="JSON config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        info = asyncio.run(_run(args))
    except (TapError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(format_info(info))
    return 0


if __name__ == "__main__":
    sys.exit(main())
