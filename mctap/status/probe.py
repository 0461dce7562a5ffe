"""Status probe: one legacy ping handshake over a fresh TCP connection.

The probe connects, writes :data:`~mctap.status.legacy_ping.PROBE_PACKET`,
and parses the first chunk the server sends back.  Connect, write and read
share a single inactivity budget (``timeout``), and the connection is
always closed before the result or error is handed back.

Only the first read is parsed; a response the server splits over several
TCP segments is cut at the first one.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Any

from mctap.config import DEFAULT_TIMEOUT
from mctap.discovery.resolver import ServerLocation
from mctap.errors import ProbeTimeout, ProbeTransportError
from mctap.status.legacy_ping import PROBE_PACKET, parse_int, parse_status_payload

logger = logging.getLogger(__name__)

_READ_SIZE = 4096


@dataclass(frozen=True)
class ServerInfo:
    """Live status reported by a server.

    ``name`` is the host used to reach the server, not a payload value.
    ``player_count`` is ``None`` when the payload had no usable number, and
    ``motd`` / ``version`` are ``None`` when the payload lacked the key.
    """

    name: str
    player_count: int | None
    motd: str | None
    version: str | None

    @classmethod
    def from_payload(cls, name: str, fields: dict[str, str]) -> ServerInfo:
        return cls(
            name=name,
            player_count=parse_int(fields.get("player_0")),
            motd=fields.get("description"),
            version=fields.get("version"),
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


class StatusProbe:
    """Speaks the legacy ping handshake to a single server location."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, read_size: int = _READ_SIZE) -> None:
        self.timeout = timeout
        self.read_size = read_size

    async def probe(self, location: ServerLocation) -> ServerInfo:
        """Fetch and parse the status of the server at *location*.

        Raises:
            ProbeTimeout: no connection, a stalled write, or no response
                inside :attr:`timeout`.
            ProbeTransportError: the connection was refused, reset or closed
                before any data arrived.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout

        reader, writer = await self._connect(location)
        try:
            writer.write(PROBE_PACKET)
            try:
                await asyncio.wait_for(writer.drain(), timeout=max(deadline - loop.time(), 0.0))
            except asyncio.TimeoutError as exc:
                raise ProbeTimeout(f"Timed out sending ping to {location}") from exc
            logger.debug("Sent %d-byte ping to %s", len(PROBE_PACKET), location)
            data = await self._read_first(reader, location, deadline - loop.time())
        except OSError as exc:
            raise ProbeTransportError(f"Connection to {location} failed: {exc}") from exc
        finally:
            await self._close(writer)

        logger.debug("Received %d bytes from %s", len(data), location)
        info = ServerInfo.from_payload(location.host, parse_status_payload(data))
        logger.info("Probed %s: %s players, version %s", location, info.player_count, info.version)
        return info

    # ── Protocol helpers ──────────────────────────────────────────

    async def _connect(
        self, location: ServerLocation,
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        try:
            return await asyncio.wait_for(
                asyncio.open_connection(location.host, location.port),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise ProbeTimeout(f"Timed out connecting to {location}") from exc
        except OSError as exc:
            raise ProbeTransportError(f"Cannot connect to {location}: {exc}") from exc

    async def _read_first(
        self, reader: asyncio.StreamReader, location: ServerLocation, remaining: float,
    ) -> bytes:
        """Return the first chunk of response bytes."""
        try:
            data = await asyncio.wait_for(reader.read(self.read_size), timeout=max(remaining, 0.0))
        except asyncio.TimeoutError as exc:
            raise ProbeTimeout(f"Timed out waiting for status from {location}") from exc
        if not data:
            raise ProbeTransportError(f"Connection to {location} closed before a response")
        return data

    @staticmethod
    async def _close(writer: asyncio.StreamWriter) -> None:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as exc:
            logger.debug("Ignoring error while closing connection: %s", exc)
