"""mctap.status: legacy server list ping handshake and payload parsing."""

from __future__ import annotations

from mctap.status.legacy_ping import PROBE_PACKET, parse_int, parse_status_payload
from mctap.status.probe import ServerInfo, StatusProbe

__all__ = [
    "PROBE_PACKET",
    "ServerInfo",
    "StatusProbe",
    "parse_int",
    "parse_status_payload",
]
