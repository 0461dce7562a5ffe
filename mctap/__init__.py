"""mctap: Minecraft server discovery and legacy status ping.

Quickstart::

    from mctap import Tap

    info = await Tap("mc.example.net").fetch_server_info()
    print(info.player_count, info.motd)
"""

from __future__ import annotations

from mctap.config import TapConfig
from mctap.discovery import AddressResolver, ServerLocation, ServiceRecord
from mctap.errors import (
    ProbeError,
    ProbeTimeout,
    ProbeTransportError,
    ResolutionError,
    ResolutionFailure,
    ResolutionTimeout,
    TapError,
)
from mctap.status import ServerInfo, StatusProbe
from mctap.tap import Tap, get_server_information, get_server_information_from_dns

__version__ = "1.0.0"

__all__ = [
    "AddressResolver",
    "ProbeError",
    "ProbeTimeout",
    "ProbeTransportError",
    "ResolutionError",
    "ResolutionFailure",
    "ResolutionTimeout",
    "ServerInfo",
    "ServerLocation",
    "ServiceRecord",
    "StatusProbe",
    "Tap",
    "TapConfig",
    "TapError",
    "get_server_information",
    "get_server_information_from_dns",
]
