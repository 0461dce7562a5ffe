"""mctap.discovery: domain to server location resolution.

Exports:
    AddressResolver    SRV lookup with A-record fallback under one deadline
    ServerLocation     resolved (host, port) pair
    ServiceRecord      one SRV answer row
"""

from __future__ import annotations

from mctap.discovery.resolver import (
    AddressResolver,
    ServerLocation,
    ServiceRecord,
)

__all__ = [
    "AddressResolver",
    "ServerLocation",
    "ServiceRecord",
]
