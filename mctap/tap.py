"""High-level entry points: domain or address in, :class:`ServerInfo` out."""

from __future__ import annotations

import logging

from mctap.config import DEFAULT_PORT, DEFAULT_TIMEOUT, TapConfig
from mctap.discovery.resolver import AddressResolver, ServerLocation
from mctap.status.probe import ServerInfo, StatusProbe

logger = logging.getLogger(__name__)


class Tap:
    """Resolve a server domain and fetch its live status.

    ``timeout`` bounds name resolution and, separately, the connect + read
    window of the probe.  A *config*, when given, supplies both timeouts
    instead.
    """

    def __init__(
        self,
        domain: str,
        timeout: float = DEFAULT_TIMEOUT,
        config: TapConfig | None = None,
        resolver: AddressResolver | None = None,
    ) -> None:
        self.domain = domain
        self.config = config or TapConfig(resolve_timeout=timeout, io_timeout=timeout)
        # Without explicit nameservers the system resolver is built on first use.
        dns_resolver = self.config.build_resolver() if self.config.nameservers else None
        self.resolver = resolver or AddressResolver(
            dns_resolver,
            default_port=self.config.default_port,
            srv_service=self.config.srv_service,
        )

    async def resolve(self) -> ServerLocation:
        return await self.resolver.resolve(self.domain, self.config.resolve_timeout)

    async def fetch_server_info(self) -> ServerInfo:
        location = await self.resolve()
        return await self.probe(location)

    async def probe(self, location: ServerLocation) -> ServerInfo:
        probe = StatusProbe(self.config.io_timeout, read_size=self.config.read_size)
        return await probe.probe(location)


async def get_server_information(
    address: str, port: int = DEFAULT_PORT, *, timeout: float = DEFAULT_TIMEOUT,
) -> ServerInfo:
    """Probe a server whose address and port are already known."""
    return await StatusProbe(timeout).probe(ServerLocation(address, port))


async def get_server_information_from_dns(
    domain: str, *, timeout: float = DEFAULT_TIMEOUT,
) -> ServerInfo:
    """Resolve *domain* (SRV first, then A) and probe the result."""
    return await Tap(domain, timeout).fetch_server_info()
