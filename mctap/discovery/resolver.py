"""Domain → (host, port) resolution for Minecraft servers.

A domain is resolved in two ways at once:
  1. SRV lookup of ``_minecraft._tcp.<domain>`` (host *and* port)
  2. A lookup of ``<domain>`` (host only, paired with port 25565)

The SRV answer wins when there is one.  Both lookups race a single shared
deadline that is started once; when it fires during the SRV wait there is no
budget left for the A fallback, so resolution fails with
:class:`~mctap.errors.ResolutionTimeout` straight away.
"""

from __future__ import annotations

import asyncio
import ipaddress
import logging
from dataclasses import dataclass
from typing import Any

import dns.asyncresolver
import dns.exception

from mctap.config import DEFAULT_PORT, DEFAULT_SRV_SERVICE, DEFAULT_TIMEOUT
from mctap.errors import ResolutionFailure, ResolutionTimeout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerLocation:
    """A concrete address a status probe can connect to."""

    host: str
    port: int

    def __post_init__(self) -> None:
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port out of range: {self.port}")

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class ServiceRecord:
    """One SRV answer row."""

    target: str
    port: int
    priority: int = 0
    weight: int = 0

    @classmethod
    def from_rdata(cls, rdata: Any) -> ServiceRecord:
        return cls(
            target=str(rdata.target).rstrip("."),
            port=int(rdata.port),
            priority=int(getattr(rdata, "priority", 0)),
            weight=int(getattr(rdata, "weight", 0)),
        )

    @property
    def usable(self) -> bool:
        """False for the "." no-service marker or a port outside 1-65535."""
        return bool(self.target) and 1 <= self.port <= 65535


class _DeadlineExpired(Exception):
    """Internal marker: the shared deadline fired before a lookup finished."""


class AddressResolver:
    """Resolves a domain via SRV with an A-record fallback."""

    def __init__(
        self,
        resolver: dns.asyncresolver.Resolver | None = None,
        default_port: int = DEFAULT_PORT,
        srv_service: str = DEFAULT_SRV_SERVICE,
    ) -> None:
        self._resolver = resolver
        self.default_port = default_port
        self.srv_service = srv_service

    @property
    def resolver(self) -> dns.asyncresolver.Resolver:
        if self._resolver is None:
            self._resolver = dns.asyncresolver.Resolver()
        return self._resolver

    # ── Public API ────────────────────────────────────────────────

    async def resolve(self, domain: str, timeout: float = DEFAULT_TIMEOUT) -> ServerLocation:
        """Resolve *domain* within *timeout* seconds.

        Raises:
            ResolutionTimeout: the shared deadline expired.
            ResolutionFailure: neither lookup produced an address.
        """
        domain = domain.strip().rstrip(".")
        if _is_ip_literal(domain):
            return ServerLocation(domain, self.default_port)

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        # Both lookups start now; they are awaited in priority order.
        srv_task = asyncio.create_task(self.lookup_srv(domain, timeout))
        a_task = asyncio.create_task(self.lookup_a(domain, timeout))
        try:
            try:
                records = await self._await_before(srv_task, deadline)
            except _DeadlineExpired:
                raise ResolutionTimeout(f"Timed out resolving SRV record for {domain}") from None
            except dns.exception.Timeout as exc:
                raise ResolutionTimeout(f"Timed out resolving SRV record for {domain}") from exc
            except dns.exception.DNSException as exc:
                logger.debug("SRV lookup for %s failed (%s), falling back to A", domain, exc)
            else:
                if records and records[0].usable:
                    record = records[0]
                    location = ServerLocation(record.target, record.port)
                    logger.info("Resolved %s via SRV → %s", domain, location)
                    return location
                logger.debug("SRV lookup for %s returned no usable record, falling back to A", domain)

            try:
                addresses = await self._await_before(a_task, deadline)
            except _DeadlineExpired:
                raise ResolutionTimeout(f"Timed out resolving A record for {domain}") from None
            except dns.exception.Timeout as exc:
                raise ResolutionTimeout(f"Timed out resolving A record for {domain}") from exc
            except dns.exception.DNSException as exc:
                raise ResolutionFailure(f"Cannot resolve {domain}: {exc}") from exc

            if not addresses:
                raise ResolutionFailure(f"Cannot resolve {domain}: no A records")
            location = ServerLocation(addresses[0], self.default_port)
            logger.info("Resolved %s via A → %s", domain, location)
            return location
        finally:
            for task in (srv_task, a_task):
                if not task.done():
                    task.cancel()
                elif not task.cancelled():
                    task.exception()  # mark retrieved so asyncio does not log it

    async def lookup_srv(self, domain: str, timeout: float) -> list[ServiceRecord]:
        """Query ``<srv_service>.<domain>`` and return records in answer order."""
        answer = await self.resolver.resolve(
            f"{self.srv_service}.{domain}", "SRV", lifetime=timeout
        )
        return [ServiceRecord.from_rdata(rdata) for rdata in answer]

    async def lookup_a(self, domain: str, timeout: float) -> list[str]:
        """Query the IPv4 addresses of *domain*."""
        answer = await self.resolver.resolve(domain, "A", lifetime=timeout)
        return [str(rdata.address) for rdata in answer]

    # ── Internal helpers ──────────────────────────────────────────

    @staticmethod
    async def _await_before(task: asyncio.Task, deadline: float) -> Any:
        """Wait for *task* until the loop clock reaches *deadline*.

        The task is not cancelled on expiry; :meth:`resolve` cancels whatever
        is still pending once it has an outcome.
        """
        remaining = max(deadline - asyncio.get_running_loop().time(), 0.0)
        done, _ = await asyncio.wait({task}, timeout=remaining)
        if not done:
            raise _DeadlineExpired()
        return task.result()


def _is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True
