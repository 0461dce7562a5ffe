"""Configuration for mctap lookups and probes."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import dns.asyncresolver

logger = logging.getLogger(__name__)

DEFAULT_PORT = 25565
DEFAULT_TIMEOUT = 5.0
DEFAULT_SRV_SERVICE = "_minecraft._tcp"


@dataclass
class TapConfig:
    """Resolver and probe settings, from defaults, a JSON file or the environment."""

    resolve_timeout: float = DEFAULT_TIMEOUT  # shared SRV + A deadline, seconds
    io_timeout: float = DEFAULT_TIMEOUT  # connect + first read, seconds
    default_port: int = DEFAULT_PORT
    srv_service: str = DEFAULT_SRV_SERVICE
    nameservers: list[str] = field(default_factory=list)  # empty = system resolv.conf
    read_size: int = 4096

    @classmethod
    def load(cls, path: str | Path) -> TapConfig:
        """Read settings from a JSON file; unknown keys are dropped."""
        path = Path(path)
        if path.exists():
            with open(path) as f:
                data = json.load(f)
            known = {k for k in cls.__dataclass_fields__}
            filtered = {k: v for k, v in data.items() if k in known}
            return cls(**filtered)
        logger.warning("Config not found at %s, using defaults", path)
        return cls()

    @classmethod
    def from_env(cls) -> TapConfig:
        """Build a config from ``MCTAP_*`` environment variables."""
        nameservers = os.environ.get("MCTAP_NAMESERVERS", "")
        return cls(
            resolve_timeout=float(os.environ.get("MCTAP_RESOLVE_TIMEOUT", DEFAULT_TIMEOUT)),
            io_timeout=float(os.environ.get("MCTAP_IO_TIMEOUT", DEFAULT_TIMEOUT)),
            default_port=int(os.environ.get("MCTAP_DEFAULT_PORT", DEFAULT_PORT)),
            srv_service=os.environ.get("MCTAP_SRV_SERVICE", DEFAULT_SRV_SERVICE),
            nameservers=[ns.strip() for ns in nameservers.split(",") if ns.strip()],
        )

    def build_resolver(self) -> dns.asyncresolver.Resolver:
        """Return an async DNS resolver honouring :attr:`nameservers`."""
        if self.nameservers:
            resolver = dns.asyncresolver.Resolver(configure=False)
            resolver.nameservers = list(self.nameservers)
        else:
            resolver = dns.asyncresolver.Resolver()
        resolver.lifetime = self.resolve_timeout
        return resolver
