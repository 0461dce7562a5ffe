"""Error taxonomy for mctap.

Every failure raised by the resolver or the status probe derives from
:class:`TapError`, so callers can catch one type and still tell the kinds
apart by class.
"""

from __future__ import annotations


class TapError(Exception):
    """Base class for resolution and probe failures."""


class ResolutionError(TapError):
    """Raised when a domain cannot be turned into a server location."""


class ResolutionTimeout(ResolutionError):
    """The shared resolution deadline expired."""


class ResolutionFailure(ResolutionError):
    """Both the SRV and the A lookup failed for non-timeout reasons."""


class ProbeError(TapError):
    """Raised when the status handshake cannot be completed."""


class ProbeTimeout(ProbeError):
    """No connection or response within the inactivity window."""


class ProbeTransportError(ProbeError):
    """Connection refused, reset, unreachable, or closed early."""
