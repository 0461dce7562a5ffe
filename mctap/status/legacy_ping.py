"""Legacy "server list ping" wire format.

Outbound: ``0xFE 0x01`` followed by twelve zero bytes (an empty plugin
message).  Inbound: five framing bytes, then UTF-16LE text whose
NUL-separated fields are read as alternating key/value pairs.  There is no
length prefix beyond the field delimiters.
"""

from __future__ import annotations

import re

PROBE_PACKET = bytes([0xFE, 0x01]) + bytes(12)
FRAME_HEADER_SIZE = 5

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def decode_fields(data: bytes) -> list[str]:
    """Decode a raw response into its ordered NUL-separated fields."""
    body = data[FRAME_HEADER_SIZE:]
    if len(body) % 2:
        body = body[:-1]  # half a code unit
    return body.decode("utf-16-le", errors="replace").split("\x00")


def pair_fields(fields: list[str]) -> dict[str, str]:
    """Pair ``fields[0]: fields[1]``, ``fields[2]: fields[3]`` and so on.

    A trailing unpaired field is ignored; a repeated key keeps its last value.
    """
    return {fields[i]: fields[i + 1] for i in range(0, len(fields) - 1, 2)}


def parse_status_payload(data: bytes) -> dict[str, str]:
    """Parse a legacy ping response into a key/value mapping."""
    return pair_fields(decode_fields(data))


def parse_int(value: str | None) -> int | None:
    """Read a leading base-10 integer the way JavaScript ``parseInt`` does.

    Leading whitespace and a sign are accepted and trailing garbage is
    ignored (``"42 players"`` → 42).  ``None`` plays the part of NaN for
    absent or non-numeric input.
    """
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group(1))
