"""Frame builder and checksum verification.

Frame layout::

    +---------+------------------+----------+
    | Opcode  |     Payload      | Checksum |
    | 1 byte  | fixed per opcode |  1 byte  |
    +---------+------------------+----------+

- There is no preamble and no length prefix; each command's length is
  known to both sides.
- Checksum: sum of every preceding byte, truncated to 8 bits.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..utils.checksum import checksum


@dataclass(frozen=True)
class Frame:
    """An encoded command split into its parts."""

    opcode: int
    payload: bytes

    def to_bytes(self) -> bytes:
        return build_frame(self.opcode, self.payload)

    def __repr__(self) -> str:
        return (
            f"Frame(opcode=0x{self.opcode:02X}, "
            f"payload={self.payload.hex(' ') if self.payload else '(empty)'})"
        )


def build_frame(opcode: int, payload: bytes = b"") -> bytes:
    """Build the wire bytes for one command.

    Args:
        opcode: Single-byte command opcode.
        payload: Command-specific parameter bytes.

    Returns:
        ``opcode + payload + checksum``.
    """
    body = bytes([opcode]) + payload
    return body + bytes([checksum(body)])


def verify_frame(data: bytes) -> bool:
    """Return True if the last byte is the checksum of the bytes before it."""
    if len(data) < 2:
        return False
    return data[-1] == checksum(data[:-1])
