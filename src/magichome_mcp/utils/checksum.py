"""Additive checksum used by every frame on the wire."""

from __future__ import annotations


def checksum(data: bytes | bytearray) -> int:
    """Sum all bytes and keep the low 8 bits."""
    return sum(data) & 0xFF
