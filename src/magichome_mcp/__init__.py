"""Client and MCP server for MagicHome RGB lighting controllers."""

from __future__ import annotations

__version__ = "0.1.0"

from .exceptions import (
    ChecksumMismatchError,
    MagicHomeError,
    MalformedResponseError,
    ProtocolError,
    SessionClosedError,
    TransportError,
    UnknownOpcodeError,
)
from .protocol import Color, Effect, Mode, StatusResponse
from .session import DeviceSession, connect

__all__ = [
    "ChecksumMismatchError",
    "Color",
    "DeviceSession",
    "Effect",
    "MagicHomeError",
    "MalformedResponseError",
    "Mode",
    "ProtocolError",
    "SessionClosedError",
    "StatusResponse",
    "TransportError",
    "UnknownOpcodeError",
    "connect",
]
