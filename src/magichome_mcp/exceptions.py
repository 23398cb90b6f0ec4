"""Exception hierarchy for controller sessions and reply decoding."""

from __future__ import annotations


class MagicHomeError(Exception):
    """Base class for all errors raised by this package."""


class TransportError(MagicHomeError, ConnectionError):
    """Connecting, writing to, or reading from the controller failed."""


class SessionClosedError(TransportError):
    """An operation was attempted on a session after ``close()``."""

    def __init__(self, message: str = "Session is closed") -> None:
        super().__init__(message)


class ProtocolError(MagicHomeError):
    """A reply from the controller could not be accepted."""


class MalformedResponseError(ProtocolError):
    """The reply does not have the fixed shape the device emits."""


class ChecksumMismatchError(ProtocolError):
    """The trailing checksum byte does not match the reply contents."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum mismatch: expected 0x{expected:02X}, got 0x{actual:02X}"
        )


class UnknownOpcodeError(ProtocolError):
    """A mode byte in the reply is not one the protocol defines."""

    def __init__(self, opcode: int) -> None:
        self.opcode = opcode
        super().__init__(f"Unknown opcode 0x{opcode:02X}")
