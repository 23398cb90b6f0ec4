"""One blocking session with one controller."""

from __future__ import annotations

import logging

from .exceptions import SessionClosedError, TransportError
from .protocol.commands import (
    Color,
    Command,
    Effect,
    PowerOff,
    PowerOn,
    QueryStatus,
    SetColor,
    SetEffect,
    to_frame,
)
from .protocol.parser import STATUS_REPLY_SIZE, StatusResponse, decode_status
from .transport.tcp_connection import DEFAULT_PORT, TCPConnection

logger = logging.getLogger(__name__)


class DeviceSession:
    """Owns one transport connection and sends one command per call.

    Usage::

        with DeviceSession.connect("192.168.1.50") as session:
            session.set_color(Color(255, 0, 128))
            print(session.query_status())

    Only the status query is answered by the controller; every other
    command is written and assumed delivered. Nothing is retried, and a
    transport failure leaves the session for the caller to close.
    """

    def __init__(self, transport) -> None:
        self._transport = transport
        self._closed = False

    @classmethod
    def connect(
        cls,
        address: str,
        port: int = DEFAULT_PORT,
        timeout: float | None = None,
    ) -> DeviceSession:
        """Open a TCP connection to a controller.

        Raises:
            TransportError: If the connection cannot be established.
        """
        conn = TCPConnection(address, port, timeout=timeout)
        try:
            conn.open()
        except OSError as e:
            raise TransportError(
                f"Could not connect to {address}:{port}: {e}"
            ) from e
        return cls(conn)

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> DeviceSession:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Release the transport. Further calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        self._transport.close()

    def send(self, command: Command) -> StatusResponse | None:
        """Write one command and, for a status query, read its reply.

        Raises:
            SessionClosedError: If the session has been closed.
            TransportError: If the write or read fails.
            ProtocolError: If the status reply is invalid.
        """
        if self._closed:
            raise SessionClosedError()

        frame = to_frame(command)
        logger.debug("Sending %r as %r", command, frame)
        try:
            self._transport.write(frame.to_bytes())
        except OSError as e:
            raise TransportError(f"Write failed: {e}") from e

        if not isinstance(command, QueryStatus):
            return None

        try:
            reply = self._transport.read_exactly(STATUS_REPLY_SIZE)
        except OSError as e:
            raise TransportError(f"Read failed: {e}") from e
        return decode_status(reply)

    def power_on(self) -> None:
        self.send(PowerOn())

    def power_off(self) -> None:
        self.send(PowerOff())

    def set_color(self, color: Color) -> None:
        self.send(SetColor(color))

    def set_effect(self, effect: Effect, speed: int | None = None) -> None:
        """Run a built-in effect.

        Effects do not switch the output on, so a power-on frame is
        written first.
        """
        command = SetEffect(effect, speed)
        self.send(PowerOn())
        self.send(command)

    def query_status(self) -> StatusResponse:
        return self.send(QueryStatus())


def connect(
    address: str,
    port: int = DEFAULT_PORT,
    timeout: float | None = None,
) -> DeviceSession:
    """Open a session with the controller at ``address:port``."""
    return DeviceSession.connect(address, port, timeout=timeout)
