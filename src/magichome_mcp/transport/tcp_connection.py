"""TCP connection to a MagicHome controller.

The controller listens on port 5577 and speaks a bare byte stream: no
handshake, no framing beyond each command's fixed length.
"""

from __future__ import annotations

import logging
import socket

logger = logging.getLogger(__name__)

DEFAULT_PORT = 5577


class TCPConnection:
    """Manages one TCP socket to a controller.

    Usage::

        conn = TCPConnection("192.168.1.50")
        conn.open()
        conn.write(frame_bytes)
        reply = conn.read_exactly(14)
        conn.close()

    Socket errors propagate as ``OSError``; a peer that closes before
    sending enough bytes raises ``ConnectionResetError``.
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        timeout: float | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout
        self._sock: socket.socket | None = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    @property
    def address(self) -> tuple[str, int]:
        return (self._host, self._port)

    def open(self) -> None:
        """Open the socket.

        Raises:
            OSError: If the connection is refused, unreachable, or times out.
        """
        self._sock = socket.create_connection(
            (self._host, self._port), timeout=self._timeout
        )
        logger.info("Connected to %s:%d", *self.address)

    def close(self) -> None:
        """Close the socket."""
        if self._sock is None:
            return

        try:
            self._sock.close()
        except OSError as e:
            logger.warning("Error closing socket: %s", e)
        finally:
            self._sock = None
            logger.info("Disconnected from %s:%d", *self.address)

    def write(self, data: bytes) -> int:
        """Write all of ``data`` to the socket.

        Returns:
            Number of bytes written.

        Raises:
            ConnectionError: If not connected.
            OSError: If the write fails.
        """
        if self._sock is None:
            raise ConnectionError("Not connected to device")

        logger.debug("-> %s", data.hex(" "))
        self._sock.sendall(data)
        return len(data)

    def read_exactly(self, size: int) -> bytes:
        """Block until exactly ``size`` bytes have been received.

        Raises:
            ConnectionError: If not connected.
            ConnectionResetError: If the peer closes the stream early.
            OSError: If the read fails.
        """
        if self._sock is None:
            raise ConnectionError("Not connected to device")

        buffer = bytearray()
        while len(buffer) < size:
            chunk = self._sock.recv(size - len(buffer))
            if not chunk:
                raise ConnectionResetError(
                    f"Connection closed after {len(buffer)} of {size} bytes"
                )
            buffer += chunk

        logger.debug("<- %s", buffer.hex(" "))
        return bytes(buffer)
