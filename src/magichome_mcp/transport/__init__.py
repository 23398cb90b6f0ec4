"""Byte-stream transports."""

from .tcp_connection import DEFAULT_PORT, TCPConnection
