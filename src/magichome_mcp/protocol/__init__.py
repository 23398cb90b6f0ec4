"""Protocol layer: frame checksums, command encoding, and status decoding."""

from .framing import Frame, build_frame, verify_frame
from .commands import (
    Color,
    Command,
    Effect,
    Mode,
    PowerOff,
    PowerOn,
    QueryStatus,
    SetColor,
    SetEffect,
    encode,
)
from .parser import STATUS_REPLY_SIZE, StatusResponse, decode_status
