"""Status reply decoding.

Reply layout (14 bytes)::

    offset  0     1     2      3     4     5      6    7     8      9-12   13
           +----+-----+------+-----+-----+------+----+-----+------+------+----+
           |0x81| dev |power | mode| --  |speed | R  |  B  |  G   |  --  | cs |
           +----+-----+------+-----+-----+------+----+-----+------+------+----+

Speed is reported as a delay byte, like the effect command takes it.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import (
    ChecksumMismatchError,
    MalformedResponseError,
    UnknownOpcodeError,
)
from ..utils.checksum import checksum
from .commands import POWER_ON, Color, Mode, Opcode, from_wire_speed
from .framing import verify_frame

STATUS_REPLY_SIZE = 14

OFF_HEADER = 0
OFF_POWER = 2
OFF_MODE = 3
OFF_SPEED = 5
OFF_RED = 6
OFF_BLUE = 7
OFF_GREEN = 8


@dataclass(frozen=True)
class StatusResponse:
    """Decoded reply to a status query."""

    power: bool
    mode: Mode
    color: Color | None = None
    speed: int | None = None
    checksum: int = 0

    @property
    def is_static(self) -> bool:
        return self.mode == Mode.STATIC

    def to_dict(self) -> dict:
        result = {
            "power": "on" if self.power else "off",
            "mode": self.mode.name.lower(),
        }
        if self.is_static and self.color is not None:
            result["color"] = list(self.color.as_tuple())
        if self.speed is not None:
            result["speed"] = self.speed
        return result


def decode_status(data: bytes) -> StatusResponse:
    """Validate and decode a raw status reply.

    Raises:
        MalformedResponseError: Wrong length, or wrong header byte under a
            valid checksum.
        ChecksumMismatchError: Trailing byte is not the sum of the others.
        UnknownOpcodeError: The mode byte is not a known mode.
    """
    data = bytes(data)
    if len(data) != STATUS_REPLY_SIZE:
        raise MalformedResponseError(
            f"Status reply must be {STATUS_REPLY_SIZE} bytes, got {len(data)}"
        )
    if not verify_frame(data):
        raise ChecksumMismatchError(expected=checksum(data[:-1]), actual=data[-1])
    if data[OFF_HEADER] != Opcode.STATUS:
        raise MalformedResponseError(
            f"Status reply must start with 0x{Opcode.STATUS:02X}, "
            f"got 0x{data[OFF_HEADER]:02X}"
        )

    try:
        mode = Mode(data[OFF_MODE])
    except ValueError:
        raise UnknownOpcodeError(data[OFF_MODE]) from None

    color = None
    speed = None
    if mode == Mode.STATIC:
        color = Color(
            red=data[OFF_RED],
            green=data[OFF_GREEN],
            blue=data[OFF_BLUE],
        )
    else:
        speed = from_wire_speed(data[OFF_SPEED])

    return StatusResponse(
        power=data[OFF_POWER] == POWER_ON,
        mode=mode,
        color=color,
        speed=speed,
        checksum=data[-1],
    )
