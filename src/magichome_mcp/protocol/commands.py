"""Opcodes, command values, and the command encoder.

Every command the controller understands is one of a closed set of
frozen dataclasses (see ``Command``). ``encode`` turns any of them into
its exact wire bytes, checksum included.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Union

from .framing import Frame


class Opcode(IntEnum):
    """First byte of each host-to-device frame."""

    POWER = 0x71
    COLOR = 0x31
    EFFECT = 0x61
    STATUS = 0x81


class Mode(IntEnum):
    """Mode byte reported in a status reply."""

    STATIC = 0x61
    CYCLE = 0x25
    STROBE = 0x31


POWER_ON = 0x23
POWER_OFF = 0x24
LOCAL = 0x0F  # trailing flag byte on state-changing commands
STATIC_COLOR_FLAG = 0xFF
STATUS_QUERY = bytes([0x8A, 0x8B])

MIN_SPEED = 0
MAX_SPEED = 100


def to_wire_speed(speed: int) -> int:
    """Convert a 0-100 speed (higher = faster) to the device's delay byte."""
    return MAX_SPEED - speed


def from_wire_speed(value: int) -> int:
    """Convert the device's delay byte back to a 0-100 speed."""
    return max(MIN_SPEED, MAX_SPEED - value)


@dataclass(frozen=True)
class Color:
    """An RGB color, one byte per channel."""

    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        for channel in ("red", "green", "blue"):
            value = getattr(self, channel)
            if not isinstance(value, int):
                raise ValueError(f"Invalid {channel} value {value!r}, must be an integer")
            if not 0 <= value <= 255:
                raise ValueError(f"Invalid {channel} value {value}, must be 0-255")

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)


class Effect(Enum):
    """Built-in dynamic patterns: (mode code, default speed)."""

    AMBIENT = (Mode.CYCLE, 50)
    RAINBOW = (Mode.CYCLE, 99)
    CHAOS = (Mode.STROBE, 95)

    def __init__(self, mode: Mode, default_speed: int) -> None:
        self.mode = mode
        self.default_speed = default_speed

    @property
    def code(self) -> int:
        return int(self.mode)


@dataclass(frozen=True)
class PowerOn:
    """Switch the controller output on."""


@dataclass(frozen=True)
class PowerOff:
    """Switch the controller output off."""


@dataclass(frozen=True)
class SetColor:
    """Display a single static color."""

    color: Color


@dataclass(frozen=True)
class SetEffect:
    """Run a built-in effect; ``speed`` defaults to the effect's own."""

    effect: Effect
    speed: int | None = None

    def __post_init__(self) -> None:
        if self.speed is None:
            object.__setattr__(self, "speed", self.effect.default_speed)
        if not isinstance(self.speed, int):
            raise ValueError(f"Speed must be an integer, got {self.speed!r}")
        if not MIN_SPEED <= self.speed <= MAX_SPEED:
            raise ValueError(
                f"Speed must be {MIN_SPEED}-{MAX_SPEED}, got {self.speed}"
            )


@dataclass(frozen=True)
class QueryStatus:
    """Ask the controller for its current state."""


Command = Union[PowerOn, PowerOff, SetColor, SetEffect, QueryStatus]


def to_frame(command: Command) -> Frame:
    """Split a command into its opcode and payload.

    The controller's channels are wired red, blue, green, so color bytes
    go out in that order.

    Raises:
        TypeError: If ``command`` is not one of the ``Command`` variants.
    """
    if isinstance(command, PowerOn):
        return Frame(Opcode.POWER, bytes([POWER_ON, LOCAL]))
    if isinstance(command, PowerOff):
        return Frame(Opcode.POWER, bytes([POWER_OFF, LOCAL]))
    if isinstance(command, SetColor):
        c = command.color
        return Frame(
            Opcode.COLOR,
            bytes([c.red, c.blue, c.green, STATIC_COLOR_FLAG, 0x00, LOCAL]),
        )
    if isinstance(command, SetEffect):
        return Frame(
            Opcode.EFFECT,
            bytes([command.effect.code, to_wire_speed(command.speed), LOCAL]),
        )
    if isinstance(command, QueryStatus):
        return Frame(Opcode.STATUS, STATUS_QUERY)
    raise TypeError(f"Cannot encode {command!r}")


def encode(command: Command) -> bytes:
    """Encode a command into its wire bytes, checksum included."""
    return to_frame(command).to_bytes()
