"""Line and timeout settings for a serial port."""

from __future__ import annotations

import enum
from dataclasses import dataclass

import serial

from .errors import InvalidParamError

MAX_BAUD_RATE = 0xFFFFFFFF
MAXDWORD = 0xFFFFFFFF


class StopBits(enum.IntEnum):
    """Stop bit setting, numbered 0 = 1 bit, 1 = 1.5 bits, 2 = 2 bits."""

    ONE = 0
    ONE_POINT_FIVE = 1
    TWO = 2

    @property
    def pyserial(self) -> float:
        return _STOPBITS[self]

    @classmethod
    def from_label(cls, label: str) -> StopBits:
        """Parse the ``"1"``, ``"1.5"`` or ``"2"`` notation used on the CLI."""

        for member, value in _STOPBITS.items():
            if label == str(value):
                return member
        raise InvalidParamError(f"unsupported stop bits {label!r}")


class Parity(enum.IntEnum):
    """Parity bit setting, numbered 0..4 = none/odd/even/mark/space."""

    NONE = 0
    ODD = 1
    EVEN = 2
    MARK = 3
    SPACE = 4

    @property
    def pyserial(self) -> str:
        return _PARITY[self]

    @classmethod
    def from_letter(cls, letter: str) -> Parity:
        for member, value in _PARITY.items():
            if letter.upper() == value:
                return member
        raise InvalidParamError(f"unsupported parity {letter!r}")


_STOPBITS = {
    StopBits.ONE: serial.STOPBITS_ONE,
    StopBits.ONE_POINT_FIVE: serial.STOPBITS_ONE_POINT_FIVE,
    StopBits.TWO: serial.STOPBITS_TWO,
}

_PARITY = {
    Parity.NONE: serial.PARITY_NONE,
    Parity.ODD: serial.PARITY_ODD,
    Parity.EVEN: serial.PARITY_EVEN,
    Parity.MARK: serial.PARITY_MARK,
    Parity.SPACE: serial.PARITY_SPACE,
}


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_baud_rate(baud_rate: int) -> int:
    """Return ``baud_rate`` if it fits an unsigned 32-bit field."""

    if not _is_int(baud_rate) or not 0 <= baud_rate <= MAX_BAUD_RATE:
        raise InvalidParamError(f"baud rate out of range: {baud_rate!r}")
    return baud_rate


@dataclass(slots=True)
class LineSettings:
    """Line parameters governing how bytes are framed on the wire."""

    baud_rate: int = 115200
    byte_size: int = 8
    stop_bits: StopBits = StopBits.ONE
    parity: Parity = Parity.NONE

    @classmethod
    def create(
        cls, baud_rate: int, byte_size: int, stop_bits: int, parity: int
    ) -> LineSettings:
        """Validate raw values and build settings from them.

        ``stop_bits`` and ``parity`` are accepted in their numeric form.
        """

        if not _is_int(byte_size) or not 4 <= byte_size <= 8:
            raise InvalidParamError(f"byte size must be 4..8, got {byte_size!r}")
        if not _is_int(stop_bits):
            raise InvalidParamError(f"invalid stop bits {stop_bits!r}")
        if not _is_int(parity):
            raise InvalidParamError(f"invalid parity {parity!r}")
        try:
            stop = StopBits(stop_bits)
        except ValueError as exc:
            raise InvalidParamError(f"invalid stop bits {stop_bits!r}") from exc
        try:
            par = Parity(parity)
        except ValueError as exc:
            raise InvalidParamError(f"invalid parity {parity!r}") from exc
        return cls(validate_baud_rate(baud_rate), byte_size, stop, par)

    def as_dict(self) -> dict[str, object]:
        """Return a mapping compatible with :meth:`serial.Serial.apply_settings`."""

        return {
            "baudrate": self.baud_rate,
            "bytesize": self.byte_size,
            "stopbits": self.stop_bits.pyserial,
            "parity": self.parity.pyserial,
        }


@dataclass(slots=True)
class Timeouts:
    """Read/write timeouts in milliseconds, following the COMMTIMEOUTS model.

    Totals are ``constant + multiplier * n`` for an ``n`` byte transfer and a
    zero total means no total timeout.  A ``read_interval`` of ``MAXDWORD``
    with both read totals at zero makes reads return immediately.
    """

    read_interval: int = 50
    read_total_constant: int = 50
    read_total_multiplier: int = 0
    write_total_constant: int = 0
    write_total_multiplier: int = 0

    def validate(self) -> Timeouts:
        for name in (
            "read_interval",
            "read_total_constant",
            "read_total_multiplier",
            "write_total_constant",
            "write_total_multiplier",
        ):
            value = getattr(self, name)
            if not _is_int(value) or value < 0:
                raise InvalidParamError(f"{name} must be a non-negative integer")
        return self

    def read_timeout(self, size: int = 0) -> float | None:
        if (
            self.read_interval == MAXDWORD
            and not self.read_total_constant
            and not self.read_total_multiplier
        ):
            return 0.0
        total = self.read_total_constant + self.read_total_multiplier * size
        return total / 1000 if total else None

    def inter_byte_timeout(self) -> float | None:
        if self.read_interval in (0, MAXDWORD):
            return None
        return self.read_interval / 1000

    def write_timeout(self, size: int = 0) -> float | None:
        total = self.write_total_constant + self.write_total_multiplier * size
        return total / 1000 if total else None

    def as_dict(self) -> dict[str, object]:
        """Return pyserial timeout attributes; per-byte terms are left out."""

        return {
            "timeout": self.read_timeout(),
            "inter_byte_timeout": self.inter_byte_timeout(),
            "write_timeout": self.write_timeout(),
        }
