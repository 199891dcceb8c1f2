"""Error taxonomy for serial port operations."""

from __future__ import annotations

import enum
from typing import ClassVar


class ErrorKind(enum.Enum):
    """Distinguishable failure causes reported by :class:`SerialPort`."""

    NOT_OPEN = "not_open"
    READ_ERROR = "read_error"
    WRITE_ERROR = "write_error"
    SET_COMM_STATE_ERROR = "set_comm_state_error"
    GET_COMM_STATE_ERROR = "get_comm_state_error"
    SET_TIMEOUTS_ERROR = "set_timeouts_error"
    CLOSE_ERROR = "close_error"
    OPEN_ERROR = "open_error"
    PORT_NOT_FOUND = "port_not_found"
    INVALID_PARAM = "invalid_param"


class SerialPortError(Exception):
    """Base class for every failure raised by the serial port wrapper."""

    kind: ClassVar[ErrorKind]


class NotOpenError(SerialPortError):
    kind = ErrorKind.NOT_OPEN


class ReadError(SerialPortError):
    kind = ErrorKind.READ_ERROR


class WriteError(SerialPortError):
    kind = ErrorKind.WRITE_ERROR


class SetCommStateError(SerialPortError):
    kind = ErrorKind.SET_COMM_STATE_ERROR


class GetCommStateError(SerialPortError):
    kind = ErrorKind.GET_COMM_STATE_ERROR


class SetTimeoutsError(SerialPortError):
    kind = ErrorKind.SET_TIMEOUTS_ERROR


class CloseError(SerialPortError):
    kind = ErrorKind.CLOSE_ERROR


class OpenError(SerialPortError):
    kind = ErrorKind.OPEN_ERROR


class PortNotFoundError(OpenError):
    """The requested device name does not exist on this host."""

    kind = ErrorKind.PORT_NOT_FOUND


class InvalidParamError(SerialPortError, ValueError):
    """A setting was rejected before reaching the device."""

    kind = ErrorKind.INVALID_PARAM
