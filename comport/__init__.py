"""Minimal synchronous access to host serial (COM) ports."""

from .config import LineSettings, Parity, StopBits, Timeouts
from .errors import (
    CloseError,
    ErrorKind,
    GetCommStateError,
    InvalidParamError,
    NotOpenError,
    OpenError,
    PortNotFoundError,
    ReadError,
    SerialPortError,
    SetCommStateError,
    SetTimeoutsError,
    WriteError,
)
from .naming import describe_ports, list_port_ids, list_port_names
from .port import SerialPort

__all__ = [
    "CloseError",
    "ErrorKind",
    "GetCommStateError",
    "InvalidParamError",
    "LineSettings",
    "NotOpenError",
    "OpenError",
    "Parity",
    "PortNotFoundError",
    "ReadError",
    "SerialPort",
    "SerialPortError",
    "SetCommStateError",
    "SetTimeoutsError",
    "StopBits",
    "Timeouts",
    "WriteError",
    "describe_ports",
    "list_port_ids",
    "list_port_names",
]
