"""Synchronous serial port bound to a single OS handle."""

from __future__ import annotations

import errno
import logging
from dataclasses import replace
from typing import Callable, Iterable

import serial

from . import naming
from .config import LineSettings, Timeouts, validate_baud_rate
from .errors import (
    CloseError,
    GetCommStateError,
    NotOpenError,
    OpenError,
    PortNotFoundError,
    ReadError,
    SerialPortError,
    SetCommStateError,
    SetTimeoutsError,
    WriteError,
)
from .formatting import format_value

_LOGGER = logging.getLogger(__name__)

HandleFactory = Callable[[str], serial.SerialBase]

_DEVICE_ERRORS = (serial.SerialException, OSError, ValueError)


def _create_handle(path: str) -> serial.SerialBase:
    return serial.serial_for_url(path, do_not_open=True, exclusive=True)


def _is_missing_device(exc: BaseException) -> bool:
    # POSIX keeps the errno, Windows only embeds the WinError repr.
    if getattr(exc, "errno", None) == errno.ENOENT:
        return True
    return "FileNotFoundError" in str(exc)


class SerialPort:
    """A serial port that caches its settings while closed.

    Line settings and timeouts may be changed at any time.  While the port is
    open they are pushed to the device immediately, otherwise they are kept
    and applied by the next :meth:`open`.  The cache always holds the last
    requested values, even when the device refused them.

    Instances are not thread safe.
    """

    list_port_ids = staticmethod(naming.list_port_ids)
    list_port_names = staticmethod(naming.list_port_names)

    def __init__(self, handle_factory: HandleFactory | None = None) -> None:
        self._handle_factory = handle_factory or _create_handle
        self._handle: serial.SerialBase | None = None
        self._port: str | None = None
        self._is_open = False
        self._line = LineSettings()
        self._timeouts = Timeouts()

    def __repr__(self) -> str:
        state = "open" if self._is_open else "closed"
        return f"<SerialPort port={self._port!r} {state}>"

    def __enter__(self) -> SerialPort:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._close_quietly()

    def __del__(self) -> None:
        self._close_quietly()

    @property
    def port(self) -> str | None:
        return self._port

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def handle(self) -> serial.SerialBase | None:
        """The underlying pyserial object, ``None`` while closed."""

        return self._handle

    @property
    def line_settings(self) -> LineSettings:
        return replace(self._line)

    @property
    def timeouts(self) -> Timeouts:
        return replace(self._timeouts)

    # lifecycle

    def open(self, name: str, baud_rate: int | None = None) -> None:
        """Open ``name`` exclusively and apply the cached settings.

        A port that is already open is closed first.  If applying the
        settings fails the error is raised but the port stays open.
        """

        if baud_rate is not None:
            validate_baud_rate(baud_rate)
        if self._is_open:
            self._close_quietly()
        if baud_rate is not None:
            self._line.baud_rate = baud_rate

        self._port = name
        path = naming.device_path(name)
        try:
            handle = self._handle_factory(path)
            handle.open()
        except _DEVICE_ERRORS as exc:
            if _is_missing_device(exc):
                raise PortNotFoundError(f"port {name!r} not found") from exc
            raise OpenError(f"could not open port {name!r}: {exc}") from exc

        self._handle = handle
        self._is_open = True
        _LOGGER.debug("Opened %s as %s", name, path)

        self.apply_comm_state()
        self.apply_timeouts()

    def close(self) -> None:
        """Release the handle; the port is closed afterwards even on error."""

        handle, self._handle = self._handle, None
        self._is_open = False
        if handle is None:
            return
        try:
            handle.close()
        except _DEVICE_ERRORS as exc:
            raise CloseError(f"could not close port {self._port!r}: {exc}") from exc
        _LOGGER.debug("Closed %s", self._port)

    def _close_quietly(self) -> None:
        if not getattr(self, "_is_open", False):
            return
        try:
            self.close()
        except SerialPortError as exc:
            _LOGGER.warning("Ignoring close failure on %s: %s", self._port, exc)

    # configuration

    def set_comm_state(
        self, baud_rate: int, byte_size: int, stop_bits: int, parity: int
    ) -> None:
        """Set the line parameters.

        ``stop_bits`` is 0, 1 or 2 for 1, 1.5 or 2 bits and ``parity`` 0..4
        for none, odd, even, mark or space.  Invalid values raise
        :class:`InvalidParamError` and leave the cached settings untouched.
        """

        self._line = LineSettings.create(baud_rate, byte_size, stop_bits, parity)
        if self._is_open:
            self.apply_comm_state()

    def set_baud_rate(self, baud_rate: int) -> None:
        self._line.baud_rate = validate_baud_rate(baud_rate)
        if self._is_open:
            self.apply_comm_state()

    def set_timeouts(
        self,
        read_interval: int,
        read_total_constant: int,
        read_total_multiplier: int,
        write_total_constant: int,
        write_total_multiplier: int,
    ) -> None:
        """Set the read and write timeouts, all in milliseconds."""

        self._timeouts = Timeouts(
            read_interval,
            read_total_constant,
            read_total_multiplier,
            write_total_constant,
            write_total_multiplier,
        ).validate()
        if self._is_open:
            self.apply_timeouts()

    def apply_comm_state(self) -> None:
        """Overlay the cached line settings on the live device state."""

        handle = self._require_handle()
        try:
            state = handle.get_settings()
        except _DEVICE_ERRORS as exc:
            raise GetCommStateError(
                f"could not read state of {self._port!r}: {exc}"
            ) from exc
        state.update(self._line.as_dict())
        try:
            handle.apply_settings(state)
        except _DEVICE_ERRORS as exc:
            raise SetCommStateError(
                f"could not apply {self._line} to {self._port!r}: {exc}"
            ) from exc
        _LOGGER.debug("Applied %s to %s", self._line, self._port)

    def apply_timeouts(self) -> None:
        handle = self._require_handle()
        try:
            handle.apply_settings(self._timeouts.as_dict())
        except _DEVICE_ERRORS as exc:
            raise SetTimeoutsError(
                f"could not apply {self._timeouts} to {self._port!r}: {exc}"
            ) from exc
        _LOGGER.debug("Applied %s to %s", self._timeouts, self._port)

    def _require_handle(self) -> serial.SerialBase:
        if not self._is_open or self._handle is None:
            raise NotOpenError(f"port {self._port!r} is not open")
        return self._handle

    # I/O

    def write(self, data: bytes | bytearray | memoryview | Iterable[int]) -> int:
        """Write ``data`` and return the number of bytes the driver accepted.

        A short count is returned as is.  When a write timeout is configured
        pyserial reports a short write as a timeout instead, which surfaces
        here as :class:`WriteError` without the partial count.
        """

        if isinstance(data, (int, str)):
            raise TypeError(
                f"write() takes a byte sequence, not {type(data).__name__}"
            )
        handle = self._require_handle()
        payload = bytes(data)
        try:
            if self._timeouts.write_total_multiplier:
                handle.write_timeout = self._timeouts.write_timeout(len(payload))
            written = handle.write(payload)
        except _DEVICE_ERRORS as exc:
            raise WriteError(f"write to {self._port!r} failed: {exc}") from exc
        return len(payload) if written is None else written

    def read(self, size: int = 1) -> bytes:
        """Read up to ``size`` bytes; an empty result means the read timed out."""

        return self._read(self._require_handle(), size)

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Read into ``buffer`` and return the number of bytes stored."""

        handle = self._require_handle()
        view = memoryview(buffer).cast("B")
        data = self._read(handle, len(view))
        view[: len(data)] = data
        return len(data)

    def _read(self, handle: serial.SerialBase, size: int) -> bytes:
        try:
            if self._timeouts.read_total_multiplier:
                handle.timeout = self._timeouts.read_timeout(size)
            return bytes(handle.read(size))
        except _DEVICE_ERRORS as exc:
            raise ReadError(f"read from {self._port!r} failed: {exc}") from exc

    def print(self, value: str | int | float, precision: int | None = None) -> int:
        """Write the textual form of ``value``, see :func:`format_value`."""

        return self.write(format_value(value, precision).encode("utf-8"))
