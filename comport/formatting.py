"""Text rendering for values written with :meth:`SerialPort.print`."""

from __future__ import annotations

DEFAULT_FLOAT_DIGITS = 6


def format_value(value: str | int | float, precision: int | None = None) -> str:
    """Render ``value`` the way it is sent over the wire.

    Text is passed through, integers use plain decimal notation and floats the
    general format with ``precision`` significant digits (six by default).
    """

    if isinstance(value, str):
        if precision is not None:
            raise TypeError("precision only applies to float values")
        return value
    if isinstance(value, bool):
        raise TypeError("cannot print a bool, convert it explicitly")
    if isinstance(value, int):
        if precision is not None:
            raise TypeError("precision only applies to float values")
        return str(value)
    if isinstance(value, float):
        digits = DEFAULT_FLOAT_DIGITS if precision is None else precision
        if digits < 0:
            raise ValueError("precision must be non-negative")
        return f"{value:.{digits}g}"
    raise TypeError(f"cannot print value of type {type(value).__name__}")
