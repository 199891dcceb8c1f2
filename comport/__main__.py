"""CLI entrypoint for listing serial ports and exchanging raw bytes."""

from __future__ import annotations

import argparse
import logging

from .config import LineSettings, Parity, StopBits
from .errors import InvalidParamError, SerialPortError
from .naming import describe_ports, list_port_ids, list_port_names
from .port import SerialPort

_LOGGER = logging.getLogger("comport.cli")


def _add_line_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("port", help="Serial port name or pyserial URL")
    parser.add_argument(
        "--baudrate", type=int, default=115200, help="Serial baudrate"
    )
    parser.add_argument(
        "--bytesize", type=int, default=8, choices=(4, 5, 6, 7, 8), help="Data bits"
    )
    parser.add_argument(
        "--parity", default="N", choices=("N", "O", "E", "M", "S"), help="Parity"
    )
    parser.add_argument(
        "--stopbits", default="1", choices=("1", "1.5", "2"), help="Stop bits"
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="comport",
        description="List serial ports and send or receive raw bytes.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Verbosity of the runtime logger",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    list_parser = commands.add_parser("list", help="List available ports")
    list_parser.add_argument(
        "--ids", action="store_true", help="Print numeric port ids instead of names"
    )
    list_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print every port pyserial knows about with its description",
    )

    send_parser = commands.add_parser("send", help="Write data to a port")
    _add_line_arguments(send_parser)
    send_parser.add_argument("data", help="Text to send")
    send_parser.add_argument(
        "--hex", action="store_true", help="Interpret DATA as hexadecimal bytes"
    )

    read_parser = commands.add_parser("read", help="Read pending data from a port")
    _add_line_arguments(read_parser)
    read_parser.add_argument(
        "--size", type=int, default=256, help="Maximum number of bytes to read"
    )
    read_parser.add_argument(
        "--timeout",
        type=int,
        default=50,
        help="Total read timeout in milliseconds",
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def line_settings_from_args(args: argparse.Namespace) -> LineSettings:
    return LineSettings.create(
        args.baudrate,
        args.bytesize,
        StopBits.from_label(args.stopbits),
        Parity.from_letter(args.parity),
    )


def _open_port(args: argparse.Namespace) -> SerialPort:
    line = line_settings_from_args(args)
    port = SerialPort()
    port.set_comm_state(line.baud_rate, line.byte_size, line.stop_bits, line.parity)
    if args.command == "read":
        port.set_timeouts(50, args.timeout, 0, 0, 0)
    port.open(args.port)
    return port


def _run_list(args: argparse.Namespace) -> int:
    if args.verbose:
        for device, description in describe_ports():
            print(f"{device}\t{description}")
    elif args.ids:
        for port_id in list_port_ids():
            print(port_id)
    else:
        for name in list_port_names():
            print(name)
    return 0


def _run_send(args: argparse.Namespace, payload: bytes) -> int:
    with _open_port(args) as port:
        written = port.write(payload)
        port.close()
    if written != len(payload):
        _LOGGER.warning(
            "Short write on %s: %d of %d bytes", args.port, written, len(payload)
        )
    print(written)
    return 0


def _run_read(args: argparse.Namespace) -> int:
    with _open_port(args) as port:
        data = port.read(args.size)
        port.close()
    _LOGGER.info("Read %d byte(s) from %s", len(data), args.port)
    print(data.hex(" "))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    payload = b""
    if args.command == "send":
        try:
            payload = bytes.fromhex(args.data) if args.hex else args.data.encode()
        except ValueError:
            parser.error("DATA is not valid hexadecimal")
    if args.command == "read" and not (1 <= args.size <= 65536):
        parser.error("--size must be in 1..65536")
    if args.command == "read" and args.timeout < 0:
        parser.error("--timeout must not be negative")

    configure_logging(args.log_level)

    try:
        if args.command == "list":
            return _run_list(args)
        if args.command == "send":
            return _run_send(args, payload)
        return _run_read(args)
    except InvalidParamError as exc:
        parser.error(str(exc))
    except SerialPortError as exc:
        _LOGGER.error(
            "Failed to %s on %s: %s", args.command, getattr(args, "port", None), exc
        )
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(main())
