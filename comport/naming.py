"""Device naming convention and port enumeration.

Ports are addressed as ``PORT_PREFIX`` followed by a number.  Enumeration
asks the host whether a device exists for every number in ``0..MAX_PORT_ID``
and keeps no state between calls.
"""

from __future__ import annotations

import ctypes
import logging
import os
from typing import Callable

import serial.tools.list_ports

_LOGGER = logging.getLogger(__name__)

PORT_PREFIX = "COM" if os.name == "nt" else "/dev/ttyS"
MAX_PORT_ID = 254
RAW_DEVICE_NAMESPACE = "\\\\.\\"

_TARGET_PATH_SIZE = 5000

Probe = Callable[[str], bool]


def port_name(port_id: int) -> str:
    return f"{PORT_PREFIX}{port_id}"


def device_path(name: str) -> str:
    """Translate a logical port name into the path handed to the driver."""

    if os.name != "nt" or "://" in name or name.startswith(RAW_DEVICE_NAMESPACE):
        return name
    return RAW_DEVICE_NAMESPACE + name


def _query_dos_device(name: str) -> bool:
    target_path = ctypes.create_unicode_buffer(_TARGET_PATH_SIZE)
    kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
    return kernel32.QueryDosDeviceW(name, target_path, _TARGET_PATH_SIZE) != 0


def _device_node_exists(name: str) -> bool:
    return os.path.exists(name)


def default_probe() -> Probe:
    return _query_dos_device if os.name == "nt" else _device_node_exists


def list_port_ids(probe: Probe | None = None) -> list[int]:
    """Return the ids of all ports that currently exist, in ascending order."""

    probe = probe or default_probe()
    port_ids = [i for i in range(MAX_PORT_ID + 1) if probe(port_name(i))]
    _LOGGER.debug("Found %d port(s): %s", len(port_ids), port_ids)
    return port_ids


def list_port_names(add_prefix: bool = True, probe: Probe | None = None) -> list[str]:
    """Return the names of all available ports.

    Without ``add_prefix`` the result is empty; bare ids are available from
    :func:`list_port_ids`.
    """

    port_ids = list_port_ids(probe)
    if not add_prefix:
        return []
    return [port_name(port_id) for port_id in port_ids]


def describe_ports() -> list[tuple[str, str]]:
    """Return ``(device, description)`` pairs reported by pyserial."""

    ports = [
        (info.device, info.description)
        for info in serial.tools.list_ports.comports()
    ]
    ports.sort(key=lambda item: item[0])
    return ports
