"""
Serial port discovery.

Lists the serial adapters a power supply may be attached to. On
non-Windows hosts only USB/ACM style device nodes are reported.
"""

from __future__ import annotations

import sys

from pydantic import BaseModel, ConfigDict
from serial.tools import list_ports

_PORT_MARKERS = ("/tty.", "/ttyUSB", "/ttyACM")


class PortInfo(BaseModel):
    """One available serial port."""

    model_config = ConfigDict(frozen=True)

    port: str
    kind: str
    info: str = ""


def _describe(port) -> PortInfo:
    if port.vid is not None and port.pid is not None:
        product = port.product or "Unknown"
        return PortInfo(
            port=port.device,
            kind="USB",
            info=f"{product} ({port.vid:04x}:{port.pid:04x})",
        )
    return PortInfo(port=port.device, kind="Unknown")


def list_serial_ports(platform: str | None = None) -> list[PortInfo]:
    """
    Enumerate serial ports.

    Args:
        platform: Override for sys.platform, used to pick the filter.

    Returns:
        Ports sorted by device name.
    """
    platform = platform or sys.platform
    ports = []
    for port in list_ports.comports():
        if not platform.startswith("win") and not any(
            marker in port.device for marker in _PORT_MARKERS
        ):
            continue
        ports.append(_describe(port))
    return sorted(ports, key=lambda p: p.port)
