"""
Transport layer for bootloader communication.

This package provides transport implementations for talking to RD60xx
power supplies.

Available transports:
- SerialTransport: Blocking serial port using pyserial
- MockTransport: Mock transport for testing without hardware
- ScriptedMockTransport: Mock transport driven by request/response pairs

Example:
    >>> from rdflash.transport import SerialTransport
    >>> with SerialTransport("/dev/ttyUSB0") as transport:
    ...     transport.write_all(b"queryd\\r\\n")
    ...     reply = transport.read_up_to(4)
"""

from rdflash.transport.abc import AbstractTransport
from rdflash.transport.mock import MockTransport, ScriptedMockTransport
from rdflash.transport.serial_sync import SerialTransport

__all__ = [
    "AbstractTransport",
    "SerialTransport",
    "MockTransport",
    "ScriptedMockTransport",
]
