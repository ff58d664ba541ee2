"""
Riden RD60xx bootloader protocol constants.

The devices speak two protocols on the same serial line:

- the bootloader's ASCII command set (``queryd``, ``getinf``, ``upfirm``)
  followed by raw 64-byte firmware chunks,
- the Modbus RTU register interface of the normal firmware, used only to
  identify the device and ask it to reboot into the bootloader.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final


class FunctionCode(IntEnum):
    """Modbus function codes used by the reboot handshake."""

    READ_HOLDING_REGISTERS = 0x03
    """Read a contiguous block of 16-bit holding registers."""

    WRITE_SINGLE_REGISTER = 0x06
    """Write one 16-bit holding register."""


class Register(IntEnum):
    """Holding registers touched by the reboot handshake."""

    MODEL = 0x0000
    """First register of the identification block (model, serial, version)."""

    SYSTEM = 0x0100
    """System command register; writing REBOOT_TO_BOOTLOADER restarts the device."""


class ProtocolConstants:
    """
    Bootloader protocol constants.

    Contains timing defaults, frame sizes and Modbus addressing used
    throughout the protocol implementation.
    """

    # ===== Timing Constants (seconds) =====

    DISCOVERY_TIMEOUT: Final[float] = 2.0
    """Read/write deadline while probing for the bootloader."""

    FLASH_TIMEOUT: Final[float] = 5.0
    """Read/write deadline once the Modbus or flashing exchange starts."""

    REBOOT_SETTLE_DELAY: Final[float] = 3.0
    """Pause after requesting a reboot into the bootloader."""

    # ===== Serial Port Configuration =====

    DEFAULT_BAUD_RATE: Final[int] = 115200
    """Default baud rate for serial communication."""

    # ===== Modbus Addressing =====

    DEVICE_ADDRESS: Final[int] = 0x01
    """Modbus slave address of the power supply."""

    IDENTITY_REGISTER_COUNT: Final[int] = 4
    """Registers read to identify a device running normal firmware."""

    REBOOT_TO_BOOTLOADER: Final[int] = 0x1601
    """Value written to Register.SYSTEM to reboot into the bootloader."""

    # ===== Frame Sizes =====

    CRC_SIZE: Final[int] = 2
    """Trailing Modbus CRC-16 size in bytes."""

    REGISTER_RESPONSE_SIZE: Final[int] = 13
    """Read-4-registers response: address, function, count, 8 data bytes, CRC."""

    INFO_RESPONSE_SIZE: Final[int] = 13
    """Bootloader ``getinf`` reply size."""

    FIRMWARE_CHUNK_SIZE: Final[int] = 64
    """Firmware bytes sent per acknowledged write."""


class Token:
    """
    Fixed ASCII commands and replies exchanged with the bootloader.

    Sent and compared verbatim; none of them is null-terminated.
    """

    QUERY: Final[bytes] = b"queryd\r\n"
    """Ask whether the device is running its bootloader."""

    BOOT: Final[bytes] = b"boot"
    """Reply to QUERY from a device already in bootloader mode."""

    GET_INFO: Final[bytes] = b"getinf\r\n"
    """Request model, serial number and firmware version."""

    INFO_PREFIX: Final[bytes] = b"inf"
    """First three bytes of the GET_INFO reply."""

    UPDATE_FIRMWARE: Final[bytes] = b"upfirm\r\n"
    """Start a firmware update."""

    READY: Final[bytes] = b"upredy"
    """Reply to UPDATE_FIRMWARE once the bootloader accepts chunks."""

    CHUNK_OK: Final[bytes] = b"OK"
    """Acknowledgment for every firmware chunk."""

    REBOOT_ACK: Final[int] = 0xFC
    """Single byte the normal firmware answers the reboot request with."""


READ_IDENTITY_REQUEST: Final[bytes] = bytes([0x01, 0x03, 0x00, 0x00, 0x00, 0x04, 0x44, 0x09])
"""Read 4 holding registers from register 0 of device 1, CRC included."""

REBOOT_REQUEST: Final[bytes] = bytes([0x01, 0x06, 0x01, 0x00, 0x16, 0x01, 0x47, 0x96])
"""Write 0x1601 to register 0x0100 of device 1, CRC included."""

REGISTER_RESPONSE_HEADER: Final[bytes] = bytes([
    ProtocolConstants.DEVICE_ADDRESS,
    FunctionCode.READ_HOLDING_REGISTERS,
    ProtocolConstants.IDENTITY_REGISTER_COUNT * 2,
])
"""Expected address, function code and byte count of the register response."""
