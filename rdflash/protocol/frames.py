"""
Frame construction and response decoding.

Binary frames follow the Modbus RTU layout::

    address(1) | function(1) | payload(n) | CRC-16 (2, little-endian)

Every received frame is checked for exact length, header bytes and CRC
before any field is read from it.
"""

from __future__ import annotations

import struct

from rdflash.exceptions import ChecksumError, ProtocolError
from rdflash.models.records import DeviceIdentity
from rdflash.protocol.checksums import append_crc, crc16_modbus, extract_crc, validate_crc
from rdflash.protocol.constants import (
    REGISTER_RESPONSE_HEADER,
    FunctionCode,
    ProtocolConstants,
    Token,
)


def build_read_holding_registers(address: int, start: int, count: int) -> bytes:
    """
    Build a Modbus "read holding registers" request.

    Example:
        >>> build_read_holding_registers(1, 0, 4).hex(" ")
        '01 03 00 00 00 04 44 09'
    """
    return append_crc(
        struct.pack(">BBHH", address, FunctionCode.READ_HOLDING_REGISTERS, start, count)
    )


def build_write_single_register(address: int, register: int, value: int) -> bytes:
    """
    Build a Modbus "write single register" request.

    Example:
        >>> build_write_single_register(1, 0x0100, 0x1601).hex(" ")
        '01 06 01 00 16 01 47 96'
    """
    return append_crc(
        struct.pack(">BBHH", address, FunctionCode.WRITE_SINGLE_REGISTER, register, value)
    )


def parse_register_response(frame: bytes, *, phase: str | None = None) -> DeviceIdentity:
    """
    Decode the read-4-registers reply of a device running normal firmware.

    Layout: address, function, byte count (8), then registers 0-3. The
    model code is the big-endian word at offset 3 and the firmware
    version is the low byte of register 3 (offset 10).

    Args:
        frame: Exactly REGISTER_RESPONSE_SIZE bytes as read from the link.
        phase: Session phase name for error reporting.

    Returns:
        DeviceIdentity without a serial number.

    Raises:
        ProtocolError: If the length or header is wrong.
        ChecksumError: If the CRC does not match.
    """
    if (
        len(frame) != ProtocolConstants.REGISTER_RESPONSE_SIZE
        or frame[:3] != REGISTER_RESPONSE_HEADER
    ):
        raise ProtocolError("Invalid response", data=bytes(frame), phase=phase)

    if not validate_crc(frame):
        raise ChecksumError(
            expected=crc16_modbus(frame[:-2]),
            received=extract_crc(frame),
            data=bytes(frame),
            phase=phase,
        )

    (model_code,) = struct.unpack_from(">H", frame, 3)
    return DeviceIdentity(model_code=model_code, firmware_version=frame[10])


def parse_info_response(frame: bytes, *, phase: str | None = None) -> DeviceIdentity:
    """
    Decode the bootloader's reply to ``getinf``.

    Layout: ``inf``, serial number at offsets 3-6, model code at offsets
    7-8, firmware version at offset 11. Both multi-byte fields are stored
    least significant byte first, the opposite of the Modbus register
    reply.

    Args:
        frame: Exactly INFO_RESPONSE_SIZE bytes as read from the link.
        phase: Session phase name for error reporting.

    Raises:
        ProtocolError: If the length or prefix is wrong.
    """
    if (
        len(frame) != ProtocolConstants.INFO_RESPONSE_SIZE
        or frame[:3] != Token.INFO_PREFIX
    ):
        raise ProtocolError("Invalid bootloader response", data=bytes(frame), phase=phase)

    serial_number, model_code = struct.unpack_from("<IH", frame, 3)
    return DeviceIdentity(
        model_code=model_code,
        firmware_version=frame[11],
        serial_number=serial_number,
    )
