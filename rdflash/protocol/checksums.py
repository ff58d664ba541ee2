"""
Modbus RTU CRC-16 calculation and validation.

The register interface protects every frame with the standard Modbus
CRC-16:
- Reflected polynomial 0xA001, initial value 0xFFFF
- Computed over every byte that precedes the CRC
- Appended low byte first
"""

from __future__ import annotations

from typing import Final

CRC16_POLYNOMIAL: Final[int] = 0xA001
CRC16_INITIAL: Final[int] = 0xFFFF


def _build_table() -> tuple[int, ...]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            if crc & 0x0001:
                crc = (crc >> 1) ^ CRC16_POLYNOMIAL
            else:
                crc >>= 1
        table.append(crc)
    return tuple(table)


# Pre-computed lookup table, one entry per input byte value
_CRC16_TABLE: Final[tuple[int, ...]] = _build_table()


def crc16_modbus(data: bytes | bytearray | memoryview) -> int:
    """
    Calculate the Modbus CRC-16 of the given data.

    Args:
        data: Frame bytes preceding the CRC.

    Returns:
        16-bit CRC value (0-0xFFFF).

    Example:
        >>> hex(crc16_modbus(b"\\x01\\x03\\x00\\x00\\x00\\x04"))
        '0x944'
    """
    crc = CRC16_INITIAL
    for byte in data:
        crc = (crc >> 8) ^ _CRC16_TABLE[(crc ^ byte) & 0xFF]
    return crc


def encode_crc(crc: int) -> bytes:
    """
    Encode a CRC value in wire order (little-endian).

    Raises:
        ValueError: If crc is not a 16-bit value.
    """
    if not 0 <= crc <= 0xFFFF:
        raise ValueError(f"CRC must be 0-0xFFFF, got {crc}")
    return crc.to_bytes(2, "little")


def append_crc(data: bytes | bytearray) -> bytes:
    """
    Calculate the CRC and append it low byte first.

    Example:
        >>> append_crc(b"\\x01\\x03\\x00\\x00\\x00\\x04").hex(" ")
        '01 03 00 00 00 04 44 09'
    """
    return bytes(data) + encode_crc(crc16_modbus(data))


def extract_crc(frame: bytes | bytearray | memoryview) -> int:
    """
    Read the trailing CRC of a frame.

    Raises:
        ValueError: If the frame is too short to carry a CRC.
    """
    if len(frame) < 2:
        raise ValueError(f"Frame too short for CRC: {len(frame)} bytes")
    return int.from_bytes(bytes(frame[-2:]), "little")


def validate_crc(frame: bytes | bytearray | memoryview) -> bool:
    """
    Check that a frame's trailing two bytes match the CRC of the rest.

    Args:
        frame: Complete frame including the CRC.

    Returns:
        True if the CRC is valid, False otherwise (including frames
        shorter than three bytes).
    """
    if len(frame) < 3:
        return False
    return crc16_modbus(frame[:-2]) == extract_crc(frame)
