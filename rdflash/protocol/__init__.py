"""
Protocol layer for the RD60xx bootloader.

This module contains the low-level protocol handling:
- Tokens, fixed request frames and protocol constants
- Modbus CRC-16 calculation and validation

Frame construction and response decoding live in
``rdflash.protocol.frames``, which depends on the data models.
"""

from rdflash.protocol.checksums import append_crc, crc16_modbus, validate_crc
from rdflash.protocol.constants import (
    READ_IDENTITY_REQUEST,
    REBOOT_REQUEST,
    FunctionCode,
    ProtocolConstants,
    Register,
    Token,
)

__all__ = [
    # Constants
    "FunctionCode",
    "ProtocolConstants",
    "Register",
    "Token",
    "READ_IDENTITY_REQUEST",
    "REBOOT_REQUEST",
    # Checksums
    "crc16_modbus",
    "append_crc",
    "validate_crc",
]
