"""Tests for frame construction and response decoding."""

import pytest

from rdflash.exceptions import ChecksumError, ProtocolError
from rdflash.protocol.checksums import append_crc
from rdflash.protocol.constants import READ_IDENTITY_REQUEST, REBOOT_REQUEST
from rdflash.protocol.frames import (
    build_read_holding_registers,
    build_write_single_register,
    parse_info_response,
    parse_register_response,
)


def make_register_response(model: bytes = b"\xEB\x15", version: int = 0x14) -> bytes:
    """Build a valid read-4-registers reply."""
    body = bytes([0x01, 0x03, 0x08]) + model + bytes([0x00, 0x00, 0x12, 0x34, 0x00, version])
    return append_crc(body)


def make_info_response(
    serial: bytes = b"\x07\x00\x00\x00",
    model: bytes = b"\x15\xEB",
    version: int = 0x8D,
) -> bytes:
    """Build a valid getinf reply (fields least significant byte first)."""
    return b"inf" + serial + model + b"\x00\x00" + bytes([version, 0x00])


class TestBuilders:
    """Tests for Modbus request builders."""

    def test_read_holding_registers_matches_constant(self):
        assert build_read_holding_registers(1, 0, 4) == READ_IDENTITY_REQUEST

    def test_write_single_register_matches_constant(self):
        assert build_write_single_register(1, 0x0100, 0x1601) == REBOOT_REQUEST


class TestParseRegisterResponse:
    """Tests for decoding the Modbus identification reply."""

    def test_decode(self):
        """Test model and version extraction."""
        identity = parse_register_response(make_register_response())
        assert identity.model_code == 60181
        assert identity.firmware_version == 20
        assert identity.version == pytest.approx(0.20)
        assert identity.serial_number is None

    def test_wrong_header(self):
        """Test that an unexpected function code is rejected."""
        frame = bytearray(make_register_response())
        frame[1] = 0x04
        with pytest.raises(ProtocolError) as exc_info:
            parse_register_response(bytes(frame), phase="LEGACY_DETECTED")
        assert exc_info.value.data == bytes(frame)
        assert exc_info.value.phase == "LEGACY_DETECTED"

    def test_short_response(self):
        """Test that a truncated reply is rejected."""
        with pytest.raises(ProtocolError):
            parse_register_response(make_register_response()[:12])

    def test_bad_crc(self):
        """Test that a corrupted reply fails CRC validation."""
        frame = bytearray(make_register_response())
        frame[10] ^= 0xFF
        with pytest.raises(ChecksumError) as exc_info:
            parse_register_response(bytes(frame))
        assert exc_info.value.expected != exc_info.value.received


class TestParseInfoResponse:
    """Tests for decoding the bootloader getinf reply."""

    def test_decode(self):
        """Test serial, model and version extraction."""
        identity = parse_info_response(make_info_response())
        assert identity.serial_number == 7
        assert identity.model_code == 60181
        assert identity.firmware_version == 141

    def test_serial_byte_order(self):
        """Test that offset 6 is the most significant serial byte."""
        identity = parse_info_response(make_info_response(serial=b"\x04\x03\x02\x01"))
        assert identity.serial_number == 0x01020304

    def test_wrong_prefix(self):
        """Test that a reply without the inf prefix is rejected."""
        frame = b"xyz" + make_info_response()[3:]
        with pytest.raises(ProtocolError):
            parse_info_response(frame)

    def test_wrong_length(self):
        """Test that a short reply is rejected."""
        with pytest.raises(ProtocolError) as exc_info:
            parse_info_response(make_info_response()[:10])
        assert "Invalid bootloader response" in str(exc_info.value)
