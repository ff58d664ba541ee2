"""Tests for data models."""

import pytest
from pydantic import ValidationError

from rdflash.models.records import DeviceIdentity, FirmwareImage, SessionSettings


class TestDeviceIdentity:
    """Tests for DeviceIdentity model."""

    def test_model_name(self):
        """Test the marketing name derived from the model code."""
        identity = DeviceIdentity(model_code=60181, firmware_version=141)
        assert identity.model_name == "RD6018"

    def test_version_string(self):
        """Test hundredths formatting."""
        assert DeviceIdentity(model_code=60062, firmware_version=123).version_string == "1.23"
        assert DeviceIdentity(model_code=60062, firmware_version=20).version_string == "0.20"
        assert DeviceIdentity(model_code=60062, firmware_version=105).version_string == "1.05"

    def test_str_with_serial(self):
        """Test display with serial number."""
        identity = DeviceIdentity(model_code=60181, firmware_version=141, serial_number=7)
        assert str(identity) == "RD6018 (60181) v1.41 S/N 00000007"

    def test_str_without_serial(self):
        """Test display without serial number."""
        identity = DeviceIdentity(model_code=60181, firmware_version=20)
        assert str(identity) == "RD6018 (60181) v0.20"

    def test_model_code_range(self):
        """Test that model codes beyond 16 bits are rejected."""
        with pytest.raises(ValidationError):
            DeviceIdentity(model_code=0x10000, firmware_version=0)

    def test_serial_range(self):
        """Test that serial numbers beyond 32 bits are rejected."""
        with pytest.raises(ValidationError):
            DeviceIdentity(model_code=60181, firmware_version=0, serial_number=2**32)

    def test_frozen(self):
        """Test that identities are immutable."""
        identity = DeviceIdentity(model_code=60181, firmware_version=141)
        with pytest.raises(ValidationError):
            identity.model_code = 60062


class TestFirmwareImage:
    """Tests for FirmwareImage chunking."""

    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (0, []),
            (1, [1]),
            (63, [63]),
            (64, [64]),
            (65, [64, 1]),
            (128, [64, 64]),
            (200, [64, 64, 64, 8]),
        ],
    )
    def test_chunk_lengths(self, size, expected):
        """Test that all chunks but the last are exactly 64 bytes."""
        image = FirmwareImage(data=bytes(size))
        assert [len(chunk) for chunk in image.chunks()] == expected
        assert image.chunk_count() == len(expected)

    def test_chunks_preserve_order(self):
        """Test that joining the chunks gives back the image."""
        data = bytes(range(256)) * 3
        image = FirmwareImage(data=data)
        assert b"".join(image.chunks()) == data

    def test_custom_chunk_size(self):
        """Test chunking with a non-default size."""
        image = FirmwareImage(data=bytes(10))
        assert [len(chunk) for chunk in image.chunks(4)] == [4, 4, 2]
        assert image.chunk_count(4) == 3

    def test_invalid_chunk_size(self):
        """Test that a zero chunk size is rejected."""
        image = FirmwareImage(data=bytes(10))
        with pytest.raises(ValueError):
            list(image.chunks(0))
        with pytest.raises(ValueError):
            image.chunk_count(0)

    def test_size_and_len(self):
        image = FirmwareImage(data=bytes(130), source="fw.bin")
        assert image.size == 130
        assert len(image) == 130
        assert "fw.bin" in repr(image)


class TestSessionSettings:
    """Tests for SessionSettings defaults and validation."""

    def test_defaults(self):
        settings = SessionSettings()
        assert settings.discovery_timeout == 2.0
        assert settings.flash_timeout == 5.0
        assert settings.settle_delay == 3.0
        assert settings.chunk_size == 64
        assert settings.verbose is False

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValidationError):
            SessionSettings(flash_timeout=0)

    def test_allows_zero_settle_delay(self):
        assert SessionSettings(settle_delay=0).settle_delay == 0
