"""
Pydantic models for the flashing workflow.

All models are frozen: identities are produced once per session and
firmware images never change after they are loaded.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field

from rdflash.protocol.constants import ProtocolConstants


class DeviceIdentity(BaseModel):
    """
    Model, firmware version and serial number reported by a device.

    The firmware version is kept in hundredths as sent on the wire, so
    ``firmware_version=123`` means v1.23.

    Example:
        >>> identity = DeviceIdentity(model_code=60181, firmware_version=120, serial_number=7)
        >>> identity.model_name
        'RD6018'
        >>> identity.version_string
        '1.20'
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_code: int = Field(ge=0, le=0xFFFF, description="Numeric model code, e.g. 60181")
    firmware_version: int = Field(ge=0, le=0xFF, description="Firmware version in hundredths")
    serial_number: int | None = Field(
        default=None,
        ge=0,
        le=0xFFFFFFFF,
        description="Serial number (only reported by the bootloader)",
    )

    @property
    def model_name(self) -> str:
        """Marketing name, e.g. ``RD6018`` for model code 60181."""
        return f"RD{self.model_code // 10}"

    @property
    def version(self) -> float:
        """Firmware version as a number, e.g. 1.23."""
        return self.firmware_version / 100.0

    @property
    def version_string(self) -> str:
        return f"{self.firmware_version // 100}.{self.firmware_version % 100:02d}"

    def __str__(self) -> str:
        text = f"{self.model_name} ({self.model_code}) v{self.version_string}"
        if self.serial_number is not None:
            text += f" S/N {self.serial_number:08d}"
        return text


class FirmwareImage(BaseModel):
    """
    Firmware bytes to transfer, partitioned into fixed-size chunks.

    Example:
        >>> image = FirmwareImage(data=bytes(130))
        >>> [len(chunk) for chunk in image.chunks()]
        [64, 64, 2]
    """

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(description="Raw firmware image")
    source: str | None = Field(default=None, description="Where the image was loaded from")

    @property
    def size(self) -> int:
        return len(self.data)

    def chunk_count(self, chunk_size: int = ProtocolConstants.FIRMWARE_CHUNK_SIZE) -> int:
        """Number of chunks the image splits into (ceil(size / chunk_size))."""
        if chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")
        return -(-len(self.data) // chunk_size)

    def chunks(self, chunk_size: int = ProtocolConstants.FIRMWARE_CHUNK_SIZE) -> Iterator[bytes]:
        """
        Yield consecutive chunks of the image.

        Every chunk but the last is exactly chunk_size bytes long.

        Raises:
            ValueError: If chunk_size is not positive.
        """
        if chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")
        for offset in range(0, len(self.data), chunk_size):
            yield self.data[offset:offset + chunk_size]

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"FirmwareImage(size={len(self.data)}, source={self.source!r})"


class SessionSettings(BaseModel):
    """
    Per-session protocol settings.

    Passed explicitly to DeviceSession; the engine reads no global state.

    Example:
        >>> settings = SessionSettings(verbose=True)
        >>> settings.flash_timeout
        5.0
    """

    model_config = ConfigDict(frozen=True)

    discovery_timeout: float = Field(
        default=ProtocolConstants.DISCOVERY_TIMEOUT,
        gt=0,
        description="Deadline while probing for the bootloader (seconds)",
    )
    flash_timeout: float = Field(
        default=ProtocolConstants.FLASH_TIMEOUT,
        gt=0,
        description="Deadline for Modbus and flashing exchanges (seconds)",
    )
    settle_delay: float = Field(
        default=ProtocolConstants.REBOOT_SETTLE_DELAY,
        ge=0,
        description="Pause after the reboot request (seconds)",
    )
    chunk_size: int = Field(
        default=ProtocolConstants.FIRMWARE_CHUNK_SIZE,
        gt=0,
        description="Firmware bytes per acknowledged write",
    )
    verbose: bool = Field(default=False, description="Log every byte sent and received")
