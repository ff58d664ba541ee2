"""
Data models for the flashing workflow.

- Value objects (DeviceIdentity, FirmwareImage)
- Session configuration (SessionSettings)
- The supported model registry
"""

from rdflash.models.records import DeviceIdentity, FirmwareImage, SessionSettings
from rdflash.models.registry import (
    SUPPORTED_MODEL_CODES,
    SupportedModel,
    is_supported_model,
    require_supported_model,
)

__all__ = [
    # Value Objects
    "DeviceIdentity",
    "FirmwareImage",
    # Configuration
    "SessionSettings",
    # Registry
    "SupportedModel",
    "SUPPORTED_MODEL_CODES",
    "is_supported_model",
    "require_supported_model",
]
