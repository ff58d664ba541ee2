"""
rdflash - firmware updater for Riden RD60xx bench power supplies.

This library drives the RD60xx bootloader over a serial link: it detects
or forces bootloader mode, reads the device identity and transfers a
firmware image in acknowledged 64-byte chunks.

Example:
    >>> from rdflash import DeviceSession, load_firmware
    >>> from rdflash.transport import SerialTransport
    >>>
    >>> image = load_firmware("RD60062_V1.41.bin")
    >>> with DeviceSession(SerialTransport("/dev/ttyUSB0")) as session:
    ...     identity = session.flash(image)
    ...     print(identity.model_name, identity.version_string)
"""

from rdflash.exceptions import (
    ChecksumError,
    ImageSourceError,
    ProtocolError,
    RDFlashError,
    SessionStateError,
    TimeoutError,
    TransportError,
    UnsupportedModelError,
)
from rdflash.firmware import load_firmware
from rdflash.models import (
    DeviceIdentity,
    FirmwareImage,
    SessionSettings,
    SupportedModel,
    is_supported_model,
)
from rdflash.session import DeviceSession, SessionState
from rdflash.transport import AbstractTransport, SerialTransport

__version__ = "0.1.0"
__all__ = [
    # Session
    "DeviceSession",
    "SessionState",
    # Models
    "DeviceIdentity",
    "FirmwareImage",
    "SessionSettings",
    "SupportedModel",
    "is_supported_model",
    "load_firmware",
    # Exceptions
    "RDFlashError",
    "ProtocolError",
    "ChecksumError",
    "TimeoutError",
    "UnsupportedModelError",
    "TransportError",
    "ImageSourceError",
    "SessionStateError",
    # Transport
    "AbstractTransport",
    "SerialTransport",
    # Version
    "__version__",
]
