"""Loading firmware images from disk."""

from __future__ import annotations

import logging
from pathlib import Path

from rdflash.exceptions import ImageSourceError
from rdflash.models.records import FirmwareImage

logger = logging.getLogger(__name__)


def load_firmware(path: str | Path) -> FirmwareImage:
    """
    Read a firmware image file.

    The contents are passed through untouched; only the device validates
    them.

    Raises:
        ImageSourceError: If the file cannot be read or is empty.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageSourceError(f"Cannot read firmware file {path}: {e}", path=str(path)) from e

    if not data:
        raise ImageSourceError(f"Firmware file {path} is empty", path=str(path))

    logger.debug("Loaded %d bytes from %s", len(data), path)
    return FirmwareImage(data=data, source=str(path))
