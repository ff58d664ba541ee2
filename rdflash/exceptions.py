"""
Exception hierarchy for rdflash.

All exceptions inherit from RDFlashError so callers can catch every
library failure with a single except clause. The protocol engine never
recovers from these locally: the first one raised aborts the sequence.
"""

from __future__ import annotations


class RDFlashError(Exception):
    """Base exception for all rdflash errors."""

    pass


class ProtocolError(RDFlashError):
    """
    Protocol violation.

    Raised when the device answers with bytes that do not match the
    expected length, header or token for the current phase.

    Attributes:
        data: The offending bytes, if any were received.
        phase: Name of the session phase the error occurred in.
        chunk_index: Zero-based index of the rejected firmware chunk.
    """

    def __init__(
        self,
        message: str,
        *,
        data: bytes | None = None,
        phase: str | None = None,
        chunk_index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.data = data
        self.phase = phase
        self.chunk_index = chunk_index

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.chunk_index is not None:
            parts.append(f"chunk={self.chunk_index}")
        if self.phase:
            parts.append(f"phase={self.phase}")
        if self.data is not None:
            parts.append(f"data={self.data.hex(' ') or '<empty>'}")
        return " ".join(parts) if len(parts) > 1 else parts[0]


class ChecksumError(ProtocolError):
    """
    CRC validation failure on a received binary frame.

    Typically indicates line noise or a baud rate mismatch.
    """

    def __init__(
        self,
        message: str = "CRC validation failed",
        *,
        expected: int | None = None,
        received: int | None = None,
        data: bytes | None = None,
        phase: str | None = None,
    ) -> None:
        super().__init__(message, data=data, phase=phase)
        self.expected = expected
        self.received = received

    def __str__(self) -> str:
        base = super().__str__()
        if self.expected is not None and self.received is not None:
            return f"{base} (expected 0x{self.expected:04X}, got 0x{self.received:04X})"
        return base


class TimeoutError(RDFlashError):  # noqa: A001 - intentionally shadows builtin
    """
    No reply before the read deadline expired.

    Only raised where an empty read means nobody is listening; short
    replies elsewhere surface as ProtocolError.
    """

    def __init__(
        self,
        message: str = "Communication timeout",
        *,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(message)
        self.timeout_seconds = timeout_seconds

    def __str__(self) -> str:
        base = super().__str__()
        if self.timeout_seconds is not None:
            return f"{base} (after {self.timeout_seconds:.1f}s)"
        return base


class UnsupportedModelError(RDFlashError):
    """The device identified itself with a model code outside the registry."""

    def __init__(self, model_code: int) -> None:
        self.model_code = model_code
        super().__init__(f"Unsupported device model: {model_code}")


class TransportError(RDFlashError):
    """
    Transport-level error.

    Raised for low-level link issues:
    - Serial port cannot be opened
    - I/O errors on read or write
    - Operations on a closed transport
    """

    pass


class ImageSourceError(RDFlashError):
    """The firmware image could not be obtained from its source."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class SessionStateError(RDFlashError):
    """A phase operation was called from a state that does not allow it."""

    pass
