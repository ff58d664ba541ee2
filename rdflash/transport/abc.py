"""
Abstract transport interface for bootloader communication.

This module defines the abstract base class for all transport
implementations. Transports move raw bytes over the physical link and
know nothing about framing.

The transport layer is responsible for:
- Opening/closing the physical connection
- Bounded-time reads and blocking writes
- The read/write deadline

Implementations:
- SerialTransport: pyserial based serial port
- MockTransport / ScriptedMockTransport: for testing without hardware
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType


class AbstractTransport(ABC):
    """
    Abstract base class for byte-stream transports.

    Transports support the context manager protocol for safe resource
    management:

        with SerialTransport("/dev/ttyUSB0") as transport:
            transport.write_all(b"queryd\\r\\n")
            reply = transport.read_up_to(4)

    A timeout is not an error at this layer: it yields a short or empty
    read and the caller decides what that means for the current phase.
    """

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """
        Check if the transport connection is currently open.

        Returns:
            True if connected and ready for I/O, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def port_name(self) -> str:
        """
        Get the transport identifier.

        Returns:
            Port name or identifier string (e.g., "/dev/ttyUSB0", "COM3").
        """
        ...

    @property
    @abstractmethod
    def deadline(self) -> float:
        """Read/write deadline in seconds currently applied to I/O."""
        ...

    @abstractmethod
    def open(self) -> None:
        """
        Open the transport connection.

        Raises:
            TransportError: If the connection cannot be established.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """
        Close the transport connection.

        Safe to call multiple times (idempotent).
        """
        ...

    @abstractmethod
    def write_all(self, data: bytes) -> None:
        """
        Write every byte of data to the link.

        Blocks until the link has accepted all bytes.

        Args:
            data: Bytes to send.

        Raises:
            TransportError: If the transport is not open or the write fails.
        """
        ...

    @abstractmethod
    def read_up_to(self, max_bytes: int) -> bytes:
        """
        Read at most max_bytes from the link.

        Blocks until data arrives or the deadline elapses and returns
        whatever was received, which may be empty.

        Args:
            max_bytes: Upper bound on the number of bytes returned.

        Returns:
            Between 0 and max_bytes bytes.

        Raises:
            TransportError: If the transport is not open or the read fails.
        """
        ...

    @abstractmethod
    def set_deadline(self, seconds: float) -> None:
        """
        Change the deadline applied to all subsequent reads and writes.

        Args:
            seconds: New deadline in seconds.

        Raises:
            TransportError: If the underlying link rejects the setting.
        """
        ...

    def __enter__(self) -> AbstractTransport:
        """Context manager entry - opens the transport."""
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit - closes the transport."""
        self.close()
