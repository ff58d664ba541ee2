"""
Blocking serial transport using pyserial.

This module provides the transport implementation for talking to real
hardware over a USB serial adapter.

Serial Configuration:
- Baud rate: 115200 (default)
- Data bits: 8
- Parity: None
- Stop bits: 1
- Flow control: None

Example:
    >>> transport = SerialTransport("/dev/ttyUSB0")
    >>> with transport:
    ...     transport.write_all(b"queryd\\r\\n")
    ...     reply = transport.read_up_to(4)
"""

from __future__ import annotations

import serial

from rdflash.exceptions import TransportError
from rdflash.protocol.constants import ProtocolConstants
from rdflash.transport.abc import AbstractTransport


class SerialTransport(AbstractTransport):
    """
    Blocking serial transport using pyserial.

    The deadline maps onto pyserial's ``timeout`` and ``write_timeout``.
    ``read_up_to(n)`` returns once n bytes arrived or the timeout expired,
    whichever comes first.

    Attributes:
        port_name: Serial port path (e.g., "/dev/ttyUSB0", "COM3").
        is_open: Whether the port is currently open.

    Example:
        >>> transport = SerialTransport("/dev/ttyUSB0", baudrate=115200)
        >>> transport.open()
        >>> try:
        ...     transport.write_all(b"getinf\\r\\n")
        ...     reply = transport.read_up_to(13)
        ... finally:
        ...     transport.close()
    """

    def __init__(
        self,
        port: str,
        baudrate: int = ProtocolConstants.DEFAULT_BAUD_RATE,
        timeout: float = ProtocolConstants.DISCOVERY_TIMEOUT,
    ) -> None:
        """
        Initialize the serial transport.

        Args:
            port: Serial port path (e.g., "/dev/ttyUSB0", "COM3").
            baudrate: Baud rate (default: 115200).
            timeout: Initial read/write deadline in seconds (default: 2.0).
        """
        self._port = port
        self._baudrate = baudrate
        self._timeout = timeout
        self._serial: serial.Serial | None = None

    @property
    def is_open(self) -> bool:
        """Check if the serial port is currently open."""
        return self._serial is not None and self._serial.is_open

    @property
    def port_name(self) -> str:
        """Get the serial port path."""
        return self._port

    @property
    def baudrate(self) -> int:
        """Get the configured baud rate."""
        return self._baudrate

    @property
    def deadline(self) -> float:
        return self._timeout

    def open(self) -> None:
        """
        Open the serial port connection.

        Raises:
            TransportError: If the port cannot be opened.
        """
        if self.is_open:
            return

        try:
            self._serial = serial.Serial(
                port=self._port,
                baudrate=self._baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=self._timeout,
                write_timeout=self._timeout,
                xonxoff=False,
                rtscts=False,
                dsrdtr=False,
            )
        except serial.SerialException as e:
            raise TransportError(f"Failed to open serial port {self._port}: {e}") from e
        except OSError as e:
            raise TransportError(f"OS error opening {self._port}: {e}") from e

    def close(self) -> None:
        """
        Close the serial port connection.

        Safe to call multiple times.
        """
        if self._serial is not None:
            try:
                self._serial.close()
            finally:
                self._serial = None

    def write_all(self, data: bytes) -> None:
        """
        Write data to the serial port and wait until it is transmitted.

        Raises:
            TransportError: If the port is not open or the write fails.
        """
        port = self._require_open()
        try:
            written = port.write(data)
            port.flush()
        except serial.SerialTimeoutException as e:
            raise TransportError(f"Write timed out after {self._timeout:.1f}s") from e
        except serial.SerialException as e:
            raise TransportError(f"Write failed: {e}") from e

        if written is not None and written != len(data):
            raise TransportError(f"Incomplete write: sent {written}/{len(data)} bytes")

    def read_up_to(self, max_bytes: int) -> bytes:
        """
        Read at most max_bytes, returning early only on timeout.

        Raises:
            TransportError: If the port is not open or the read fails.
        """
        port = self._require_open()
        if max_bytes <= 0:
            return b""

        try:
            return bytes(port.read(max_bytes))
        except serial.SerialException as e:
            raise TransportError(f"Read failed: {e}") from e

    def set_deadline(self, seconds: float) -> None:
        """
        Apply a new read/write timeout.

        The value is remembered when the port is closed and used on open().

        Raises:
            TransportError: If the port rejects the timeout.
        """
        self._timeout = seconds
        if self._serial is None:
            return
        try:
            self._serial.timeout = seconds
            self._serial.write_timeout = seconds
        except (ValueError, serial.SerialException) as e:
            raise TransportError(f"Cannot set timeout {seconds}: {e}") from e

    def _require_open(self) -> serial.Serial:
        if self._serial is None or not self._serial.is_open:
            raise TransportError("Serial port is not open")
        return self._serial

    def __repr__(self) -> str:
        status = "open" if self.is_open else "closed"
        return f"SerialTransport({self._port!r}, baudrate={self._baudrate}, {status})"
