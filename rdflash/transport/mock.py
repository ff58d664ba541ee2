"""
Mock transport for testing.

This module provides mock transport implementations that allow testing
the device session without actual hardware. Responses can be queued,
scripted per request, or generated by a callback.

Example:
    >>> from rdflash.transport import MockTransport
    >>> from rdflash.session import DeviceSession
    >>>
    >>> mock = MockTransport()
    >>> mock.add_response(b"boot")
    >>>
    >>> with mock:
    ...     DeviceSession(mock).detect_bootloader()
    True
"""

from __future__ import annotations

from collections import deque
from typing import Callable

from rdflash.exceptions import TransportError
from rdflash.protocol.constants import ProtocolConstants
from rdflash.transport.abc import AbstractTransport


class MockTransport(AbstractTransport):
    """
    Mock transport for testing without hardware.

    Each read call is served from the pending read buffer; when the
    buffer is empty the next queued response is loaded into it. With
    nothing buffered or queued a read returns ``b""``, the same way a
    serial read times out.

    Attributes:
        written_data: List of all bytes written to the transport.
        deadlines: Every deadline applied through set_deadline().

    Example:
        >>> mock = MockTransport()
        >>> mock.add_response(b"upredy")
        >>>
        >>> with mock:
        ...     mock.write_all(b"upfirm\\r\\n")
        ...     assert mock.read_up_to(6) == b"upredy"
        ...     assert mock.written_data == [b"upfirm\\r\\n"]
    """

    def __init__(
        self,
        port_name: str = "mock://test",
        deadline: float = ProtocolConstants.DISCOVERY_TIMEOUT,
    ) -> None:
        """
        Initialize the mock transport.

        Args:
            port_name: Identifier for the mock transport.
            deadline: Initial deadline reported by the deadline property.
        """
        self._port_name = port_name
        self._deadline = deadline
        self._is_open = False
        self._responses: deque[bytes] = deque()
        self._written_data: list[bytes] = []
        self._read_buffer = bytearray()
        self._deadlines: list[float] = []
        self._response_callback: Callable[[bytes], bytes | None] | None = None

    @property
    def is_open(self) -> bool:
        """Check if the mock transport is open."""
        return self._is_open

    @property
    def port_name(self) -> str:
        """Get the mock port name."""
        return self._port_name

    @property
    def deadline(self) -> float:
        return self._deadline

    @property
    def deadlines(self) -> list[float]:
        """Get every deadline applied so far, in order."""
        return self._deadlines.copy()

    @property
    def written_data(self) -> list[bytes]:
        """Get all data written to the transport."""
        return self._written_data.copy()

    @property
    def last_written(self) -> bytes | None:
        """Get the most recently written data."""
        return self._written_data[-1] if self._written_data else None

    def add_response(self, response: bytes) -> None:
        """
        Add a response to the queue.

        Responses are returned in FIFO order on read operations.

        Args:
            response: Bytes to return on the next read.
        """
        self._responses.append(response)

    def add_responses(self, *responses: bytes) -> None:
        """
        Add multiple responses to the queue.

        Args:
            *responses: Multiple byte responses to add.
        """
        for response in responses:
            self._responses.append(response)

    def set_response_callback(
        self,
        callback: Callable[[bytes], bytes | None] | None,
    ) -> None:
        """
        Set a callback to dynamically generate responses.

        The callback receives the written data and returns the bytes the
        device would answer with, or None to answer nothing.

        Args:
            callback: Function that takes written bytes and returns response.
        """
        self._response_callback = callback

    def clear(self) -> None:
        """Clear all written data and pending responses."""
        self._written_data.clear()
        self._responses.clear()
        self._read_buffer.clear()

    def open(self) -> None:
        """Open the mock transport."""
        if self._is_open:
            raise TransportError("Mock transport already open")
        self._is_open = True

    def close(self) -> None:
        """Close the mock transport."""
        self._is_open = False

    def write_all(self, data: bytes) -> None:
        """
        Record the written data and optionally trigger the response callback.

        Raises:
            TransportError: If transport is not open.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")

        self._written_data.append(bytes(data))

        if self._response_callback:
            response = self._response_callback(bytes(data))
            if response is not None:
                self._read_buffer.extend(response)

    def read_up_to(self, max_bytes: int) -> bytes:
        """
        Return up to max_bytes of buffered or queued response data.

        Raises:
            TransportError: If transport is not open.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")

        if not self._read_buffer and self._responses:
            self._read_buffer.extend(self._responses.popleft())

        result = bytes(self._read_buffer[:max_bytes])
        del self._read_buffer[:max_bytes]
        return result

    def set_deadline(self, seconds: float) -> None:
        """Record the new deadline."""
        self._deadline = seconds
        self._deadlines.append(seconds)

    def assert_written(self, expected: bytes, index: int = -1) -> None:
        """
        Assert that specific data was written.

        Args:
            expected: Expected bytes.
            index: Index in written_data list (-1 for last).

        Raises:
            AssertionError: If data doesn't match.
        """
        if not self._written_data:
            raise AssertionError("No data written to mock transport")

        actual = self._written_data[index]
        if actual != expected:
            raise AssertionError(f"Written data mismatch: expected {expected!r}, got {actual!r}")

    def assert_write_count(self, expected: int) -> None:
        """
        Assert number of write operations.

        Raises:
            AssertionError: If count doesn't match.
        """
        actual = len(self._written_data)
        if actual != expected:
            raise AssertionError(f"Write count mismatch: expected {expected}, got {actual}")


class ScriptedMockTransport(MockTransport):
    """
    Mock transport with scripted request/response pairs.

    Every write consumes the next script step: the written bytes are
    checked against the expected request (if one was given) and the
    step's response is made available to the following reads. Writes
    past the end of the script are recorded and answered with nothing.

    Example:
        >>> mock = ScriptedMockTransport()
        >>> mock.expect(request=b"queryd\\r\\n", response=b"boot")
        >>> mock.expect(request=b"getinf\\r\\n", response=info_reply)
    """

    def __init__(self, port_name: str = "mock://scripted") -> None:
        super().__init__(port_name)
        self._script: list[tuple[bytes | None, bytes]] = []
        self._script_index = 0

    @property
    def remaining_steps(self) -> int:
        """Number of script steps not yet consumed."""
        return len(self._script) - self._script_index

    def expect(
        self,
        response: bytes,
        request: bytes | None = None,
    ) -> None:
        """
        Add an expected request/response pair.

        Args:
            response: Response to return (b"" for silence).
            request: Expected request (None to match any).
        """
        self._script.append((request, response))

    def write_all(self, data: bytes) -> None:
        """Write with script validation."""
        if not self._is_open:
            raise TransportError("Mock transport not open")

        self._written_data.append(bytes(data))

        if self._script_index < len(self._script):
            expected_request, response = self._script[self._script_index]

            if expected_request is not None and data != expected_request:
                raise AssertionError(
                    f"Script mismatch at step {self._script_index}: "
                    f"expected {expected_request!r}, got {data!r}"
                )

            self._read_buffer.extend(response)
            self._script_index += 1

    def reset_script(self) -> None:
        """Reset script to beginning."""
        self._script_index = 0
        self._read_buffer.clear()

    def clear_script(self) -> None:
        """Clear all scripted expectations."""
        self._script.clear()
        self._script_index = 0
