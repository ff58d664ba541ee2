"""Tests for MockTransport."""

import pytest

from rdflash.exceptions import TransportError
from rdflash.transport.mock import MockTransport, ScriptedMockTransport


class TestMockTransport:
    """Tests for MockTransport class."""

    @pytest.fixture
    def transport(self):
        """Create an open MockTransport instance."""
        transport = MockTransport()
        transport.open()
        return transport

    def test_open_close(self):
        """Test opening and closing transport."""
        transport = MockTransport()
        assert not transport.is_open
        transport.open()
        assert transport.is_open
        transport.close()
        assert not transport.is_open

    def test_double_open_raises(self, transport):
        """Test that opening twice raises error."""
        with pytest.raises(TransportError):
            transport.open()

    def test_write_records_data(self, transport):
        """Test that write records data."""
        transport.write_all(b"hello")
        transport.write_all(b"world")
        assert transport.written_data == [b"hello", b"world"]
        assert transport.last_written == b"world"

    def test_write_when_closed_raises(self):
        """Test that writing to closed transport raises."""
        with pytest.raises(TransportError):
            MockTransport().write_all(b"test")

    def test_read_when_closed_raises(self):
        with pytest.raises(TransportError):
            MockTransport().read_up_to(1)

    def test_read_without_data_is_empty(self, transport):
        """Test that an empty queue behaves like a timeout."""
        assert transport.read_up_to(4) == b""

    def test_read_one_response_per_call(self, transport):
        """Test that each read is served from one queued response."""
        transport.add_responses(b"boot", b"OK")
        assert transport.read_up_to(13) == b"boot"
        assert transport.read_up_to(13) == b"OK"
        assert transport.read_up_to(13) == b""

    def test_read_partial_response(self, transport):
        """Test that the rest of a long response stays buffered."""
        transport.add_response(b"hello world")
        assert transport.read_up_to(5) == b"hello"
        assert transport.read_up_to(6) == b" world"

    def test_clear(self, transport):
        """Test clearing transport state."""
        transport.write_all(b"test")
        transport.add_response(b"\xfc")
        transport.clear()
        assert transport.written_data == []
        assert transport.read_up_to(1) == b""

    def test_set_deadline(self, transport):
        transport.set_deadline(5.0)
        transport.set_deadline(2.0)
        assert transport.deadline == 2.0
        assert transport.deadlines == [5.0, 2.0]

    def test_response_callback(self, transport):
        """Test dynamic response callback."""
        transport.set_response_callback(lambda data: b"OK" if len(data) == 64 else None)
        transport.write_all(bytes(64))
        assert transport.read_up_to(2) == b"OK"
        transport.write_all(b"short")
        assert transport.read_up_to(2) == b""

    def test_context_manager(self):
        """Test context manager protocol."""
        with MockTransport() as transport:
            assert transport.is_open
            transport.add_response(b"\xfc")
            assert transport.read_up_to(1) == b"\xfc"
        assert not transport.is_open

    def test_assert_written(self, transport):
        """Test assert_written helper."""
        transport.write_all(b"test")
        transport.assert_written(b"test")
        transport.assert_written(b"test", 0)
        with pytest.raises(AssertionError):
            transport.assert_written(b"wrong")

    def test_assert_write_count(self, transport):
        """Test assert_write_count helper."""
        transport.write_all(b"a")
        transport.write_all(b"b")
        transport.assert_write_count(2)
        with pytest.raises(AssertionError):
            transport.assert_write_count(3)


class TestScriptedMockTransport:
    """Tests for ScriptedMockTransport class."""

    @pytest.fixture
    def transport(self):
        """Create an open ScriptedMockTransport instance."""
        transport = ScriptedMockTransport()
        transport.open()
        return transport

    def test_scripted_responses(self, transport):
        """Test scripted request/response pairs."""
        transport.expect(response=b"boot", request=b"queryd\r\n")
        transport.expect(response=b"upredy", request=b"upfirm\r\n")

        transport.write_all(b"queryd\r\n")
        assert transport.read_up_to(4) == b"boot"

        transport.write_all(b"upfirm\r\n")
        assert transport.read_up_to(6) == b"upredy"
        assert transport.remaining_steps == 0

    def test_scripted_any_request(self, transport):
        """Test scripted response for any request."""
        transport.expect(response=b"OK")
        transport.write_all(bytes(64))
        assert transport.read_up_to(2) == b"OK"

    def test_scripted_wrong_request_raises(self, transport):
        """Test that wrong request raises assertion."""
        transport.expect(response=b"boot", request=b"queryd\r\n")
        with pytest.raises(AssertionError) as exc_info:
            transport.write_all(b"wrong")
        assert "Script mismatch" in str(exc_info.value)

    def test_write_past_script_is_silent(self, transport):
        transport.write_all(b"anything")
        assert transport.read_up_to(4) == b""
        assert transport.written_data == [b"anything"]

    def test_reset_script(self, transport):
        """Test resetting script to beginning."""
        transport.expect(response=b"a")
        transport.expect(response=b"b")

        transport.write_all(b"x")
        transport.read_up_to(1)

        transport.reset_script()

        transport.write_all(b"y")
        assert transport.read_up_to(1) == b"a"

    def test_clear_script(self, transport):
        transport.expect(response=b"a")
        transport.clear_script()
        assert transport.remaining_steps == 0
