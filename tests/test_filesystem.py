import pytest

from tr7rt.filesystem import (
    AllocatedReceiver,
    FileSystem,
    UserBufferReceiver,
)


def test_user_buffer_receiver_writes_at_offset():
    buffer = bytearray(8)
    receiver = UserBufferReceiver(buffer)
    assert receiver.receive_data(b"abc", 2) == 3
    assert bytes(buffer[2:5]) == b"abc"
    assert bytes(buffer[:2]) == b"\x00\x00"


def test_user_buffer_receiver_rejects_overflow():
    receiver = UserBufferReceiver(bytearray(4))
    with pytest.raises(IndexError):
        receiver.receive_data(b"abcd", 1)


def test_user_buffer_receiver_callbacks_leave_buffer_intact():
    buffer = bytearray(b"data")
    receiver = UserBufferReceiver(buffer)
    receiver.receive_started(None, 4)
    receiver.receive_done(None)
    receiver.receive_cancelled(None)
    assert receiver.buffer is buffer
    assert bytes(buffer) == b"data"


def test_allocated_receiver_lifecycle():
    receiver = AllocatedReceiver()
    receiver.receive_started(None, 6)
    assert len(receiver.buffer) == 6
    assert receiver.receive_data(b"xyz", 3) == 3
    assert bytes(receiver.buffer[3:]) == b"xyz"
    receiver.receive_done(None)
    assert receiver.buffer is None


def test_allocated_receiver_cancel_drops_buffer():
    receiver = AllocatedReceiver()
    receiver.receive_started(None, 2)
    receiver.receive_cancelled(None)
    assert receiver.buffer is None


def test_allocated_receiver_requires_start():
    with pytest.raises(RuntimeError):
        AllocatedReceiver().receive_data(b"a", 0)


def test_file_system_is_abstract():
    with pytest.raises(TypeError):
        FileSystem()