import os

import pytest

from tr7rt.diskfs import (
    NUM_REQUESTS,
    SECTOR_SIZE,
    DiskFileSystem,
    MAX_READ,
    ReadState,
    round_to_sectors,
)
from tr7rt.errors import FatalError
from tr7rt.filesystem import (
    FileReceiver,
    FileSystemStatus,
    RequestPriority,
    RequestStatus,
    UserBufferReceiver,
)


class Recorder(FileReceiver):
    def __init__(self, name="", events=None):
        self.name = name
        self.events = events if events is not None else []
        self.chunks = []
        self.started = None

    def receive_data(self, data, request_offset):
        self.chunks.append((request_offset, bytes(data)))
        return len(data)

    def receive_started(self, request, request_size):
        self.started = request_size

    def receive_cancelled(self, request):
        self.events.append(("cancelled", self.name))

    def receive_done(self, request):
        self.events.append(("done", self.name))

    def data(self):
        return b"".join(chunk for _, chunk in self.chunks)


def pattern(size):
    return (bytes(range(256)) * (size // 256 + 1))[:size]


@pytest.fixture
def fs(tmp_path):
    return DiskFileSystem(str(tmp_path) + os.sep)


def read_all(fs, name, priority=RequestPriority.NORMAL):
    recorder = Recorder(name)
    request = fs.request_read(recorder, name, 0)
    request.submit(priority)
    fs.synchronize()
    return request, recorder


def test_round_to_sectors_pins():
    assert round_to_sectors(0) == 0
    assert round_to_sectors(1) == SECTOR_SIZE
    assert round_to_sectors(SECTOR_SIZE) == SECTOR_SIZE


@pytest.mark.parametrize("size", [2, 100, 2047, 2049, 5000, 123457])
def test_round_to_sectors_invariants(size):
    rounded = round_to_sectors(size)
    assert rounded % SECTOR_SIZE == 0
    assert size <= rounded < size + SECTOR_SIZE


def test_small_read(tmp_path, fs):
    payload = pattern(5000)
    (tmp_path / "small.bin").write_bytes(payload)
    request, recorder = read_all(fs, "small.bin")
    assert recorder.data() == payload
    assert recorder.started == len(payload)
    assert request.status() == RequestStatus.DONE
    assert request.read_state == ReadState.DONE
    assert recorder.events == [("done", "small.bin")]
    assert fs.status() == FileSystemStatus.IDLE


@pytest.mark.parametrize("priority", [RequestPriority.HIGH, RequestPriority.NORMAL])
def test_large_read_in_chunks(tmp_path, fs, priority):
    payload = pattern(2 * MAX_READ + 123)
    (tmp_path / "big.bin").write_bytes(payload)
    request, recorder = read_all(fs, "big.bin", priority)
    assert recorder.data() == payload
    expected_offset = 0
    for offset, chunk in recorder.chunks:
        assert offset == expected_offset
        assert len(chunk) <= MAX_READ
        expected_offset += len(chunk)
    assert len(recorder.chunks) > 1
    assert request.bytes_processed == len(payload)


def test_user_buffer_receiver(tmp_path, fs):
    payload = pattern(3000)
    (tmp_path / "a.bin").write_bytes(payload)
    buffer = bytearray(len(payload))
    request = fs.request_read(UserBufferReceiver(buffer), "a.bin", 0)
    request.submit(RequestPriority.LOW)
    fs.synchronize()
    assert bytes(buffer) == payload


def test_status_busy_until_synchronized(tmp_path, fs):
    (tmp_path / "a.bin").write_bytes(b"abc")
    request = fs.request_read(Recorder(), "a.bin", 0)
    assert fs.status() == FileSystemStatus.IDLE
    request.submit(RequestPriority.NORMAL)
    assert request.status() == RequestStatus.QUEUED
    assert fs.status() == FileSystemStatus.BUSY
    fs.synchronize()
    assert fs.status() == FileSystemStatus.IDLE


def test_high_priority_goes_after_head(tmp_path, fs):
    events = []
    requests = {}
    for name in ("a", "b", "c"):
        (tmp_path / f"{name}.bin").write_bytes(name.encode() * 10)
        requests[name] = fs.request_read(Recorder(name, events), f"{name}.bin", 0)
    requests["a"].submit(RequestPriority.NORMAL)
    requests["b"].submit(RequestPriority.NORMAL)
    requests["c"].submit(RequestPriority.HIGH)
    queue = fs.queue
    assert [q is r for q, r in zip(queue, (requests["a"], requests["c"], requests["b"]))] == [
        True,
        True,
        True,
    ]
    fs.synchronize()
    assert events == [("done", "a"), ("done", "c"), ("done", "b")]


def test_cancel_queued_request(tmp_path, fs):
    (tmp_path / "a.bin").write_bytes(b"abcdef")
    recorder = Recorder("a")
    request = fs.request_read(recorder, "a.bin", 0)
    request.submit(RequestPriority.NORMAL)
    request.cancel()
    fs.synchronize()
    assert request.status() == RequestStatus.CANCELLED
    assert recorder.events == [("cancelled", "a")]
    assert recorder.started is None
    assert recorder.chunks == []


def test_cancel_unsubmitted_request(fs):
    request = fs.request_read(Recorder(), "none.bin", 0)
    request.cancel()
    assert request.status() == RequestStatus.CANCELLED
    assert request.is_cancelled is False


def test_failed_open_raises_then_finishes(fs):
    recorder = Recorder("missing")
    request = fs.request_read(recorder, "missing.bin", 0)
    request.submit(RequestPriority.NORMAL)
    with pytest.raises(FatalError, match="missing.bin"):
        fs.update()
    fs.synchronize()
    assert request.status() == RequestStatus.DONE
    assert recorder.events == [("done", "missing")]


def test_open_file_missing_raises(fs):
    with pytest.raises(FatalError, match="Failed to open missing.bin"):
        fs.open_file("missing.bin")


def test_open_file_read(tmp_path, fs):
    payload = pattern(4321)
    (tmp_path / "f.bin").write_bytes(payload)
    file = fs.open_file("f.bin")
    assert file.size() == len(payload)
    recorder = Recorder("f")
    request = file.request_read(recorder, "f.bin", 0)
    assert request.close_file is False
    request.submit(RequestPriority.NORMAL)
    fs.synchronize()
    assert recorder.data() == payload
    assert request.file_handle == file.handle


def test_file_queries(tmp_path, fs):
    (tmp_path / "a.bin").write_bytes(b"x" * 99)
    (tmp_path / "empty.bin").write_bytes(b"")
    assert fs.get_file_size("a.bin") == 99
    assert fs.file_exists("a.bin") is True
    assert fs.file_exists("empty.bin") is False
    assert fs.get_specialisation_mask() == 0
    fs.set_specialisation_mask(5)
    assert fs.get_specialisation_mask() == 0


def test_request_refs_and_completion(fs):
    request = fs.request_read(Recorder(), "x.bin", 0)
    assert request.ref == 2
    request.add_ref()
    assert request.ref == 3
    assert request.completed() == 0.0
    assert request.size == 0


def test_request_pool_exhaustion(fs):
    recorder = Recorder()
    for _ in range(NUM_REQUESTS):
        fs.request_read(recorder, "x.bin", 0)
    assert fs.used_requests == NUM_REQUESTS
    with pytest.raises(FatalError):
        fs.request_read(recorder, "x.bin", 0)


def test_remove_head_from_queue(tmp_path, fs):
    first = fs.request_read(Recorder(), "a.bin", 0)
    second = fs.request_read(Recorder(), "b.bin", 0)
    first.submit(RequestPriority.NORMAL)
    second.submit(RequestPriority.NORMAL)
    fs.remove_from_queue(first)
    assert len(fs.queue) == 1
    assert fs.queue[0] is second