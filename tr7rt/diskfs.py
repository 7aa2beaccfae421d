"""A queued, sector-buffered file system reading from disk."""

from __future__ import annotations

import enum
from collections import deque
from typing import Optional

from .errors import fatal_error
from .filesources import DiskFileSource, FileSource
from .filesystem import (
    File,
    FileReceiver,
    FileRequest,
    FileSystem,
    FileSystemStatus,
    RequestPriority,
    RequestStatus,
)

SECTOR_SIZE = 0x800
BUFFER_SIZE = 0x100800
NUM_REQUESTS = 256
MAX_READ = 0x80000
_READ_WINDOW = 0x100000
_HIGH_PRIORITY_BASE = 0x80400
_SEEK_THRESHOLD = 0x40000
_U32 = 0xFFFFFFFF


class ReadState(enum.IntEnum):
    INIT = 0
    READ = 1
    READING = 2
    PROCESSING = 3
    PAUSED = 4
    EXIT = 5
    DONE = 6


def round_to_sectors(size: int) -> int:
    """Round ``size`` up to a whole number of sectors."""
    remainder = size & (SECTOR_SIZE - 1)
    if remainder:
        return SECTOR_SIZE - remainder + size
    return size


class Request(FileRequest):
    """A read request owned by a :class:`DiskFileSystem` pool."""

    def __init__(self, file_system: "DiskFileSystem") -> None:
        self.file_system = file_system
        self.is_initialised = False
        self.file_handle = 0
        self.skip_size = 0
        self.file_name = ""
        self.priority = RequestPriority.NORMAL
        self.close_file = False
        self.is_cancelled = False
        self.receiver: Optional[FileReceiver] = None
        self._status = RequestStatus.SETUP
        self.ref = 0
        self.bytes_read = 0
        self.bytes_processed = 0
        self.read_state = ReadState.INIT
        self.offset = 0
        self.size = 0

    def init(
        self, receiver: FileReceiver, file_name: str, file_handle: int, start_offset: int
    ) -> None:
        """Prepare the request for a new read."""
        self.is_initialised = True
        self.priority = RequestPriority.NORMAL
        self.file_handle = file_handle
        self.receiver = receiver
        self._status = RequestStatus.SETUP
        self.close_file = False
        self.offset = start_offset
        self.bytes_read = 0
        self.bytes_processed = 0
        self.read_state = ReadState.INIT
        self.is_cancelled = False
        self.skip_size = 0
        self.ref = 2
        self.file_name = file_name
        self.set_size(0)

    def add_ref(self) -> None:
        self.ref += 1

    def release(self) -> None:
        pass

    def set_compressed_size(self, compressed_size: int) -> None:
        pass

    def set_size(self, size: int) -> None:
        """Set the byte count to read; 0 means the whole file."""
        if size == 0:
            if self.file_handle:
                size = self.file_system.source.handle_size(self.file_handle)
            else:
                size = self.file_system.get_file_size(self.file_name)
        self.size = size

    def status(self) -> RequestStatus:
        return self._status

    def submit(self, priority: RequestPriority) -> None:
        self._status = RequestStatus.QUEUED
        self.priority = RequestPriority(priority)
        self.file_system.put_in_queue(self, self.priority)

    def cancel(self) -> None:
        if self._status in (RequestStatus.QUEUED, RequestStatus.PROCESSING):
            self.is_cancelled = True
        else:
            self._status = RequestStatus.CANCELLED

    def completed(self) -> float:
        return 0.0


class DiskFile(File):
    """A file held open on a :class:`DiskFileSystem`."""

    def __init__(self, file_name: str, file_system: "DiskFileSystem") -> None:
        self.file_system = file_system
        self.file_name = file_name
        self.request: Optional[Request] = None
        self.handle = file_system.source.open(file_name)
        if not self.handle:
            fatal_error("Failed to open %s", file_name)

    def request_read(
        self, receiver: FileReceiver, file_name: str, start_offset: int
    ) -> Request:
        request = self.file_system.pop_free_request()
        self.request = request
        request.init(receiver, file_name, self.handle, start_offset)
        return request

    def size(self) -> int:
        return self.file_system.source.handle_size(self.handle)


class DiskFileSystem(FileSystem):
    """Serves queued read requests one at a time through a shared buffer."""

    def __init__(self, base_path: str = "", source: Optional[FileSource] = None) -> None:
        self.source: FileSource = source if source is not None else DiskFileSource(base_path)
        self._buffer = bytearray(BUFFER_SIZE)
        self._view = memoryview(self._buffer)
        self._bytes_in_buffer = 0
        self._buffer_offset = 0
        self._file_offset = 0
        self._paused_bytes_in_buffer = 0
        self._paused_buffer_offset = 0
        self._paused_file_offset = 0
        self._paused_read_state = ReadState.INIT
        self._requests = [Request(self) for _ in range(NUM_REQUESTS)]
        self._free: deque[Request] = deque(self._requests)
        self._queue: list[Request] = []
        self.used_requests = 0

    @property
    def queue(self) -> tuple[Request, ...]:
        """Requests waiting to be served, head first."""
        return tuple(self._queue)

    def put_in_queue(self, request: Request, priority: RequestPriority) -> None:
        """Append normal and low requests; put high ones right after the head."""
        if self._queue and priority < RequestPriority.NORMAL:
            self._queue.insert(1, request)
        else:
            self._queue.append(request)

    def remove_from_queue(self, request: Request) -> None:
        """Remove ``request`` when it heads the queue; for any other entry the one after it is unlinked."""
        if not self._queue:
            return
        if self._queue[0] is request:
            self._queue.pop(0)
            return
        for index, queued in enumerate(self._queue):
            if queued is request:
                if index + 1 < len(self._queue):
                    del self._queue[index + 1]
                return

    def pop_free_request(self) -> Request:
        if not self._free:
            fatal_error("No free file requests")
        request = self._free.popleft()
        self.used_requests += 1
        return request

    def request_read(
        self, receiver: FileReceiver, file_name: str, start_offset: int
    ) -> Request:
        request = self.pop_free_request()
        request.init(receiver, file_name, 0, start_offset)
        return request

    def open_file(self, file_name: str) -> DiskFile:
        return DiskFile(file_name, self)

    def file_exists(self, file_name: str) -> bool:
        return self.source.exists(file_name)

    def get_file_size(self, file_name: str) -> int:
        return self.source.file_size(file_name)

    def set_specialisation_mask(self, mask: int) -> None:
        pass

    def get_specialisation_mask(self) -> int:
        return 0

    def status(self) -> FileSystemStatus:
        return FileSystemStatus.BUSY if self._queue else FileSystemStatus.IDLE

    def _process_buffer(self, base: int, request: Request, reading: bool) -> None:
        size = self._bytes_in_buffer
        if size == 0:
            return
        skip = request.skip_size
        if skip >= size:
            request.skip_size = skip - size
        else:
            read_size = size - skip
            start = base + self._buffer_offset + skip
            data = bytes(self._view[start : start + read_size])
            assert request.receiver is not None
            taken = request.receiver.receive_data(data, skip + request.bytes_processed)
            request.skip_size = 0 if taken == read_size else (taken - read_size) & _U32
        request.bytes_processed = (request.bytes_processed + size) & _U32
        if reading:
            self._buffer_offset += size
        else:
            self._buffer_offset = 0
        self._bytes_in_buffer = 0

    def update(self) -> None:
        """Advance the head request until it waits on a read or the queue empties."""
        while self._queue:
            request = self._queue[0]
            base = 0 if request.priority else _HIGH_PRIORITY_BASE
            state = request.read_state
            receiver = request.receiver
            assert receiver is not None

            if state is ReadState.INIT:
                if request.is_cancelled:
                    request.read_state = ReadState.EXIT
                    continue
                request._status = RequestStatus.PROCESSING
                receiver.receive_started(request, request.size)
                if not request.file_handle:
                    request.file_handle = self.source.open(request.file_name)
                    request.close_file = True
                if not request.file_handle:
                    request.read_state = ReadState.EXIT
                    fatal_error("Failed to open %s", request.file_name)
                request.read_state = ReadState.READ
                request.bytes_read = 0
                request.bytes_processed = 0
                self._buffer_offset = 0
                self._bytes_in_buffer = 0
                self._file_offset = request.offset

            elif state is ReadState.READ:
                if request.is_cancelled:
                    request.read_state = ReadState.EXIT
                    continue
                skip = request.skip_size
                if skip + request.bytes_processed == request.size:
                    request.read_state = ReadState.EXIT
                    continue
                if skip > _SEEK_THRESHOLD:
                    offset = self._file_offset + skip
                    skip = offset & (SECTOR_SIZE - 1)
                    request.skip_size = skip
                    self._file_offset = offset - skip
                    request.bytes_read = (request.bytes_read - skip) & _U32
                    request.bytes_processed = (request.bytes_processed - skip) & _U32
                start = self._bytes_in_buffer + self._buffer_offset
                num = min(
                    (_READ_WINDOW - start) & _U32,
                    (request.size - request.bytes_read) & _U32,
                    MAX_READ,
                )
                num = round_to_sectors(num)
                if num + self._bytes_in_buffer > BUFFER_SIZE:
                    num -= SECTOR_SIZE
                target = self._view[base + start : base + start + num]
                if self.source.read(request.file_handle, self._file_offset, num, target):
                    request.read_state = ReadState.READING
                    return

            elif state is ReadState.READING:
                count = self.source.get_read_result(request.file_handle)
                if count is None:
                    self._process_buffer(base, request, reading=True)
                    return
                self._bytes_in_buffer += count
                self._file_offset += count
                request.bytes_read += count
                if request.bytes_read > request.size:
                    self._bytes_in_buffer += request.size - request.bytes_read
                request.read_state = ReadState.PROCESSING

            elif state is ReadState.PROCESSING:
                self._process_buffer(base, request, reading=False)
                if request.bytes_read >= request.size:
                    if request.bytes_processed >= request.size:
                        request.read_state = ReadState.EXIT
                else:
                    request.read_state = ReadState.READ

            elif state is ReadState.PAUSED:
                self._bytes_in_buffer = self._paused_bytes_in_buffer
                self._buffer_offset = self._paused_buffer_offset
                self._file_offset = self._paused_file_offset
                request.read_state = self._paused_read_state

            elif state is ReadState.EXIT:
                if request.close_file:
                    self.source.close(request.file_handle)
                    request.file_handle = 0
                if request.is_cancelled:
                    receiver.receive_cancelled(request)
                    request._status = RequestStatus.CANCELLED
                else:
                    receiver.receive_done(request)
                    request._status = RequestStatus.DONE
                self.remove_from_queue(request)
                request.read_state = ReadState.DONE

            else:
                self.remove_from_queue(request)

    def synchronize(self) -> None:
        """Update until every queued request has finished."""
        while self.status() is FileSystemStatus.BUSY:
            self.update()