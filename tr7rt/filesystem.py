"""Abstract file-system interfaces and the standard data receivers."""

from __future__ import annotations

import abc
import enum
from typing import Optional


class RequestStatus(enum.IntEnum):
    SETUP = 0
    QUEUED = 1
    PROCESSING = 2
    DONE = 3
    CANCELLED = 4


class RequestPriority(enum.IntEnum):
    HIGH = 0
    NORMAL = 1
    LOW = 2


class FileSystemStatus(enum.IntEnum):
    IDLE = 0
    BUSY = 1


class FileRequest(abc.ABC):
    """An asynchronous read of one file."""

    @abc.abstractmethod
    def add_ref(self) -> None: ...

    @abc.abstractmethod
    def release(self) -> None: ...

    @abc.abstractmethod
    def set_compressed_size(self, compressed_size: int) -> None: ...

    @abc.abstractmethod
    def set_size(self, size: int) -> None: ...

    @abc.abstractmethod
    def status(self) -> RequestStatus: ...

    @abc.abstractmethod
    def submit(self, priority: RequestPriority) -> None: ...

    @abc.abstractmethod
    def cancel(self) -> None: ...

    @abc.abstractmethod
    def completed(self) -> float: ...


class FileReceiver(abc.ABC):
    """Consumer of the data produced by a file request."""

    @abc.abstractmethod
    def receive_data(self, data: bytes, request_offset: int) -> int:
        """Accept ``data`` at ``request_offset``; return the number of bytes taken."""

    @abc.abstractmethod
    def receive_started(self, request: FileRequest, request_size: int) -> None: ...

    @abc.abstractmethod
    def receive_cancelled(self, request: FileRequest) -> None: ...

    @abc.abstractmethod
    def receive_done(self, request: FileRequest) -> None: ...


class File(abc.ABC):
    """An opened file that reads can be requested from."""

    @abc.abstractmethod
    def request_read(
        self, receiver: FileReceiver, file_name: str, start_offset: int
    ) -> FileRequest: ...

    @abc.abstractmethod
    def size(self) -> int: ...


class FileSystem(abc.ABC):
    """A source of files with queued, asynchronous reads."""

    @abc.abstractmethod
    def request_read(
        self, receiver: FileReceiver, file_name: str, start_offset: int
    ) -> FileRequest: ...

    @abc.abstractmethod
    def open_file(self, file_name: str) -> File: ...

    @abc.abstractmethod
    def file_exists(self, file_name: str) -> bool: ...

    @abc.abstractmethod
    def get_file_size(self, file_name: str) -> int: ...

    @abc.abstractmethod
    def set_specialisation_mask(self, mask: int) -> None: ...

    @abc.abstractmethod
    def get_specialisation_mask(self) -> int: ...

    @abc.abstractmethod
    def status(self) -> FileSystemStatus: ...

    @abc.abstractmethod
    def update(self) -> None: ...

    @abc.abstractmethod
    def synchronize(self) -> None: ...


def _store(buffer: bytearray, data: bytes, offset: int) -> int:
    end = offset + len(data)
    if offset < 0 or end > len(buffer):
        raise IndexError(f"write of {len(data)} bytes at {offset} exceeds buffer of {len(buffer)}")
    buffer[offset:end] = data
    return len(data)


class UserBufferReceiver(FileReceiver):
    """Copies received data into a caller-supplied buffer."""

    def __init__(self, buffer: bytearray) -> None:
        self.buffer = buffer

    def receive_data(self, data: bytes, request_offset: int) -> int:
        return _store(self.buffer, data, request_offset)

    def receive_started(self, request: FileRequest, request_size: int) -> None:
        pass

    def receive_cancelled(self, request: FileRequest) -> None:
        pass

    def receive_done(self, request: FileRequest) -> None:
        pass


class AllocatedReceiver(FileReceiver):
    """Allocates a buffer when a request starts and drops it when it ends."""

    def __init__(self) -> None:
        self.buffer: Optional[bytearray] = None

    def receive_data(self, data: bytes, request_offset: int) -> int:
        if self.buffer is None:
            raise RuntimeError("no buffer: receive_started was not called")
        return _store(self.buffer, data, request_offset)

    def receive_started(self, request: FileRequest, request_size: int) -> None:
        self.buffer = bytearray(request_size)

    def receive_cancelled(self, request: FileRequest) -> None:
        self.buffer = None

    def receive_done(self, request: FileRequest) -> None:
        self.buffer = None