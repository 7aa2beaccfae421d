"""Simple synchronous files for debug input and output."""

from __future__ import annotations

import abc
import enum
import os
from typing import BinaryIO, ClassVar, Optional


class ReadWrite(enum.Enum):
    READ = 0
    WRITE = 1


class DebugFile(abc.ABC):
    """A blocking file handle opened for reading or writing."""

    def __init__(self) -> None:
        self.file_name = ""

    @abc.abstractmethod
    def open(self, file_name: str, read_write: ReadWrite) -> bool: ...

    @abc.abstractmethod
    def close(self) -> None: ...

    @abc.abstractmethod
    def read(self, size: int) -> bytes: ...

    @abc.abstractmethod
    def write(self, data: bytes) -> int: ...

    @abc.abstractmethod
    def flush(self) -> None: ...

    @abc.abstractmethod
    def exists(self, file_name: str) -> bool: ...

    @abc.abstractmethod
    def end_of_file(self) -> bool: ...

    @abc.abstractmethod
    def size(self) -> int: ...

    @abc.abstractmethod
    def is_open(self) -> bool: ...

    def __enter__(self) -> "DebugFile":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class LocalDebugFile(DebugFile):
    """A debug file on the local disk."""

    def __init__(self) -> None:
        super().__init__()
        self._handle: Optional[BinaryIO] = None
        self._bytes_read = 0
        self.read_write: Optional[ReadWrite] = None

    def open(self, file_name: str, read_write: ReadWrite) -> bool:
        self.close()
        mode = "rb" if read_write == ReadWrite.READ else "wb"
        try:
            handle = open(file_name, mode)
        except OSError:
            return False
        self._handle = handle
        self._bytes_read = 0
        self.read_write = read_write
        self.file_name = str(file_name)
        return True

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            self.file_name = ""

    def read(self, size: int) -> bytes:
        if self._handle is None:
            return b""
        try:
            data = self._handle.read(size)
        except OSError:
            return b""
        self._bytes_read += len(data)
        return data

    def write(self, data: bytes) -> int:
        if self._handle is None:
            return 0
        try:
            return self._handle.write(data)
        except OSError:
            return 0

    def flush(self) -> None:
        if self._handle is not None:
            self._handle.flush()

    def exists(self, file_name: str) -> bool:
        try:
            with open(file_name, "rb"):
                return True
        except OSError:
            return False

    def end_of_file(self) -> bool:
        return self._bytes_read >= self.size()

    def size(self) -> int:
        if self._handle is None:
            return 0
        return os.fstat(self._handle.fileno()).st_size

    def is_open(self) -> bool:
        return self._handle is not None


class DebugFileSystem:
    """Factory and query helpers for debug files."""

    _instance: ClassVar[Optional["DebugFileSystem"]] = None

    def get_file(self) -> DebugFile:
        return LocalDebugFile()

    def file_exists(self, file_name: str) -> bool:
        return self.get_file().exists(file_name)

    def get_file_size(self, file_name: str) -> int:
        """Size of the file, or 0 if it cannot be opened."""
        file = self.get_file()
        if not file.open(file_name, ReadWrite.READ):
            return 0
        with file:
            return file.size()

    @classmethod
    def create(cls) -> "DebugFileSystem":
        DebugFileSystem._instance = cls()
        return DebugFileSystem._instance

    @classmethod
    def destroy(cls) -> None:
        DebugFileSystem._instance = None


def debug_file_system() -> Optional[DebugFileSystem]:
    """The instance made by :meth:`DebugFileSystem.create`, if any."""
    return DebugFileSystem._instance