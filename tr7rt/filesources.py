"""Sources of raw file bytes addressed by integer handles."""

from __future__ import annotations

import abc
import os
from typing import BinaryIO, Optional, Union

from .errors import fatal_error

Buffer = Union[bytearray, memoryview]


class FileSource(abc.ABC):
    """Opens files by name and reads them through integer handles (0 means none)."""

    @abc.abstractmethod
    def open(self, file_name: str) -> int:
        """Open a file; return a non-zero handle, or 0 on failure."""

    @abc.abstractmethod
    def close(self, handle: int) -> None:
        """Close a handle returned by :meth:`open`."""

    @abc.abstractmethod
    def read(self, handle: int, offset: int, num_bytes: int, target: Buffer) -> bool:
        """Start reading ``num_bytes`` at ``offset`` into ``target``."""

    @abc.abstractmethod
    def get_read_result(self, handle: int) -> Optional[int]:
        """Bytes transferred by the last read, or None while it is still pending."""

    @abc.abstractmethod
    def handle_size(self, handle: int) -> int:
        """Size of the open file."""

    def file_size(self, file_name: str) -> int:
        """Size of the named file, or 0 if it cannot be opened."""
        handle = self.open(file_name)
        if not handle:
            return 0
        try:
            return self.handle_size(handle)
        finally:
            self.close(handle)

    def exists(self, file_name: str) -> bool:
        """True if the file can be opened and is not empty."""
        return self.file_size(file_name) != 0


class DiskFileSource(FileSource):
    """Reads files from the local disk relative to a base path."""

    def __init__(self, base_path: str = "") -> None:
        self.base_path = base_path
        self._files: dict[int, BinaryIO] = {}
        self._results: dict[int, int] = {}
        self._next_handle = 1

    def _resolve(self, file_name: str) -> str:
        path = ""
        if file_name[1:2] != ":":
            path = self.base_path
        if (
            not file_name.startswith("\\")
            and len(path) > 1
            and path[1] == ":"
            and path[2:3] != "\\"
        ):
            path += "\\"
        path += file_name
        if os.sep != "\\":
            path = path.replace("\\", os.sep)
        return path

    def _file(self, handle: int) -> BinaryIO:
        file = self._files.get(handle)
        if file is None:
            fatal_error("Disc error\n")
        return file  # type: ignore[return-value]

    def open(self, file_name: str) -> int:
        try:
            file = open(self._resolve(file_name), "rb")
        except OSError:
            return 0
        handle = self._next_handle
        self._next_handle += 1
        self._files[handle] = file
        return handle

    def close(self, handle: int) -> None:
        file = self._files.pop(handle, None)
        self._results.pop(handle, None)
        if file is not None:
            file.close()

    def read(self, handle: int, offset: int, num_bytes: int, target: Buffer) -> bool:
        file = self._file(handle)
        view = memoryview(target)[:num_bytes]
        try:
            file.seek(offset)
            count = file.readinto(view)
        except OSError:
            fatal_error("Disc error\n")
            return False
        self._results[handle] = count or 0
        return True

    def get_read_result(self, handle: int) -> Optional[int]:
        self._file(handle)
        return self._results.pop(handle, None)

    def handle_size(self, handle: int) -> int:
        file = self._file(handle)
        try:
            return os.fstat(file.fileno()).st_size
        except OSError:
            fatal_error("Disc error\n")
            return 0