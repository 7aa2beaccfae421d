"""A file system that serves each file from the first member that has it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .filesystem import File, FileReceiver, FileRequest, FileSystem, FileSystemStatus

MAX_SYSTEMS = 8


@dataclass
class _Entry:
    system: FileSystem
    reprioritize: bool


class MultiFileSystem(FileSystem):
    """An ordered stack of up to eight file systems."""

    def __init__(self) -> None:
        self._entries: list[_Entry] = []

    @property
    def systems(self) -> tuple[FileSystem, ...]:
        """Member file systems in lookup order."""
        return tuple(entry.system for entry in self._entries)

    def _best(self, file_name: str) -> Optional[FileSystem]:
        for entry in self._entries:
            if entry.system.file_exists(file_name):
                return entry.system
        return None

    def _require(self, file_name: str) -> FileSystem:
        system = self._best(file_name)
        if system is None:
            raise FileNotFoundError(file_name)
        return system

    def add(self, file_system: FileSystem, reprioritize: bool, add_to_front: bool) -> None:
        if len(self._entries) >= MAX_SYSTEMS:
            raise OverflowError(f"at most {MAX_SYSTEMS} file systems can be added")
        entry = _Entry(file_system, reprioritize)
        if add_to_front:
            self._entries.insert(0, entry)
        else:
            self._entries.append(entry)

    def request_read(
        self, receiver: FileReceiver, file_name: str, start_offset: int
    ) -> FileRequest:
        return self._require(file_name).request_read(receiver, file_name, start_offset)

    def open_file(self, file_name: str) -> File:
        return self._require(file_name).open_file(file_name)

    def file_exists(self, file_name: str) -> bool:
        return self._best(file_name) is not None

    def get_file_size(self, file_name: str) -> int:
        return self._require(file_name).get_file_size(file_name)

    def set_specialisation_mask(self, mask: int) -> None:
        for entry in self._entries:
            entry.system.set_specialisation_mask(mask)

    def get_specialisation_mask(self) -> int:
        if not self._entries:
            return 0xFFFFFFFF
        return self._entries[0].system.get_specialisation_mask()

    def status(self) -> FileSystemStatus:
        if any(entry.system.status() == FileSystemStatus.BUSY for entry in self._entries):
            return FileSystemStatus.BUSY
        return FileSystemStatus.IDLE

    def update(self) -> None:
        for entry in self._entries:
            entry.system.update()

    def synchronize(self) -> None:
        for entry in self._entries:
            entry.system.synchronize()