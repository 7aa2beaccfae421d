"""Hierarchical trace logs with per-log filters and a pluggable output backend."""

from __future__ import annotations

import abc
import enum
import sys
from dataclasses import dataclass
from typing import Iterator, Optional, TextIO

MAX_LOGS = 1024
BUFFER_SIZE = 2048
_SLOT_BITS = 10
_INDEX_MASK = MAX_LOGS - 1


class TraceFilter(enum.IntEnum):
    DEFAULT = 0
    ENABLED = 1
    DISABLED = 2


@dataclass(frozen=True)
class TraceMask:
    """Up to three log indices packed into 10-bit slots."""

    bits: int

    def indices(self) -> tuple[int, int, int]:
        """The three slot indices, highest slot first."""
        return tuple(  # type: ignore[return-value]
            (self.bits >> (_SLOT_BITS * (2 - i))) & _INDEX_MASK for i in range(3)
        )


class TraceRegistry:
    """Table of live trace logs and their effective filters."""

    max_count = MAX_LOGS

    def __init__(self) -> None:
        self._logs: list[Optional[TraceLog]] = [None] * MAX_LOGS
        self._filters: list[TraceFilter] = [TraceFilter.DEFAULT] * MAX_LOGS
        self.count = 0

    def get(self, index: int) -> Optional["TraceLog"]:
        return self._logs[index]

    def logs(self) -> Iterator["TraceLog"]:
        return (log for log in self._logs if log is not None)

    def check_filter(self, mask: TraceMask) -> bool:
        """False if any log named by the mask is disabled."""
        bits = mask.bits
        while bits:
            if self._filters[bits & _INDEX_MASK] == TraceFilter.DISABLED:
                return False
            bits >>= _SLOT_BITS
        return True

    def effective_filter(self, index: int) -> TraceFilter:
        return self._filters[index]

    def _register(self, log: "TraceLog") -> int:
        index = self.count
        self.count += 1
        while self._logs[index] is not None:
            index = (index + 1) % MAX_LOGS
        self._logs[index] = log
        return index

    def _unregister(self, log: "TraceLog") -> None:
        self.count -= 1
        if self.count == 0:
            set_backend(None)
        self._logs[log.index] = None
        self._filters[log.index] = TraceFilter.DEFAULT


class TraceLog:
    """A named log whose filter may be inherited from a parent."""

    def __init__(
        self,
        name: str,
        parent: Optional["TraceLog"] = None,
        filter: TraceFilter = TraceFilter.DEFAULT,
        registry: Optional[TraceRegistry] = None,
    ) -> None:
        self.registry = registry if registry is not None else default_registry
        if self.registry.count >= MAX_LOGS:
            raise RuntimeError("too many trace logs")
        if any(log.name == name for log in self.registry.logs()):
            raise ValueError(f"log name is not unique: {name!r}")
        self.name = name
        self.parent = parent
        self.own_filter = TraceFilter(filter)
        self._closed = False
        self.index = self.registry._register(self)
        self._apply(
            TraceFilter.DISABLED if self.own_filter == TraceFilter.DEFAULT else self.own_filter
        )

    @property
    def effective_filter(self) -> TraceFilter:
        return self.registry.effective_filter(self.index)

    def set_filter(self, filter: TraceFilter) -> None:
        self.own_filter = TraceFilter(filter)
        inherited = self.parent.effective_filter if self.parent else TraceFilter.DISABLED
        self._apply(inherited)

    def _apply(self, inherited: TraceFilter) -> None:
        effective = inherited if self.own_filter == TraceFilter.DEFAULT else self.own_filter
        self.registry._filters[self.index] = effective
        for log in list(self.registry.logs()):
            if log is not self and log.parent is self:
                log._apply(effective)

    def close(self) -> None:
        """Remove the log from its registry."""
        if self._closed:
            return
        self._closed = True
        self.registry._unregister(self)

    def __enter__(self) -> "TraceLog":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class TraceBackend(abc.ABC):
    @abc.abstractmethod
    def output(self, message: str) -> None:
        """Emit a piece of trace text."""


class StreamTraceBackend(TraceBackend):
    """Writes trace text to a stream, standard error by default."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    def output(self, message: str) -> None:
        stream = self._stream if self._stream is not None else sys.stderr
        stream.write(message)
        stream.flush()


_backend: Optional[TraceBackend] = None


def get_backend() -> TraceBackend:
    """The current backend, created on first use."""
    global _backend
    if _backend is None:
        _backend = StreamTraceBackend()
    return _backend


def set_backend(backend: Optional[TraceBackend]) -> Optional[TraceBackend]:
    """Replace the current backend and return the one it replaced."""
    global _backend
    if backend is not None and not isinstance(backend, TraceBackend):
        raise TypeError(f"not a trace backend: {backend!r}")
    previous, _backend = _backend, backend
    return previous


def formatted_append(text: str, size: int, fmt: str, *args: object) -> tuple[str, int]:
    """Append formatted text, keeping at most ``size - 1`` characters.

    Returns the stored text and the length the full text would have.
    """
    full = text + (fmt % args if args else fmt)
    return full[: max(size - 1, 0)], len(full)


class TraceContext:
    """One trace message: prefix on creation, body via write, newline on close."""

    def __init__(
        self,
        mask: TraceMask,
        auto_trailing_newline: bool = True,
        registry: Optional[TraceRegistry] = None,
    ) -> None:
        self.registry = registry if registry is not None else default_registry
        self.filter_check_result = self.registry.check_filter(mask)
        self.auto_trailing_newline = auto_trailing_newline
        self._static_log: Optional[TraceLog] = None
        self._closed = False

        if self.registry.count == 0:
            self._static_log = TraceLog("StaticDtor", None, TraceFilter.ENABLED, self.registry)

        if self.filter_check_result:
            text = ""
            opened = False
            for index in mask.indices():
                if not index:
                    continue
                log = self.registry.get(index)
                if log is None or not log.name:
                    continue
                text, _ = formatted_append(text, BUFFER_SIZE, "|" if opened else "[")
                text, _ = formatted_append(text, BUFFER_SIZE, "%s", log.name)
                opened = True
            if opened:
                text, _ = formatted_append(text, BUFFER_SIZE, "] ")
            get_backend().output(text)

    def write(self, fmt: str, *args: object) -> None:
        if not self.filter_check_result:
            return
        text = fmt % args if args else fmt
        if self.auto_trailing_newline and text.endswith("\n"):
            text = text[:-1]
        if len(text) >= BUFFER_SIZE:
            text = text[: BUFFER_SIZE - 4] + "..."
        get_backend().output(text)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self.filter_check_result:
            get_backend().output("\n")
        if self._static_log is not None:
            self._static_log.close()

    def __enter__(self) -> "TraceContext":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def trace_check_filter_and_print(mask: TraceMask, fmt: str, *args: object) -> None:
    """Print one complete trace line if the mask passes the filters."""
    with TraceContext(mask, True) as context:
        context.write(fmt, *args)


default_registry = TraceRegistry()
default_log = TraceLog("", None, TraceFilter.ENABLED, default_registry)