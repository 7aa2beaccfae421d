"""Fatal runtime errors."""

from __future__ import annotations


class FatalError(RuntimeError):
    """An unrecoverable runtime failure."""


def fatal_error(message: str, *args: object) -> None:
    """Raise :class:`FatalError` with a printf-style formatted message."""
    text = message % args if args else message
    raise FatalError(text)