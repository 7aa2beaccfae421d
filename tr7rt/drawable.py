"""Drawables sorted into render passes and the lists that hold them."""

from __future__ import annotations

import abc
import enum
from collections import deque
from typing import Any, Iterator, Optional


class RenderPass(enum.IntFlag):
    DEPTH = 1 << 0
    DECAL = 1 << 1
    SHADOW = 1 << 2
    TRANSLUCENT = 1 << 3
    OPAQUE = 1 << 4
    PROJECTED = 1 << 5
    AMBIENT = 1 << 6
    MULTIPASSLIGHT = 1 << 7
    COMPOSITE = 1 << 8
    PREDATOR = 1 << 9
    HIGHLIGHT = 1 << 10
    WATER = 1 << 11
    DEPTHTOCOLOR = 1 << 12


PASS_COUNT = 13


class Drawable(abc.ABC):
    """Something that can be drawn in one or more render passes."""

    scene: Optional[Any] = None
    sort_z: float = 0.0

    @abc.abstractmethod
    def draw(self, render_pass: RenderPass, previous: Optional["Drawable"]) -> None: ...

    @abc.abstractmethod
    def compare(self, render_pass: RenderPass, other: "Drawable") -> bool: ...

    @abc.abstractmethod
    def passes(self) -> int: ...

    @abc.abstractmethod
    def poly_flags(self) -> int: ...

    def set_sort_z(self, sort_z: float) -> None:
        self.sort_z = sort_z

    def set_scene(self, scene: Any) -> None:
        self.scene = scene


class DrawableList:
    """A list of drawables; the most recently added is drawn first."""

    def __init__(self) -> None:
        self._items: deque[Drawable] = deque()

    def add(self, drawable: Drawable) -> None:
        self._items.appendleft(drawable)

    def draw(self, render_pass: RenderPass, scene: Any = None) -> None:
        for drawable in self._items:
            drawable.draw(render_pass, None)

    def clear(self) -> None:
        self._items.clear()

    def __iter__(self) -> Iterator[Drawable]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)