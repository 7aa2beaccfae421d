"""Vertex element declarations and the strides they imply."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Iterator, Union

END_STREAM = 0xFF


class DeclType(enum.IntEnum):
    FLOAT1 = 0
    FLOAT2 = 1
    FLOAT3 = 2
    FLOAT4 = 3
    D3DCOLOR = 4
    UBYTE4 = 5
    SHORT2 = 6
    SHORT4 = 7
    UBYTE4N = 8
    SHORT2N = 9
    SHORT4N = 10
    USHORT2N = 11
    USHORT4N = 12
    UDEC3 = 13
    DEC3N = 14
    FLOAT16_2 = 15
    FLOAT16_4 = 16
    UNUSED = 17


_SIZES = {
    **dict.fromkeys(
        (
            DeclType.FLOAT1,
            DeclType.D3DCOLOR,
            DeclType.UBYTE4,
            DeclType.SHORT2,
            DeclType.UBYTE4N,
            DeclType.SHORT2N,
            DeclType.USHORT2N,
            DeclType.UDEC3,
            DeclType.DEC3N,
            DeclType.FLOAT16_2,
        ),
        4,
    ),
    **dict.fromkeys(
        (
            DeclType.FLOAT2,
            DeclType.SHORT4,
            DeclType.SHORT4N,
            DeclType.USHORT4N,
            DeclType.FLOAT16_4,
        ),
        8,
    ),
    DeclType.FLOAT3: 12,
    DeclType.FLOAT4: 16,
}


@dataclass(frozen=True)
class VertexElement:
    """One entry of a vertex declaration; stream ``END_STREAM`` ends the list."""

    stream: int
    offset: int
    type: Union[DeclType, int]
    method: int = 0
    usage: int = 0
    usage_index: int = 0

    @property
    def is_end(self) -> bool:
        return self.stream == END_STREAM


DECL_END = VertexElement(END_STREAM, 0, DeclType.UNUSED)


def element_size(decl_type: Union[DeclType, int]) -> int:
    """Byte size of one element of ``decl_type``; 0 for unknown types."""
    return _SIZES.get(decl_type, 0)  # type: ignore[call-overload]


def _until_end(elements: Iterable[VertexElement]) -> Iterator[VertexElement]:
    for element in elements:
        if element.is_end:
            return
        yield element


def vertex_stride(elements: Iterable[VertexElement]) -> int:
    """Total byte size of the elements before the end marker."""
    return sum(element_size(element.type) for element in _until_end(elements)) & 0xFFFF


class VertexFormat:
    """A vertex declaration with its computed stride."""

    def __init__(self, elements: Iterable[VertexElement]) -> None:
        self.elements: tuple[VertexElement, ...] = tuple(_until_end(elements))
        self.stride = vertex_stride(self.elements)


class VertexFormatRegistry:
    """Keeps every vertex format created, in creation order."""

    def __init__(self) -> None:
        self._formats: list[VertexFormat] = []

    def create(self, elements: Iterable[VertexElement]) -> VertexFormat:
        vertex_format = VertexFormat(elements)
        self._formats.append(vertex_format)
        return vertex_format

    def __iter__(self) -> Iterator[VertexFormat]:
        return iter(self._formats)

    def __len__(self) -> int:
        return len(self._formats)