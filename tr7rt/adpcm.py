"""IMA-style 4-bit ADPCM decoding of 36-byte sound blocks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .mathutil import clamp

BLOCK_SIZE = 36
SAMPLES_PER_BLOCK = 64
BYTES_PER_BLOCK_DECODED = SAMPLES_PER_BLOCK * 2
MAX_STEP_INDEX = 88
STEP_LIMIT = 0x1FFF

_NEXT_STEP = (-1, -1, -1, -1, 2, 4, 6, 8) * 2

_STEP_TABLE = [
    7, 8, 9, 10, 11, 12, 13, 14,
    16, 17, 19, 21, 23, 25, 28, 31,
    34, 37, 41, 45, 50, 55, 60, 66,
    73, 80, 88, 97, 107, 118, 130, 143,
    157, 173, 190, 209, 230, 253, 279, 307,
    337, 371, 408, 449, 494, 544, 598, 658,
    724, 796, 876, 963, 1060, 1166, 1282, 1411,
    1552, 1707, 1878, 2066, 2272, 2499, 2749, 3024,
    3327, 3660, 4026, 4428, 4871, 5358, 5894, 6484,
    7132, 7845, 8630, 9493, 10442, 11487, 12635, 13899,
    15289, 16818, 18500, 20350, 22385, 24623, 27086, 29794,
    32767,
]

_total_sound_memory = 0

Bytes = Union[bytes, bytearray, memoryview]


def calc_table() -> None:
    """Limit every step size in the decoding table to ``STEP_LIMIT``."""
    _STEP_TABLE[:] = [min(step, STEP_LIMIT) for step in _STEP_TABLE]


def _decode_sample(code: int, predicted: int, step: int) -> int:
    delta = step >> 3
    if code & 1:
        delta += step >> 2
    if code & 2:
        delta += step >> 1
    if code & 4:
        delta += step
    if code & 8:
        delta = -delta
    return clamp(delta + predicted, -32768, 32767)


def _next_index(index: int, code: int) -> int:
    return clamp(index + _NEXT_STEP[code], 0, MAX_STEP_INDEX)


def _decode_block(block: bytes) -> list[int]:
    predictor = int.from_bytes(block[0:2], "little", signed=True)
    index = block[2]
    if index > MAX_STEP_INDEX:
        raise ValueError(f"step index {index} out of range 0..{MAX_STEP_INDEX}")

    code = block[4] >> 4
    value = _decode_sample(code, predictor, _STEP_TABLE[index])
    index = _next_index(index, code)
    samples = [predictor, value]

    for byte in block[5:BLOCK_SIZE]:
        for code in (byte & 0xF, byte >> 4):
            value = _decode_sample(code, value, _STEP_TABLE[index])
            index = _next_index(index, code)
            samples.append(value)
    return samples


def decode(data: Bytes, num_blocks: Optional[int] = None) -> list[int]:
    """Decode ``num_blocks`` blocks (all whole blocks by default) into 16-bit samples."""
    raw = bytes(data)
    if num_blocks is None:
        num_blocks = len(raw) // BLOCK_SIZE
    if num_blocks < 0:
        raise ValueError("num_blocks must not be negative")
    if len(raw) < num_blocks * BLOCK_SIZE:
        raise ValueError(
            f"{num_blocks} blocks need {num_blocks * BLOCK_SIZE} bytes, got {len(raw)}"
        )
    samples: list[int] = []
    for start in range(0, num_blocks * BLOCK_SIZE, BLOCK_SIZE):
        samples.extend(_decode_block(raw[start : start + BLOCK_SIZE]))
    return samples


@dataclass
class Sample:
    """A decoded sound sample ready for playback."""

    length: int
    loop_start: int
    loop_end: int
    pcm: tuple[int, ...] = ()


def upload_sample(data: Bytes, loop_start: int, loop_end: int) -> Sample:
    """Decode ADPCM data into a :class:`Sample`; ``length`` is in bytes of PCM."""
    global _total_sound_memory
    num_blocks = len(data) // BLOCK_SIZE
    pcm = decode(data, num_blocks)
    length = num_blocks * BYTES_PER_BLOCK_DECODED
    _total_sound_memory += length
    return Sample(length=length, loop_start=loop_start, loop_end=loop_end, pcm=tuple(pcm))