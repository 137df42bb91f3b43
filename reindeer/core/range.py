"""
Range and Bounds Utilities
===========================

Byte ranges in an ELF file are expressed as unsigned integers as wide
as the file format's offsets (64 bits).  Python integers never overflow,
so the fixed-width behaviour of the format is reproduced explicitly:

    - :func:`saturating_add` / :func:`saturating_mul` clamp at
      :data:`U64_MAX` instead of growing past it, so an enormous offset
      can never be made to look small.
    - :func:`try_into_index` converts a file-width integer into a
      platform index (bounded by :data:`sys.maxsize`), failing instead
      of truncating.
    - :func:`slice_buffer` turns a converted range into a view of the
      caller's buffer, failing instead of silently shortening the slice
      the way Python slicing does.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Union

from reindeer.core.errors import BufferOutOfBounds, TooBigForUsize

U16_MAX: int = 0xFFFF
U32_MAX: int = 0xFFFF_FFFF
U64_MAX: int = 0xFFFF_FFFF_FFFF_FFFF

# Largest index a sequence on this platform can hold.
INDEX_MAX: int = sys.maxsize

Buffer = Union[bytes, bytearray, memoryview]


def saturating_add(a: int, b: int, limit: int = U64_MAX) -> int:
    """Return ``a + b`` clamped to *limit*."""
    return min(a + b, limit)


def saturating_mul(a: int, b: int, limit: int = U64_MAX) -> int:
    """Return ``a * b`` clamped to *limit*."""
    return min(a * b, limit)


def try_into_index(value: int) -> int:
    """Convert a file-width unsigned integer to a platform index.

    Raises:
        TooBigForUsize: If *value* is negative or exceeds :data:`INDEX_MAX`.
    """
    if value < 0 or value > INDEX_MAX:
        raise TooBigForUsize(value)
    return value


@dataclass(frozen=True, slots=True)
class ByteRange:
    """Half-open byte interval ``[start, end)``.

    Instances produced by the location resolvers always satisfy
    ``start <= end`` because both endpoints are computed with saturating
    addition.
    """

    start: int
    end: int

    @classmethod
    def from_offset(cls, start: int, size: int) -> ByteRange:
        """Build ``[start, start + size)`` with saturating addition."""
        return cls(start, saturating_add(start, size))

    def __len__(self) -> int:
        return max(self.end - self.start, 0)

    def __contains__(self, offset: object) -> bool:
        return isinstance(offset, int) and self.start <= offset < self.end

    def try_into_index(self) -> slice:
        """Convert both endpoints to platform indices.

        Raises:
            TooBigForUsize: If either endpoint is not representable.
        """
        return slice(try_into_index(self.start), try_into_index(self.end))

    def __str__(self) -> str:
        return f"0x{self.start:x}..0x{self.end:x}"


def slice_buffer(buffer: Buffer, location: ByteRange) -> memoryview:
    """Return a zero-copy view of *location* inside *buffer*.

    Raises:
        TooBigForUsize: If the range cannot be expressed as indices.
        BufferOutOfBounds: If the range is inverted or runs past the end.
    """
    index = location.try_into_index()
    view = memoryview(buffer)
    if index.start > index.stop or index.stop > len(view):
        raise BufferOutOfBounds(index.start, index.stop, len(view))
    return view[index]
