"""
String Tables
==============

A string table section is a run of NUL-terminated names referenced by
byte offset.  The first byte (index zero) and the last byte are both
defined to hold NUL, which guarantees every name is terminated.

Reference:
    Section 1-18 of https://refspecs.linuxfoundation.org/elf/elf.pdf
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from reindeer.core.errors import (
    InvalidUtf8,
    MissingNulTerminator,
    StringTableNotZeroTerminated,
    StringTableOutOfBounds,
)
from reindeer.core.range import Buffer, try_into_index

if TYPE_CHECKING:
    from reindeer.core.section import ElfSectionHeader


@dataclass(frozen=True, slots=True, eq=False)
class ElfStringTable:
    """A validated view over a string table's bytes."""

    buffer: memoryview

    @classmethod
    def parse(cls, buffer: Buffer) -> ElfStringTable:
        """Validate the boundary bytes of a string table.

        Raises:
            StringTableNotZeroTerminated: The table is empty, or its first
                or last byte is not NUL.
        """
        view = memoryview(buffer)
        if len(view) == 0 or view[0] != 0 or view[-1] != 0:
            raise StringTableNotZeroTerminated()
        return cls(buffer=view)

    def __len__(self) -> int:
        return len(self.buffer)

    def string_at(self, index: int) -> str:
        """Decode the NUL-terminated name starting at *index*.

        Raises:
            TooBigForUsize: *index* is not a valid platform index.
            StringTableOutOfBounds: *index* is at or past the table end.
            MissingNulTerminator: No NUL follows *index*.
            InvalidUtf8: The name is not valid UTF-8.
        """
        start = try_into_index(index)
        if start >= len(self.buffer):
            raise StringTableOutOfBounds(start)

        view = self.buffer
        end = start
        while end < len(view) and view[end] != 0:
            end += 1
        if end == len(view):
            raise MissingNulTerminator(start)

        try:
            return bytes(view[start:end]).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidUtf8(start, exc) from exc

    def section_name(self, header: ElfSectionHeader) -> str:
        """Resolve a section header's ``sh_name`` against this table."""
        return self.string_at(header.sh_name)
