"""
Reindeer Error Taxonomy
========================

Every failure the decoder can report is a subclass of :class:`ElfError`.
Errors are grouped by category so that callers can catch a whole family
(e.g. every identification problem) or a single kind.

A table, string table or optional field that the file declares absent is
*not* an error: those cases are reported as ``None`` by the accessors.

Categories:
    - :class:`StructuralError`     -- buffer too short for a record
    - :class:`IdentificationError` -- bad ident block
    - :class:`BoundsError`         -- index / range arithmetic failures
    - :class:`StringTableError`    -- malformed string tables or names
    - :class:`SegmentError`        -- inconsistent program headers
"""

from __future__ import annotations


class ElfError(Exception):
    """Base class for every decoding failure."""


# ---------------------------------------------------------------------------
# Structural
# ---------------------------------------------------------------------------

class StructuralError(ElfError):
    """The buffer cannot hold the requested structure."""


class ZeroCopyError(StructuralError):
    """Buffer is smaller than the fixed-size record being decoded."""

    def __init__(self, needed: int = 0, available: int = 0) -> None:
        self.needed = needed
        self.available = available
        super().__init__(
            "buffer is smaller than expected "
            f"(needed {needed} bytes, got {available})"
        )


# ---------------------------------------------------------------------------
# Identification
# ---------------------------------------------------------------------------

class IdentificationError(ElfError):
    """The ident block failed validation."""


class InvalidMagic(IdentificationError):
    def __init__(self, found: bytes) -> None:
        self.found = bytes(found)
        super().__init__(
            f"invalid magic number, expected b'\\x7fELF', found {self.found!r}"
        )


class InvalidDataEncoding(IdentificationError):
    def __init__(self, found: int) -> None:
        self.found = found
        super().__init__(
            f"invalid data encoding, expected 1 (little-endian), found {found}"
        )


class InvalidVersion(IdentificationError):
    def __init__(self, found: int) -> None:
        self.found = found
        super().__init__(
            f"invalid elf ident version, expected 1 (current), found {found}"
        )


class InvalidClass(IdentificationError):
    def __init__(self, found: int) -> None:
        self.found = found
        super().__init__(f"invalid elf ident class, found {found}")


# ---------------------------------------------------------------------------
# Range / arithmetic
# ---------------------------------------------------------------------------

class BoundsError(ElfError):
    """An index or byte range cannot be represented or is out of bounds."""


class TooBigForUsize(BoundsError):
    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"too big for a platform index: {value}")


class BufferOutOfBounds(BoundsError):
    """A byte range does not fit inside the caller's buffer."""

    def __init__(self, start: int, end: int, length: int) -> None:
        self.start = start
        self.end = end
        self.length = length
        super().__init__(
            f"range {start}..{end} is outside the buffer of {length} bytes"
        )


class StringTableHeaderOutOfBounds(BoundsError):
    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(
            f"string table section header index {index} "
            "is outside the section table"
        )


# ---------------------------------------------------------------------------
# String table
# ---------------------------------------------------------------------------

class StringTableError(ElfError):
    """The string table or a name inside it is malformed."""


class StringTableNotZeroTerminated(StringTableError):
    def __init__(self) -> None:
        super().__init__("string table first/last bytes were not zero")


class StringTableOutOfBounds(StringTableError, BoundsError):
    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"string table index {index} is outside the string table")


class MissingNulTerminator(StringTableError):
    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"no NUL terminator after string table index {index}")


class InvalidUtf8(StringTableError):
    def __init__(self, index: int, reason: UnicodeDecodeError) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"name at string table index {index} is not UTF-8: {reason}")


# ---------------------------------------------------------------------------
# Segment consistency
# ---------------------------------------------------------------------------

class SegmentError(ElfError):
    """A program header violates an ELF segment invariant."""


class FileSzLargerThanMemSz(SegmentError):
    def __init__(self) -> None:
        super().__init__("the file size can not be larger than the memory size")


class IncongruentSegmentAlignment(SegmentError):
    def __init__(self) -> None:
        super().__init__(
            "segment virtual address is not congruent with its file offset "
            "modulo the alignment"
        )


# ---------------------------------------------------------------------------
# Absence where a table is mandatory
# ---------------------------------------------------------------------------

class NoSectionHeaders(ElfError):
    def __init__(self) -> None:
        super().__init__("the elf file has no section header table")


__all__ = [
    "ElfError",
    "StructuralError",
    "ZeroCopyError",
    "IdentificationError",
    "InvalidMagic",
    "InvalidDataEncoding",
    "InvalidVersion",
    "InvalidClass",
    "BoundsError",
    "TooBigForUsize",
    "BufferOutOfBounds",
    "StringTableHeaderOutOfBounds",
    "StringTableError",
    "StringTableNotZeroTerminated",
    "StringTableOutOfBounds",
    "MissingNulTerminator",
    "InvalidUtf8",
    "SegmentError",
    "FileSzLargerThanMemSz",
    "IncongruentSegmentAlignment",
    "NoSectionHeaders",
]
