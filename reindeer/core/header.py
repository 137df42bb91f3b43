"""
ELF Header Decoder and Table Location Resolver
================================================

:class:`ElfHeader` validates the identification block, selects the 32-bit
or 64-bit file-header layout, and resolves the byte ranges of individual
section headers, program headers and the section-name string table.

The header never reads past itself: locating a table only produces a
:class:`~reindeer.core.range.ByteRange`, which callers convert into a
slice of their buffer with :func:`~reindeer.core.range.slice_buffer`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from reindeer.core.errors import (
    InvalidClass,
    InvalidDataEncoding,
    InvalidMagic,
    InvalidVersion,
)
from reindeer.core.range import (
    Buffer,
    ByteRange,
    U16_MAX,
    saturating_add,
    saturating_mul,
)
from reindeer.core.structures import (
    ELF_MAGIC,
    ELFCLASS32,
    ELFCLASS64,
    ELFDATA2LSB,
    EV_CURRENT,
    Elf32Header,
    Elf64Header,
    ElfIdent,
    file_type_name,
    machine_name,
)

RawHeader = Union[Elf32Header, Elf64Header]


def accessor(name: str) -> property:
    """Build a read-only accessor for a field shared by both layouts.

    Both raw layouts decode to Python integers, so a 32-bit value is
    already zero-extended to the 64-bit representation.
    """

    def get(self):  # type: ignore[no-untyped-def]
        return getattr(self.raw, name)

    get.__name__ = name
    get.__doc__ = f"``{name}`` of the underlying ELF32 or ELF64 record."
    return property(get)


def entry_location(
    table_offset: Optional[int],
    count: Optional[int],
    entry_size: int,
    index: int,
) -> Optional[ByteRange]:
    """Byte range of entry *index* in a table of *count* entries.

    Returns ``None`` when the table is absent or *index* is not below
    *count*.  Both ``start`` and ``end`` saturate at the 64-bit maximum.
    """
    if table_offset is None or count is None:
        return None
    if not 0 <= index < count or index > U16_MAX:
        return None
    start = saturating_add(table_offset, saturating_mul(index, entry_size))
    return ByteRange.from_offset(start, entry_size)


def table_location(
    table_offset: Optional[int],
    count: Optional[int],
    entry_size: int,
) -> Optional[ByteRange]:
    """Byte range covering a whole table, or ``None`` if it is absent."""
    if table_offset is None or count is None:
        return None
    return ByteRange.from_offset(table_offset, saturating_mul(count, entry_size))


@dataclass(frozen=True, slots=True, eq=False)
class ElfHeader:
    """A validated ELF file header, tagged with its width.

    Attributes:
        raw:  The decoded :class:`Elf32Header` or :class:`Elf64Header`.
        view: Zero-copy view of the header bytes in the caller's buffer.
    """

    raw: RawHeader
    view: memoryview

    @classmethod
    def parse(cls, buffer: Buffer) -> ElfHeader:
        """Validate the ident block and decode the matching header layout.

        Checks run in a fixed order: magic, data encoding, ident version,
        then class.

        Raises:
            ZeroCopyError: The buffer is shorter than the ident block or
                the selected header layout.
            InvalidMagic: The first four bytes are not ``\\x7fELF``.
            InvalidDataEncoding: The file is not little-endian.
            InvalidVersion: The ident version is not ``EV_CURRENT``.
            InvalidClass: The class is neither ELF32 nor ELF64.
        """
        ident = ElfIdent.from_prefix(buffer)

        if ident.ei_magic != ELF_MAGIC:
            raise InvalidMagic(ident.ei_magic)
        if ident.ei_data != ELFDATA2LSB:
            raise InvalidDataEncoding(ident.ei_data)
        if ident.ei_version != EV_CURRENT:
            raise InvalidVersion(ident.ei_version)

        raw: RawHeader
        if ident.ei_class == ELFCLASS32:
            raw = Elf32Header.from_prefix(buffer)
        elif ident.ei_class == ELFCLASS64:
            raw = Elf64Header.from_prefix(buffer)
        else:
            raise InvalidClass(ident.ei_class)

        return cls(raw=raw, view=memoryview(buffer)[: raw.size()])

    # ------------------------------------------------------------------ #
    #  Width
    # ------------------------------------------------------------------ #

    @property
    def is_64bit(self) -> bool:
        return isinstance(self.raw, Elf64Header)

    @property
    def width(self) -> int:
        """Address width in bits: 32 or 64."""
        return 64 if self.is_64bit else 32

    # ------------------------------------------------------------------ #
    #  Field accessors
    # ------------------------------------------------------------------ #

    e_ident = accessor("e_ident")
    e_type = accessor("e_type")
    e_machine = accessor("e_machine")
    e_version = accessor("e_version")
    e_entry = accessor("e_entry")
    e_phoff = accessor("e_phoff")
    e_shoff = accessor("e_shoff")
    e_flags = accessor("e_flags")
    e_ehsize = accessor("e_ehsize")
    e_phentsize = accessor("e_phentsize")
    e_phnum = accessor("e_phnum")
    e_shentsize = accessor("e_shentsize")
    e_shnum = accessor("e_shnum")
    e_shstrndx = accessor("e_shstrndx")

    @property
    def type_name(self) -> str:
        return file_type_name(self.e_type)

    @property
    def machine_name(self) -> str:
        return machine_name(self.e_machine)

    # ------------------------------------------------------------------ #
    #  Table locations
    # ------------------------------------------------------------------ #

    def section_header_location(self, header_number: int) -> Optional[ByteRange]:
        """Byte range of section header *header_number*, if it exists."""
        return entry_location(
            self.e_shoff, self.e_shnum, self.e_shentsize, header_number
        )

    def program_header_location(self, header_number: int) -> Optional[ByteRange]:
        """Byte range of program header *header_number*, if it exists."""
        return entry_location(
            self.e_phoff, self.e_phnum, self.e_phentsize, header_number
        )

    def string_table_header_location(self) -> Optional[ByteRange]:
        """Byte range of the section header for the section-name string table.

        The string table is located through :meth:`section_header_location`
        like any other section.
        """
        index = self.e_shstrndx
        if index is None:
            return None
        return self.section_header_location(index)

    def section_headers_location(self) -> Optional[ByteRange]:
        """Byte range of the whole section header table."""
        return table_location(self.e_shoff, self.e_shnum, self.e_shentsize)

    def program_headers_location(self) -> Optional[ByteRange]:
        """Byte range of the whole program header table."""
        return table_location(self.e_phoff, self.e_phnum, self.e_phentsize)
