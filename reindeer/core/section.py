"""
Section Headers
================

:class:`ElfSectionHeader` decodes one section header entry with the layout
selected by the owning :class:`~reindeer.core.header.ElfHeader`, and
:class:`ElfSectionHeaders` walks the section header table lazily, one
entry at a time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Optional, Union

from reindeer.core.errors import ElfError
from reindeer.core.header import ElfHeader, accessor
from reindeer.core.range import Buffer, ByteRange, slice_buffer
from reindeer.core.structures import (
    Elf32SectionHeader,
    Elf64SectionHeader,
    section_flags_str,
    section_type_name,
)

if TYPE_CHECKING:
    from reindeer.core.strtab import ElfStringTable

RawSectionHeader = Union[Elf32SectionHeader, Elf64SectionHeader]


@dataclass(frozen=True, slots=True, eq=False)
class ElfSectionHeader:
    """One section header, tagged with its width."""

    raw: RawSectionHeader
    view: memoryview

    @classmethod
    def parse(cls, header: ElfHeader, buffer: Buffer) -> ElfSectionHeader:
        """Decode a section header from the start of *buffer*.

        Raises:
            ZeroCopyError: *buffer* is shorter than one entry.
        """
        layout = Elf64SectionHeader if header.is_64bit else Elf32SectionHeader
        raw = layout.from_prefix(buffer)
        return cls(raw=raw, view=memoryview(buffer)[: layout.size()])

    sh_name = accessor("sh_name")
    sh_type = accessor("sh_type")
    sh_flags = accessor("sh_flags")
    sh_addr = accessor("sh_addr")
    sh_offset = accessor("sh_offset")
    sh_size = accessor("sh_size")
    sh_link = accessor("sh_link")
    sh_info = accessor("sh_info")
    sh_addralign = accessor("sh_addralign")
    sh_entsize = accessor("sh_entsize")

    @property
    def type_name(self) -> str:
        return section_type_name(self.sh_type)

    @property
    def flags_str(self) -> str:
        return section_flags_str(self.sh_flags)

    def location(self) -> ByteRange:
        """File range ``[sh_offset, sh_offset + sh_size)``, saturating."""
        return ByteRange.from_offset(self.sh_offset, self.sh_size)


class ElfSectionHeaders:
    """Lazy, restartable view of a file's section header table.

    Each iteration recomputes entry locations from the header, so the
    same table may be walked any number of times.  Nothing is cached.

    Usage::

        for section in ElfSectionHeaders(header, buffer):
            print(section.type_name)
    """

    __slots__ = ("_header", "_buffer")

    def __init__(self, header: ElfHeader, buffer: Buffer) -> None:
        self._header = header
        self._buffer = buffer

    def __len__(self) -> int:
        return self._header.e_shnum or 0

    def get(self, index: int) -> Optional[ElfSectionHeader]:
        """Decode section header *index*.

        Returns:
            The header, or ``None`` if *index* is outside the table or
            the file has no section header table.

        Raises:
            ElfError: The entry's range is unrepresentable, runs past
                the buffer, or is too short for one record.
        """
        location = self._header.section_header_location(index)
        if location is None:
            return None
        return ElfSectionHeader.parse(
            self._header, slice_buffer(self._buffer, location)
        )

    def __getitem__(self, index: int) -> ElfSectionHeader:
        section = self.get(index)
        if section is None:
            raise IndexError(f"section header index {index} out of range")
        return section

    def __iter__(self) -> Iterator[ElfSectionHeader]:
        for index in range(len(self)):
            section = self.get(index)
            if section is not None:
                yield section

    def find_by_name(
        self,
        string_table: ElfStringTable,
        name: str,
    ) -> Optional[ElfSectionHeader]:
        """Return the first section whose name resolves to *name*.

        Sections whose names cannot be resolved are skipped.
        """
        for section in self:
            try:
                if string_table.section_name(section) == name:
                    return section
            except ElfError:
                continue
        return None
