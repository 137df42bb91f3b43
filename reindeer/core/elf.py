"""
ELF File Facade
================

:class:`ElfFile` ties the decoding stages together over one immutable
buffer::

    buffer -> ElfHeader -> locations -> section / program headers
                                     -> string table -> section names

The facade keeps only the buffer and the decoded header; every other
view is recomputed on request.
"""

from __future__ import annotations

from typing import Optional

from reindeer.core.errors import NoSectionHeaders, StringTableHeaderOutOfBounds
from reindeer.core.header import ElfHeader
from reindeer.core.program import ElfProgramHeaders
from reindeer.core.range import Buffer, slice_buffer
from reindeer.core.section import ElfSectionHeader, ElfSectionHeaders
from reindeer.core.strtab import ElfStringTable


class ElfFile:
    """Read-only decoder over a complete ELF image.

    Usage::

        elf = ElfFile.parse(Path("/bin/true").read_bytes())
        strtab = elf.string_table()
        for section in elf.section_headers():
            print(strtab.section_name(section) if strtab else "?")
    """

    __slots__ = ("_buffer", "_header")

    def __init__(self, header: ElfHeader, buffer: Buffer) -> None:
        self._header = header
        self._buffer = memoryview(buffer)

    @classmethod
    def parse(cls, buffer: Buffer) -> ElfFile:
        """Decode the file header of *buffer*.

        Raises:
            ElfError: The ident block or header is invalid.
        """
        return cls(ElfHeader.parse(buffer), buffer)

    @property
    def header(self) -> ElfHeader:
        return self._header

    @property
    def buffer(self) -> memoryview:
        return self._buffer

    def section_headers(self, required: bool = False) -> ElfSectionHeaders:
        """Lazy view of the section header table.

        Raises:
            NoSectionHeaders: *required* is set and the file declares no
                section header table.
        """
        if required and self._header.section_headers_location() is None:
            raise NoSectionHeaders()
        return ElfSectionHeaders(self._header, self._buffer)

    def program_headers(self) -> ElfProgramHeaders:
        return ElfProgramHeaders(self._header, self._buffer)

    def string_table_header(self) -> Optional[ElfSectionHeader]:
        """Section header of the section-name string table (``e_shstrndx``).

        Returns:
            ``None`` if the file declares no section-name string table.

        Raises:
            StringTableHeaderOutOfBounds: ``e_shstrndx`` does not name an
                entry of the section header table.
            ElfError: The header entry cannot be sliced or decoded.
        """
        index = self._header.e_shstrndx
        if index is None:
            return None
        location = self._header.string_table_header_location()
        if location is None:
            raise StringTableHeaderOutOfBounds(index)
        return ElfSectionHeader.parse(
            self._header, slice_buffer(self._buffer, location)
        )

    def string_table(self) -> Optional[ElfStringTable]:
        """Resolve and validate the section-name string table.

        Returns:
            ``None`` if the file declares no section-name string table.

        Raises:
            ElfError: The table cannot be located, sliced or validated.
        """
        section = self.string_table_header()
        if section is None:
            return None
        return ElfStringTable.parse(slice_buffer(self._buffer, section.location()))

    def section_data(self, section: ElfSectionHeader) -> memoryview:
        """Zero-copy view of a section's file contents.

        Raises:
            ElfError: The section's range does not fit the buffer.
        """
        return slice_buffer(self._buffer, section.location())

    def section_by_name(self, name: str) -> Optional[ElfSectionHeader]:
        """Find a section by name, or ``None`` if there is no such section
        or no section-name string table."""
        strtab = self.string_table()
        if strtab is None:
            return None
        return self.section_headers().find_by_name(strtab, name)
