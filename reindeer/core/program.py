"""
Program Headers
================

:class:`ElfProgramHeader` decodes one program header (segment) entry.
The ELF32 and ELF64 layouts order their fields differently: the 64-bit
record moves ``p_flags`` up next to ``p_type``.  Accessors hide that
difference.

Two ELF invariants are enforced when computing a segment's memory
image:

    - ``p_filesz`` may not exceed ``p_memsz``;
    - for ``PT_LOAD`` segments with ``p_align > 1``, ``p_vaddr`` and
      ``p_offset`` must be congruent modulo ``p_align``.

Reference:
    Section 2-2 of https://refspecs.linuxfoundation.org/elf/elf.pdf
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Union

from reindeer.core.errors import FileSzLargerThanMemSz, IncongruentSegmentAlignment
from reindeer.core.header import ElfHeader, accessor
from reindeer.core.range import Buffer, ByteRange, slice_buffer
from reindeer.core.structures import (
    PT_LOAD,
    Elf32ProgramHeader,
    Elf64ProgramHeader,
    segment_flags_str,
    segment_type_name,
)

RawProgramHeader = Union[Elf32ProgramHeader, Elf64ProgramHeader]


@dataclass(frozen=True, slots=True, eq=False)
class ElfProgramHeader:
    """One program header, tagged with its width."""

    raw: RawProgramHeader
    view: memoryview

    @classmethod
    def parse(cls, header: ElfHeader, buffer: Buffer) -> ElfProgramHeader:
        """Decode a program header from the start of *buffer*.

        Raises:
            ZeroCopyError: *buffer* is shorter than one entry.
        """
        layout = Elf64ProgramHeader if header.is_64bit else Elf32ProgramHeader
        raw = layout.from_prefix(buffer)
        return cls(raw=raw, view=memoryview(buffer)[: layout.size()])

    p_type = accessor("p_type")
    p_offset = accessor("p_offset")
    p_vaddr = accessor("p_vaddr")
    p_paddr = accessor("p_paddr")
    p_filesz = accessor("p_filesz")
    p_memsz = accessor("p_memsz")
    p_flags = accessor("p_flags")
    p_align = accessor("p_align")

    @property
    def type_name(self) -> str:
        return segment_type_name(self.p_type)

    @property
    def flags_str(self) -> str:
        return segment_flags_str(self.p_flags)

    def file_location(self) -> Optional[ByteRange]:
        """File image range ``[p_offset, p_offset + p_filesz)``.

        Returns ``None`` when the segment has no file image.
        """
        size = self.p_filesz
        if size is None:
            return None
        return ByteRange.from_offset(self.p_offset, size)

    def memory_location(self) -> Optional[ByteRange]:
        """Memory image range ``[p_vaddr, p_vaddr + p_memsz)``.

        Returns ``None`` when the memory image is empty.

        Raises:
            FileSzLargerThanMemSz: ``p_filesz`` exceeds ``p_memsz``.
            IncongruentSegmentAlignment: A loadable segment's address and
                offset disagree modulo its alignment.
        """
        size = self.p_memsz
        if size is None:
            return None

        if (self.p_filesz or 0) > size:
            raise FileSzLargerThanMemSz()

        align = self.p_align
        if (
            self.p_type == PT_LOAD
            and align > 1
            and self.p_vaddr % align != self.p_offset % align
        ):
            raise IncongruentSegmentAlignment()

        return ByteRange.from_offset(self.p_vaddr, size)


class ElfProgramHeaders:
    """Lazy, restartable view of a file's program header table."""

    __slots__ = ("_header", "_buffer")

    def __init__(self, header: ElfHeader, buffer: Buffer) -> None:
        self._header = header
        self._buffer = buffer

    def __len__(self) -> int:
        return self._header.e_phnum or 0

    def get(self, index: int) -> Optional[ElfProgramHeader]:
        """Decode program header *index*, or ``None`` if it does not exist.

        Raises:
            ElfError: The entry cannot be sliced or decoded.
        """
        location = self._header.program_header_location(index)
        if location is None:
            return None
        return ElfProgramHeader.parse(
            self._header, slice_buffer(self._buffer, location)
        )

    def __getitem__(self, index: int) -> ElfProgramHeader:
        segment = self.get(index)
        if segment is None:
            raise IndexError(f"program header index {index} out of range")
        return segment

    def __iter__(self) -> Iterator[ElfProgramHeader]:
        for index in range(len(self)):
            segment = self.get(index)
            if segment is not None:
                yield segment

    def loadable(self) -> Iterator[ElfProgramHeader]:
        """Iterate over ``PT_LOAD`` segments only."""
        return (segment for segment in self if segment.p_type == PT_LOAD)
