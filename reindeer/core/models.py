"""
Reindeer Data Models
=====================

Pydantic models describing what the viewer reports about one ELF file.
They are built from the core's views by
:class:`~reindeer.core.engine.ElfInspector` and consumed by the console
and JSON report writers.  The core decoder itself never produces them.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class RangeInfo(BaseModel):
    """A half-open byte interval ``[start, end)``."""
    start: int = 0
    end: int = 0


class HeaderInfo(BaseModel):
    """Decoded ELF file header.

    Attributes mirror the ``e_*`` fields.  Fields the file declares
    absent are ``None``.
    """
    bits: int = 0
    type: str = ""
    machine: str = ""
    version: int = 0
    entry: Optional[int] = None
    phoff: Optional[int] = None
    shoff: Optional[int] = None
    flags: int = 0
    ehsize: int = 0
    phentsize: int = 0
    phnum: Optional[int] = None
    shentsize: int = 0
    shnum: Optional[int] = None
    shstrndx: Optional[int] = None


class SectionInfo(BaseModel):
    """One section header as shown in the viewer.

    Attributes:
        index: Position in the section header table.
        name: Resolved name, or empty if it could not be resolved.
        type: Symbolic ``sh_type`` or its hex value.
        address: ``sh_addr``; ``None`` if the section is not loaded.
        offset: ``sh_offset``.
        size: ``sh_size``.
        flags: ``sh_flags`` rendered as W/A/X letters.
        raw_flags: ``sh_flags`` as stored.
        link: ``sh_link``.
        info: ``sh_info``.
        align: ``sh_addralign``.
        entsize: ``sh_entsize``; ``None`` for non-table sections.
        error: Name resolution error, if any.
    """
    index: int = 0
    name: str = ""
    type: str = ""
    address: Optional[int] = None
    offset: int = 0
    size: int = 0
    flags: str = "-"
    raw_flags: int = 0
    link: int = 0
    info: int = 0
    align: int = 0
    entsize: Optional[int] = None
    error: str = ""


class SegmentInfo(BaseModel):
    """One program header as shown in the viewer."""
    index: int = 0
    type: str = ""
    offset: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: Optional[int] = None
    memsz: Optional[int] = None
    flags: str = "-"
    align: int = 0
    file_range: Optional[RangeInfo] = None
    memory_range: Optional[RangeInfo] = None
    error: str = ""


class ElfSummary(BaseModel):
    """Everything the viewer decoded from one file.

    Attributes:
        path: Source path, if the buffer came from a file.
        size: Buffer size in bytes.
        header: Decoded file header.
        sections: Section headers in table order.
        segments: Program headers in table order.
        string_table_resolved: Whether the section-name string table
            was found and validated.
        errors: Decoding errors collected in non-strict mode.
    """
    path: str = ""
    size: int = 0
    header: HeaderInfo = Field(default_factory=HeaderInfo)
    sections: list[SectionInfo] = Field(default_factory=list)
    segments: list[SegmentInfo] = Field(default_factory=list)
    string_table_resolved: bool = False
    errors: list[str] = Field(default_factory=list)

    @property
    def loadable_segments(self) -> list[SegmentInfo]:
        return [s for s in self.segments if s.type == "LOAD"]
