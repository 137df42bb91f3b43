"""
Reindeer Inspection Engine
===========================

Drives the decoding core over one file and collects the results into an
:class:`~reindeer.core.models.ElfSummary` for display or export.

Pipeline:
    1. Read the file (bounded by ``viewer.max_file_size``)
    2. Decode and validate the file header
    3. Resolve the section-name string table via ``e_shstrndx``
    4. Walk the section header table, resolving names
    5. Walk the program header table, computing file and memory images

In strict mode (the default) the first :class:`ElfError` propagates to
the caller.  Otherwise the error is logged, recorded on the summary, and
the pipeline moves on to the next entry.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from shared.config import ReindeerConfig
from shared.logger import ReindeerLogger

from reindeer.core.elf import ElfFile
from reindeer.core.errors import ElfError
from reindeer.core.header import ElfHeader
from reindeer.core.models import (
    ElfSummary,
    HeaderInfo,
    RangeInfo,
    SectionInfo,
    SegmentInfo,
)
from reindeer.core.program import ElfProgramHeader
from reindeer.core.range import Buffer, ByteRange
from reindeer.core.section import ElfSectionHeader
from reindeer.core.strtab import ElfStringTable


def _range_info(location: Optional[ByteRange]) -> Optional[RangeInfo]:
    if location is None:
        return None
    return RangeInfo(start=location.start, end=location.end)


class ElfInspector:
    """Runs the viewer pipeline and builds an :class:`ElfSummary`.

    Usage::

        inspector = ElfInspector()
        summary = inspector.inspect_path("/bin/true")
        print(len(summary.sections))
    """

    def __init__(
        self,
        config: ReindeerConfig | None = None,
        logger: ReindeerLogger | None = None,
    ) -> None:
        self._config: ReindeerConfig = config or ReindeerConfig()
        self._logger: ReindeerLogger = logger or ReindeerLogger(
            "engine", console_output=False
        )

    @property
    def strict(self) -> bool:
        return self._config.viewer.strict

    # ------------------------------------------------------------------ #
    #  Entry points
    # ------------------------------------------------------------------ #

    def read_path(self, file_path: str | Path) -> bytes:
        """Read *file_path*, enforcing ``viewer.max_file_size``.

        Raises:
            FileNotFoundError: The file does not exist.
            ValueError: The file exceeds ``viewer.max_file_size``.
        """
        path = Path(file_path)
        size = path.stat().st_size
        limit = self._config.viewer.max_file_size
        if size > limit:
            raise ValueError(
                f"File too large: {size:,} bytes (max: {limit:,} bytes)"
            )

        self._logger.debug("Reading %s", path, size=size)
        return path.read_bytes()

    def inspect_path(self, file_path: str | Path) -> ElfSummary:
        """Read *file_path* and inspect its contents.

        Raises:
            FileNotFoundError: The file does not exist.
            ValueError: The file exceeds ``viewer.max_file_size``.
            ElfError: Decoding failed (always for the header; for later
                stages only in strict mode).
        """
        return self.inspect(self.read_path(file_path), path=str(file_path))

    def inspect(self, buffer: Buffer, path: str = "") -> ElfSummary:
        """Inspect an in-memory ELF image."""
        with self._logger.timed(f"inspect {path or '<buffer>'}"):
            with self._logger.operation("header"):
                elf = ElfFile.parse(buffer)
                self._logger.debug(
                    "ELF%d %s for %s",
                    elf.header.width,
                    elf.header.type_name,
                    elf.header.machine_name,
                )

            summary = ElfSummary(
                path=path,
                size=len(elf.buffer),
                header=self._header_info(elf.header),
            )

            strtab = self._string_table(elf, summary)
            summary.string_table_resolved = strtab is not None
            self._sections(elf, strtab, summary)
            self._segments(elf, summary)

        return summary

    # ------------------------------------------------------------------ #
    #  Stages
    # ------------------------------------------------------------------ #

    def _record(self, summary: ElfSummary, stage: str, exc: ElfError) -> None:
        if self.strict:
            raise exc
        message = f"{stage}: {exc}"
        self._logger.warning("Skipping after error in %s", message)
        summary.errors.append(message)

    def _string_table(
        self, elf: ElfFile, summary: ElfSummary
    ) -> Optional[ElfStringTable]:
        with self._logger.operation("string_table"):
            try:
                strtab = elf.string_table()
            except ElfError as exc:
                self._record(summary, "string table", exc)
                return None
            if strtab is None:
                self._logger.debug("File declares no section-name string table")
            else:
                self._logger.debug("String table is %d bytes", len(strtab))
            return strtab

    def _sections(
        self,
        elf: ElfFile,
        strtab: Optional[ElfStringTable],
        summary: ElfSummary,
    ) -> None:
        table = elf.section_headers()
        with self._logger.operation("section_headers"):
            for index in range(len(table)):
                try:
                    section = table.get(index)
                except ElfError as exc:
                    self._record(summary, f"section header {index}", exc)
                    continue
                if section is None:
                    break
                info = self._section_info(index, section)
                if strtab is not None:
                    try:
                        info.name = strtab.section_name(section)
                    except ElfError as exc:
                        info.error = str(exc)
                        self._record(summary, f"section name {index}", exc)
                summary.sections.append(info)
            self._logger.debug("Decoded %d section headers", len(summary.sections))

    def _segments(self, elf: ElfFile, summary: ElfSummary) -> None:
        table = elf.program_headers()
        with self._logger.operation("program_headers"):
            for index in range(len(table)):
                try:
                    segment = table.get(index)
                except ElfError as exc:
                    self._record(summary, f"program header {index}", exc)
                    continue
                if segment is None:
                    break
                info = self._segment_info(index, segment)
                try:
                    info.memory_range = _range_info(segment.memory_location())
                except ElfError as exc:
                    info.error = str(exc)
                    self._record(summary, f"segment {index}", exc)
                summary.segments.append(info)
            self._logger.debug("Decoded %d program headers", len(summary.segments))

    # ------------------------------------------------------------------ #
    #  Model builders
    # ------------------------------------------------------------------ #

    @staticmethod
    def _header_info(header: ElfHeader) -> HeaderInfo:
        return HeaderInfo(
            bits=header.width,
            type=header.type_name,
            machine=header.machine_name,
            version=header.e_version,
            entry=header.e_entry,
            phoff=header.e_phoff,
            shoff=header.e_shoff,
            flags=header.e_flags,
            ehsize=header.e_ehsize,
            phentsize=header.e_phentsize,
            phnum=header.e_phnum,
            shentsize=header.e_shentsize,
            shnum=header.e_shnum,
            shstrndx=header.e_shstrndx,
        )

    @staticmethod
    def _section_info(index: int, section: ElfSectionHeader) -> SectionInfo:
        return SectionInfo(
            index=index,
            type=section.type_name,
            address=section.sh_addr,
            offset=section.sh_offset,
            size=section.sh_size,
            flags=section.flags_str,
            raw_flags=section.sh_flags,
            link=section.sh_link,
            info=section.sh_info,
            align=section.sh_addralign,
            entsize=section.sh_entsize,
        )

    @staticmethod
    def _segment_info(index: int, segment: ElfProgramHeader) -> SegmentInfo:
        return SegmentInfo(
            index=index,
            type=segment.type_name,
            offset=segment.p_offset,
            vaddr=segment.p_vaddr,
            paddr=segment.p_paddr,
            filesz=segment.p_filesz,
            memsz=segment.p_memsz,
            flags=segment.flags_str,
            align=segment.p_align,
            file_range=_range_info(segment.file_location()),
        )
