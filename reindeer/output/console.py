"""
Reindeer Console Output
========================

Rich terminal rendering of an :class:`~reindeer.core.models.ElfSummary`,
laid out like ``readelf``: a header panel, the section header table, the
program header table and the file-to-memory mapping of loadable
segments.
"""

from __future__ import annotations

from typing import Optional

from rich.markup import escape
from rich.panel import Panel

from shared.console import ReindeerConsole

from reindeer.core.models import (
    ElfSummary,
    HeaderInfo,
    RangeInfo,
    SectionInfo,
    SegmentInfo,
)


def _opt_hex(value: Optional[int], width: int = 0) -> str:
    return f"0x{(value or 0):0{width}x}"


def _range_str(location: Optional[RangeInfo]) -> str:
    if location is None:
        return "-"
    return f"0x{location.start:x}..0x{location.end:x}"


class ReindeerConsoleOutput:
    """Render viewer results to the terminal.

    Usage::

        output = ReindeerConsoleOutput()
        output.display(summary)
    """

    def __init__(self, console: ReindeerConsole | None = None) -> None:
        self._console: ReindeerConsole = console or ReindeerConsole()

    def display(
        self,
        summary: ElfSummary,
        *,
        show_sections: bool = True,
        show_segments: bool = True,
    ) -> None:
        self.display_header(summary)

        if show_sections:
            self.display_sections(summary.sections)
        if show_segments:
            self.display_segments(summary.segments)
            self.display_load_mappings(summary.loadable_segments)

        for message in summary.errors:
            self._console.warning(message)

    def display_header(self, summary: ElfSummary) -> None:
        h: HeaderInfo = summary.header
        lines: list[str] = [
            f"[bold]File:[/bold]         {escape(summary.path or '<buffer>')}",
            f"[bold]Size:[/bold]         {summary.size:,} bytes",
            f"[bold]Class:[/bold]        ELF{h.bits} (little-endian)",
            f"[bold]Type:[/bold]         {h.type}",
            f"[bold]Machine:[/bold]      {h.machine}",
            f"[bold]Entry point:[/bold]  {_opt_hex(h.entry)}",
            f"[bold]Sections:[/bold]     {h.shnum or 0} at offset {_opt_hex(h.shoff)}"
            f" ({h.shentsize} bytes each)",
            f"[bold]Segments:[/bold]     {h.phnum or 0} at offset {_opt_hex(h.phoff)}"
            f" ({h.phentsize} bytes each)",
            f"[bold]Name table:[/bold]   "
            + (f"section {h.shstrndx}" if h.shstrndx is not None else "none")
            + ("" if summary.string_table_resolved else " (unresolved)"),
        ]
        self._console.print(
            Panel(
                "\n".join(lines),
                title="[bold bright_cyan]ELF Header[/bold bright_cyan]",
                border_style="bright_cyan",
                expand=False,
            )
        )

    def display_sections(self, sections: list[SectionInfo]) -> None:
        if not sections:
            self._console.info("There are no section headers in this file.")
            return
        rows = [
            (
                f"[{s.index:02}]",
                escape(s.name) or ("?" if s.error else ""),
                s.type,
                _opt_hex(s.address, 16),
                f"{s.offset:06x}",
                f"{s.size:06x}",
                s.flags,
                s.align,
            )
            for s in sections
        ]
        self._console.table(
            "Section Headers",
            ["Nr", "Name", "Type", "Address", "Off", "Size", "Flags", "Align"],
            rows,
            justify=["right", "left", "left", "left", "right", "right", "left", "right"],
        )

    def display_segments(self, segments: list[SegmentInfo]) -> None:
        if not segments:
            self._console.info("There are no program headers in this file.")
            return
        rows = [
            (
                s.type,
                f"0x{s.offset:06x}",
                f"0x{s.vaddr:016x}",
                f"0x{s.paddr:016x}",
                _opt_hex(s.filesz, 6),
                _opt_hex(s.memsz, 6),
                s.flags,
                f"0x{s.align:x}",
            )
            for s in segments
        ]
        self._console.table(
            "Program Headers",
            ["Type", "Offset", "VirtAddr", "PhysAddr", "FileSize", "MemSize",
             "Flags", "Align"],
            rows,
        )

    def display_load_mappings(self, segments: list[SegmentInfo]) -> None:
        if not segments:
            return
        rows = [
            (
                s.index,
                _range_str(s.file_range),
                _range_str(s.memory_range),
                escape(s.error),
            )
            for s in segments
        ]
        self._console.table(
            "Loadable Segments",
            ["#", "File image", "Memory image", "Error"],
            rows,
            styles=["dim", "", "", "reindeer.error"],
        )
