"""
Reindeer Console Interface
===========================

Rich-powered console wrapper giving every Reindeer entry point the same
palette for status messages and tables.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

_REINDEER_THEME = Theme(
    {
        "reindeer.success": "bold green",
        "reindeer.warning": "bold yellow",
        "reindeer.error": "bold red",
        "reindeer.info": "bold bright_blue",
    }
)


class ReindeerConsole:
    """Unified console for the viewer CLI.

    Usage::

        con = ReindeerConsole()
        con.success("Decoded 27 sections")
        con.table("Sections", ["Nr", "Name"], [(0, ""), (1, ".shstrtab")])
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        width: int | None = None,
    ) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output.
            record: Keep rendered output for :meth:`export_text`.
            width:  Fixed terminal width; autodetected when ``None``.
        """
        self._console = Console(
            theme=_REINDEER_THEME,
            quiet=quiet,
            record=record,
            highlight=False,
            width=width,
        )

    # ------------------------------------------------------------------ #
    #  Messages
    # ------------------------------------------------------------------ #

    # Message text is escaped: names and paths taken from a file may
    # contain square brackets.

    def success(self, message: str) -> None:
        self._console.print(
            f"[reindeer.success][✔] SUCCESS:[/reindeer.success] {escape(message)}"
        )

    def warning(self, message: str) -> None:
        self._console.print(
            f"[reindeer.warning][⚠] WARNING:[/reindeer.warning] {escape(message)}"
        )

    def error(self, message: str) -> None:
        self._console.print(
            f"[reindeer.error][✘] ERROR:[/reindeer.error] {escape(message)}"
        )

    def info(self, message: str) -> None:
        self._console.print(
            f"[reindeer.info][ℹ] INFO:[/reindeer.info] {escape(message)}"
        )

    # ------------------------------------------------------------------ #
    #  Tables
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
        justify: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Row tuples; every cell is stringified.
            caption:  Optional footer caption.
            styles:   Optional per-column Rich styles.
            justify:  Optional per-column justification
                      (``"left"``, ``"right"``, ``"center"``).
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            just = justify[idx] if justify and idx < len(justify) else "left"
            tbl.add_column(col_name, style=style, justify=just)  # type: ignore[arg-type]

        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Proxy to :meth:`rich.console.Console.print`."""
        self._console.print(*args, **kwargs)

    def export_text(self) -> str:
        """Recorded output as plain text (requires ``record=True``)."""
        return self._console.export_text()
