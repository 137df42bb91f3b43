"""
Reindeer JSON Report
=====================

Writes an :class:`~reindeer.core.models.ElfSummary` as a JSON document
for machine consumption.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from reindeer import __version__
from reindeer.core.models import ElfSummary


class ReindeerReportGenerator:
    """Generate JSON reports from viewer results.

    Usage::

        generator = ReindeerReportGenerator()
        generator.generate_json(summary, "report.json")
    """

    @staticmethod
    def build(summary: ElfSummary) -> dict[str, Any]:
        """Report document as a plain dictionary."""
        return {
            "report_type": "reindeer_elf_summary",
            "version": __version__,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "elf": summary.model_dump(mode="json"),
        }

    def generate_json(self, summary: ElfSummary, output_path: str) -> str:
        """Write the report to *output_path*.

        Returns:
            The absolute path of the written file.
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(self.build(summary), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        return str(path.resolve())
