"""
Reindeer Output
================

- ``console`` -- Rich-based terminal display
- ``report``  -- JSON report generation
"""

from reindeer.output.console import ReindeerConsoleOutput
from reindeer.output.report import ReindeerReportGenerator

__all__ = [
    "ReindeerConsoleOutput",
    "ReindeerReportGenerator",
]
