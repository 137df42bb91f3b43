"""
Reindeer Shared Module
======================

Configuration, logging and console helpers used by the Reindeer viewer
and its CLI.
"""

from shared.config import ReindeerConfig

__all__ = ["ReindeerConfig"]
