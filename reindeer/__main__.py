"""
Reindeer Module Entry Point
============================

Allows running the viewer via: python -m reindeer
"""

from reindeer.cli import main

if __name__ == "__main__":
    main()
