"""
Reindeer Core Module
=====================

The decoding core (``errors``, ``range``, ``structures``, ``header``,
``section``, ``program``, ``strtab``, ``elf``) is pure: no I/O, no
logging, no shared state.  ``models`` and ``engine`` build viewer
results on top of it.
"""
