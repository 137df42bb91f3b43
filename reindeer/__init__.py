"""
Reindeer -- Zero-Copy ELF Decoder
==================================

Reindeer decodes the Executable and Linkable Format (ELF) from an
untrusted byte buffer.  It exposes typed, bounds-checked views over the
caller's buffer without copying it, and never trusts a size, offset or
count it reads from the file.

Capabilities:
    - ELF32 and ELF64 little-endian header decoding and validation
    - Section and program header location with saturating arithmetic
    - Width-independent section / program header accessors
    - Section-name string table validation and name resolution
    - Segment consistency checks (file vs. memory size, alignment)
    - A readelf-style viewer CLI and fuzz-harness target bodies

Non-goals: writing ELF files, relocations, symbols, dynamic linking,
big-endian files, and loading segments.

References:
    - TIS Committee. (1995). ELF Specification, Version 1.2.
    - System V Application Binary Interface, Draft 2013.
"""

__version__ = "0.3.0"

from reindeer.core.elf import ElfFile
from reindeer.core.errors import ElfError
from reindeer.core.header import ElfHeader
from reindeer.core.program import ElfProgramHeader, ElfProgramHeaders
from reindeer.core.range import ByteRange, slice_buffer, try_into_index
from reindeer.core.section import ElfSectionHeader, ElfSectionHeaders
from reindeer.core.strtab import ElfStringTable

__all__ = [
    "ByteRange",
    "ElfError",
    "ElfFile",
    "ElfHeader",
    "ElfProgramHeader",
    "ElfProgramHeaders",
    "ElfSectionHeader",
    "ElfSectionHeaders",
    "ElfStringTable",
    "slice_buffer",
    "try_into_index",
]
