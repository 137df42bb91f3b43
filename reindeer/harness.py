"""
Fuzz Harness Targets
=====================

Target bodies for coverage-guided fuzzers.  Each target takes one input
buffer, drives the decoder over it and classifies the input:

    - :attr:`Corpus.KEEP`   -- the input decoded far enough to be
      interesting; keep it in the corpus.
    - :attr:`Corpus.REJECT` -- the input was rejected by the decoder.

A decoding failure is an expected outcome and is always an
:class:`~reindeer.core.errors.ElfError`.  Any other exception escaping a
target is a decoder bug, and is deliberately left to propagate so the
fuzzer reports it.

The driver loop (libFuzzer, atheris, AFL) is supplied by the fuzzer.
"""

from __future__ import annotations

import enum

from reindeer.core.elf import ElfFile
from reindeer.core.errors import ElfError
from reindeer.core.range import Buffer


class Corpus(str, enum.Enum):
    """Fuzzer verdict for one input."""
    KEEP = "keep"
    REJECT = "reject"


def string_table_target(buffer: Buffer) -> Corpus:
    """Keep inputs whose section-name string table resolves."""
    try:
        strtab = ElfFile.parse(buffer).string_table()
    except ElfError:
        return Corpus.REJECT
    return Corpus.KEEP if strtab is not None else Corpus.REJECT


def full_target(buffer: Buffer) -> Corpus:
    """Exercise every stage of the decoder.

    The input is kept when the header, the string table, every program
    header and every section header decode.  Section names and segment
    locations are computed too, but failures there do not reject the
    input.
    """
    try:
        elf = ElfFile.parse(buffer)
        strtab = elf.string_table()
        if strtab is None or elf.header.e_phnum is None:
            return Corpus.REJECT
        segments = list(elf.program_headers())
        sections = list(elf.section_headers(required=True))
    except ElfError:
        return Corpus.REJECT

    for section in sections:
        try:
            strtab.section_name(section)
        except ElfError:
            pass
    for segment in segments:
        segment.file_location()
        try:
            segment.memory_location()
        except ElfError:
            pass

    return Corpus.KEEP
