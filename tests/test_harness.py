"""Tests for the fuzz harness targets."""

import random

import pytest

from reindeer.harness import Corpus, full_target, string_table_target

from tests.builders import build_image, elf_header, program_header


class TestStringTableTarget:
    def test_keeps_resolvable_table(self, image64):
        assert string_table_target(image64) is Corpus.KEEP

    def test_rejects_missing_table(self):
        assert string_table_target(build_image(64, shstrndx=None)) is Corpus.REJECT

    def test_rejects_garbage(self):
        assert string_table_target(b"\x00" * 128) is Corpus.REJECT
        assert string_table_target(b"") is Corpus.REJECT


class TestFullTarget:
    def test_keeps_complete_image(self, image_with_segments):
        assert full_target(image_with_segments) is Corpus.KEEP

    def test_rejects_image_without_program_headers(self, image64):
        assert full_target(image64) is Corpus.REJECT

    def test_rejects_image_without_section_headers(self):
        data = elf_header(64, e_phoff=64, e_phnum=1) + program_header(64)
        assert full_target(data) is Corpus.REJECT

    def test_segment_errors_do_not_reject(self):
        data = build_image(
            64,
            segments=(
                program_header(64, filesz=0x200, memsz=0x100),
                program_header(64, offset=0x10, vaddr=0x401000, filesz=8, memsz=8, align=0x1000),
            ),
        )
        assert full_target(data) is Corpus.KEEP

    def test_rejects_truncated_tables(self, image_with_segments):
        assert full_target(image_with_segments[:-1]) is Corpus.REJECT

    def test_verdict_values(self):
        assert Corpus.KEEP.value == "keep"
        assert Corpus.REJECT.value == "reject"


@pytest.mark.parametrize("target", [string_table_target, full_target])
def test_every_prefix_is_classified(target, image_with_segments):
    for end in range(len(image_with_segments) + 1):
        assert target(image_with_segments[:end]) in (Corpus.KEEP, Corpus.REJECT)


@pytest.mark.parametrize("target", [string_table_target, full_target])
def test_random_mutations_are_classified(target, image_with_segments):
    rng = random.Random(0x7F454C46)
    for _ in range(500):
        data = bytearray(image_with_segments)
        for _ in range(rng.randint(1, 8)):
            data[rng.randrange(len(data))] = rng.randrange(256)
        assert target(bytes(data)) in (Corpus.KEEP, Corpus.REJECT)
