"""Shared fixtures for the Reindeer test suite."""

from __future__ import annotations

import pytest

from shared.config import ReindeerConfig
from shared.logger import ReindeerLogger

from tests.builders import build_image, program_header


@pytest.fixture
def image64() -> bytes:
    """ELF64 with a null section and the section-name string table."""
    return build_image(64)


@pytest.fixture
def image32() -> bytes:
    return build_image(32)


@pytest.fixture
def image_with_segments() -> bytes:
    """ELF64 with two sections and two well-formed program headers."""
    return build_image(
        64,
        section_names=(".shstrtab", ".text"),
        segments=(
            program_header(64, type=1, flags=0x5, offset=0, vaddr=0x400000,
                           filesz=0x100, memsz=0x100, align=0x1000),
            program_header(64, type=0x6474E551, flags=0x6),
        ),
    )


@pytest.fixture
def quiet_logger() -> ReindeerLogger:
    return ReindeerLogger("test", console_output=False)


@pytest.fixture
def lenient_config() -> ReindeerConfig:
    config = ReindeerConfig()
    config.viewer.strict = False
    return config
