"""Tests for console rendering and JSON reports."""

import json

import pytest

from reindeer.core.engine import ElfInspector
from reindeer.output import ReindeerConsoleOutput, ReindeerReportGenerator
from shared.console import ReindeerConsole

from tests.builders import build_image


@pytest.fixture
def summary(quiet_logger, image_with_segments):
    return ElfInspector(logger=quiet_logger).inspect(image_with_segments, path="sample.elf")


def _render(summary, **options):
    console = ReindeerConsole(record=True, width=200)
    ReindeerConsoleOutput(console=console).display(summary, **options)
    return console.export_text()


def test_display(summary):
    text = _render(summary)
    assert "sample.elf" in text
    assert "ELF64 (little-endian)" in text
    assert "EXEC (Executable)" in text
    assert ".text" in text
    assert "Loadable Segments" in text
    assert "0x400000..0x400100" in text


def test_display_without_tables(summary):
    text = _render(summary, show_sections=False, show_segments=False)
    assert "Section Headers" not in text
    assert "Program Headers" not in text


def test_empty_tables(quiet_logger):
    summary = ElfInspector(logger=quiet_logger).inspect(build_image(64, shstrndx=None))
    summary.sections.clear()
    text = _render(summary)
    assert "There are no section headers in this file." in text
    assert "There are no program headers in this file." in text


def test_names_are_not_markup(summary):
    summary.sections[2].name = "[bold]odd[/bold]"
    assert "[bold]odd[/bold]" in _render(summary)


def test_errors_are_shown(summary):
    summary.errors.append("segment 3: broken")
    assert "segment 3: broken" in _render(summary)


def test_json_report(summary, tmp_path):
    path = ReindeerReportGenerator().generate_json(summary, str(tmp_path / "r.json"))
    document = json.loads(open(path, encoding="utf-8").read())
    assert document["report_type"] == "reindeer_elf_summary"
    assert document["elf"]["path"] == "sample.elf"
    assert document["elf"]["header"]["machine"] == "x86_64"
    assert "generated_at" in document


def test_error_messages_are_not_markup(summary):
    summary.errors.append("segment 9: found b'[/x]'")
    assert "segment 9: found b'[/x]'" in _render(summary)
