"""Tests for TOML configuration loading."""

import pytest

from shared.config import GlobalConfig, ReindeerConfig, ViewerConfig


def test_defaults():
    config = ReindeerConfig()
    assert config.viewer.default_path == "/bin/true"
    assert config.viewer.strict is True
    assert config.viewer.max_file_size == 256 * 1024 * 1024
    assert config.global_settings.log_level == "INFO"
    assert config.global_settings.log_file == ""


def test_load_sections(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        "[global]\n"
        'log_level = "DEBUG"\n'
        "log_json = true\n"
        "\n"
        "[viewer]\n"
        'default_path = "/usr/bin/ls"\n'
        "strict = false\n"
        "show_segments = false\n",
        encoding="utf-8",
    )
    config = ReindeerConfig.load(path)
    assert config.global_settings.log_level == "DEBUG"
    assert config.global_settings.log_json is True
    assert config.viewer.default_path == "/usr/bin/ls"
    assert config.viewer.strict is False
    assert config.viewer.show_segments is False
    # Keys absent from the file keep their defaults.
    assert config.viewer.show_sections is True
    assert config.global_settings.output_dir == GlobalConfig().output_dir


def test_unknown_keys_are_ignored(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[viewer]\ncolour = 'always'\n[extra]\nx = 1\n", encoding="utf-8")
    config = ReindeerConfig.load(path)
    assert config.viewer == ViewerConfig()


def test_explicit_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ReindeerConfig.load(tmp_path / "nope.toml")


def test_invalid_toml(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[viewer\n", encoding="utf-8")
    with pytest.raises(ValueError):
        ReindeerConfig.load(path)


def test_to_dict():
    data = ReindeerConfig().to_dict()
    assert data["viewer"]["default_path"] == "/bin/true"
    assert "log_level" in data["global_settings"]

