"""
Reindeer Configuration Management
==================================

Configuration for the Reindeer ELF viewer, held in
dataclasses and persisted as TOML.

The decoding core takes no configuration: every knob here controls the
layers around it (logging, the viewer's file limits, and whether the
viewer stops at the first decoding error).

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"


# ============================ Viewer Settings ==============================


@dataclass(frozen=False, slots=True)
class ViewerConfig:
    """Configuration for the ELF viewer.

    Attributes:
        default_path:  File inspected when the CLI gets no path.
        max_file_size: Refuse files larger than this many bytes.
        show_sections: Render the section header table.
        show_segments: Render the program header table.
        strict:        Stop at the first decoding error.  When ``False``
                       the viewer records the error and keeps going with
                       the next entry.
    """

    default_path: str = "/bin/true"
    max_file_size: int = 268_435_456  # 256 MiB
    show_sections: bool = True
    show_segments: bool = True
    strict: bool = True


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Logging and output settings shared by every Reindeer entry point."""

    log_level: str = "INFO"
    log_file: str = ""
    log_json: bool = False
    output_dir: str = "output"  # base for relative report paths
    debug: bool = False


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class ReindeerConfig:
    """Master configuration aggregating global and viewer settings.

    Usage:
        >>> config = ReindeerConfig.load()                  # from default path
        >>> config = ReindeerConfig.load("custom.toml")     # from custom path
        >>> config.viewer.default_path
        '/bin/true'
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    viewer: ViewerConfig = field(default_factory=ViewerConfig)

    @classmethod
    def load(cls, path: str | Path | None = None) -> ReindeerConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root and falls back to defaults when it is absent.  Keys
        missing from the file keep their dataclass defaults.

        Raises:
            FileNotFoundError: If *path* was given and does not exist.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            viewer=cls._build_section(ViewerConfig, raw.get("viewer", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise the configuration tree to a plain dictionary."""
        return asdict(self)

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        # Unknown keys are dropped so newer config files still load.
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)

