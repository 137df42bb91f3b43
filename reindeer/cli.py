"""
Reindeer CLI -- ELF Viewer
===========================

Click-based command-line viewer.  Reads one file, decodes it with the
Reindeer core and prints the header, section header table and program
header table.

Usage::

    # Inspect the configured default file (/bin/true)
    reindeer

    # Inspect a specific file
    reindeer /usr/bin/ls

    # Keep going past decoding errors
    reindeer corrupt.elf --lenient

    # JSON to stdout, or to a report file
    reindeer /usr/bin/ls --json
    reindeer /usr/bin/ls --output report.json

    # Fuzz-harness verdicts for an input
    reindeer crash-1234 --classify

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from shared.config import ReindeerConfig
from shared.console import ReindeerConsole
from shared.logger import ReindeerLogger

from reindeer import __version__
from reindeer.core.engine import ElfInspector
from reindeer.core.errors import ElfError
from reindeer.harness import full_target, string_table_target
from reindeer.output.console import ReindeerConsoleOutput
from reindeer.output.report import ReindeerReportGenerator


@click.command("reindeer")
@click.argument("path", required=False, type=click.Path(dir_okay=False))
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="TOML configuration file.  Default: config.toml in the project root.",
)
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write a JSON report to this path (relative to global.output_dir).",
)
@click.option(
    "--json", "json_output",
    is_flag=True,
    default=False,
    help="Print the decoded summary as JSON to stdout.",
)
@click.option(
    "--lenient", "-l",
    is_flag=True,
    default=False,
    help="Record decoding errors and continue instead of stopping.",
)
@click.option(
    "--no-sections",
    is_flag=True,
    default=False,
    help="Do not print the section header table.",
)
@click.option(
    "--no-segments",
    is_flag=True,
    default=False,
    help="Do not print the program header table.",
)
@click.option(
    "--classify",
    is_flag=True,
    default=False,
    help="Print the fuzz-harness verdicts for the input and exit.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.version_option(__version__, prog_name="reindeer")
def reindeer_cli(
    path: str | None,
    config_path: str | None,
    output_path: str | None,
    json_output: bool,
    lenient: bool,
    no_sections: bool,
    no_segments: bool,
    classify: bool,
    verbose: bool,
) -> None:
    """Reindeer -- zero-copy ELF viewer.

    PATH is the ELF file to inspect.  When omitted, the viewer's
    configured default path is used.

    Examples:

    \b
        reindeer /usr/bin/ls
        reindeer /usr/bin/ls --json
        reindeer broken.elf --lenient
    """
    console = ReindeerConsole()

    try:
        config = ReindeerConfig.load(config_path)
    except (OSError, ValueError) as exc:
        console.error(f"Cannot load configuration: {exc}")
        sys.exit(1)

    if lenient:
        config.viewer.strict = False
    settings = config.global_settings
    logger = ReindeerLogger(
        "cli",
        log_level="DEBUG" if verbose or settings.debug else settings.log_level,
        log_file=settings.log_file or None,
        json_logs=settings.log_json,
    )

    target = Path(path or config.viewer.default_path)
    engine = ElfInspector(config=config, logger=logger)

    if classify:
        try:
            data = engine.read_path(target)
        except (OSError, ValueError) as exc:
            console.error(f"Cannot read {target}: {exc}")
            sys.exit(1)
        click.echo(f"string_table_target: {string_table_target(data).value}")
        click.echo(f"full_target: {full_target(data).value}")
        return

    try:
        summary = engine.inspect_path(target)
    except KeyboardInterrupt:
        console.warning("Interrupted by user.")
        sys.exit(130)
    except ElfError as exc:
        logger.error("Decoding %s failed: %s", target, exc)
        console.error(f"{target}: {exc}")
        sys.exit(1)
    except (OSError, ValueError) as exc:
        console.error(str(exc))
        sys.exit(1)

    if json_output:
        click.echo(json.dumps(summary.model_dump(mode="json"), indent=2))
    else:
        ReindeerConsoleOutput(console=console).display(
            summary,
            show_sections=config.viewer.show_sections and not no_sections,
            show_segments=config.viewer.show_segments and not no_segments,
        )

    if output_path:
        report_target = Path(output_path)
        if not report_target.is_absolute():
            report_target = Path(settings.output_dir) / report_target
        report_path = ReindeerReportGenerator().generate_json(
            summary, str(report_target)
        )
        if not json_output:
            console.success(f"JSON report saved: {report_path}")


def main() -> None:
    """Entry point for the ``reindeer`` console script."""
    reindeer_cli()


if __name__ == "__main__":
    main()
