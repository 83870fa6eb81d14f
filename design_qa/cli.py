"""Click-based CLI for design QA comparisons."""

import asyncio
import sys
from pathlib import Path
from typing import NoReturn

import click
from pydantic import ValidationError

from . import __version__
from .comparator import DesignComparator
from .config import ConfigLoader, DesignQAConfig
from .errors import ConfigurationError, DesignQAError, classify_error
from .models import Readiness
from .pipeline import (
    design_file_source,
    live_page_source,
    run_pipeline,
    snapshot_file_source,
)
from .qa_logging import setup_logging
from .reporting.console import ConsoleReporter, JSONReporter
from .settings import RuntimeSettings

EXIT_OK = 0
EXIT_NOT_READY = 1
EXIT_ERROR = 2


def _fail(error: DesignQAError) -> NoReturn:
    use_color = sys.stderr.isatty()
    click.echo(error.format(use_color=use_color), err=True)
    sys.exit(EXIT_ERROR)


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Compare a design frame against a rendered website."""


@cli.command()
@click.argument(
    "design_json", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--rendered",
    "rendered_json",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Saved DOM snapshot (extraction script output).",
)
@click.option("--url", help="Live URL to capture with a headless browser.")
@click.option("--frame-id", help="Frame node id inside the design document.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to design-qa.config.json.",
)
@click.option("--json", "as_json", is_flag=True, help="Output the result as JSON.")
@click.option(
    "--strict", is_flag=True, help="Exit 1 unless the verdict is production-ready."
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    help="Overall timeout in seconds.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write logs to this file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
def compare(
    design_json: Path,
    rendered_json: Path | None,
    url: str | None,
    frame_id: str | None,
    config_path: Path | None,
    as_json: bool,
    strict: bool,
    timeout: float | None,
    log_file: Path | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """Compare DESIGN_JSON against a rendered page snapshot or live URL."""
    if quiet and verbose:
        click.echo("Error: --quiet and --verbose are mutually exclusive", err=True)
        sys.exit(EXIT_ERROR)
    if (rendered_json is None) == (url is None):
        click.echo("Error: provide exactly one of --rendered or --url", err=True)
        sys.exit(EXIT_ERROR)

    try:
        settings = RuntimeSettings.from_env()
    except ValidationError as e:
        _fail(ConfigurationError(f"Invalid environment settings: {e}"))

    setup_logging(
        level=settings.log_level,
        quiet=quiet,
        verbose=verbose,
        log_file=log_file,
        enable_file_logging=log_file is not None,
        log_format=settings.log_format,
    )

    try:
        config = ConfigLoader().load(config_path or settings.config_path)
    except DesignQAError as e:
        _fail(e)

    design_source = design_file_source(design_json, frame_id)
    if rendered_json is not None:
        rendered_source = snapshot_file_source(rendered_json)
    else:
        rendered_source = live_page_source(url, config.capture)

    comparator = DesignComparator(config, settings)
    try:
        result = asyncio.run(
            run_pipeline(
                design_source,
                rendered_source,
                comparator,
                timeout_seconds=(
                    timeout if timeout is not None else config.pipeline.timeout_seconds
                ),
            )
        )
    except DesignQAError as e:
        _fail(e)
    except Exception as e:
        _fail(classify_error(e))

    if as_json:
        JSONReporter(stream=sys.stdout).report(result)
    else:
        ConsoleReporter(stream=sys.stdout).report(result)

    if strict and result.readiness != Readiness.PRODUCTION_READY:
        sys.exit(EXIT_NOT_READY)


@cli.command("init-config")
@click.option(
    "--path",
    "project_path",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    help="Project directory to write design-qa.config.json into.",
)
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
def init_config(project_path: Path, force: bool) -> None:
    """Write a default design-qa.config.json."""
    loader = ConfigLoader(project_path)
    target = loader.project_path / "design-qa.config.json"
    if target.exists() and not force:
        click.echo(f"Config already exists: {target} (use --force)", err=True)
        sys.exit(EXIT_ERROR)
    path = loader.save(DesignQAConfig(), target)
    click.echo(f"Wrote {path}")


if __name__ == "__main__":
    cli()
