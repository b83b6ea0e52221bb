"""Conformance check command."""

from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..core.pipeline import ConformancePipeline
from ..exceptions import ConfigurationError, LayerlintError
from ..formatters import get_formatter
from ..logging_config import setup_logging
from . import app
from ._common import err_console, resolve_policy, resolve_settings

EXIT_VIOLATIONS = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


class ReportFormat(str, Enum):
    text = "text"
    json = "json"
    github = "github"
    quiet = "quiet"


@app.command()
def check(
    path: Path = typer.Argument(
        Path("."),
        help="Project root to check",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    policy_file: Optional[Path] = typer.Option(
        None,
        "--policy",
        "-p",
        help="Architecture policy (TOML); default: <PATH>/layerlint.policy.toml or built-in",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    fmt: Optional[ReportFormat] = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format",
        case_sensitive=False,
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail on warnings as well as errors",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Parallel workers (default: auto-detect)",
        min=1,
        max=32,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Run settings file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress logging"),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write logs to this file",
        dir_okay=False,
    ),
):
    """
    Check a project for layer, naming, size and structure violations.

    Exit status: 0 clean, 1 violations (warnings too with --strict),
    2 invalid policy or configuration.

    [bold cyan]Examples:[/bold cyan]

      layerlint check .

      layerlint check app --policy arch.toml --format github
    """
    try:
        settings = resolve_settings(
            config=config,
            output_format=fmt.value if fmt is not None else None,
            workers=workers,
            strict=strict,
            verbose=verbose,
            quiet=quiet,
        )
    except ConfigurationError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_CONFIG_ERROR)

    # Flags, config files and LAYERLINT_VERBOSITY all land in settings.verbosity
    logger = setup_logging(settings.verbosity, log_file=log_file)

    try:
        policy = resolve_policy(path, policy_file, settings)

        report = ConformancePipeline(path, policy, settings).run()
        get_formatter(settings.output_format).render(report)

        if report.failed(settings.fail_on_warnings):
            raise typer.Exit(EXIT_VIOLATIONS)

    except typer.Exit:
        raise

    except ConfigurationError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_CONFIG_ERROR)

    except LayerlintError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_VIOLATIONS)

    except KeyboardInterrupt:
        logger.info("Check interrupted by user")
        err_console.print("\n[yellow]Check interrupted[/yellow]")
        raise typer.Exit(EXIT_INTERRUPTED)

    except Exception as e:
        logger.exception("Unexpected error during check")
        err_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        if settings.verbosity == "verbose":
            err_console.print_exception()
        raise typer.Exit(EXIT_VIOLATIONS)
