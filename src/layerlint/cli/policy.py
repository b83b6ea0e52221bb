"""Policy inspection command."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..exceptions import ConfigurationError
from ..logging_config import setup_logging
from ..policy import Policy
from . import app
from ._common import console, err_console, resolve_policy, resolve_settings
from .check import EXIT_CONFIG_ERROR


@app.command()
def policy(
    path: Path = typer.Argument(
        Path("."),
        help="Project root whose policy to show",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    policy_file: Optional[Path] = typer.Option(
        None,
        "--policy",
        "-p",
        help="Architecture policy (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the policy as JSON"),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Run settings file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
):
    """
    Validate and print the effective architecture policy.
    """
    try:
        settings = resolve_settings(config=config)
        setup_logging(settings.verbosity)
        effective = resolve_policy(path, policy_file, settings)
    except ConfigurationError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_CONFIG_ERROR)

    if as_json:
        print(json.dumps(effective.to_dict(), indent=2, sort_keys=True))
    else:
        _output_rich(effective)


def _output_rich(effective: Policy) -> None:
    console.print(
        f"threshold [bold]{effective.threshold}[/bold] lines, "
        f"features in [bold]{escape(effective.features_dir)}[/bold], "
        f"common feature [bold]{escape(effective.common_feature)}[/bold]"
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("Layer")
    table.add_column("Folder")
    table.add_column("Naming")
    table.add_column("May depend on")
    table.add_column("Private")
    for name, rule in sorted(effective.layers.items()):
        allowed = sorted(rule.allowed - rule.forbidden)
        table.add_row(
            name,
            escape(rule.folder),
            escape(rule.naming.describe()),
            ", ".join(allowed) or "-",
            "yes" if rule.feature_private else "",
        )
    console.print(table)
    console.print(f"[dim]{effective.business_object_layer} is always a permitted target[/dim]")
