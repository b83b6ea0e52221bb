"""CLI entry point: registers all subcommands."""

from typing import Optional

import typer

from ._common import console

app = typer.Typer(
    name="layerlint",
    help="layerlint - Layered-architecture conformance checker",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        is_eager=True,
    ),
):
    """
    Check a project against its declared layered architecture.

    [bold cyan]Examples:[/bold cyan]

      layerlint check .

      layerlint check . --format json --strict

      layerlint policy . --json
    """
    from .. import __version__

    if version:
        console.print(f"[bold cyan]layerlint[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


# Import subcommands to register them
from .check import check as _check  # noqa: F401, E402
from .policy import policy as _policy  # noqa: F401, E402
