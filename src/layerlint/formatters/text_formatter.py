"""Rich terminal formatter for layerlint."""

import io

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..conformance.models import ConformanceReport
from ..models import Severity
from .base import BaseFormatter


def _severity_label(severity: Severity) -> str:
    if severity is Severity.ERROR:
        return "[red bold]error[/red bold]"
    return "[yellow]warning[/yellow]"


class TextFormatter(BaseFormatter):
    """Violation table followed by summary lines."""

    def render(self, report: ConformanceReport) -> None:
        # Console() resolves sys.stdout at write time, so redirection still works
        self._print(Console(), report)

    def format(self, report: ConformanceReport) -> str:
        buffer = io.StringIO()
        self._print(Console(file=buffer, width=120, no_color=True, highlight=False), report)
        return buffer.getvalue().rstrip("\n")

    def _print(self, console: Console, report: ConformanceReport) -> None:
        if report.violations:
            table = Table(show_header=True, header_style="bold", expand=False)
            table.add_column("Severity")
            table.add_column("Kind")
            table.add_column("Location", no_wrap=True, min_width=20)
            table.add_column("Message", overflow="fold")
            for v in report.violations:
                table.add_row(
                    _severity_label(v.severity), v.kind.label, escape(v.location), escape(v.message)
                )
            console.print(table)
            console.print()

        self._print_summary(console, report)

    def _print_summary(self, console: Console, report: ConformanceReport) -> None:
        findings = len(report.findings)
        skipped = len(report.skipped)

        if findings:
            console.print(f"[bold]{findings} violation(s) found[/bold]")
        else:
            console.print("[green]No violations found[/green]")
        if skipped:
            console.print(f"[yellow]{skipped} file(s) skipped due to errors[/yellow]")
        console.print(
            f"[dim]{report.error_count} error(s), {report.warning_count} warning(s) "
            f"across {report.files_indexed} files, {report.unit_count} units, "
            f"{report.edge_count} dependencies[/dim]"
        )
