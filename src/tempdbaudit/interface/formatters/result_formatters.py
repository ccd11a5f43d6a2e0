"""
CLI result formatters for tempdb reports.

Reports go to stdout; warnings and errors go to stderr so JSON output
stays machine-readable.
"""

import json
from typing import Any, List

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tempdbaudit.application.audit_service import TargetOutcome
from tempdbaudit.domain.models import TempdbReport


def _format_value(value: Any) -> str:
    if value is None:
        return "-"
    return str(value)


class ReportFormatter:
    """Renders TargetOutcome lists as rich tables or JSON."""

    def __init__(self, console: Console | None = None, err_console: Console | None = None):
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    def build_table(self, report: TempdbReport, title: str) -> Table:
        table = Table(title=f"tempdb best practices - {escape(title)}")
        table.add_column("Rule", style="cyan", no_wrap=True)
        table.add_column("Recommended", justify="right")
        table.add_column("Current Setting", justify="right")
        table.add_column("Best Practice")
        table.add_column("Notes", style="dim")

        for result in report.results:
            if result.recommended is None:
                verdict = "[blue]Info[/blue]"
            elif result.is_best_practice:
                verdict = "[green]✅ Yes[/green]"
            else:
                verdict = "[red]❌ No[/red]"
            table.add_row(
                escape(result.rule),
                _format_value(result.recommended),
                _format_value(result.current_setting),
                verdict,
                escape(result.notes),
            )
        return table

    def display_tables(self, outcomes: List[TargetOutcome]) -> None:
        """Print one table per checked target, then a warning per problem target."""
        for outcome in outcomes:
            name = outcome.target.display_name
            if outcome.report is not None:
                self.console.print(self.build_table(outcome.report, name))
            self._print_status(name, outcome)

        checked = sum(1 for o in outcomes if o.succeeded)
        self.console.print(f"\n[blue]📊 Summary: {checked}/{len(outcomes)} targets checked[/blue]")

    def to_json(self, outcomes: List[TargetOutcome]) -> str:
        """Serialize all outcomes as one JSON array."""
        return json.dumps([self.outcome_to_dict(o) for o in outcomes], indent=2)

    def display_warnings(self, outcomes: List[TargetOutcome]) -> None:
        """Print failures and violations only (used alongside JSON output)."""
        for outcome in outcomes:
            self._print_status(outcome.target.display_name, outcome, quiet_ok=True)

    @staticmethod
    def outcome_to_dict(outcome: TargetOutcome) -> dict:
        if outcome.report is not None:
            return outcome.report.to_dict()
        return {
            "server": outcome.target.server,
            "instance": outcome.target.instance or "",
            "error": str(outcome.error),
        }

    def _print_status(self, name: str, outcome: TargetOutcome, quiet_ok: bool = False) -> None:
        if outcome.error is not None:
            self.err_console.print(f"[red]❌ {escape(name)}: {escape(str(outcome.error))}[/red]")
        elif outcome.has_violations:
            count = len(outcome.report.violations)
            self.err_console.print(
                f"[yellow]⚠️  {escape(name)}: {count} tempdb rule(s) deviate from best practice[/yellow]"
            )
        elif not quiet_ok:
            self.console.print(f"[green]✅ {escape(name)}: tempdb follows best practice[/green]")
