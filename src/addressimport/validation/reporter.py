"""
Console reporter for validation reports and load outcomes.

Formats results using Rich. Truncation of long error lists happens here
only; the report itself always keeps every error.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from addressimport.loading.loader import LoadOutcome, LoadStatus
from addressimport.validation.report import ValidationReport

STAT_LABELS: dict[str, str] = {
    "regions": "Regions",
    "provinces": "Provinces",
    "lgus": "LGUs",
    "barangays": "Barangays",
}


def visible_errors(errors: list[str], limit: int) -> list[str]:
    """
    First limit errors, plus a summary line for the rest.

    >>> visible_errors(["a", "b", "c"], 2)
    ['a', 'b', '...and 1 more errors']
    """
    shown = errors[:limit]
    if len(errors) > limit:
        shown.append(f"...and {len(errors) - limit} more errors")
    return shown


class ConsoleReporter:
    """Formats and displays import results to the console."""

    def __init__(self, console: Console, max_errors: int = 10) -> None:
        """
        Initialize console reporter.

        Args:
            console: Rich Console instance for output.
            max_errors: Number of validation errors listed before truncating.
        """
        self.console = console
        self.max_errors = max_errors

    def print_report(self, report: ValidationReport, source: str | None = None) -> None:
        """Print either the entity counts or the validation errors."""
        title = f"Validation: {escape(source)}" if source else "Validation"

        if report.valid:
            self.console.print(f"[green]✓ File is valid[/green] [dim]({title})[/dim]")
            self._print_stats(report)
            return

        self.console.print(f"[red]✗ Validation failed[/red] [dim]({title})[/dim]")
        for line in visible_errors(report.errors, self.max_errors):
            self.console.print(f"  [red]•[/red] {escape(line)}")

    def _print_stats(self, report: ValidationReport) -> None:
        table = Table(title="Address Hierarchy", show_header=True)
        table.add_column("Level", style="cyan", no_wrap=True)
        table.add_column("Records", justify="right", style="green")

        for key, count in report.stats.as_dict().items():
            table.add_row(STAT_LABELS[key], str(count))

        self.console.print(table)

    def print_outcome(self, outcome: LoadOutcome) -> None:
        """Print the terminal status of a load."""
        if outcome.status is LoadStatus.SUCCESS:
            self.console.print("[green]Address data updated successfully![/green]")
            if outcome.inserted:
                table = Table(title="Inserted", show_header=True)
                table.add_column("Table", style="cyan")
                table.add_column("Records", justify="right", style="green")
                for name, count in outcome.inserted.items():
                    table.add_row(name, str(count))
                self.console.print(table)
            return

        color = "yellow" if outcome.status is LoadStatus.CANCELLED else "red"
        message = escape(outcome.message or "Failed to update address data")
        self.console.print(f"[{color}]{message}[/{color}]")

        if outcome.rejected:
            return
        if outcome.rolled_back:
            self.console.print("[dim]All changes were rolled back; the store is unchanged.[/dim]")
        elif outcome.completed:
            self.console.print(
                "[yellow]⚠ The store was partially updated. "
                "Re-run the full import to restore a consistent state.[/yellow]"
            )
