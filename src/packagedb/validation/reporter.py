"""
Console reporter for validation results.

Formats the validation report using Rich for clear, colored output.
"""

from rich.console import Console
from rich.table import Table

from packagedb.issues import Issue, IssueKind
from packagedb.validation.core import ValidationOutcome


class ConsoleReporter:
    """Formats and displays validation results to the console."""

    def __init__(self, console: Console) -> None:
        """
        Initialize console reporter.

        Args:
            console: Rich Console instance for output.
        """
        self.console = console

    def print_results(self, outcome: ValidationOutcome) -> None:
        """
        Print the summary table, warnings and errors.

        Args:
            outcome: Result of a validation run.
        """
        report = outcome.report

        table = Table(title="Validation Summary", show_header=True)
        table.add_column("Check", style="cyan", no_wrap=True)
        table.add_column("Status", justify="center")
        table.add_column("Errors", justify="right")

        for kind in IssueKind:
            count = len(report.errors_of(kind))
            table.add_row(kind.value, self._format_status(count), str(count))

        self.console.print(table)
        self.console.print(f"  Packages: {report.packages_validated}")
        self.console.print(f"  Groups: {report.groups_validated}")

        self._print_issues(report.warnings, "yellow", "⚠", "Warnings")
        self._print_issues(report.errors, "red", "✗", "Errors")

        self.console.print()
        if report.failed:
            self.console.print("[bold red]Validation failed[/bold red]")
        else:
            self.console.print("[bold green]All validations passed! ✓[/bold green]")

    def _format_status(self, error_count: int) -> str:
        """Format a stage status with color."""
        if error_count:
            return "[red]Fail[/red]"
        return "[green]Pass[/green]"

    def _print_issues(self, issues: list[Issue], color: str, mark: str, title: str) -> None:
        """Print one block of issues, if any."""
        if not issues:
            return
        self.console.print()
        self.console.print(f"[bold {color}]{mark} {len(issues)} {title}:[/bold {color}]")
        for issue in issues:
            # Paths and names may contain brackets; keep them literal
            self.console.print(f"  {issue.render()}", style=color, markup=False)
