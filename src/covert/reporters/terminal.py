"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from covert.analyzers.stats import compute_stats

if TYPE_CHECKING:
    from covert.analyzers.stats import CoverageStats
    from covert.models.coverage import Coverage

console = Console(stderr=True)

_HIGH_THRESHOLD = 80.0
_MEDIUM_THRESHOLD = 50.0


def _coverage_color(percentage: float) -> str:
    """Return a Rich color name for a coverage percentage."""
    if percentage >= _HIGH_THRESHOLD:
        return "green"
    if percentage >= _MEDIUM_THRESHOLD:
        return "yellow"
    return "red"


def _rate_cell(rate: float, covered: float, valid: int, *, bold: bool = False) -> str:
    pct = rate * 100
    style = f"bold {_coverage_color(pct)}" if bold else _coverage_color(pct)
    return f"[{style}]{pct:.1f}%[/{style}] [dim]({int(covered)}/{valid})[/dim]"


class CLIReporter:
    """Rich terminal output for conversion results."""

    def __init__(self, output: Console | None = None) -> None:
        """Initialize the CLI reporter."""
        self.console = output or console

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def print_coverage_summary(self, coverage: Coverage) -> None:
        """Print a line/branch coverage table, one row per package."""
        table = Table(title="Coverage Summary", title_style="bold cyan")
        table.add_column("Package", style="bold")
        table.add_column("Methods", justify="right")
        table.add_column("Line Coverage", justify="right")
        table.add_column("Branch Coverage", justify="right")

        for package in coverage.packages:
            stats = compute_stats(package)
            method_count = sum(len(cls.methods) for cls in package.classes)
            table.add_row(package.name, str(method_count), *self._stats_cells(stats))

        overall = compute_stats(coverage)
        table.add_section()
        table.add_row(
            "[bold]Overall[/bold]",
            "",
            *self._stats_cells(overall, bold=True),
        )

        self.console.print(table)

    def _stats_cells(self, stats: CoverageStats, *, bold: bool = False) -> tuple[str, str]:
        return (
            _rate_cell(stats.line_rate, stats.lines_covered, stats.lines_valid, bold=bold),
            _rate_cell(stats.branch_rate, stats.branches_covered, stats.branches_valid, bold=bold),
        )


# Singleton instance for easy import
reporter = CLIReporter()
