"""Coverage statistics aggregated over any node of the report tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from covert.models.coverage import (
    BranchLine,
    Class,
    Coverage,
    Method,
    Package,
    PlainLine,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from covert.models.coverage import Line

    Node = Coverage | Package | Class | Method | Line


@dataclass(frozen=True)
class CoverageStats:
    """Line and branch counts for a subtree."""

    lines_valid: int = 0
    lines_covered: int = 0
    branches_valid: int = 0
    branches_covered: float = 0.0
    complexity: float = 0.0
    """Always zero; cyclomatic complexity is not measured."""

    @property
    def line_rate(self) -> float:
        """Covered lines over valid lines, 0.0 when there are no lines."""
        if self.lines_valid == 0:
            return 0.0
        return self.lines_covered / self.lines_valid

    @property
    def branch_rate(self) -> float:
        """Covered conditions over all conditions, 0.0 when there are none."""
        if self.branches_valid == 0:
            return 0.0
        return self.branches_covered / self.branches_valid


def iter_lines(node: Node, filename: str = "") -> Iterator[tuple[str, Line]]:
    """Yield every line leaf under *node* with the filename that owns it."""
    match node:
        case Coverage(packages=packages):
            for package in packages:
                yield from iter_lines(package, filename)
        case Package(classes=classes):
            for cls in classes:
                yield from iter_lines(cls, filename)
        case Class(filename=class_filename, lines=lines, methods=methods):
            for method in methods:
                yield from iter_lines(method, class_filename)
            for line in lines:
                yield class_filename, line
        case Method(lines=lines):
            for line in lines:
                yield filename, line
        case PlainLine() | BranchLine():
            yield filename, node
        case _:
            raise TypeError(f"Not a coverage tree node: {type(node).__name__}")


def _combine(parts: Iterable[CoverageStats]) -> CoverageStats:
    totals = CoverageStats()
    for part in parts:
        totals = CoverageStats(
            lines_valid=totals.lines_valid + part.lines_valid,
            lines_covered=totals.lines_covered + part.lines_covered,
            branches_valid=totals.branches_valid + part.branches_valid,
            branches_covered=totals.branches_covered + part.branches_covered,
        )
    return totals


def _leaf_stats(node: Class | Method | Line) -> CoverageStats:
    # Methods sharing a start line claim the same lines; count each once.
    unique: dict[int, Line] = {}
    for _, line in iter_lines(node):
        unique.setdefault(line.number, line)

    lines_covered = 0
    branches_valid = 0
    branches_covered = 0.0
    for line in unique.values():
        if line.is_covered:
            lines_covered += 1
        match line:
            case BranchLine(conditions=conditions):
                branches_valid += len(conditions)
                branches_covered += sum(condition.coverage for condition in conditions)
            case PlainLine():
                pass

    return CoverageStats(
        lines_valid=len(unique),
        lines_covered=lines_covered,
        branches_valid=branches_valid,
        branches_covered=branches_covered,
    )


def compute_stats(node: Node) -> CoverageStats:
    """Aggregate line and branch counts over the leaves under *node*.

    Within a class each line number counts once, so methods that share a
    start line do not inflate the totals. Packages and the root sum the
    stats of their classes: the same file reported twice counts twice.
    """
    match node:
        case Coverage(packages=packages):
            return _combine(compute_stats(package) for package in packages)
        case Package(classes=classes):
            return _combine(compute_stats(cls) for cls in classes)
        case _:
            return _leaf_stats(node)
