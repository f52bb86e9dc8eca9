"""Attribution, classification and aggregation of coverage data."""

from covert.analyzers.attribution import Attribution, FunctionSpan, attribute_lines
from covert.analyzers.lines import classify_line
from covert.analyzers.stats import CoverageStats, compute_stats
from covert.analyzers.tree import build_coverage, build_package

__all__ = [
    "Attribution",
    "CoverageStats",
    "FunctionSpan",
    "attribute_lines",
    "build_coverage",
    "build_package",
    "classify_line",
    "compute_stats",
]
