"""Coverage input adapters producing per-file results."""

from covert.adapters.coverage.base import CoverageInputAdapter, relative_to_prefix
from covert.adapters.coverage.json_results import JsonResultsAdapter
from covert.adapters.coverage.lcov import LcovAdapter

__all__ = [
    "CoverageInputAdapter",
    "JsonResultsAdapter",
    "LcovAdapter",
    "relative_to_prefix",
]
