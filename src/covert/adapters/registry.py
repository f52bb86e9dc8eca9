"""Adapter registry — selection of coverage input adapters.

Adapters are chosen by name (``lcov``, ``json``) or, with ``auto``, by
inspecting each input file.
"""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING

from covert.adapters.coverage.json_results import JsonResultsAdapter
from covert.adapters.coverage.lcov import LcovAdapter

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from covert.adapters.coverage.base import CoverageInputAdapter
    from covert.models.coverage import FileResult

logger = logging.getLogger(__name__)

FORMAT_AUTO = "auto"

# Detection order matters: JSON is checked first because LCOV detection
# accepts any file whose content starts with TN:/SF:.
_ADAPTERS: dict[str, type[CoverageInputAdapter]] = {
    "json": JsonResultsAdapter,
    "lcov": LcovAdapter,
}


def input_formats() -> list[str]:
    """Return every accepted ``format`` value, ``auto`` first."""
    return [FORMAT_AUTO, *_ADAPTERS]


def get_input_adapter(name: str) -> CoverageInputAdapter:
    """Return a new adapter for format *name*.

    Raises:
        ValueError: If *name* is not a known format.
    """
    try:
        return _ADAPTERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown input format {name!r}; expected one of {', '.join(_ADAPTERS)}"
        ) from None


def detect_input_adapter(coverage_file: Path) -> CoverageInputAdapter:
    """Pick the adapter for *coverage_file*, falling back to LCOV."""
    for adapter_cls in _ADAPTERS.values():
        adapter = adapter_cls()
        if adapter.detect(coverage_file):
            logger.debug("Detected %s input: %s", adapter.name, coverage_file)
            return adapter
    logger.debug("No format detected for %s; assuming lcov", coverage_file)
    return LcovAdapter()


def read_inputs(
    coverage_files: Iterable[Path],
    *,
    input_format: str = FORMAT_AUTO,
    prefix: Path | None = None,
) -> Iterator[FileResult]:
    """Chain the results of every file in *coverage_files*, in order.

    Files are opened lazily, one after another, as the sequence is consumed.
    """
    fixed = None if input_format == FORMAT_AUTO else get_input_adapter(input_format)

    def _read(coverage_file: Path) -> Iterator[FileResult]:
        adapter = fixed or detect_input_adapter(coverage_file)
        return adapter.read(coverage_file, prefix=prefix)

    return itertools.chain.from_iterable(_read(path) for path in coverage_files)
