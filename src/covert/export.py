"""Top-level conversion: coverage results in, Cobertura document out."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from covert.analyzers.attribution import METHOD_ORDER_START
from covert.analyzers.tree import build_coverage
from covert.reporters.cobertura import CoberturaReporter

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from covert.models.coverage import Coverage, FileResult

logger = logging.getLogger(__name__)


def export_cobertura(
    results: Iterable[FileResult],
    output_path: Path | str | None,
    *,
    demangle: bool = True,
    demangler: Callable[[str], str | None] | None = None,
    method_order: str = METHOD_ORDER_START,
    clock: Callable[[], float] = time.time,
) -> Coverage:
    """Convert *results* to Cobertura XML and write it to *output_path*.

    The report tree is built from a single pass over *results*, then
    serialized and written in one operation; ``None`` writes to stdout.

    Returns:
        The report tree that was written.

    Raises:
        ExportError: If the report cannot be written. No partial file is
            left at *output_path*.
    """
    coverage = build_coverage(
        results,
        demangle=demangle,
        demangler=demangler,
        method_order=method_order,
    )
    logger.debug("Built coverage tree with %d package(s)", len(coverage.packages))
    CoberturaReporter(clock=clock).generate(coverage, output_path)
    return coverage
