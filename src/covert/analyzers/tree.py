"""Build the Cobertura report tree from a sequence of file results."""

from __future__ import annotations

import logging
from pathlib import PurePath
from typing import TYPE_CHECKING

from covert.analyzers.attribution import METHOD_ORDER_START, attribute_lines
from covert.analyzers.lines import classify_line
from covert.models.coverage import Class, Coverage, Method, Package
from covert.utils.demangle import resolve_name

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from covert.models.coverage import FileResult, Line

logger = logging.getLogger(__name__)


def build_package(
    file_result: FileResult,
    *,
    demangle: bool = False,
    demangler: Callable[[str], str | None] | None = None,
    method_order: str = METHOD_ORDER_START,
) -> Package:
    """Build the package (and its single class) for one source file."""
    result = file_result.result
    relative_path = PurePath(file_result.relative_path)
    filename = relative_path.as_posix() if relative_path.parts else ""

    attribution = attribute_lines(result.lines, result.functions, method_order=method_order)

    def _line(number: int) -> Line:
        return classify_line(number, result.lines, result.branches)

    methods = tuple(
        Method(
            name=resolve_name(span.name, demangle=demangle, demangler=demangler),
            lines=tuple(_line(number) for number in span.lines),
        )
        for span in attribution.functions
    )
    cls = Class(
        name=relative_path.stem,
        filename=filename,
        lines=tuple(_line(number) for number in attribution.orphans),
        methods=methods,
    )
    logger.debug(
        "%s: %d method(s), %d orphan line(s)", filename, len(methods), len(attribution.orphans)
    )
    return Package(name=filename, classes=(cls,))


def build_coverage(
    results: Iterable[FileResult],
    *,
    demangle: bool = False,
    demangler: Callable[[str], str | None] | None = None,
    method_order: str = METHOD_ORDER_START,
) -> Coverage:
    """Consume *results* once, in order, and build the report tree.

    Args:
        results: One entry per source file.
        demangle: Pass function names through the demangler.
        demangler: Custom demangling function; defaults to ``cxxfilt``.
        method_order: Order of methods within a class, see
            :func:`covert.analyzers.attribution.attribute_lines`.

    Returns:
        The complete, immutable report tree.
    """
    packages = tuple(
        build_package(
            file_result,
            demangle=demangle,
            demangler=demangler,
            method_order=method_order,
        )
        for file_result in results
    )
    return Coverage(packages=packages)
