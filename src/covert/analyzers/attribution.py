"""Attribute a file's line numbers to the functions that contain them.

A function spans from its own start line up to (not including) the next
recorded function start, or to the end of the file for the last one.
Lines before the first function, or otherwise claimed by no function,
stay with the enclosing class as orphan lines.

Functions sharing a start line resolve to the same span, so each of them
claims the same lines. Compilers emit such duplicates for specialized
copies of a function and for closures that share their parent's start.
"""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from covert.models.coverage import FunctionRecord

logger = logging.getLogger(__name__)

METHOD_ORDER_START = "start"
METHOD_ORDER_INPUT = "input"
METHOD_ORDERS = (METHOD_ORDER_START, METHOD_ORDER_INPUT)


@dataclass
class FunctionSpan:
    """Lines claimed by a single function."""

    name: str
    """Raw symbol name, as found in the input."""

    start: int
    """First line of the span."""

    end: int
    """Exclusive end of the span."""

    lines: list[int] = field(default_factory=list)
    """Ascending line numbers present in the file within the span."""


@dataclass
class Attribution:
    """Partition of one file's lines across functions and the class."""

    functions: list[FunctionSpan] = field(default_factory=list)
    orphans: list[int] = field(default_factory=list)


def file_end(line_numbers: list[int]) -> int:
    """Return the exclusive end boundary for ascending *line_numbers*."""
    return line_numbers[-1] + 1 if line_numbers else 0


def _ordered_functions(
    functions: Mapping[str, FunctionRecord], method_order: str
) -> list[tuple[str, FunctionRecord]]:
    items = list(functions.items())
    if method_order == METHOD_ORDER_START:
        items.sort(key=lambda item: (item[1].start, item[0]))
    elif method_order != METHOD_ORDER_INPUT:
        raise ValueError(
            f"Unknown method order {method_order!r}; expected one of {', '.join(METHOD_ORDERS)}"
        )
    return items


def attribute_lines(
    line_numbers: Iterable[int],
    functions: Mapping[str, FunctionRecord],
    *,
    method_order: str = METHOD_ORDER_START,
) -> Attribution:
    """Split *line_numbers* between *functions* and the orphan remainder.

    Args:
        line_numbers: Line numbers present in the file.
        functions: Symbol name to function record.
        method_order: ``"start"`` orders spans by start line then name;
            ``"input"`` keeps the iteration order of *functions*.

    Returns:
        One span per function plus the ascending orphan line numbers.
    """
    all_lines = sorted(set(line_numbers))
    end = file_end(all_lines)
    starts = sorted(function.start for function in functions.values())

    remaining = set(all_lines)
    spans: list[FunctionSpan] = []
    for name, function in _ordered_functions(functions, method_order):
        next_start = bisect_right(starts, function.start)
        span_end = starts[next_start] if next_start < len(starts) else end

        first = bisect_left(all_lines, function.start)
        last = bisect_left(all_lines, span_end)
        claimed = all_lines[first:last]
        remaining.difference_update(claimed)

        spans.append(FunctionSpan(name=name, start=function.start, end=span_end, lines=claimed))

    orphans = sorted(remaining)
    if orphans:
        logger.debug("%d line(s) not attributed to any function", len(orphans))
    return Attribution(functions=spans, orphans=orphans)
