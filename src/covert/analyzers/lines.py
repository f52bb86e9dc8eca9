"""Classify line numbers into plain or branch report lines."""

from __future__ import annotations

from typing import TYPE_CHECKING

from covert.models.coverage import BranchLine, Condition, PlainLine

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from covert.models.coverage import Line


def classify_line(
    number: int,
    hits: Mapping[int, int],
    branches: Mapping[int, Sequence[bool]],
) -> Line:
    """Build the report line for *number*.

    A line missing from *hits* counts as not executed. A line present in
    *branches* becomes a ``BranchLine`` with one condition per recorded
    branch, in branch order.
    """
    count = hits.get(number, 0)
    taken = branches.get(number)
    if taken is None:
        return PlainLine(number=number, hits=count)

    conditions = tuple(
        Condition(number=index, coverage=1.0 if outcome else 0.0)
        for index, outcome in enumerate(taken)
    )
    return BranchLine(number=number, hits=count, conditions=conditions)
