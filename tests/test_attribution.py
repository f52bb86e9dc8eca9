"""Tests for function attribution (analyzers/attribution.py)."""

from __future__ import annotations

import pytest

from covert.analyzers.attribution import attribute_lines, file_end
from covert.models.coverage import CoverageResult, FunctionRecord


def _spans(result: CoverageResult, method_order: str = "start") -> list[tuple[str, list[int]]]:
    attribution = attribute_lines(result.lines, result.functions, method_order=method_order)
    return [(span.name, span.lines) for span in attribution.functions]


# ── file_end ─────────────────────────────────────────────────────


def test_file_end_is_one_past_last_line() -> None:
    assert file_end([1, 4, 9]) == 10


def test_file_end_without_lines_is_zero() -> None:
    assert file_end([]) == 0


# ── Partitioning ─────────────────────────────────────────────────


def test_single_function_claims_every_line(branching_result: CoverageResult) -> None:
    attribution = attribute_lines(branching_result.lines, branching_result.functions)

    assert len(attribution.functions) == 1
    span = attribution.functions[0]
    assert span.start == 1
    assert span.end == 10
    assert span.lines == [1, 2, 3, 4, 5, 6, 8, 9]
    assert attribution.orphans == []


def test_function_ends_at_next_start() -> None:
    result = CoverageResult(
        lines={1: 1, 2: 1, 5: 0, 6: 1, 7: 1},
        functions={"a": FunctionRecord(start=1), "b": FunctionRecord(start=5)},
    )
    assert _spans(result) == [("a", [1, 2]), ("b", [5, 6, 7])]


def test_lines_before_first_function_are_orphans() -> None:
    result = CoverageResult(
        lines={1: 1, 2: 1, 3: 0, 10: 1, 11: 1},
        functions={"late": FunctionRecord(start=10)},
    )
    attribution = attribute_lines(result.lines, result.functions)

    assert attribution.functions[0].lines == [10, 11]
    assert attribution.orphans == [1, 2, 3]


def test_no_functions_leaves_everything_orphaned() -> None:
    attribution = attribute_lines({3: 1, 1: 0, 2: 4}, {})
    assert attribution.functions == []
    assert attribution.orphans == [1, 2, 3]


def test_function_past_last_line_claims_nothing() -> None:
    attribution = attribute_lines({1: 1, 2: 1}, {"ghost": FunctionRecord(start=40)})

    assert attribution.functions[0].lines == []
    assert attribution.orphans == [1, 2]


def test_empty_file_with_function() -> None:
    attribution = attribute_lines({}, {"f": FunctionRecord(start=1)})

    assert attribution.functions[0].lines == []
    assert attribution.functions[0].end == 0
    assert attribution.orphans == []


def test_every_line_appears_once_without_duplicate_starts() -> None:
    result = CoverageResult(
        lines={n: n % 3 for n in range(1, 40)},
        functions={
            "a": FunctionRecord(start=4),
            "b": FunctionRecord(start=12),
            "c": FunctionRecord(start=30),
        },
    )
    attribution = attribute_lines(result.lines, result.functions)

    placed = [n for span in attribution.functions for n in span.lines] + attribution.orphans
    assert sorted(placed) == sorted(result.lines)
    assert len(placed) == len(set(placed))


# ── Duplicate start lines ────────────────────────────────────────


def test_shared_start_duplicates_the_span(duplicated_result: CoverageResult) -> None:
    attribution = attribute_lines(duplicated_result.lines, duplicated_result.functions)

    assert len(attribution.functions) == len(duplicated_result.functions)
    by_start: dict[int, list[list[int]]] = {}
    for span in attribution.functions:
        by_start.setdefault(span.start, []).append(span.lines)
    assert by_start[1] == [[1, 3]] * 3
    assert by_start[6] == [[6, 7, 8, 9, 11, 12]] * 2
    assert attribution.orphans == []


# ── Method order ─────────────────────────────────────────────────


def test_start_order_sorts_by_start_then_name() -> None:
    functions = {
        "zeta": FunctionRecord(start=5),
        "beta": FunctionRecord(start=1),
        "alpha": FunctionRecord(start=5),
    }
    attribution = attribute_lines({1: 1, 5: 1}, functions)
    assert [span.name for span in attribution.functions] == ["beta", "alpha", "zeta"]


def test_input_order_keeps_mapping_order() -> None:
    functions = {
        "zeta": FunctionRecord(start=5),
        "beta": FunctionRecord(start=1),
        "alpha": FunctionRecord(start=5),
    }
    attribution = attribute_lines({1: 1, 5: 1}, functions, method_order="input")
    assert [span.name for span in attribution.functions] == ["zeta", "beta", "alpha"]


def test_unknown_method_order_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown method order"):
        attribute_lines({1: 1}, {"f": FunctionRecord(start=1)}, method_order="random")
