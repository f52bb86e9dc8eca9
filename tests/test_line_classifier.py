"""Tests for line classification (analyzers/lines.py)."""

from __future__ import annotations

from covert.analyzers.lines import classify_line
from covert.models.coverage import BranchLine, Condition, PlainLine


def test_plain_line_keeps_hits() -> None:
    line = classify_line(4, {4: 7}, {})
    assert line == PlainLine(number=4, hits=7)
    assert line.is_covered is True


def test_missing_hits_default_to_zero() -> None:
    line = classify_line(12, {1: 3}, {})
    assert line == PlainLine(number=12, hits=0)
    assert line.is_covered is False


def test_branch_line_builds_one_condition_per_outcome() -> None:
    line = classify_line(3, {3: 2}, {3: [True, False, True]})

    assert isinstance(line, BranchLine)
    assert line.hits == 2
    assert line.conditions == (
        Condition(number=0, coverage=1.0),
        Condition(number=1, coverage=0.0),
        Condition(number=2, coverage=1.0),
    )
    assert all(condition.type == "jump" for condition in line.conditions)


def test_branch_line_without_hits() -> None:
    line = classify_line(5, {}, {5: [False, False]})

    assert isinstance(line, BranchLine)
    assert line.hits == 0
    assert line.is_covered is False
    assert [c.coverage for c in line.conditions] == [0.0, 0.0]


def test_empty_branch_list_is_still_a_branch_line() -> None:
    line = classify_line(8, {8: 1}, {8: []})
    assert line == BranchLine(number=8, hits=1, conditions=())
