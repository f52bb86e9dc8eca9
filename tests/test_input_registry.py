"""Tests for input adapter selection (adapters/registry.py)."""

from __future__ import annotations

import json
from pathlib import Path, PurePath

import pytest

from covert.adapters.coverage.json_results import JsonResultsAdapter
from covert.adapters.coverage.lcov import LcovAdapter
from covert.adapters.registry import (
    detect_input_adapter,
    get_input_adapter,
    input_formats,
    read_inputs,
)
from covert.errors import CoverageInputError

_LCOV = "SF:/project/a.c\nDA:1,1\nend_of_record\nSF:/project/b.c\nDA:1,0\nend_of_record\n"


def _write(root: Path, rel: str, content: str) -> Path:
    f = root / rel
    f.write_text(content, encoding="utf-8")
    return f


def test_input_formats_lists_auto_first() -> None:
    assert input_formats() == ["auto", "json", "lcov"]


def test_get_input_adapter_by_name() -> None:
    assert isinstance(get_input_adapter("lcov"), LcovAdapter)
    assert isinstance(get_input_adapter("json"), JsonResultsAdapter)


def test_get_input_adapter_unknown() -> None:
    with pytest.raises(ValueError, match="Unknown input format 'cobertura'"):
        get_input_adapter("cobertura")


def test_detect_json(tmp_path: Path) -> None:
    path = _write(tmp_path, "results", json.dumps([]))
    assert isinstance(detect_input_adapter(path), JsonResultsAdapter)


def test_detect_lcov(tmp_path: Path) -> None:
    path = _write(tmp_path, "coverage.info", _LCOV)
    assert isinstance(detect_input_adapter(path), LcovAdapter)


def test_detect_falls_back_to_lcov(tmp_path: Path) -> None:
    path = _write(tmp_path, "mystery.dat", "nothing recognisable")
    assert isinstance(detect_input_adapter(path), LcovAdapter)


def test_read_inputs_chains_files_in_order(tmp_path: Path) -> None:
    lcov = _write(tmp_path, "coverage.info", _LCOV)
    results_json = _write(
        tmp_path,
        "results.json",
        json.dumps([{"path": "/project/c.rs", "lines": {"2": 3}}]),
    )

    results = list(read_inputs([lcov, results_json], prefix=Path("/project")))
    assert [r.relative_path for r in results] == [
        PurePath("a.c"),
        PurePath("b.c"),
        PurePath("c.rs"),
    ]


def test_read_inputs_is_lazy(tmp_path: Path) -> None:
    lcov = _write(tmp_path, "coverage.info", _LCOV)
    results = read_inputs([lcov, tmp_path / "missing.info"])

    assert next(results).absolute_path == PurePath("/project/a.c")
    assert next(results).absolute_path == PurePath("/project/b.c")
    with pytest.raises(CoverageInputError):
        next(results)


def test_read_inputs_forced_format(tmp_path: Path) -> None:
    path = _write(tmp_path, "coverage.json", _LCOV)
    results = list(read_inputs([path], input_format="lcov"))
    assert len(results) == 2


def test_read_inputs_unknown_format() -> None:
    with pytest.raises(ValueError, match="Unknown input format"):
        read_inputs([], input_format="xml")
