"""Shared fixtures: the two reference coverage results."""

from __future__ import annotations

from pathlib import PurePath
from typing import TYPE_CHECKING

import pytest

from covert.models.coverage import CoverageResult, FileResult, FunctionRecord

if TYPE_CHECKING:
    from collections.abc import Callable

MAIN_HASH_A = "_ZN8cov_test4main17h7eb435a3fb3e6f20E"
MAIN_HASH_B = "_ZN8cov_test4main17h29b45b3d7d8851d2E"
MAIN_HASH_C = "_ZN8cov_test4main17h679717cd8503f8adE"
TEST_FN = "_ZN8cov_test7test_fn17hbf19ec7bfabe8524E"
TEST_FN_CLOSURE = "_ZN8cov_test7test_fn28_$u7b$$u7b$closure$u7d$$u7d$17hab7a162ac9b573fcE"

DEMANGLED = {
    MAIN_HASH_A: "cov_test::main",
    MAIN_HASH_B: "cov_test::main",
    MAIN_HASH_C: "cov_test::main",
    TEST_FN: "cov_test::test_fn",
    TEST_FN_CLOSURE: "cov_test::test_fn::{{closure}}",
}


FIXED_TIMESTAMP = 1_700_000_000


@pytest.fixture
def demangler() -> Callable[[str], str | None]:
    """Demangle the reference symbols without the C++ runtime."""
    return DEMANGLED.get


@pytest.fixture
def clock() -> Callable[[], float]:
    return lambda: float(FIXED_TIMESTAMP)


@pytest.fixture
def make_file_result() -> Callable[..., FileResult]:
    def _make(result: CoverageResult, path: str = "src/main.rs") -> FileResult:
        return FileResult(
            absolute_path=PurePath("/project") / path,
            relative_path=PurePath(path),
            result=result,
        )

    return _make


@pytest.fixture
def branching_result() -> CoverageResult:
    """A single function with two branch points.

    fn main() {
        let inp = "a";
        if "a" == inp {
            println!("a");
        } else if "b" == inp {
            println!("b");
        }
        println!("what?");
    }
    """
    return CoverageResult(
        lines={1: 1, 2: 1, 3: 2, 4: 1, 5: 0, 6: 0, 8: 1, 9: 1},
        branches={3: [True, False], 5: [False, False]},
        functions={MAIN_HASH_A: FunctionRecord(start=1, executed=True)},
    )


@pytest.fixture
def duplicated_result() -> CoverageResult:
    """Functions emitted several times with identical start lines.

    fn main() {
    }

    #[test]
    fn test_fn() {
        let s = "s";
        if s == "s" {
            println!("test");
        }
        println!("test");
    }
    """
    return CoverageResult(
        lines={1: 2, 3: 0, 6: 2, 7: 1, 8: 2, 9: 1, 11: 1, 12: 2},
        branches={8: [True, False]},
        functions={
            TEST_FN: FunctionRecord(start=6, executed=True),
            MAIN_HASH_A: FunctionRecord(start=1, executed=False),
            MAIN_HASH_B: FunctionRecord(start=1, executed=True),
            TEST_FN_CLOSURE: FunctionRecord(start=6, executed=True),
            MAIN_HASH_C: FunctionRecord(start=1, executed=False),
        },
    )
