"""Coverage input and report tree models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import PurePath

# ── Input models ─────────────────────────────────────────────────


@dataclass
class FunctionRecord:
    """A function detected in a source file."""

    start: int
    """First line of the function."""

    executed: bool = False
    """True if the function was entered at least once."""


@dataclass
class CoverageResult:
    """Raw coverage measurements for a single source file."""

    lines: dict[int, int] = field(default_factory=dict)
    """Line number to hit count."""

    branches: dict[int, list[bool]] = field(default_factory=dict)
    """Line number to per-branch taken flags, in branch order."""

    functions: dict[str, FunctionRecord] = field(default_factory=dict)
    """Symbol name to function record."""


@dataclass
class FileResult:
    """One element of the input sequence: a file and its measurements."""

    absolute_path: PurePath
    relative_path: PurePath
    result: CoverageResult


# ── Report tree ──────────────────────────────────────────────────

CONDITION_TYPE_JUMP = "jump"


@dataclass(frozen=True)
class Condition:
    """One outcome of a branch point."""

    number: int
    coverage: float
    type: str = CONDITION_TYPE_JUMP


@dataclass(frozen=True)
class PlainLine:
    """An executable line without branches."""

    number: int
    hits: int

    @property
    def is_covered(self) -> bool:
        return self.hits > 0


@dataclass(frozen=True)
class BranchLine:
    """A line holding a branch point."""

    number: int
    hits: int
    conditions: tuple[Condition, ...] = ()

    @property
    def is_covered(self) -> bool:
        return self.hits > 0


Line = PlainLine | BranchLine


@dataclass(frozen=True)
class Method:
    """A function and the lines attributed to it."""

    name: str
    lines: tuple[Line, ...] = ()
    signature: str = ""


@dataclass(frozen=True)
class Class:
    """A source file: its methods plus lines no method claimed."""

    name: str
    filename: str
    lines: tuple[Line, ...] = ()
    methods: tuple[Method, ...] = ()


@dataclass(frozen=True)
class Package:
    """A package wraps exactly one class (one per source file)."""

    name: str
    classes: tuple[Class, ...] = ()


DEFAULT_SOURCE_ROOT = "."


@dataclass(frozen=True)
class Coverage:
    """Root of the report tree."""

    packages: tuple[Package, ...] = ()
    sources: tuple[str, ...] = (DEFAULT_SOURCE_ROOT,)
