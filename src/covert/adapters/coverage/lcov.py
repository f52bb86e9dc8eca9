"""LCOV tracefile adapter.

Supports the ``.info`` format written by lcov/geninfo, ``gcovr --lcov``,
``llvm-cov export -format=lcov``, grcov and most JavaScript tooling,
including the LCOV 2 ``FNL``/``FNA`` function records.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import TYPE_CHECKING

from covert.adapters.coverage.base import CoverageInputAdapter, relative_to_prefix
from covert.errors import CoverageInputError
from covert.models.coverage import CoverageResult, FileResult, FunctionRecord

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

logger = logging.getLogger(__name__)


# ── Constants ────────────────────────────────────────────────────

_LCOV_SUFFIXES = (".info", ".lcov")
_LCOV_DETECT_KEYS = ("SF:", "TN:")

# LCOV record keys
_LCOV_SF = "SF"
_LCOV_FN = "FN"
_LCOV_FNDA = "FNDA"
_LCOV_FNL = "FNL"
_LCOV_FNA = "FNA"
_LCOV_DA = "DA"
_LCOV_BRDA = "BRDA"
_LCOV_END = "end_of_record"
_LCOV_DA_PARTS = 2
_LCOV_BRDA_PARTS = 4
_LCOV_NOT_TAKEN = "-"

# FN:<start>,<name> or FN:<start>,<end>,<name>
_FN_RE = re.compile(r"^(\d+)(?:,(\d+))?,(.+)$")
# FNDA:<count>,<name>
_FNDA_RE = re.compile(r"^(\d+),(.+)$")
# FNL:<index>,<start>[,<end>]
_FNL_RE = re.compile(r"^(\d+),(\d+)(?:,\d+)?$")
# FNA:<index>,<count>,<name>
_FNA_RE = re.compile(r"^(\d+),(\d+),(.+)$")


@dataclass
class _LcovRecordState:
    path: str
    starts: dict[str, int] = field(default_factory=dict)
    counts: dict[str, int] = field(default_factory=dict)
    da: dict[int, int] = field(default_factory=dict)
    brda: dict[int, list[bool]] = field(default_factory=dict)
    fnl: dict[int, int] = field(default_factory=dict)

    def to_result(self) -> CoverageResult:
        functions = {
            name: FunctionRecord(start=start, executed=self.counts.get(name, 0) > 0)
            for name, start in self.starts.items()
        }
        return CoverageResult(lines=self.da, branches=self.brda, functions=functions)


# ── Adapter ──────────────────────────────────────────────────────


class LcovAdapter(CoverageInputAdapter):
    """LCOV tracefile adapter.

    Maps LCOV records onto the per-file result model:

    - ``DA:line,count`` → hit count (repeated records are summed)
    - ``BRDA:line,block,branch,taken`` → one taken flag per record, in order
    - ``FN``/``FNDA`` (or ``FNL``/``FNA``) → function start and executed flag
    """

    @property
    def name(self) -> str:
        return "lcov"

    def detect(self, coverage_file: Path) -> bool:
        """Return True for LCOV suffixes or content starting with TN:/SF:."""
        if coverage_file.suffix.lower() in _LCOV_SUFFIXES:
            return True
        try:
            with coverage_file.open(encoding="utf-8", errors="replace") as fh:
                head = fh.read(256).lstrip()
        except OSError:
            return False
        return head.startswith(_LCOV_DETECT_KEYS)

    def read(self, coverage_file: Path, *, prefix: Path | None = None) -> Iterator[FileResult]:
        """Yield one result per ``SF`` record of *coverage_file*."""
        try:
            content = coverage_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CoverageInputError(f"Failed to read LCOV file {coverage_file}: {e}") from e
        root = PurePath(prefix) if prefix is not None else None
        for state in self._parse_records(content):
            absolute = PurePath(state.path)
            yield FileResult(
                absolute_path=absolute,
                relative_path=relative_to_prefix(absolute, root),
                result=state.to_result(),
            )

    def _parse_records(self, content: str) -> Iterator[_LcovRecordState]:
        """Parse LCOV text, yielding each completed file record."""
        state: _LcovRecordState | None = None

        for lineno, raw_line in enumerate(content.splitlines(), start=1):
            line = raw_line.strip()
            if not line:
                continue
            if line == _LCOV_END:
                if state is not None:
                    yield state
                state = None
                continue
            key, sep, value = line.partition(":")
            if not sep:
                logger.debug("Skipping malformed LCOV line %d: %r", lineno, line)
                continue
            value = value.strip()
            if key == _LCOV_SF:
                if state is not None:
                    yield state
                state = _LcovRecordState(path=value)
            elif state is not None:
                if not self._apply_lcov_key(key, value, state):
                    logger.debug("Skipping malformed %s record on line %d", key, lineno)

        if state is not None:
            yield state

    def _apply_lcov_key(self, key: str, value: str, state: _LcovRecordState) -> bool:
        """Apply one record to *state*; return False if it was malformed."""
        if key == _LCOV_FN:
            match = _FN_RE.match(value)
            if not match:
                return False
            state.starts[match.group(3).strip()] = int(match.group(1))
            return True
        if key == _LCOV_FNDA:
            match = _FNDA_RE.match(value)
            if not match:
                return False
            name = match.group(2).strip()
            state.counts[name] = state.counts.get(name, 0) + int(match.group(1))
            return True
        if key == _LCOV_FNL:
            match = _FNL_RE.match(value)
            if not match:
                return False
            state.fnl[int(match.group(1))] = int(match.group(2))
            return True
        if key == _LCOV_FNA:
            match = _FNA_RE.match(value)
            if not match or int(match.group(1)) not in state.fnl:
                return False
            name = match.group(3).strip()
            state.starts[name] = state.fnl[int(match.group(1))]
            state.counts[name] = state.counts.get(name, 0) + int(match.group(2))
            return True
        if key == _LCOV_DA:
            parts = value.split(",")
            if len(parts) < _LCOV_DA_PARTS:
                return False
            try:
                ln = int(parts[0].strip())
                cnt = int(parts[1].strip())
            except ValueError:
                return False
            state.da[ln] = state.da.get(ln, 0) + max(cnt, 0)
            return True
        if key == _LCOV_BRDA:
            parts = value.split(",")
            if len(parts) < _LCOV_BRDA_PARTS:
                return False
            taken_s = parts[-1].strip()
            try:
                ln = int(parts[0].strip())
                taken = 0 if taken_s == _LCOV_NOT_TAKEN else int(taken_s)
            except ValueError:
                return False
            state.brda.setdefault(ln, []).append(taken > 0)
            return True
        # TN, LF, LH, BRF, BRH, FNF, FNH and unknown keys carry nothing we use.
        return True
