"""JSON adapter for serialized coverage results.

Reads a list of file entries, either at the top level or under a
``"files"`` key::

    [
      {
        "path": "/project/src/main.rs",
        "relative_path": "src/main.rs",
        "lines": {"1": 1, "2": 0},
        "branches": {"2": [true, false]},
        "functions": {"main": {"start": 1, "executed": true}}
      }
    ]

``relative_path`` is optional and falls back to ``path`` made relative
to the prefix.
"""

from __future__ import annotations

import json
import logging
from pathlib import PurePath
from typing import TYPE_CHECKING, Any

from covert.adapters.coverage.base import CoverageInputAdapter, relative_to_prefix
from covert.errors import CoverageInputError
from covert.models.coverage import CoverageResult, FileResult, FunctionRecord

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

logger = logging.getLogger(__name__)

_JSON_OPENERS = ("{", "[")


def _int_keys(raw: Any, field_name: str, path: str) -> dict[int, Any]:
    if not isinstance(raw, dict):
        raise CoverageInputError(f"{path}: '{field_name}' must be an object")
    try:
        return {int(key): value for key, value in raw.items()}
    except ValueError as e:
        raise CoverageInputError(f"{path}: '{field_name}' keys must be line numbers") from e


def _parse_result(entry: dict[str, Any], path: str) -> CoverageResult:
    lines = {
        number: int(hits)
        for number, hits in _int_keys(entry.get("lines", {}), "lines", path).items()
    }
    branches = {
        number: [bool(taken) for taken in outcomes]
        for number, outcomes in _int_keys(entry.get("branches", {}), "branches", path).items()
    }

    functions_raw = entry.get("functions", {})
    if not isinstance(functions_raw, dict):
        raise CoverageInputError(f"{path}: 'functions' must be an object")
    functions: dict[str, FunctionRecord] = {}
    for name, info in functions_raw.items():
        if not isinstance(info, dict) or "start" not in info:
            raise CoverageInputError(f"{path}: function {name!r} needs a 'start' line")
        functions[str(name)] = FunctionRecord(
            start=int(info["start"]),
            executed=bool(info.get("executed", False)),
        )
    return CoverageResult(lines=lines, branches=branches, functions=functions)


class JsonResultsAdapter(CoverageInputAdapter):
    """Adapter for covert's JSON serialization of per-file results."""

    @property
    def name(self) -> str:
        return "json"

    def detect(self, coverage_file: Path) -> bool:
        """Return True for ``.json`` files or content opening with ``{``/``[``."""
        if coverage_file.suffix.lower() == ".json":
            return True
        try:
            with coverage_file.open(encoding="utf-8", errors="replace") as fh:
                head = fh.read(64).lstrip()
        except OSError:
            return False
        return head.startswith(_JSON_OPENERS)

    def read(self, coverage_file: Path, *, prefix: Path | None = None) -> Iterator[FileResult]:
        """Yield one result per file entry of *coverage_file*."""
        try:
            data = json.loads(coverage_file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CoverageInputError(f"Failed to read JSON results {coverage_file}: {e}") from e

        entries = data.get("files", []) if isinstance(data, dict) else data
        if not isinstance(entries, list):
            raise CoverageInputError(f"{coverage_file}: expected a list of file entries")

        root = PurePath(prefix) if prefix is not None else None
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict) or not entry.get("path"):
                logger.debug("Skipping entry %d of %s: no 'path'", index, coverage_file)
                continue
            path = str(entry["path"])
            absolute = PurePath(path)
            relative_raw = entry.get("relative_path")
            relative = (
                PurePath(str(relative_raw))
                if relative_raw
                else relative_to_prefix(absolute, root)
            )
            try:
                result = _parse_result(entry, path)
            except CoverageInputError:
                raise
            except (TypeError, ValueError) as e:
                raise CoverageInputError(f"{coverage_file}: invalid entry for {path}: {e}") from e
            yield FileResult(absolute_path=absolute, relative_path=relative, result=result)
