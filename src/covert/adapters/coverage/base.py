"""Base class for coverage input adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import PurePath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from covert.models.coverage import FileResult


def relative_to_prefix(path: PurePath, prefix: PurePath | None) -> PurePath:
    """Return *path* relative to *prefix*, or *path* itself if outside it."""
    if prefix is None or not prefix.parts:
        return path
    try:
        return path.relative_to(prefix)
    except ValueError:
        return path


class CoverageInputAdapter(ABC):
    """Abstract base class for coverage input formats.

    Each concrete adapter reads one native coverage format and yields the
    per-file results lazily, in file order.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Format identifier (e.g. 'lcov', 'json')."""

    @abstractmethod
    def detect(self, coverage_file: Path) -> bool:
        """Return True if *coverage_file* looks like this adapter's format."""

    @abstractmethod
    def read(self, coverage_file: Path, *, prefix: Path | None = None) -> Iterator[FileResult]:
        """Yield one result per source file recorded in *coverage_file*.

        Args:
            coverage_file: Path to the native coverage file.
            prefix: Directory that source paths are made relative to.

        Raises:
            CoverageInputError: If the file cannot be read or decoded.
        """
