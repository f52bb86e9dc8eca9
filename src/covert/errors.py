"""Exceptions raised by covert."""

from __future__ import annotations


class CovertError(Exception):
    """Base class for covert errors."""


class CoverageInputError(CovertError, ValueError):
    """Raised when a coverage input file cannot be read or decoded."""


class ExportError(CovertError, RuntimeError):
    """Raised when the report cannot be written to its output sink."""
