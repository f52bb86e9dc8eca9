"""Data models for coverage input and the Cobertura report tree."""

from covert.models.coverage import (
    BranchLine,
    Class,
    Condition,
    Coverage,
    CoverageResult,
    FileResult,
    FunctionRecord,
    Line,
    Method,
    Package,
    PlainLine,
)

__all__ = [
    "BranchLine",
    "Class",
    "Condition",
    "Coverage",
    "CoverageResult",
    "FileResult",
    "FunctionRecord",
    "Line",
    "Method",
    "Package",
    "PlainLine",
]
