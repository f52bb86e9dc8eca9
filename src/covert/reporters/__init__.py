"""Reporters for writing and displaying coverage results."""

from __future__ import annotations

from covert.reporters.cobertura import CoberturaReporter
from covert.reporters.terminal import reporter

__all__ = [
    "CoberturaReporter",
    "reporter",
]
