"""Cobertura XML reporter — serializes the coverage tree.

Produces documents against the Cobertura ``coverage-04`` DTD (report
version 1.9), the interchange format read by Jenkins, GitLab, Azure
DevOps, Codecov and most coverage dashboards.
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import IO, TYPE_CHECKING

from lxml import etree

from covert.analyzers.stats import compute_stats
from covert.errors import ExportError
from covert.models.coverage import BranchLine, PlainLine
from covert.utils.output import open_output

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from covert.analyzers.stats import CoverageStats
    from covert.models.coverage import Class, Coverage, Line, Method, Package

logger = logging.getLogger(__name__)

COBERTURA_DTD = "http://cobertura.sourceforge.net/xml/coverage-04.dtd"
COBERTURA_DOCTYPE = f"<!DOCTYPE coverage SYSTEM '{COBERTURA_DTD}'>"
COBERTURA_VERSION = "1.9"
_INDENT = "    "


def format_number(value: float) -> str:
    """Render *value* as a plain decimal: ``6``, ``0.75``, ``0.00001``."""
    if value == int(value):
        return str(int(value))
    text = repr(float(value))
    if "e" in text:
        text = format(Decimal(text), "f")
    return text


def _timestamp(clock: Callable[[], float]) -> str:
    try:
        seconds = int(clock())
    except (OSError, OverflowError, ValueError) as e:
        logger.debug("Clock unavailable, using timestamp 0: %s", e)
        return "0"
    return str(seconds) if seconds >= 0 else "0"


class CoberturaReporter:
    """Generate Cobertura XML reports from a coverage tree.

    The element tree is built in full, then serialized and written to the
    sink in a single operation.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """Initialize the reporter.

        Args:
            clock: Returns the current unix time in seconds; used for the
                ``timestamp`` attribute.
        """
        self._clock = clock

    def generate_bytes(self, coverage: Coverage) -> bytes:
        """Return the complete document, UTF-8 encoded."""
        root = _build_xml(coverage, _timestamp(self._clock))
        etree.indent(root, space=_INDENT)
        document: bytes = etree.tostring(
            root,
            xml_declaration=True,
            encoding="UTF-8",
            doctype=COBERTURA_DOCTYPE,
        )
        return document + b"\n"

    def generate_string(self, coverage: Coverage) -> str:
        """Return the complete document as text."""
        return self.generate_bytes(coverage).decode("utf-8")

    def write(self, coverage: Coverage, sink: IO[bytes]) -> None:
        """Write the document to an open binary *sink*.

        Raises:
            ExportError: If writing to the sink fails.
        """
        document = self.generate_bytes(coverage)
        try:
            sink.write(document)
        except OSError as e:
            logger.error("Failed to write Cobertura report: %s", e)
            raise ExportError(f"Failed to write Cobertura report: {e}") from e

    def generate(self, coverage: Coverage, output_path: Path | str | None) -> None:
        """Write the report to *output_path*, or to stdout when it is None.

        Raises:
            ExportError: If the target cannot be created or written.
        """
        try:
            with open_output(output_path) as sink:
                self.write(coverage, sink)
        except OSError as e:
            logger.error("Failed to write Cobertura report to %s: %s", output_path, e)
            raise ExportError(f"Failed to write Cobertura report to {output_path}: {e}") from e
        if output_path:
            logger.info("Cobertura report written to %s", output_path)


# ── Element builders ─────────────────────────────────────────────


def _set_rates(elem: etree._Element, stats: CoverageStats) -> None:
    elem.set("line-rate", format_number(stats.line_rate))
    elem.set("branch-rate", format_number(stats.branch_rate))
    elem.set("complexity", format_number(stats.complexity))


def _build_xml(coverage: Coverage, timestamp: str) -> etree._Element:
    """Build the ``<coverage>`` element tree."""
    stats = compute_stats(coverage)
    root = etree.Element("coverage")
    root.set("lines-covered", str(stats.lines_covered))
    root.set("lines-valid", str(stats.lines_valid))
    root.set("line-rate", format_number(stats.line_rate))
    root.set("branches-covered", format_number(stats.branches_covered))
    root.set("branches-valid", str(stats.branches_valid))
    root.set("branch-rate", format_number(stats.branch_rate))
    root.set("complexity", "0")
    root.set("version", COBERTURA_VERSION)
    root.set("timestamp", timestamp)

    sources = etree.SubElement(root, "sources")
    for path in coverage.sources:
        etree.SubElement(sources, "source").text = path

    packages = etree.SubElement(root, "packages")
    for package in coverage.packages:
        packages.append(_package_element(package))
    return root


def _package_element(package: Package) -> etree._Element:
    elem = etree.Element("package")
    elem.set("name", package.name)
    _set_rates(elem, compute_stats(package))
    classes = etree.SubElement(elem, "classes")
    for cls in package.classes:
        classes.append(_class_element(cls))
    return elem


def _class_element(cls: Class) -> etree._Element:
    elem = etree.Element("class")
    elem.set("name", cls.name)
    elem.set("filename", cls.filename)
    _set_rates(elem, compute_stats(cls))
    methods = etree.SubElement(elem, "methods")
    for method in cls.methods:
        methods.append(_method_element(method))
    elem.append(_lines_element(cls.lines))
    return elem


def _method_element(method: Method) -> etree._Element:
    elem = etree.Element("method")
    elem.set("name", method.name)
    elem.set("signature", method.signature)
    _set_rates(elem, compute_stats(method))
    elem.append(_lines_element(method.lines))
    return elem


def _lines_element(lines: Iterable[Line]) -> etree._Element:
    elem = etree.Element("lines")
    for line in lines:
        elem.append(_line_element(line))
    return elem


def _line_element(line: Line) -> etree._Element:
    elem = etree.Element("line")
    elem.set("number", str(line.number))
    elem.set("hits", str(line.hits))
    match line:
        case BranchLine(conditions=conditions):
            elem.set("branch", "true")
            conditions_elem = etree.SubElement(elem, "conditions")
            for condition in conditions:
                condition_elem = etree.SubElement(conditions_elem, "condition")
                condition_elem.set("number", str(condition.number))
                condition_elem.set("type", condition.type)
                condition_elem.set("coverage", format_number(condition.coverage))
        case PlainLine():
            pass
    return elem
