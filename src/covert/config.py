"""Configuration parsing from ``.covert.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from covert.adapters.registry import input_formats
from covert.analyzers.attribution import METHOD_ORDER_START, METHOD_ORDERS

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".covert.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")
_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_value(match: re.Match[str]) -> str:
    name = match.group(1)
    value = os.environ.get(name)
    if value is None:
        logger.warning("%s references unset environment variable %s", CONFIG_FILENAME, name)
        return ""
    return value


def _expand_env(value: Any) -> Any:
    """Expand ``${VAR}`` placeholders in every string nested in *value*."""
    match value:
        case str():
            return _ENV_VAR_RE.sub(_env_value, value)
        case dict():
            return {key: _expand_env(item) for key, item in value.items()}
        case list():
            return [_expand_env(item) for item in value]
        case _:
            return value


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


@dataclass
class InputConfig:
    """Coverage input configuration."""

    format: str = "auto"
    """Input format: auto, lcov or json."""

    prefix: str = ""
    """Directory that source paths are made relative to (empty = keep as-is)."""


@dataclass
class ExportConfig:
    """Cobertura export configuration."""

    output: str = ""
    """Output file path (empty = stdout)."""

    demangle: bool = True
    """Demangle function symbol names."""

    demangle_name_only: bool = True
    """Keep only the qualified name of demangled symbols."""

    method_order: str = METHOD_ORDER_START
    """Method order within a class: start (start line, then name) or input."""


@dataclass
class CovertConfig:
    """Complete covert configuration from ``.covert.yml``."""

    root: str
    """Directory the configuration was loaded from."""

    input: InputConfig = field(default_factory=InputConfig)
    """Input configuration."""

    export: ExportConfig = field(default_factory=ExportConfig)
    """Export configuration."""

    raw: dict[str, Any] = field(default_factory=dict)
    """Raw parsed YAML for extension/debugging."""


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, dict):
        logger.warning("Ignoring '%s' section in %s: expected a mapping", name, CONFIG_FILENAME)
        return {}
    return section


def _parse_input_config(raw: dict[str, Any]) -> InputConfig:
    """Parse the input section from raw YAML."""
    input_raw = _section(raw, "input")
    return InputConfig(
        format=str(input_raw.get("format", os.environ.get("COVERT_FORMAT", "auto"))),
        prefix=str(input_raw.get("prefix", os.environ.get("COVERT_PREFIX", ""))),
    )


def _parse_export_config(raw: dict[str, Any]) -> ExportConfig:
    """Parse the export section from raw YAML."""
    export_raw = _section(raw, "export")
    return ExportConfig(
        output=str(export_raw.get("output", os.environ.get("COVERT_OUTPUT", ""))),
        demangle=_as_bool(export_raw.get("demangle", True)),
        demangle_name_only=_as_bool(export_raw.get("demangle_name_only", True)),
        method_order=str(export_raw.get("method_order", METHOD_ORDER_START)),
    )


def load_config(root: str | Path) -> CovertConfig:
    """Load and parse ``.covert.yml`` from *root*.

    Falls back to defaults and environment variables when the YAML file
    is missing or incomplete.
    """
    root_path = Path(root).resolve()
    config_file = root_path / CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_file.is_file():
        parsed = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _expand_env(parsed)
        elif parsed is not None:
            logger.warning("Ignoring %s: top level is not a mapping", config_file)

    return CovertConfig(
        root=str(root_path),
        input=_parse_input_config(raw),
        export=_parse_export_config(raw),
        raw=raw,
    )


def validate_config(config: CovertConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []

    formats = input_formats()
    if config.input.format not in formats:
        errors.append(
            f"input.format must be one of {', '.join(formats)} (got: {config.input.format})"
        )

    if config.export.method_order not in METHOD_ORDERS:
        errors.append(
            f"export.method_order must be one of {', '.join(METHOD_ORDERS)} "
            f"(got: {config.export.method_order})"
        )

    return errors
