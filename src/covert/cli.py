"""covert CLI — top-level command group."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler

from covert import __version__
from covert.adapters.registry import input_formats, read_inputs
from covert.analyzers.attribution import METHOD_ORDERS
from covert.analyzers.tree import build_coverage
from covert.config import CovertConfig, load_config, validate_config
from covert.errors import CoverageInputError, ExportError
from covert.export import export_cobertura
from covert.reporters.terminal import CLIReporter, reporter
from covert.utils.demangle import DemangleOptions, demangle_symbol
from covert.utils.output import is_stdout

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from covert.models.coverage import Coverage, FileResult

logger = logging.getLogger(__name__)


@dataclass
class _ExportSettings:
    """Effective export settings: CLI options layered over ``.covert.yml``."""

    input_format: str
    prefix: Path | None
    output: str | None
    demangle: bool
    demangle_name_only: bool
    method_order: str

    @property
    def demangler(self) -> Callable[[str], str | None]:
        return partial(demangle_symbol, options=DemangleOptions(name_only=self.demangle_name_only))


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _load_valid_config(path: str) -> CovertConfig:
    try:
        config = load_config(path)
    except Exception as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    errors = validate_config(config)
    if errors:
        for error in errors:
            reporter.print_error(error)
        raise click.Abort
    return config


def _resolve_settings(
    config: CovertConfig,
    *,
    input_format: str | None = None,
    prefix: Path | None = None,
    output: str | None = None,
    demangle: bool | None = None,
    method_order: str | None = None,
) -> _ExportSettings:
    # Paths in .covert.yml are relative to the project root.
    config_prefix = Path(config.root) / config.input.prefix if config.input.prefix else None
    config_output = config.export.output
    if not is_stdout(config_output):
        config_output = str(Path(config.root) / config_output)
    return _ExportSettings(
        input_format=input_format or config.input.format,
        prefix=prefix if prefix is not None else config_prefix,
        output=output if output is not None else (config_output or None),
        demangle=config.export.demangle if demangle is None else demangle,
        demangle_name_only=config.export.demangle_name_only,
        method_order=method_order or config.export.method_order,
    )


def _read(inputs: tuple[Path, ...], settings: _ExportSettings) -> Iterator[FileResult]:
    return read_inputs(inputs, input_format=settings.input_format, prefix=settings.prefix)


def _warn_if_empty(coverage: Coverage, inputs: tuple[Path, ...]) -> None:
    if not coverage.packages:
        names = ", ".join(str(p) for p in inputs)
        reporter.print_warning(f"No source files found in {names}")


def _config_to_dict(config: CovertConfig) -> dict[str, Any]:
    """Convert CovertConfig to dictionary for display."""
    result = asdict(config)
    result.pop("raw", None)
    return result


# ── Shared options ───────────────────────────────────────────────

_inputs_argument = click.argument(
    "inputs",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
_format_option = click.option(
    "--format",
    "input_format",
    type=click.Choice(input_formats()),
    default=None,
    help="Input format (default: input.format from .covert.yml, else auto-detect).",
)
_prefix_option = click.option(
    "--prefix",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Make source paths relative to this directory.",
)
_path_option = click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory containing .covert.yml.",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr.")
@click.version_option(version=__version__, prog_name="covert")
@click.pass_context
def cli(ctx: click.Context, *, verbose: bool) -> None:
    """covert — convert coverage data to Cobertura XML."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose=verbose)


@cli.command("export")
@_inputs_argument
@click.option(
    "-o",
    "--output",
    default=None,
    help="Output file; '-' for stdout (default: export.output, else stdout).",
)
@_format_option
@_prefix_option
@click.option(
    "--demangle/--no-demangle",
    default=None,
    help="Demangle function names (default: export.demangle).",
)
@click.option(
    "--method-order",
    type=click.Choice(METHOD_ORDERS),
    default=None,
    help="Method order within a class (default: export.method_order).",
)
@_path_option
def export_command(
    inputs: tuple[Path, ...],
    output: str | None,
    input_format: str | None,
    prefix: Path | None,
    demangle: bool | None,
    method_order: str | None,
    path: str,
) -> None:
    """Convert coverage INPUTS to a Cobertura XML report.

    Example:
      covert export coverage.info -o coverage.xml
      covert export results.json --no-demangle > coverage.xml
    """
    config = _load_valid_config(path)
    settings = _resolve_settings(
        config,
        input_format=input_format,
        prefix=prefix,
        output=output,
        demangle=demangle,
        method_order=method_order,
    )
    target = None if is_stdout(settings.output) else settings.output

    try:
        coverage = export_cobertura(
            _read(inputs, settings),
            target,
            demangle=settings.demangle,
            demangler=settings.demangler,
            method_order=settings.method_order,
        )
    except (CoverageInputError, ExportError) as e:
        reporter.print_error(str(e))
        raise click.Abort from e

    _warn_if_empty(coverage, inputs)
    if target is not None:
        reporter.print_success(
            f"Wrote Cobertura report for {len(coverage.packages)} file(s) to {target}"
        )


@cli.command("summary")
@_inputs_argument
@_format_option
@_prefix_option
@_path_option
def summary_command(
    inputs: tuple[Path, ...],
    input_format: str | None,
    prefix: Path | None,
    path: str,
) -> None:
    """Print line and branch coverage of INPUTS per file."""
    config = _load_valid_config(path)
    settings = _resolve_settings(config, input_format=input_format, prefix=prefix)
    try:
        coverage = build_coverage(
            _read(inputs, settings),
            demangle=settings.demangle,
            demangler=settings.demangler,
            method_order=settings.method_order,
        )
    except CoverageInputError as e:
        reporter.print_error(str(e))
        raise click.Abort from e

    _warn_if_empty(coverage, inputs)
    CLIReporter(Console()).print_coverage_summary(coverage)


@cli.group("config")
def config_group() -> None:
    """Inspect `.covert.yml` configuration."""


@config_group.command("show")
@_path_option
@click.option(
    "--json-output",
    "as_json",
    is_flag=True,
    help="Output as JSON instead of YAML.",
)
def config_show(path: str, *, as_json: bool) -> None:
    """Display the resolved configuration.

    Example:
      covert config show
      covert config show --json-output
    """
    try:
        config = load_config(path)
    except Exception as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    config_dict = _config_to_dict(config)
    if as_json:
        click.echo(json.dumps(config_dict, indent=2))
    else:
        click.echo(yaml.safe_dump(config_dict, sort_keys=False, default_flow_style=False))


@config_group.command("validate")
@_path_option
def config_validate(path: str) -> None:
    """Validate `.covert.yml` configuration.

    Example:
      covert config validate
    """
    try:
        config = load_config(path)
    except Exception as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    errors = validate_config(config)
    if not errors:
        reporter.print_success("Configuration is valid!")
        return

    reporter.print_error(f"Found {len(errors)} configuration error(s):")
    for idx, error in enumerate(errors, start=1):
        reporter.console.print(f"  {idx}. [red]{error}[/red]")
    raise click.Abort


def main() -> None:
    """Console script entry point."""
    cli(obj={})
