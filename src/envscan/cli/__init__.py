"""
CLI for envscan.

Provides command-line interface for scanning source trees for environment
variable reads.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from dotenv import find_dotenv, load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)

from envscan.cli.ui import (
    render_error,
    render_file_errors,
    render_language_table,
    render_languages_detected,
    render_security_issues,
    render_summary,
    render_variables,
    render_warning,
)
from envscan.core.config import EnvScanConfig, LoggingConfig, ScanOptions, load_config
from envscan.core.errors import ScanError
from envscan.core.file_scanner import get_default_registry
from envscan.services import ScanResult, ScanService

# Initialize Rich Consoles; diagnostics go to stderr so JSON/YAML stay clean
console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="envscan",
    help="Find every environment variable read in a source tree",
    add_completion=False,
)


class OutputFormat(str, Enum):
    """Output format for scan results."""

    TEXT = "text"
    JSON = "json"
    YAML = "yaml"


def _configure_logging(config: LoggingConfig) -> None:
    """Route log records through Rich on stderr at the configured level."""
    level = getattr(logging, config.level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_cli_config(config_path: Optional[Path]) -> EnvScanConfig:
    # ENVSCAN_* overrides may also come from a .env in or above the working directory
    env_file = find_dotenv(usecwd=True)
    if env_file:
        load_dotenv(env_file)

    try:
        return load_config(config_path)
    except (FileNotFoundError, ValueError, TypeError) as e:
        render_error(f"Invalid configuration: {e}", err_console)
        raise typer.Exit(1)


@app.command()
def scan(
    path: Path = typer.Argument(Path("."), help="Directory to scan"),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TEXT, "--format", "-f", help="Output format: text, json or yaml"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or JSON configuration file"
    ),
    include: Optional[list[str]] = typer.Option(
        None, "--include", "-i", help="File name glob to scan (repeatable, replaces defaults)"
    ),
    exclude: Optional[list[str]] = typer.Option(
        None, "--exclude", "-e", help="Path glob to exclude (repeatable, added to defaults)"
    ),
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", "-d", help="Maximum directory depth to descend"
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", help="Number of parallel workers"
    ),
    sequential: bool = typer.Option(
        False, "--sequential", help="Scan on a single thread"
    ),
    no_secrets: bool = typer.Option(
        False, "--no-secrets", help="Skip hardcoded secret detection"
    ),
    show_lines: bool = typer.Option(
        False, "--lines", "-l", help="Show file:line for every usage"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    ),
):
    """Scan a directory for environment variable usage."""
    cfg = _load_cli_config(config_path)
    if log_level:
        cfg.logging.level = log_level
    _configure_logging(cfg.logging)

    options = cfg.scan
    if include:
        options.include_patterns = list(include)
    if exclude:
        options.exclude_patterns = [*options.exclude_patterns, *exclude]
    if max_depth is not None:
        options.max_depth = max_depth
    if workers is not None:
        options.max_workers = workers
    if sequential:
        options.parallel = False
    if no_secrets:
        options.detect_secrets = False

    try:
        if output_format is OutputFormat.TEXT:
            result = _scan_with_progress(path, options)
        else:
            result = ScanService(options=options).scan(path)
    except (ScanError, ValueError) as e:
        render_error(str(e), err_console)
        raise typer.Exit(1)

    if output_format is OutputFormat.JSON:
        typer.echo(result.to_json())
    elif output_format is OutputFormat.YAML:
        typer.echo(result.to_yaml(), nl=False)
    else:
        _render_text(result, show_lines)


def _scan_with_progress(path: Path, options: ScanOptions) -> ScanResult:
    console.print(f"[bold blue]Scanning[/bold blue] {path}...")
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=err_console,
        transient=True,
    ) as progress:
        task = progress.add_task("Discovering files...", total=None)

        def update_progress(current: int, total: int, message: str) -> None:
            progress.update(task, completed=current, total=total, description=message)

        service = ScanService(options=options, progress_callback=update_progress)
        return service.scan(path)


def _render_text(result: ScanResult, show_lines: bool) -> None:
    render_summary(result, console)
    render_languages_detected(result, console)
    render_variables(result, console, show_lines=show_lines)
    render_security_issues(result, console)
    render_file_errors(result, console)
    if result.errors:
        render_warning(
            f"{len(result.errors)} file(s) could not be scanned; results may be incomplete",
            err_console,
        )


@app.command()
def languages():
    """List supported languages in lookup order."""
    try:
        registry = get_default_registry()
    except ScanError as e:
        render_error(str(e), err_console)
        raise typer.Exit(1)
    render_language_table(registry, console)


if __name__ == "__main__":
    app()
