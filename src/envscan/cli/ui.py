"""
UI components module for the envscan CLI.

Renders scan results, errors and the language table with Rich.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from envscan.core.file_scanner import LanguageRegistry
from envscan.core.security import Severity
from envscan.services import ScanResult

# Number of files listed inline before collapsing to "and N more"
MAX_INLINE_FILES = 3

_SEVERITY_STYLES = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "dim",
}


def render_error(message: str, console: Console) -> None:
    """
    Render an error message in a visually distinct red panel.

    Args:
        message: Error message to display.
        console: Rich Console instance for output.
    """
    error_text = Text()
    error_text.append("Error: ", style="bold red")
    error_text.append(message, style="red")

    console.print(
        Panel(
            error_text,
            border_style="red",
            title="[bold red]Error[/bold red]",
            expand=False,
        )
    )


def render_warning(message: str, console: Console) -> None:
    """Render a warning message in yellow."""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def render_summary(result: ScanResult, console: Console) -> None:
    """Render the scan statistics panel."""
    summary = Table.grid(padding=1)
    summary.add_column(style="bold")
    summary.add_column()
    summary.add_row("Files Scanned:", str(result.files_scanned))
    summary.add_row("Files Skipped:", str(result.files_skipped))
    summary.add_row("Variables Found:", str(len(result.variables)))
    summary.add_row("Patterns Matched:", str(result.patterns_matched))
    summary.add_row("Duration:", f"{result.duration_seconds:.2f}s")
    if result.security_issues:
        summary.add_row("Security Issues:", f"[yellow]{len(result.security_issues)}[/yellow]")
    if result.errors:
        summary.add_row("Errors:", f"[red]{len(result.errors)}[/red]")

    console.print(
        Panel(
            summary,
            title="[bold green]Scan Complete[/bold green]",
            border_style="green",
            expand=False,
        )
    )


def render_languages_detected(result: ScanResult, console: Console) -> None:
    if not result.languages_detected:
        return

    lang_table = Table(title="Languages", box=None, show_header=True)
    lang_table.add_column("Language", style="cyan")
    lang_table.add_column("Files", justify="right")
    for language, count in result.languages_detected.items():
        lang_table.add_row(language, str(count))

    console.print(Panel(lang_table, border_style="blue", expand=False))


def render_variables(result: ScanResult, console: Console, show_lines: bool = False) -> None:
    """
    Render one row per variable with its usage count and files.

    Args:
        result: Scan result to render.
        console: Rich Console instance for output.
        show_lines: List every file:line location instead of file names.
    """
    if not result.variables:
        console.print("[dim]No environment variables found.[/dim]")
        return

    table = Table(title="Environment Variables", show_header=True, header_style="bold")
    table.add_column("Variable", style="cyan", no_wrap=True)
    table.add_column("Uses", justify="right")
    table.add_column("Locations")

    for name, usage in result.variables.items():
        if show_lines:
            locations = [f"{r.file_path}:{r.line_number}" for r in usage.records]
        else:
            locations = list(usage.files)
        if len(locations) > MAX_INLINE_FILES:
            shown = ", ".join(locations[: MAX_INLINE_FILES - 1])
            locations_text = f"{shown} and {len(locations) - MAX_INLINE_FILES + 1} more"
        else:
            locations_text = ", ".join(locations)
        table.add_row(name, str(usage.total_count), locations_text)

    console.print(table)


def render_security_issues(result: ScanResult, console: Console) -> None:
    if not result.security_issues:
        return

    console.print("\n[bold]Security Issues:[/bold]")
    for issue in sorted(result.security_issues, key=lambda i: -i.severity.rank):
        style = _SEVERITY_STYLES[issue.severity]
        console.print(
            f"  [{style}]{issue.severity.value.upper()}[/{style}] "
            f"{issue.message}: {issue.file_path}:{issue.line_number}"
        )


def render_file_errors(result: ScanResult, console: Console, limit: int = 5) -> None:
    """List per-file errors, collapsing the tail past limit."""
    if not result.errors:
        return

    console.print("\n[bold red]Files with errors:[/bold red]")
    for error in result.errors[:limit]:
        console.print(f"  - {error.file_path}: {error.message}")
    if len(result.errors) > limit:
        console.print(f"  ... and {len(result.errors) - limit} more")


def render_language_table(registry: LanguageRegistry, console: Console) -> None:
    """Render the registry in lookup order."""
    table = Table(title="Supported Languages", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Language", style="cyan")
    table.add_column("Files")
    table.add_column("Patterns", justify="right")
    table.add_column("Frameworks", style="dim")

    for index, config in enumerate(registry, start=1):
        table.add_row(
            str(index),
            config.name,
            " ".join(config.file_matchers),
            str(len(config.detection_patterns)),
            ", ".join(config.frameworks),
        )

    console.print(table)
