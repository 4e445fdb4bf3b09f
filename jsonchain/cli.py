#!/usr/bin/env python3
"""
jsonchain CLI - JSON Assertion Suite Runner

Usage:
    jsonchain run <suite.yaml> [OPTIONS]
    jsonchain validate <suite.yaml>
    jsonchain --version
"""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .checks import load_suite, run_suite

app = typer.Typer(
    name="jsonchain",
    help="🔗 jsonchain - Fluent assertion chains for JSON documents",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"🔗 jsonchain v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
):
    """
    🔗 jsonchain - Fluent assertion chains for JSON documents

    Check JSON documents with declarative YAML suites.
    """
    pass


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def run(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Only show the final status"
    ),
    output: str = typer.Option(
        "text", "--output", "-o",
        help="Output format: text or json"
    ),
    report_dir: Path = typer.Option(
        Path("reports"), "--report-dir", "-r",
        help="Directory to save JSON reports"
    ),
    no_report: bool = typer.Option(
        False, "--no-report",
        help="Don't save a JSON report file"
    ),
    log_level: str = typer.Option(
        "warning", "--log-level", "-l",
        help="Logging level: debug, info, warning or error"
    ),
):
    """
    Run a check suite.

    Build and finalize every chain in the suite and generate a run report.
    """
    configure_logging(log_level)

    if not quiet:
        console.print(f"\n📄 Loading suite: {suite_file}")

    suite, validation = load_suite(suite_file)

    if not validation.is_valid:
        console.print("\n[red]❌ Validation failed:[/red]")
        console.print(str(validation))
        raise typer.Exit(code=1)

    if not quiet:
        console.print(f"   [green]✅ Valid suite:[/green] {suite.name} ({len(suite.checks)} checks)")

    reporter = run_suite(suite)
    report = reporter.report_data

    if output == "json":
        console.print_json(data=report.to_dict())
    elif not quiet:
        console.print("\n" + report.summary(), highlight=False, markup=False)
    else:
        icon = "✅" if report.status.value == "passed" else "❌"
        console.print(f"{icon} {report.passed_checks}/{report.total_checks} checks passed")

    if not no_report:
        report_dir.mkdir(parents=True, exist_ok=True)
        report_path = report_dir / f"{report.run_id}.json"
        reporter.save_json(report_path)
        if not quiet:
            console.print(f"\n📁 Report saved: {report_path}")

    if report.status.value == "passed":
        raise typer.Exit(code=0)
    else:
        raise typer.Exit(code=1)


@app.command()
def validate(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
):
    """
    Validate a suite YAML file.

    Check the schema and report any errors without running the checks.
    """
    console.print(f"\n📄 Validating: {suite_file}")

    suite, validation = load_suite(suite_file)

    if validation.is_valid:
        console.print(f"\n[green]✅ Valid suite:[/green] {suite.name}")
        console.print(f"   Checks: {len(suite.checks)}")

        table = Table(title="Checks")
        table.add_column("ID", style="cyan")
        table.add_column("Document", style="magenta")
        table.add_column("Steps")

        for check in suite.checks:
            if check.document_file is not None:
                source = f"file: {check.document_file}"
            elif check.document_text is not None:
                source = "text"
            else:
                source = "inline"
            steps = " → ".join(call.op.value for call in check.steps)
            table.add_row(check.id, source, steps)

        console.print()
        console.print(table)
        raise typer.Exit(code=0)
    else:
        console.print("\n[red]❌ Validation failed:[/red]")
        console.print(str(validation))
        raise typer.Exit(code=1)


@app.command()
def info():
    """
    Show information about jsonchain.
    """
    console.print(f"""
🔗 [bold]jsonchain[/bold] v{__version__}

Fluent query-and-assertion chains for JSON documents

[bold]Features:[/bold]
  • Slash paths with negative array indexes
  • Filters, typed assertions and cardinality checks
  • either / or_else / end alternatives
  • Declarative YAML check suites
  • Step-by-step failure traces and JSON run reports

[bold]Quick Start:[/bold]
  jsonchain run checks/suite.yaml
  jsonchain validate checks/suite.yaml
""")


if __name__ == "__main__":
    app()
