#!/usr/bin/env python3
"""
rendertest CLI - Chart Template Unit Testing

Usage:
    rendertest run <chart>... [OPTIONS]
    rendertest validate <suite.yaml>...
    rendertest --version
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import DEFAULT_TEST_PATTERN, RunnerConfig
from .formatting import FORMATTERS, create_formatter
from .rendering import RendererUnavailable, create_renderer
from .rendering.factory import RENDERERS
from .reporting import Printer
from .runner import TestRunner
from .schema_parsing import load_suites
from .validators import display_kind

app = typer.Typer(
    name="rendertest",
    help="Unit testing for chart templates",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"rendertest v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
):
    """
    rendertest - Unit testing for chart templates

    Render chart templates with test values and check the manifests
    against declarative YAML suites.
    """
    pass


def setup_logging(debug: bool, colored: Optional[bool]) -> None:
    """Send log records to stderr through rich."""
    stderr = Console(stderr=True, no_color=colored is False)
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=stderr, show_path=debug)],
        force=True,
    )


def make_console(colored: Optional[bool]) -> Console:
    if colored is None:
        return console
    return Console(force_terminal=colored, no_color=not colored)


@app.command()
def run(
    charts: List[Path] = typer.Argument(
        ...,
        help="Chart directories to test",
    ),
    test_files: List[str] = typer.Option(
        [DEFAULT_TEST_PATTERN], "--file", "-f",
        help="Glob pattern of suite files, relative to the chart (repeatable)"
    ),
    values_files: List[str] = typer.Option(
        [], "--values", "-v",
        help="Values file applied to every suite (repeatable)"
    ),
    update_snapshot: bool = typer.Option(
        False, "--update-snapshot", "-u",
        help="Record new snapshots and overwrite changed ones"
    ),
    with_subchart: bool = typer.Option(
        True, "--with-subchart/--without-subchart", "-s",
        help="Also run the suites of charts under charts/"
    ),
    output_file: Optional[Path] = typer.Option(
        None, "--output-file", "-o",
        help="Write a structured report to this file"
    ),
    output_type: str = typer.Option(
        "XUnit", "--output-type", "-t",
        help=f"Report format: {', '.join(cls.name for cls in FORMATTERS.values())}"
    ),
    chart_tests_path: Optional[str] = typer.Option(
        None, "--chart-tests-path",
        help="Directory, relative to the chart, that holds the suites"
    ),
    failfast: bool = typer.Option(
        False, "--failfast", "-q",
        help="Stop at the first failing assertion"
    ),
    strict: bool = typer.Option(
        False, "--strict",
        help="Reject unknown fields in suite files"
    ),
    colored: Optional[bool] = typer.Option(
        None, "--color/--no-color",
        help="Force colored output on or off"
    ),
    debug: bool = typer.Option(
        False, "--debug", "-d",
        help="Verbose logging"
    ),
    renderer: str = typer.Option(
        "builtin", "--renderer",
        help=f"Rendering backend: {', '.join(RENDERERS)}"
    ),
):
    """
    Run the suites of one or more charts.

    Exits 0 when every suite passed and 1 otherwise.
    """
    setup_logging(debug, colored)
    out = make_console(colored)

    # Reject bad options before anything runs
    try:
        formatter = create_formatter(output_type)
        backend = create_renderer(renderer)
    except ValueError as e:
        out.print(f"[red]❌ {escape(str(e))}[/red]")
        raise typer.Exit(code=2)

    config = RunnerConfig(
        test_files=tuple(test_files),
        values_files=tuple(values_files),
        update_snapshot=update_snapshot,
        with_subchart=with_subchart,
        strict=strict,
        failfast=failfast,
        output_file=str(output_file) if output_file else None,
        output_type=formatter.name,
        chart_tests_path=chart_tests_path,
        renderer=backend.name,
        colored=colored,
        debug=debug,
    )

    try:
        report = TestRunner(config, renderer=backend).run(charts)
    except RendererUnavailable as e:
        out.print(f"[red]❌ Renderer unavailable:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    Printer(out).print_report(report)

    if output_file:
        try:
            formatter.write(report, output_file)
        except OSError as e:
            out.print(f"[red]❌ Cannot write report:[/red] {escape(str(e))}")
            raise typer.Exit(code=1)
        out.print(f"📁 Report saved: {escape(str(output_file))}")

    # Exit with appropriate code
    if report.passed:
        raise typer.Exit(code=0)
    else:
        raise typer.Exit(code=1)


@app.command()
def validate(
    suite_files: List[Path] = typer.Argument(
        ...,
        help="Suite YAML files to check",
        exists=True,
        readable=True,
    ),
    strict: bool = typer.Option(
        False, "--strict",
        help="Reject unknown fields"
    ),
):
    """
    Validate suite YAML files.

    Check the schema and report any errors without rendering anything.
    """
    valid = True
    for suite_file in suite_files:
        console.print(f"\n📄 Validating: {escape(str(suite_file))}")

        suites, validation = load_suites(suite_file, strict=strict)
        if not validation.is_valid:
            valid = False
            console.print(f"\n[red]❌ Validation failed:[/red]")
            console.print(escape(str(validation)))
            continue

        for warning in validation.warnings:
            console.print(f"[yellow]⚠️  {escape(warning.plain())}[/yellow]")

        for suite in suites:
            console.print(f"\n[green]✅ Valid suite:[/green] {escape(suite.name)}")
            console.print(f"   Tests: {len(suite.tests)}")

            table = Table(title="Tests")
            table.add_column("It", style="cyan")
            table.add_column("Template", style="magenta")
            table.add_column("Asserts")

            for job in suite.tests:
                template = job.template or ", ".join(job.templates or suite.templates) or "*"
                asserts = ", ".join(display_kind(a.kind, a.negative) for a in job.asserts)
                table.add_row(escape(job.name), escape(template), escape(asserts))

            console.print()
            console.print(table)

    raise typer.Exit(code=0 if valid else 1)


@app.command()
def info():
    """
    Show information about rendertest.
    """
    console.print(f"""
[bold]rendertest[/bold] v{__version__}

Unit testing for chart templates

[bold]Features:[/bold]
  • Declarative YAML test suites next to the chart
  • Value, regex, document and snapshot assertions
  • Built-in renderer or `helm template`
  • JUnit, NUnit, XUnit and Sonar reports

[bold]Quick Start:[/bold]
  rendertest run charts/web
  rendertest run charts/web -u
  rendertest validate charts/web/tests/deployment_test.yaml
""")


if __name__ == "__main__":
    app()
