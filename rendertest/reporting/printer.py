"""
Console output for test runs.

Prints suite verdicts, failure diagnostics and the summary block
with rich.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from .models import ResultStatus, RunReport, SuiteRecord

_LABELS = {
    ResultStatus.PASSED: "[bold black on green] PASS [/]",
    ResultStatus.FAILED: "[bold white on red] FAIL [/]",
    ResultStatus.ERROR: "[bold white on red] ERROR [/]",
    ResultStatus.SKIPPED: "[bold black on yellow] SKIP [/]",
}


class Printer:
    """
    Renders a RunReport to the terminal.

    Example:
        printer = Printer(Console())
        printer.print_report(report)
    """

    def __init__(self, console: Console):
        self.console = console

    def print_report(self, report: RunReport) -> None:
        for chart, suites in report.charts.items():
            self.console.print()
            self.console.print(f"### Chart [ [bold]{escape(chart)}[/bold] ]")
            self.console.print()
            for suite in suites:
                self.print_suite(suite)
        self.print_summary(report)

    def print_suite(self, suite: SuiteRecord) -> None:
        label = _LABELS.get(suite.status, suite.status.value.upper())
        self.console.print(f" {label}  {escape(suite.name)}\t[dim]{escape(suite.file_path)}[/dim]")

        if suite.error_message:
            for line in suite.error_message.splitlines():
                self.console.print(f"\t[red]{escape(line)}[/red]")
            self.console.print()
            return

        for job in suite.jobs:
            if job.status not in (ResultStatus.FAILED, ResultStatus.ERROR):
                continue
            self.console.print(f"\t[bold]- {escape(job.name)}[/bold]")
            self.console.print()
            if job.error_message:
                self.console.print(f"\t\t[red]Error: {escape(job.error_message)}[/red]")
            for assertion in job.failed_assertions:
                self.console.print(
                    f"\t\t- asserts[{assertion.index}] `{escape(assertion.display_kind)}` fail"
                )
                for line in assertion.diagnostics:
                    self.console.print(f"\t\t\t{escape(line)}", highlight=False)
                self.console.print()

    def print_summary(self, report: RunReport) -> None:
        charts = report.charts
        failed_charts = sum(1 for suites in charts.values() if not all(s.passed for s in suites))
        failed_suites = sum(1 for s in report.suites if not s.passed)
        jobs = report.jobs
        failed_jobs = sum(1 for j in jobs if j.status in (ResultStatus.FAILED, ResultStatus.ERROR))
        skipped_jobs = sum(1 for j in jobs if j.status == ResultStatus.SKIPPED)
        snapshot = report.snapshot

        self.console.print()
        self.console.print(
            f"[bold]Charts:[/bold]      {_count(failed_charts, len(charts) - failed_charts, len(charts))}"
        )
        self.console.print(
            f"[bold]Test Suites:[/bold] {_count(failed_suites, len(report.suites) - failed_suites, len(report.suites))}"
        )
        tests = _count(failed_jobs, len(jobs) - failed_jobs - skipped_jobs, len(jobs))
        if skipped_jobs:
            tests = f"{tests}, [yellow]{skipped_jobs} skipped[/yellow]"
        self.console.print(f"[bold]Tests:[/bold]       {tests}")

        snapshot_line = f"{snapshot.matched + snapshot.inserted + snapshot.updated} passed, {snapshot.total} total"
        if snapshot.failed:
            snapshot_line = f"[red]{snapshot.failed} failed[/red], {snapshot_line}"
        if snapshot.inserted:
            snapshot_line += f", {snapshot.inserted} new"
        if snapshot.updated:
            snapshot_line += f", {snapshot.updated} updated"
        if snapshot.vanished:
            snapshot_line += f", {snapshot.vanished} obsolete"
        self.console.print(f"[bold]Snapshot:[/bold]    {snapshot_line}")
        self.console.print(f"[bold]Time:[/bold]        {report.duration_ms or 0:.1f}ms")
        self.console.print()


def _count(failed: int, passed: int, total: int) -> str:
    prefix = f"[red]{failed} failed[/red], " if failed else ""
    return f"{prefix}[green]{passed} passed[/green], {total} total"
