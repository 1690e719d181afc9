"""
Base class for report formatters.

Formatters turn a finished RunReport into a structured XML document.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from xml.etree import ElementTree as ET

from ..reporting import JobRecord, ResultStatus, RunReport, SuiteRecord


class BaseFormatter(ABC):
    """
    Abstract base class for report formatters.

    Subclasses build the element tree; rendering and writing are shared.
    """

    name: str = ""

    @abstractmethod
    def build(self, report: RunReport) -> ET.Element:
        """Build the root element for a report."""
        ...

    def render(self, report: RunReport) -> str:
        """Serialize the report. Pure: the report is not modified."""
        root = self.build(report)
        ET.indent(root)
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(root, encoding="unicode") + "\n"

    def write(self, report: RunReport, path: str | Path) -> None:
        """
        Write the report to a file, creating parent directories.

        Args:
            report: The finished run
            path: Output file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(report), encoding="utf-8")


def seconds(duration_ms: float | None) -> str:
    return f"{(duration_ms or 0.0) / 1000:.3f}"


def job_message(job: JobRecord) -> str:
    """Short one-line reason for a failed or errored job."""
    if job.error_message:
        return job.error_message.splitlines()[0]
    failed = job.failed_assertions
    if not failed:
        return ""
    kinds = ", ".join(f"asserts[{a.index}] `{a.display_kind}`" for a in failed)
    return f"{kinds} fail"


@dataclass(frozen=True)
class CaseCounts:
    tests: int = 0
    failures: int = 0
    errors: int = 0
    skipped: int = 0


def suite_counts(suite: SuiteRecord) -> CaseCounts:
    """
    Test-case counts of a suite as reports show them.

    A suite with an error is reported as a single errored case.
    """
    if suite.error_message:
        return CaseCounts(tests=1, errors=1)
    return CaseCounts(
        tests=suite.total_jobs,
        failures=suite.failed_jobs,
        errors=suite.errored_jobs,
        skipped=suite.skipped_jobs,
    )


@dataclass(frozen=True)
class Case:
    """One reported test case: a job, or the stand-in for a suite that errored."""
    name: str
    status: ResultStatus
    message: str = ""
    text: str = ""
    duration_ms: float = 0.0
    asserts: int = 0


def suite_cases(suite: SuiteRecord) -> list[Case]:
    if suite.error_message:
        return [Case(
            name=suite.name,
            status=ResultStatus.ERROR,
            message=suite.error_message.splitlines()[0],
            text=suite.error_message,
        )]
    return [
        Case(
            name=job.name,
            status=job.status,
            message=job_message(job),
            text=job.failure_text(),
            duration_ms=job.duration_ms or 0.0,
            asserts=len(job.assertions),
        )
        for job in suite.jobs
    ]
