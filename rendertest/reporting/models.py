"""
Result models for test runs.

This module defines the result tree produced by a run:
run -> suites -> jobs -> assertions, each with status, diagnostics
and timing. Formatters and the console printer only read this tree.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable

from ..snapshot import SnapshotStats
from ..validators import display_kind


class ResultStatus(str, Enum):
    """Status of an assertion, job or suite."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"


class RunStatus(str, Enum):
    """Overall status of a test run."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"


@dataclass
class AssertionRecord:
    """Outcome of one assertion."""
    index: int
    kind: str
    status: ResultStatus
    negative: bool = False
    template: str | None = None
    diagnostics: list[str] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def passed(self) -> bool:
        return self.status == ResultStatus.PASSED

    @property
    def display_kind(self) -> str:
        return display_kind(self.kind, self.negative)


@dataclass
class _Timed:
    """Start/end timestamps shared by jobs and suites."""
    started_at: datetime | None = None
    ended_at: datetime | None = None
    duration_ms: float | None = None

    def _start_clock(self) -> None:
        self.started_at = datetime.now(timezone.utc)

    def _stop_clock(self) -> None:
        self.ended_at = datetime.now(timezone.utc)
        if self.started_at:
            delta = self.ended_at - self.started_at
            self.duration_ms = delta.total_seconds() * 1000

    @property
    def duration_s(self) -> float:
        return (self.duration_ms or 0.0) / 1000


@dataclass
class JobRecord(_Timed):
    """
    Outcome of one test job.

    A job passes iff every assertion passed. Assertions not evaluated
    because of fail-fast are kept with status skipped.
    """
    name: str = ""
    status: ResultStatus = ResultStatus.PENDING
    assertions: list[AssertionRecord] = field(default_factory=list)
    error_message: str | None = None

    def start(self) -> None:
        """Mark the job as started."""
        self.status = ResultStatus.RUNNING
        self._start_clock()

    def complete(self) -> None:
        """Mark the job as completed and derive its status."""
        self._stop_clock()
        if self.error_message:
            self.status = ResultStatus.ERROR
        elif all(a.passed for a in self.assertions):
            self.status = ResultStatus.PASSED
        else:
            self.status = ResultStatus.FAILED

    @classmethod
    def skipped(cls, name: str) -> JobRecord:
        return cls(name=name, status=ResultStatus.SKIPPED)

    @property
    def passed(self) -> bool:
        return self.status == ResultStatus.PASSED

    @property
    def failed_assertions(self) -> list[AssertionRecord]:
        return [a for a in self.assertions if a.status == ResultStatus.FAILED]

    def failure_text(self) -> str:
        """All diagnostics of the job as one block, for report bodies."""
        if self.error_message:
            return self.error_message
        lines: list[str] = []
        for assertion in self.failed_assertions:
            lines.append(f"- asserts[{assertion.index}] `{assertion.display_kind}` fail")
            lines.extend(f"\t{line}" for line in assertion.diagnostics)
        return "\n".join(lines)


@dataclass
class SuiteRecord(_Timed):
    """
    Outcome of one suite.

    A suite passes iff every job passed. Suites that could not be
    loaded carry the error and status error.
    """
    name: str = ""
    file_path: str = ""
    chart: str = ""
    status: ResultStatus = ResultStatus.PENDING
    jobs: list[JobRecord] = field(default_factory=list)
    error_message: str | None = None
    snapshot: SnapshotStats = field(default_factory=SnapshotStats)

    def start(self) -> None:
        """Mark the suite as started."""
        self.status = ResultStatus.RUNNING
        self._start_clock()

    def complete(self) -> None:
        """Mark the suite as completed and derive its status."""
        self._stop_clock()
        if self.error_message:
            self.status = ResultStatus.ERROR
        elif self.jobs and all(j.status == ResultStatus.SKIPPED for j in self.jobs):
            self.status = ResultStatus.SKIPPED
        elif all(j.status in (ResultStatus.PASSED, ResultStatus.SKIPPED) for j in self.jobs):
            self.status = ResultStatus.PASSED
        else:
            self.status = ResultStatus.FAILED

    def fail_with_error(self, message: str) -> None:
        """Record a suite-level error (load, I/O) and complete the suite."""
        self.error_message = message
        self.complete()

    @classmethod
    def errored(cls, name: str, file_path: str, chart: str, message: str) -> SuiteRecord:
        record = cls(name=name, file_path=file_path, chart=chart)
        record.start()
        record.fail_with_error(message)
        return record

    @classmethod
    def skipped(cls, name: str, file_path: str, chart: str, job_names: Iterable[str] = ()) -> SuiteRecord:
        """A suite that fail-fast kept from running."""
        record = cls(name=name, file_path=file_path, chart=chart)
        record.jobs = [JobRecord.skipped(job_name) for job_name in job_names]
        record.status = ResultStatus.SKIPPED
        return record

    @property
    def passed(self) -> bool:
        return self.status in (ResultStatus.PASSED, ResultStatus.SKIPPED)

    @property
    def total_jobs(self) -> int:
        return len(self.jobs)

    @property
    def passed_jobs(self) -> int:
        return sum(1 for j in self.jobs if j.status == ResultStatus.PASSED)

    @property
    def failed_jobs(self) -> int:
        return sum(1 for j in self.jobs if j.status == ResultStatus.FAILED)

    @property
    def errored_jobs(self) -> int:
        return sum(1 for j in self.jobs if j.status == ResultStatus.ERROR)

    @property
    def skipped_jobs(self) -> int:
        return sum(1 for j in self.jobs if j.status == ResultStatus.SKIPPED)


@dataclass
class RunReport:
    """
    Complete record of a test run.

    The run passes iff every suite passed.
    """
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: datetime | None = None
    duration_ms: float | None = None
    status: RunStatus = RunStatus.PENDING
    suites: list[SuiteRecord] = field(default_factory=list)

    def start(self) -> None:
        """Mark the run as started."""
        self.status = RunStatus.RUNNING
        self.started_at = datetime.now(timezone.utc)

    def complete(self) -> None:
        """Mark the run as completed and calculate final status."""
        self.ended_at = datetime.now(timezone.utc)
        delta = self.ended_at - self.started_at
        self.duration_ms = delta.total_seconds() * 1000
        self.status = RunStatus.PASSED if all(s.passed for s in self.suites) else RunStatus.FAILED

    def add_suite(self, suite: SuiteRecord) -> None:
        self.suites.append(suite)

    @property
    def passed(self) -> bool:
        return self.status == RunStatus.PASSED

    @property
    def charts(self) -> dict[str, list[SuiteRecord]]:
        """Suites grouped by chart, in run order."""
        grouped: dict[str, list[SuiteRecord]] = {}
        for suite in self.suites:
            grouped.setdefault(suite.chart, []).append(suite)
        return grouped

    @property
    def jobs(self) -> list[JobRecord]:
        return [job for suite in self.suites for job in suite.jobs]

    @property
    def snapshot(self) -> SnapshotStats:
        total = SnapshotStats()
        for suite in self.suites:
            total.add(suite.snapshot)
        return total
