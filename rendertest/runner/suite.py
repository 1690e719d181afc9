"""
Suite-file execution.

One suite file may hold several suites; they share one snapshot file.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

from ..config import RunnerConfig
from ..rendering import BaseRenderer, Chart
from ..reporting import JobRecord, ResultStatus, SuiteRecord
from ..schema_parsing import load_suites
from ..snapshot import SnapshotCache, SnapshotError, SnapshotStats
from .job import JobEnvironment, run_job

logger = logging.getLogger(__name__)


def run_suite(
    path: str | Path,
    chart: Chart,
    renderer: BaseRenderer,
    config: RunnerConfig,
    base_values: dict[str, Any],
) -> list[SuiteRecord]:
    """
    Run every suite of one suite file.

    Load and snapshot I/O problems never raise: they are reported as a
    suite with status error.

    Args:
        path: The suite file
        chart: The chart under test
        renderer: Rendering backend
        config: Run options
        base_values: Chart values merged with the --values files

    Returns:
        One SuiteRecord per suite in the file
    """
    path = Path(path)
    file_path = str(path)

    suites, validation = load_suites(path, strict=config.strict)
    if not validation.is_valid:
        logger.debug(f"Invalid suite file {file_path}:\n{validation}")
        return [SuiteRecord.errored(path.name, file_path, chart.name, validation.summary())]

    cache = SnapshotCache.for_suite_file(path, is_updating=config.update_snapshot)
    try:
        cache.restore()
    except SnapshotError as e:
        return [SuiteRecord.errored(suite.name, file_path, chart.name, str(e)) for suite in suites]

    env = JobEnvironment(
        chart=chart,
        renderer=renderer,
        config=config,
        base_values=base_values,
        cache=cache,
    )

    records: list[SuiteRecord] = []
    stop = False
    for suite in suites:
        if stop:
            names = [job.name for job in suite.tests]
            for name in names:
                cache.keep_test(suite.name, name)
            records.append(SuiteRecord.skipped(suite.name, file_path, chart.name, names))
            continue

        record = SuiteRecord(name=suite.name, file_path=file_path, chart=chart.name)
        logger.info(f"Running suite '{suite.name}' ({file_path})")
        record.start()
        before = replace(cache.stats)
        for job in suite.tests:
            if stop:
                record.jobs.append(JobRecord.skipped(job.name))
                cache.keep_test(suite.name, job.name)
                continue
            job_record = run_job(job, suite, env)
            record.jobs.append(job_record)
            # Unvisited snapshots of a job that did not pass may still be live
            if not job_record.passed:
                cache.keep_test(suite.name, job.name)
            if config.failfast and job_record.status in (ResultStatus.FAILED, ResultStatus.ERROR):
                stop = True

        record.snapshot = _delta(cache.stats, before)
        record.complete()
        logger.info(f"Suite '{suite.name}' {record.status.value}")
        records.append(record)

    try:
        cache.store_to_file_if_needed()
    except (OSError, SnapshotError) as e:
        message = f"cannot write snapshot file {cache.path}: {e}"
        for record in records:
            record.fail_with_error(message)
        return records

    # Vanished snapshots are only known once the whole file has run
    if records:
        records[-1].snapshot.vanished = cache.stats.vanished

    return records


def _delta(after: SnapshotStats, before: SnapshotStats) -> SnapshotStats:
    return SnapshotStats(
        matched=after.matched - before.matched,
        inserted=after.inserted - before.inserted,
        updated=after.updated - before.updated,
        failed=after.failed - before.failed,
    )


def skip_suite_file(path: str | Path, chart: Chart, config: RunnerConfig) -> list[SuiteRecord]:
    """
    Record every suite of a file as skipped without running anything.

    A file that cannot be parsed is recorded as one skipped suite named
    after the file. Its snapshot file is left untouched.
    """
    path = Path(path)
    suites, validation = load_suites(path, strict=config.strict)
    if not validation.is_valid:
        return [SuiteRecord.skipped(path.name, str(path), chart.name)]
    return [
        SuiteRecord.skipped(suite.name, str(path), chart.name, [job.name for job in suite.tests])
        for suite in suites
    ]
