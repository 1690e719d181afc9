"""
Job execution.

A job renders the chart once, then runs its assertions strictly in
declared order against that one render result.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

from ..config import RunnerConfig
from ..rendering import (
    BaseRenderer,
    Chart,
    ChartError,
    Manifest,
    ReleaseInfo,
    RenderRequest,
    RenderResult,
    load_values_files,
    merge_values,
    parse_set_values,
    template_matches,
)
from ..reporting import AssertionRecord, JobRecord, ResultStatus
from ..schema_parsing import AssertionSpec, JobSpec, SuiteSpec
from ..snapshot import SnapshotCache, SnapshotComparer
from ..validators import FailedTemplateValidator, ValidateContext
from ..validators.common import error_info

logger = logging.getLogger(__name__)


@dataclass
class JobEnvironment:
    """What every job of a suite file shares."""
    chart: Chart
    renderer: BaseRenderer
    config: RunnerConfig
    base_values: dict[str, Any]  # chart values.yaml merged with --values files
    cache: SnapshotCache | None = None


def run_job(job: JobSpec, suite: SuiteSpec, env: JobEnvironment) -> JobRecord:
    """
    Render once and evaluate every assertion of the job.

    Fail-fast stops at the first failing assertion; the rest are
    recorded as skipped.
    """
    record = JobRecord(name=job.name)
    record.start()

    try:
        request = build_request(job, suite, env.base_values)
    except (ChartError, ValueError) as e:
        record.error_message = str(e)
        record.complete()
        return record

    render = env.renderer.render(env.chart, request)
    comparer = SnapshotComparer(env.cache, suite.name, job.name) if env.cache else None

    failed = False
    for index, assertion in enumerate(job.asserts):
        if failed and env.config.failfast:
            record.assertions.append(
                AssertionRecord(
                    index=index,
                    kind=assertion.kind,
                    status=ResultStatus.SKIPPED,
                    negative=assertion.negative,
                    template=assertion.template or job.template,
                )
            )
            continue

        result = evaluate_assertion(index, assertion, job, render, env.config, comparer)
        record.assertions.append(result)
        if not result.passed:
            failed = True

    record.complete()
    logger.debug(f"Job '{job.name}' {record.status.value} in {record.duration_ms or 0:.1f}ms")
    return record


def evaluate_assertion(
    index: int,
    assertion: AssertionSpec,
    job: JobSpec,
    render: RenderResult,
    config: RunnerConfig,
    comparer: SnapshotComparer | None,
) -> AssertionRecord:
    """Build a fresh context for one assertion and run its validator."""
    started = time.perf_counter()
    template = assertion.template or job.template

    if render.error is not None and not isinstance(assertion.validator, FailedTemplateValidator):
        passed, diagnostics = False, error_info(str(render.error))
    else:
        manifests, diagnostics = select_manifests(render.manifests, assertion, job)
        if diagnostics:
            passed = False
        elif not manifests and assertion.validator.requires_documents:
            passed, diagnostics = False, error_info(
                f"no manifest found for template {template}" if template else "no manifest found"
            )
        else:
            context = ValidateContext(
                manifests=manifests,
                negative=assertion.negative,
                fail_fast=config.failfast,
                strict=config.strict,
                render_error=render.error,
                snapshot=comparer,
            )
            passed, diagnostics = assertion.validator.validate(context)

    return AssertionRecord(
        index=index,
        kind=assertion.kind,
        status=ResultStatus.PASSED if passed else ResultStatus.FAILED,
        negative=assertion.negative,
        template=template,
        diagnostics=diagnostics,
        duration_ms=(time.perf_counter() - started) * 1000,
    )


def select_manifests(
    manifests: tuple[Manifest, ...],
    assertion: AssertionSpec,
    job: JobSpec,
) -> tuple[tuple[Manifest, ...], list[str]]:
    """
    Narrow the rendered manifests to the ones an assertion targets.

    Returns:
        Tuple of (manifests, diagnostics). Diagnostics are set when the
        requested documentIndex does not exist.
    """
    template = assertion.template or job.template
    document_index = assertion.document_index if assertion.document_index is not None else job.document_index

    selected = tuple(m for m in manifests if template is None or template_matches(m.source, template))
    if document_index is None:
        return selected, []

    indexed = tuple(m for m in selected if m.index == document_index)
    if selected and not indexed:
        count = max(m.index for m in selected) + 1
        return (), error_info(f"documentIndex {document_index} out of range ({count} document(s) rendered)")
    return indexed, []


def build_request(job: JobSpec, suite: SuiteSpec, base_values: dict[str, Any]) -> RenderRequest:
    """
    Merge values and release info for a job.

    Precedence, lowest first: base values, suite values files, suite
    set, job values files, job set.

    Raises:
        ChartError: If a values file cannot be read
        ValueError: If a set key is malformed
    """
    values = merge_values(base_values, load_values_files(suite.values))
    values = merge_values(values, parse_set_values(suite.set_values))
    values = merge_values(values, load_values_files(job.values))
    values = merge_values(values, parse_set_values(job.set_values))

    release = {**suite.release, **job.release}
    defaults = ReleaseInfo()
    return RenderRequest(
        templates=tuple(job.templates or suite.templates),
        values=values,
        release=ReleaseInfo(
            name=release.get("name", defaults.name),
            namespace=release.get("namespace", defaults.namespace),
            revision=release.get("revision", defaults.revision),
            upgrade=release.get("upgrade", defaults.upgrade),
        ),
    )
