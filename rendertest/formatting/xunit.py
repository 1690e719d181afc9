"""xUnit.net v2 XML report."""

from __future__ import annotations

from xml.etree import ElementTree as ET

from ..reporting import ResultStatus, RunReport, SuiteRecord
from .base import BaseFormatter, seconds, suite_cases, suite_counts

_RESULTS = {
    ResultStatus.PASSED: "Pass",
    ResultStatus.FAILED: "Fail",
    ResultStatus.ERROR: "Fail",
    ResultStatus.SKIPPED: "Skip",
}


class XUnitFormatter(BaseFormatter):
    """assemblies > assembly (one per suite) > errors, collection > test."""

    name = "XUnit"

    def build(self, report: RunReport) -> ET.Element:
        root = ET.Element("assemblies", {"timestamp": report.started_at.strftime("%m/%d/%Y %H:%M:%S")})
        for suite in report.suites:
            root.append(self._assembly(suite))
        return root

    def _assembly(self, suite: SuiteRecord) -> ET.Element:
        counts = suite_counts(suite)
        started = suite.started_at
        totals = {
            "total": str(counts.tests),
            # xUnit has no separate error result: errored jobs count as failed
            "passed": str(counts.tests - counts.failures - counts.errors - counts.skipped),
            "failed": str(counts.failures + counts.errors),
            "skipped": str(counts.skipped),
            "time": seconds(suite.duration_ms),
        }
        element = ET.Element("assembly", {
            "name": suite.file_path,
            "config-file": "",
            "test-framework": "rendertest",
            "environment": suite.chart,
            "run-date": started.strftime("%Y-%m-%d") if started else "",
            "run-time": started.strftime("%H:%M:%S") if started else "",
            "errors": "1" if suite.error_message else "0",
            **totals,
        })

        errors = ET.SubElement(element, "errors")
        if suite.error_message:
            error = ET.SubElement(errors, "error", {"type": "suite", "name": suite.name})
            failure = ET.SubElement(error, "failure", {"exception-type": "error"})
            ET.SubElement(failure, "message").text = suite.error_message
            return element

        collection = ET.SubElement(element, "collection", {"name": suite.name, **totals})
        for case in suite_cases(suite):
            test = ET.SubElement(collection, "test", {
                "name": case.name,
                "type": suite.name,
                "method": case.name,
                "time": seconds(case.duration_ms),
                "result": _RESULTS.get(case.status, "NotRun"),
            })
            if case.status in (ResultStatus.FAILED, ResultStatus.ERROR):
                failure = ET.SubElement(test, "failure", {"exception-type": case.status.value})
                ET.SubElement(failure, "message").text = case.text or case.message
            elif case.status == ResultStatus.SKIPPED:
                ET.SubElement(test, "reason").text = "skipped after an earlier failure"
        return element
