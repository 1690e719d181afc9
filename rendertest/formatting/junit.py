"""JUnit XML report."""

from __future__ import annotations

from xml.etree import ElementTree as ET

from ..reporting import ResultStatus, RunReport, SuiteRecord
from .base import BaseFormatter, seconds, suite_cases, suite_counts


class JUnitFormatter(BaseFormatter):
    """testsuites > testsuite > testcase, with failure/error/skipped children."""

    name = "JUnit"

    def build(self, report: RunReport) -> ET.Element:
        counts = [suite_counts(s) for s in report.suites]
        root = ET.Element("testsuites", {
            "name": "rendertest",
            "tests": str(sum(c.tests for c in counts)),
            "failures": str(sum(c.failures for c in counts)),
            "errors": str(sum(c.errors for c in counts)),
            "skipped": str(sum(c.skipped for c in counts)),
            "time": seconds(report.duration_ms),
        })
        for i, suite in enumerate(report.suites):
            root.append(self._suite(i, suite))
        return root

    def _suite(self, index: int, suite: SuiteRecord) -> ET.Element:
        counts = suite_counts(suite)
        element = ET.Element("testsuite", {
            "id": str(index),
            "name": suite.name,
            "package": suite.chart,
            "file": suite.file_path,
            "tests": str(counts.tests),
            "failures": str(counts.failures),
            "errors": str(counts.errors),
            "skipped": str(counts.skipped),
            "time": seconds(suite.duration_ms),
            "timestamp": suite.started_at.strftime("%Y-%m-%dT%H:%M:%S") if suite.started_at else "",
        })

        for case in suite_cases(suite):
            testcase = ET.SubElement(element, "testcase", {
                "name": case.name,
                "classname": suite.name,
                "time": seconds(case.duration_ms),
            })
            if case.status == ResultStatus.FAILED:
                failure = ET.SubElement(testcase, "failure", {"message": case.message, "type": "failure"})
                failure.text = case.text
            elif case.status == ResultStatus.ERROR:
                error = ET.SubElement(testcase, "error", {"message": case.message, "type": "error"})
                error.text = case.text
            elif case.status == ResultStatus.SKIPPED:
                ET.SubElement(testcase, "skipped")
        return element
