"""NUnit 2.5 XML report."""

from __future__ import annotations

import getpass
import locale
import os
import platform
from xml.etree import ElementTree as ET

from ..reporting import ResultStatus, RunReport, SuiteRecord
from .base import BaseFormatter, seconds, suite_cases, suite_counts

_RESULTS = {
    ResultStatus.PASSED: "Success",
    ResultStatus.FAILED: "Failure",
    ResultStatus.ERROR: "Error",
    ResultStatus.SKIPPED: "Ignored",
}


class NUnitFormatter(BaseFormatter):
    """
    test-results > environment, culture-info, test-suite (one TestFixture
    per suite) > results > test-case.
    """

    name = "NUnit"

    def build(self, report: RunReport) -> ET.Element:
        counts = [suite_counts(s) for s in report.suites]
        started = report.started_at
        root = ET.Element("test-results", {
            "name": "rendertest",
            "total": str(sum(c.tests for c in counts)),
            "errors": str(sum(c.errors for c in counts)),
            "failures": str(sum(c.failures for c in counts)),
            "not-run": str(sum(c.skipped for c in counts)),
            "inconclusive": "0",
            "ignored": str(sum(c.skipped for c in counts)),
            "skipped": "0",
            "invalid": "0",
            "date": started.strftime("%Y-%m-%d"),
            "time": started.strftime("%H:%M:%S"),
        })
        ET.SubElement(root, "environment", {
            "nunit-version": "2.5.8.0",
            "clr-version": platform.python_version(),
            "os-version": platform.release(),
            "platform": platform.system(),
            "cwd": os.getcwd(),
            "machine-name": platform.node(),
            "user": _user(),
            "user-domain": platform.node(),
        })
        culture = locale.getlocale()[0] or "en-US"
        ET.SubElement(root, "culture-info", {"current-culture": culture, "current-uiculture": culture})

        for suite in report.suites:
            root.append(self._suite(suite))
        return root

    def _suite(self, suite: SuiteRecord) -> ET.Element:
        cases = suite_cases(suite)
        element = ET.Element("test-suite", {
            "type": "TestFixture",
            "name": suite.name,
            "description": suite.file_path,
            "executed": "True",
            "result": "Success" if suite.passed else "Failure",
            "success": str(suite.passed),
            "time": seconds(suite.duration_ms),
            "asserts": str(sum(c.asserts for c in cases)),
        })
        results = ET.SubElement(element, "results")
        for case in cases:
            skipped = case.status == ResultStatus.SKIPPED
            testcase = ET.SubElement(results, "test-case", {
                "name": f"{suite.name}.{case.name}",
                "description": case.name,
                "executed": str(not skipped),
                "result": _RESULTS.get(case.status, "Inconclusive"),
                "success": str(case.status == ResultStatus.PASSED),
                "time": seconds(case.duration_ms),
                "asserts": str(case.asserts),
            })
            if case.status in (ResultStatus.FAILED, ResultStatus.ERROR):
                failure = ET.SubElement(testcase, "failure")
                ET.SubElement(failure, "message").text = case.text or case.message
                ET.SubElement(failure, "stack-trace").text = ""
            elif skipped:
                reason = ET.SubElement(testcase, "reason")
                ET.SubElement(reason, "message").text = "skipped after an earlier failure"
        return element


def _user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return ""
