"""SonarQube generic test execution report."""

from __future__ import annotations

from xml.etree import ElementTree as ET

from ..reporting import ResultStatus, RunReport
from .base import BaseFormatter, suite_cases


class SonarFormatter(BaseFormatter):
    """testExecutions > file (one per suite file) > testCase, durations in ms."""

    name = "Sonar"

    def build(self, report: RunReport) -> ET.Element:
        root = ET.Element("testExecutions", {"version": "1"})
        files: dict[str, ET.Element] = {}

        for suite in report.suites:
            file_element = files.get(suite.file_path)
            if file_element is None:
                file_element = ET.SubElement(root, "file", {"path": suite.file_path})
                files[suite.file_path] = file_element

            for case in suite_cases(suite):
                testcase = ET.SubElement(file_element, "testCase", {
                    "name": f"{suite.name}.{case.name}",
                    "duration": str(int(round(case.duration_ms))),
                })
                if case.status == ResultStatus.FAILED:
                    ET.SubElement(testcase, "failure", {"message": case.message}).text = case.text
                elif case.status == ResultStatus.ERROR:
                    ET.SubElement(testcase, "error", {"message": case.message}).text = case.text
                elif case.status == ResultStatus.SKIPPED:
                    ET.SubElement(testcase, "skipped", {"message": "skipped after an earlier failure"})
        return root
