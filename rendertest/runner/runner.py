"""
Test runner.

Runs the suites of one or more charts and collects a RunReport.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from ..config import RunnerConfig
from ..rendering import (
    BaseRenderer,
    Chart,
    ChartError,
    create_renderer,
    load_chart,
    load_values_files,
    merge_values,
)
from ..reporting import RunReport, SuiteRecord
from .discovery import discover_test_files
from .suite import run_suite, skip_suite_file

logger = logging.getLogger(__name__)


class TestRunner:
    """
    Runs chart test suites.

    Example:
        runner = TestRunner(RunnerConfig(failfast=True))
        report = runner.run(["charts/web"])
        if not report.passed:
            sys.exit(1)
    """

    __test__ = False

    def __init__(self, config: RunnerConfig, renderer: BaseRenderer | None = None):
        self.config = config
        self.renderer = renderer or create_renderer(config.renderer)

    def run(self, chart_paths: Iterable[str | Path]) -> RunReport:
        """
        Run every suite of every chart, in order.

        Once fail-fast trips, the remaining suites are still recorded,
        as skipped.

        Raises:
            RendererUnavailable: If the rendering backend cannot be used
        """
        report = RunReport()
        report.start()

        stopped = False
        for chart_path in chart_paths:
            stopped = self._run_chart(Path(chart_path), report, stopped)

        report.complete()
        return report

    def _run_chart(self, chart_path: Path, report: RunReport, stopped: bool) -> bool:
        """Run one chart and its subcharts. Returns True once fail-fast has tripped."""
        try:
            chart = load_chart(chart_path)
            charts = [chart] + (chart.subcharts() if self.config.with_subchart else [])
        except ChartError as e:
            if stopped:
                report.add_suite(SuiteRecord.skipped(chart_path.name, str(chart_path), chart_path.name))
                return True
            report.add_suite(SuiteRecord.errored(chart_path.name, str(chart_path), chart_path.name, str(e)))
            return self.config.failfast

        for each in charts:
            stopped = self._run_single_chart(each, report, stopped)
        return stopped

    def _run_single_chart(self, chart: Chart, report: RunReport, stopped: bool) -> bool:
        files = discover_test_files(chart.path, self.config.test_files, self.config.chart_tests_path)
        logger.debug(f"Chart '{chart.name}': {len(files)} suite file(s)")
        if not files:
            return stopped

        if not stopped:
            try:
                base_values = merge_values(chart.values, load_values_files(self.config.values_files))
            except ChartError as e:
                report.add_suite(SuiteRecord.errored(chart.name, str(chart.path), chart.name, str(e)))
                if not self.config.failfast:
                    return False
                stopped = True

        for path in files:
            if stopped:
                for suite in skip_suite_file(path, chart, self.config):
                    report.add_suite(suite)
                continue
            for suite in run_suite(path, chart, self.renderer, self.config, base_values):
                report.add_suite(suite)
                if self.config.failfast and not suite.passed:
                    stopped = True
        return stopped
