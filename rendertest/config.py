"""
Runner configuration.

Built once from the command line and passed to TestRunner; nothing in
the engine reads configuration from anywhere else.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_TEST_PATTERN = str(Path("tests") / "*_test.yaml")


@dataclass(frozen=True)
class RunnerConfig:
    """
    Options for one test run.

    Attributes:
        test_files: Glob patterns of suite files, relative to each chart
        values_files: Values files applied to every suite, after the chart's values.yaml
        update_snapshot: Record new and changed snapshots instead of failing
        with_subchart: Also run the suites of charts under charts/
        strict: Reject unknown keys in suite files
        failfast: Stop at the first failing assertion
        output_file: Where to write the structured report, None for no report
        output_type: Report format (JUnit, NUnit, XUnit, Sonar)
        chart_tests_path: Directory, relative to the chart, that holds the suites
        renderer: Rendering backend ("builtin" or "helm")
        colored: Force colored console output on or off, None for auto
        debug: Verbose logging
    """
    test_files: tuple[str, ...] = (DEFAULT_TEST_PATTERN,)
    values_files: tuple[str, ...] = ()
    update_snapshot: bool = False
    with_subchart: bool = True
    strict: bool = False
    failfast: bool = False
    output_file: str | None = None
    output_type: str = "XUnit"
    chart_tests_path: str | None = None
    renderer: str = "builtin"
    colored: bool | None = None
    debug: bool = False
