"""
Test execution

Runs suite files against charts: one render per job, assertions in
declared order, snapshots stored per suite file.

Usage:
    from rendertest.runner import TestRunner
    from rendertest.config import RunnerConfig

    report = TestRunner(RunnerConfig()).run(["charts/web"])
"""

from .discovery import discover_test_files
from .job import JobEnvironment, build_request, run_job, select_manifests
from .runner import TestRunner
from .suite import run_suite, skip_suite_file

__all__ = [
    "JobEnvironment",
    "TestRunner",
    "build_request",
    "discover_test_files",
    "run_job",
    "run_suite",
    "select_manifests",
    "skip_suite_file",
]
