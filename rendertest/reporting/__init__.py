"""
Reporting for Test Runs

This package holds the result tree of a run and prints it to the
terminal.

Features:
    - Run, suite, job and assertion records with timing
    - Failure diagnostics per assertion
    - Snapshot counters per suite
    - Human-readable console output

Usage:
    from rich.console import Console
    from rendertest.reporting import Printer

    report = TestRunner(config).run(["charts/web"])
    Printer(Console()).print_report(report)
"""

# Models
from .models import (
    AssertionRecord,
    JobRecord,
    ResultStatus,
    RunReport,
    RunStatus,
    SuiteRecord,
)

# Printer
from .printer import Printer

__all__ = [
    # Models
    "AssertionRecord",
    "JobRecord",
    "ResultStatus",
    "RunReport",
    "RunStatus",
    "SuiteRecord",
    # Printer
    "Printer",
]
