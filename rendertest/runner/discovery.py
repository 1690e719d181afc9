"""Suite file discovery."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


def discover_test_files(
    chart_dir: str | Path,
    patterns: Iterable[str],
    chart_tests_path: str | None = None,
) -> list[Path]:
    """
    Find suite files for a chart.

    Patterns are globs relative to the chart directory, or to
    chart_tests_path (itself relative to the chart) when given.
    Results are sorted and each file appears once.
    """
    root = Path(chart_dir)
    if chart_tests_path:
        root = root / chart_tests_path

    found: set[Path] = set()
    for pattern in patterns:
        found.update(p for p in root.glob(pattern) if p.is_file())
    return sorted(found)
