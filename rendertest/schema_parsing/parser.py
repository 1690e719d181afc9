"""
Schema parser for test-suite files.

This module converts validated YAML data into typed SuiteSpec structures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ..validators import VALIDATORS, build_validator
from .models import AssertionSpec, JobSpec, SuiteSpec


class SchemaParser:
    """Parses and converts validated YAML to a typed SuiteSpec."""

    def __init__(self, data: dict[str, Any], file_path: str | Path):
        self.data = data
        self.file_path = Path(file_path)

    def parse(self) -> SuiteSpec:
        """Convert validated data to a typed SuiteSpec."""
        return SuiteSpec(
            name=self.data["suite"],
            file_path=self.file_path,
            templates=list(self.data.get("templates") or []),
            values=self._resolve_paths(self.data.get("values")),
            set_values=dict(self.data.get("set") or {}),
            release=dict(self.data.get("release") or {}),
            tests=[self._parse_test(test) for test in self.data["tests"]],
        )

    def _parse_test(self, test: dict) -> JobSpec:
        return JobSpec(
            name=test["it"],
            asserts=[self._parse_assert(assertion) for assertion in test["asserts"]],
            templates=list(test.get("templates") or []),
            template=test.get("template"),
            document_index=test.get("documentIndex"),
            values=self._resolve_paths(test.get("values")),
            set_values=dict(test.get("set") or {}),
            release=dict(test.get("release") or {}),
        )

    def _parse_assert(self, assertion: dict) -> AssertionSpec:
        kind = next(key for key in assertion if key in VALIDATORS)
        validator, negated = build_validator(kind, assertion[kind])
        return AssertionSpec(
            kind=kind,
            validator=validator,
            negative=negated != bool(assertion.get("not", False)),
            template=assertion.get("template"),
            document_index=assertion.get("documentIndex"),
        )

    def _resolve_paths(self, paths: list[str] | None) -> list[Path]:
        """Values files are relative to the suite file."""
        base = self.file_path.parent
        return [Path(p) if Path(p).is_absolute() else base / p for p in paths or []]
