"""
Typed data structures for test-suite files.

This module contains the dataclasses that represent the internal
typed structure of a parsed suite.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..validators import Validator


# ─────────────────────────────────────────────────────────────────────────────
# Assertions
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AssertionSpec:
    """
    One declared assertion.

    negative combines the key's own negation (notEqual, isNotNull, ...)
    with the `not:` marker.
    """
    kind: str
    validator: Validator
    negative: bool = False
    template: str | None = None  # Narrows the documents to one template
    document_index: int | None = None


# ─────────────────────────────────────────────────────────────────────────────
# Jobs & Suites
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class JobSpec:
    """A test: one rendering scenario and its ordered assertions."""
    name: str  # 'it' in YAML
    asserts: list[AssertionSpec] = field(default_factory=list)
    templates: list[str] = field(default_factory=list)  # Empty: inherit the suite's
    template: str | None = None  # Default template filter for asserts
    document_index: int | None = None
    values: list[Path] = field(default_factory=list)
    set_values: dict[str, Any] = field(default_factory=dict)  # 'set' in YAML
    release: dict[str, Any] = field(default_factory=dict)


@dataclass
class SuiteSpec:
    """Fully parsed and validated suite."""
    name: str  # 'suite' in YAML
    file_path: Path
    templates: list[str] = field(default_factory=list)
    values: list[Path] = field(default_factory=list)
    set_values: dict[str, Any] = field(default_factory=dict)
    release: dict[str, Any] = field(default_factory=dict)
    tests: list[JobSpec] = field(default_factory=list)
