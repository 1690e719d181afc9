"""
Snapshot validators: matchSnapshot, matchSnapshotRaw.

Each compared document takes the next snapshot ordinal of the test.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from ..compare import diff_trees
from ..rendering import Manifest
from .base import CheckResult, Validator, required_values_at
from .common import error_info, extract_string, format_value
from .context import ValidateContext


@dataclass(frozen=True)
class MatchSnapshotValidator(Validator):
    """Assert that the value at path (the whole document by default) matches its snapshot."""
    path: str | None = None

    PARAMS: ClassVar[dict[str, str]] = {"path": "path"}

    def validate(self, context: ValidateContext) -> CheckResult:
        if context.snapshot is None:
            return False, error_info("no snapshot store attached to this run")

        def check(manifest: Manifest) -> CheckResult:
            if self.path is None:
                content = manifest.tree
            else:
                values, errors = required_values_at(manifest, self.path)
                if values is None:
                    return False, errors
                content = values[0] if len(values) == 1 else values
            return _compare(context, manifest, content, self.path)

        return self.validate_each(context, check)


@dataclass(frozen=True)
class MatchSnapshotRawValidator(Validator):
    """Assert that a raw (non-mapping) document matches its snapshot."""

    def validate(self, context: ValidateContext) -> CheckResult:
        if context.snapshot is None:
            return False, error_info("no snapshot store attached to this run")

        def check(manifest: Manifest) -> CheckResult:
            content, errors = extract_string(manifest.raw, f"{manifest.source}[{manifest.index}]")
            if errors:
                return False, error_info(errors, manifest)
            return _compare(context, manifest, content, None)

        return self.validate_each(context, check)


def _compare(context: ValidateContext, manifest: Manifest, content: Any, path: str | None) -> CheckResult:
    # A negated check never rewrites what it is compared against
    result = context.snapshot.compare(content, update=not context.negative)
    ordinal = result.key.ordinal

    if result.missing:
        return False, error_info(
            f"no snapshot recorded for snapshot {ordinal}, run with --update-snapshot to record it",
            manifest,
            path,
        )
    if result.passed != context.negative:
        return True, []

    lines = [f"Template:\t{manifest.source}", f"DocumentIndex:\t{manifest.index}"]
    if path:
        lines.append(f"Path:\t{path}")
    if context.negative:
        lines.append(f"Expected NOT to match snapshot {ordinal}:")
        lines.extend(f"\t{line}" for line in format_value(content))
    else:
        lines.append(f"Expected to match snapshot {ordinal}:")
        lines.extend(f"\t{line}" for line in diff_trees(result.cached, content, "Expected", "Actual"))
    return False, lines
