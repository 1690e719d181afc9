"""
Regular expression validators: matchRegex, matchRegexRaw.

Patterns use re.search semantics: they match anywhere in the subject
unless anchored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from ..rendering import Manifest
from .base import CheckResult, Validator, required_values_at
from .common import compile_pattern, error_info, extract_string, fail_info
from .context import ValidateContext


@dataclass(frozen=True)
class MatchRegexValidator(Validator):
    """Assert that the string at path matches pattern."""
    path: str = ""
    pattern: str = ""

    PARAMS: ClassVar[dict[str, str]] = {"path": "path", "pattern": "pattern"}
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"path", "pattern"})

    def validate(self, context: ValidateContext) -> CheckResult:
        compiled, errors = compile_pattern(self.pattern)
        if compiled is None:
            return False, errors

        def check(manifest: Manifest) -> CheckResult:
            actuals, path_errors = required_values_at(manifest, self.path)
            if actuals is None:
                return False, path_errors

            for value in actuals:
                actual, extract_errors = extract_string(value, self.path)
                if extract_errors:
                    return False, error_info(extract_errors, manifest, self.path)
                matched = actual is not None and compiled.search(actual) is not None
                if matched == context.negative:
                    return False, fail_info(
                        manifest,
                        negative=context.negative,
                        verb="to match",
                        expected=self.pattern,
                        actual=actual,
                        path=self.path,
                    )
            return True, []

        return self.validate_each(context, check)


@dataclass(frozen=True)
class MatchRegexRawValidator(Validator):
    """Assert that a raw (non-mapping) document matches pattern."""
    pattern: str = ""

    PARAMS: ClassVar[dict[str, str]] = {"pattern": "pattern"}
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"pattern"})

    def validate(self, context: ValidateContext) -> CheckResult:
        compiled, errors = compile_pattern(self.pattern)
        if compiled is None:
            return False, errors

        def check(manifest: Manifest) -> CheckResult:
            actual, extract_errors = extract_string(manifest.raw, f"{manifest.source}[{manifest.index}]")
            if extract_errors:
                return False, error_info(extract_errors, manifest)
            matched = actual is not None and compiled.search(actual) is not None
            if matched == context.negative:
                return False, fail_info(
                    manifest,
                    negative=context.negative,
                    verb="to match",
                    expected=self.pattern,
                    actual=actual,
                )
            return True, []

        return self.validate_each(context, check)
