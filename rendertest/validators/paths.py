"""
Path validators: exists, isNull, isNullOrEmpty, lengthEqual.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from ..rendering import Manifest
from .base import CheckResult, Validator, required_values_at, values_at
from .common import MISSING, error_info, fail_info, is_empty
from .context import ValidateContext


@dataclass(frozen=True)
class ExistsValidator(Validator):
    """Assert that path resolves in the document."""
    path: str = ""

    PARAMS: ClassVar[dict[str, str]] = {"path": "path"}
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"path"})

    def validate(self, context: ValidateContext) -> CheckResult:
        def check(manifest: Manifest) -> CheckResult:
            values, errors = values_at(manifest, self.path)
            if values is None:
                return False, errors
            if bool(values) == context.negative:
                return False, fail_info(
                    manifest,
                    negative=context.negative,
                    verb="to exist",
                    actual=values[0] if values else MISSING,
                    path=self.path,
                )
            return True, []

        return self.validate_each(context, check)


@dataclass(frozen=True)
class IsNullValidator(Validator):
    """Assert that the value at path is null or missing."""
    path: str = ""

    PARAMS: ClassVar[dict[str, str]] = {"path": "path"}
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"path"})

    def validate(self, context: ValidateContext) -> CheckResult:
        def check(manifest: Manifest) -> CheckResult:
            values, errors = values_at(manifest, self.path)
            if values is None:
                return False, errors
            matched = all(value is None for value in values)
            if matched == context.negative:
                return False, fail_info(
                    manifest,
                    negative=context.negative,
                    verb="to be null",
                    actual=values[0] if values else None,
                    path=self.path,
                )
            return True, []

        return self.validate_each(context, check)


@dataclass(frozen=True)
class IsNullOrEmptyValidator(Validator):
    """Assert that the value at path is null, missing or empty."""
    path: str = ""

    PARAMS: ClassVar[dict[str, str]] = {"path": "path"}
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"path"})

    def validate(self, context: ValidateContext) -> CheckResult:
        def check(manifest: Manifest) -> CheckResult:
            values, errors = values_at(manifest, self.path)
            if values is None:
                return False, errors
            matched = all(is_empty(value) for value in values)
            if matched == context.negative:
                return False, fail_info(
                    manifest,
                    negative=context.negative,
                    verb="to be null or empty",
                    actual=values[0] if values else None,
                    path=self.path,
                )
            return True, []

        return self.validate_each(context, check)


@dataclass(frozen=True)
class LengthEqualValidator(Validator):
    """Assert that the list, mapping or string at path has count items."""
    path: str = ""
    count: int = 0

    PARAMS: ClassVar[dict[str, str]] = {"path": "path", "count": "count"}
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"path", "count"})

    def validate(self, context: ValidateContext) -> CheckResult:
        def check(manifest: Manifest) -> CheckResult:
            values, errors = required_values_at(manifest, self.path)
            if values is None:
                return False, errors
            for value in values:
                if not isinstance(value, (list, dict, str)):
                    return False, error_info(
                        f"expect '{self.path}' to have a length, got {type(value).__name__}",
                        manifest,
                        self.path,
                    )
                if (len(value) == self.count) == context.negative:
                    return False, fail_info(
                        manifest,
                        negative=context.negative,
                        verb="to have length",
                        expected=self.count,
                        actual=len(value),
                        path=self.path,
                    )
            return True, []

        return self.validate_each(context, check)
