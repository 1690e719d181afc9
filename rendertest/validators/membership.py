"""
Membership validators: contains, isSubset.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from ..rendering import Manifest
from .base import CheckResult, Validator, required_values_at
from .common import deep_equal, error_info, fail_info, is_subset
from .context import ValidateContext


@dataclass(frozen=True)
class ContainsValidator(Validator):
    """
    Assert that the list at path contains content.

    With any=True a mapping item matches when it contains content as a
    subset. With count set, exactly that many items must match.
    """
    path: str = ""
    content: Any = None
    count: int | None = None
    any: bool = False

    PARAMS: ClassVar[dict[str, str]] = {
        "path": "path",
        "content": "content",
        "count": "count",
        "any": "any",
    }
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"path", "content"})

    def validate(self, context: ValidateContext) -> CheckResult:
        return self.validate_each(context, lambda manifest: self._check(manifest, context.negative))

    def _check(self, manifest: Manifest, negative: bool) -> CheckResult:
        actuals, errors = required_values_at(manifest, self.path)
        if actuals is None:
            return False, errors

        for actual in actuals:
            if not isinstance(actual, list):
                return False, error_info(
                    f"expect '{self.path}' to be an array, got {type(actual).__name__}",
                    manifest,
                    self.path,
                )

            hits = sum(1 for item in actual if self._item_matches(item))
            matched = hits == self.count if self.count is not None else hits > 0
            if matched == negative:
                verb = "to contain" if self.count is None else f"to contain {self.count} time(s)"
                return False, fail_info(
                    manifest,
                    negative=negative,
                    verb=verb,
                    expected=self.content,
                    actual=actual,
                    path=self.path,
                )
        return True, []

    def _item_matches(self, item: Any) -> bool:
        if self.any and isinstance(self.content, dict) and isinstance(item, dict):
            return is_subset(item, self.content)
        return deep_equal(self.content, item)


@dataclass(frozen=True)
class IsSubsetValidator(Validator):
    """Assert that the mapping at path contains content as a subset."""
    path: str = ""
    content: Any = None

    PARAMS: ClassVar[dict[str, str]] = {"path": "path", "content": "content"}
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"path", "content"})

    def validate(self, context: ValidateContext) -> CheckResult:
        return self.validate_each(context, lambda manifest: self._check(manifest, context.negative))

    def _check(self, manifest: Manifest, negative: bool) -> CheckResult:
        actuals, errors = required_values_at(manifest, self.path)
        if actuals is None:
            return False, errors

        for actual in actuals:
            if not isinstance(actual, dict):
                return False, error_info(
                    f"expect '{self.path}' to be an object, got {type(actual).__name__}",
                    manifest,
                    self.path,
                )
            if is_subset(actual, self.content) == negative:
                return False, fail_info(
                    manifest,
                    negative=negative,
                    verb="to contain",
                    expected=self.content,
                    actual=actual,
                    path=self.path,
                )
        return True, []
