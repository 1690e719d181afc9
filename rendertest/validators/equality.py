"""
Equality validators: equal, equalRaw.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar

from ..rendering import Manifest
from .base import CheckResult, Validator, required_values_at
from .common import deep_equal, error_info, extract_string, fail_info
from .context import ValidateContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EqualValidator(Validator):
    """Assert that the value at path structurally equals value."""
    path: str = ""
    value: Any = None

    PARAMS: ClassVar[dict[str, str]] = {"path": "path", "value": "value"}
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"path"})

    def validate(self, context: ValidateContext) -> CheckResult:
        return self.validate_each(context, lambda manifest: self._check(manifest, context.negative))

    def _check(self, manifest: Manifest, negative: bool) -> CheckResult:
        actuals, errors = required_values_at(manifest, self.path)
        if actuals is None:
            return False, errors

        for actual in actuals:
            logger.debug(f"expected content: {self.value!r}, actual content: {actual!r}")
            if deep_equal(self.value, actual) == negative:
                return False, fail_info(
                    manifest,
                    negative=negative,
                    verb="to equal",
                    expected=self.value,
                    actual=actual,
                    path=self.path,
                )
        return True, []


@dataclass(frozen=True)
class EqualRawValidator(Validator):
    """Assert that a raw (non-mapping) document equals value."""
    value: Any = None

    PARAMS: ClassVar[dict[str, str]] = {"value": "value"}
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"value"})

    def validate(self, context: ValidateContext) -> CheckResult:
        return self.validate_each(context, lambda manifest: self._check(manifest, context.negative))

    def _check(self, manifest: Manifest, negative: bool) -> CheckResult:
        actual, errors = extract_string(manifest.raw, f"{manifest.source}[{manifest.index}]")
        if errors:
            return False, error_info(errors, manifest)

        matched = actual is not None and actual == self.value
        if matched == negative:
            return False, fail_info(manifest, negative=negative, verb="to equal", expected=self.value, actual=actual)
        return True, []
