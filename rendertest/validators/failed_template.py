"""
Validator for templates that are expected to fail rendering.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar

from ..rendering import Manifest
from .base import CheckResult, Validator
from .common import compile_pattern, determine_success, error_info, extract_string, fail_info
from .context import ValidateContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FailedTemplateValidator(Validator):
    """
    Assert that rendering failed with a given message or pattern.

    errorMessage is compared for equality, errorPattern with re.search.
    Setting both is a configuration error.

    When rendering succeeded, each manifest's raw text is checked
    instead. An instance without parameters in a non-negated context
    accepts any populated output.
    """
    error_message: str | None = None
    error_pattern: str | None = None

    PARAMS: ClassVar[dict[str, str]] = {
        "errorMessage": "error_message",
        "errorPattern": "error_pattern",
    }
    requires_documents: ClassVar[bool] = False

    def validate(self, context: ValidateContext) -> CheckResult:
        if self.error_message and self.error_pattern:
            return False, error_info(
                "single attribute 'errorMessage' or 'errorPattern' supported at the same time"
            )

        if context.render_error is not None:
            if self.error_pattern:
                return self._validate_pattern(str(context.render_error), None, context)
            if self.error_message:
                return self._validate_message(str(context.render_error), None, context)
            return True, []

        return self._validate_manifests(context)

    def _validate_manifests(self, context: ValidateContext) -> CheckResult:
        manifests = context.get_manifests()
        success = True
        errors: list[str] = []

        for manifest in manifests:
            # Nothing specific expected and nothing failed: not an error.
            if not self.error_message and not self.error_pattern and not context.negative:
                continue

            actual, extract_errors = extract_string(
                manifest.raw, f"{manifest.source}[{manifest.index}]"
            )
            if extract_errors:
                current, single_errors = False, error_info(extract_errors, manifest)
            elif self.error_pattern:
                current, single_errors = self._validate_pattern(actual, manifest, context)
            elif self.error_message:
                current, single_errors = self._validate_message(actual, manifest, context)
            else:
                current, single_errors = True, []

            errors.extend(single_errors)
            success = determine_success(success, current)
            if not success and context.fail_fast:
                break

        if not manifests and not context.negative:
            success = False
            errors.extend(self._fail_info("No failed document", None, context.negative))

        return success, errors

    def _validate_pattern(self, actual: str | None, manifest: Manifest | None, context: ValidateContext) -> CheckResult:
        pattern, errors = compile_pattern(self.error_pattern)
        if pattern is None:
            return False, errors

        matched = actual is not None and pattern.search(actual) is not None
        if matched == context.negative:
            return False, self._fail_info(actual, manifest, context.negative)
        return True, []

    def _validate_message(self, actual: str | None, manifest: Manifest | None, context: ValidateContext) -> CheckResult:
        matched = actual is not None and actual == self.error_message
        if matched == context.negative:
            return False, self._fail_info(actual, manifest, context.negative)
        return True, []

    def _fail_info(self, actual: Any, manifest: Manifest | None, negative: bool) -> list[str]:
        verb = "to match" if self.error_pattern else "to equal"
        expected = self.error_message or self.error_pattern or ""

        logger.debug(f"expected content: {expected}")
        logger.debug(f"actual content: {actual}")

        return fail_info(manifest, negative=negative, verb=verb, expected=expected, actual=actual)
