"""
Schema validation for test-suite files.

This module contains the validation logic that checks raw parsed YAML
against the suite schema and reports errors with helpful messages.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..validators import VALIDATORS

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ValidationError:
    """One schema problem, located by a dotted path into the suite document."""
    path: str  # e.g., "tests[0].asserts[1].equal.path"
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        parts = [f"❌ {self.path}: {self.message}"]
        if self.value is not None:
            parts.append(f"   Got: {self.value!r}")
        if self.suggestion:
            parts.append(f"   💡 {self.suggestion}")
        return "\n".join(parts)

    def plain(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


@dataclass
class ValidationResult:
    """
    Outcome of checking one suite file.

    Errors make the file unusable. Warnings are unknown keys that were
    ignored because strict mode was off.
    """
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def add_warning(self, path: str, message: str, suggestion: str | None = None) -> None:
        self.warnings.append(ValidationError(path, message, suggestion=suggestion))

    def extend(self, other: ValidationResult, prefix: str = "") -> None:
        """Merge another document's result, prefixing its paths."""
        for source, target in ((other.errors, self.errors), (other.warnings, self.warnings)):
            for error in source:
                path = f"{prefix}{error.path}" if prefix else error.path
                target.append(ValidationError(path, error.message, error.value, error.suggestion))

    def summary(self) -> str:
        """Errors as plain `path: message` lines, for reports."""
        return "\n".join(e.plain() for e in self.errors)

    def __str__(self) -> str:
        if self.is_valid:
            return "✅ Schema validation passed"
        lines = [f"Suite validation failed with {len(self.errors)} error(s):\n"]
        lines.extend(str(e) for e in self.errors)
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Schema Validator
# ─────────────────────────────────────────────────────────────────────────────

class SchemaValidator:
    """Validates raw parsed YAML against the suite schema."""

    REQUIRED_TOP_LEVEL = {"suite", "tests"}
    OPTIONAL_TOP_LEVEL = {"templates", "values", "set", "release"}
    REQUIRED_TEST_FIELDS = {"it", "asserts"}
    OPTIONAL_TEST_FIELDS = {"template", "templates", "documentIndex", "values", "set", "release"}
    ASSERT_MODIFIERS = {"not", "template", "documentIndex"}
    RELEASE_FIELDS = {"name": str, "namespace": str, "revision": int, "upgrade": bool}
    VALID_ASSERTS = set(VALIDATORS)

    STRING_PARAMS = {
        "path", "pattern", "errorMessage", "errorPattern",
        "of", "kind", "apiVersion", "name", "namespace",
    }
    COUNT_PARAMS = {"count"}
    BOOL_PARAMS = {"any"}

    def __init__(self, data: dict[str, Any], strict: bool = False):
        self.data = data
        self.strict = strict
        self.result = ValidationResult()
        self.test_names: set[str] = set()

    def validate(self) -> ValidationResult:
        """Run all validation checks and return result."""
        self._validate_top_level()
        if not self.result.is_valid:
            return self.result

        self._validate_name()
        self._validate_string_list("templates", self.data.get("templates"))
        self._validate_string_list("values", self.data.get("values"))
        self._validate_set("set", self.data.get("set"))
        self._validate_release("release", self.data.get("release"))
        self._validate_tests()

        return self.result

    def _unknown(self, path: str, key: str, valid: set[str]) -> None:
        """Unknown keys are errors in strict mode and warnings otherwise."""
        suggestion = f"Valid fields are: {', '.join(sorted(valid))}"
        if self.strict:
            self.result.add_error(f"{path}{key}", f"Unknown field '{key}'", suggestion=suggestion)
        else:
            self.result.add_warning(f"{path}{key}", f"Unknown field '{key}' ignored", suggestion=suggestion)
            logger.warning(f"Ignoring unknown field '{path}{key}'. {suggestion}")

    def _validate_top_level(self) -> None:
        """Check required and unknown top-level keys."""
        keys = set(self.data.keys())
        missing = self.REQUIRED_TOP_LEVEL - keys
        unknown = keys - self.REQUIRED_TOP_LEVEL - self.OPTIONAL_TOP_LEVEL

        for key in sorted(missing):
            self.result.add_error(
                key,
                f"Required field '{key}' is missing",
                suggestion=f"Add '{key}:' to your suite file"
            )

        for key in sorted(unknown, key=str):
            self._unknown("", str(key), self.REQUIRED_TOP_LEVEL | self.OPTIONAL_TOP_LEVEL)

    def _validate_name(self) -> None:
        name = self.data.get("suite")
        if not isinstance(name, str):
            self.result.add_error(
                "suite",
                "Must be a string",
                value=name
            )
        elif not name.strip():
            self.result.add_error(
                "suite",
                "Cannot be empty",
                suggestion="Provide a descriptive name for your suite"
            )

    def _validate_string_list(self, path: str, value: Any) -> None:
        if value is None:
            return
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            self.result.add_error(
                path,
                "Must be a list of strings",
                value=value
            )

    def _validate_set(self, path: str, value: Any) -> None:
        if value is None:
            return
        if not isinstance(value, dict):
            self.result.add_error(
                path,
                "Must be an object (key-value pairs)",
                value=value,
                suggestion="Use dotted keys, e.g. 'image.tag: v2'"
            )

    def _validate_release(self, path: str, release: Any) -> None:
        if release is None:
            return
        if not isinstance(release, dict):
            self.result.add_error(
                path,
                "Must be an object",
                value=release
            )
            return

        for key, value in release.items():
            expected_type = self.RELEASE_FIELDS.get(key)
            if expected_type is None:
                self._unknown(f"{path}.", str(key), set(self.RELEASE_FIELDS))
            elif not isinstance(value, expected_type) or (expected_type is int and isinstance(value, bool)):
                self.result.add_error(
                    f"{path}.{key}",
                    f"Must be a {expected_type.__name__}",
                    value=value
                )

    def _validate_tests(self) -> None:
        tests = self.data.get("tests")
        if not isinstance(tests, list):
            self.result.add_error(
                "tests",
                "Must be a list",
                value=tests
            )
            return

        if len(tests) == 0:
            self.result.add_error(
                "tests",
                "Must contain at least one test",
                suggestion="Add a test with 'it:' and 'asserts:'"
            )
            return

        for i, test in enumerate(tests):
            self._validate_test(i, test)

    def _validate_test(self, index: int, test: Any) -> None:
        path = f"tests[{index}]"

        if not isinstance(test, dict):
            self.result.add_error(
                path,
                "Test must be an object",
                value=test
            )
            return

        for key in test:
            if key not in self.REQUIRED_TEST_FIELDS | self.OPTIONAL_TEST_FIELDS:
                self._unknown(f"{path}.", str(key), self.REQUIRED_TEST_FIELDS | self.OPTIONAL_TEST_FIELDS)

        name = test.get("it")
        if not name:
            self.result.add_error(
                f"{path}.it",
                "Test must have an 'it' field",
                suggestion="Describe the behaviour, like 'it: should render a Deployment'"
            )
        elif not isinstance(name, str):
            self.result.add_error(
                f"{path}.it",
                "Test name must be a string",
                value=name
            )
        elif name in self.test_names:
            self.result.add_error(
                f"{path}.it",
                "Duplicate test name",
                value=name,
                suggestion="Test names identify snapshots and must be unique within a suite"
            )
        else:
            self.test_names.add(name)

        template = test.get("template")
        if template is not None and not isinstance(template, str):
            self.result.add_error(f"{path}.template", "Must be a string", value=template)

        self._validate_document_index(f"{path}.documentIndex", test.get("documentIndex"))
        self._validate_string_list(f"{path}.templates", test.get("templates"))
        self._validate_string_list(f"{path}.values", test.get("values"))
        self._validate_set(f"{path}.set", test.get("set"))
        self._validate_release(f"{path}.release", test.get("release"))

        asserts = test.get("asserts")
        if not isinstance(asserts, list) or len(asserts) == 0:
            self.result.add_error(
                f"{path}.asserts",
                "Must be a non-empty list",
                value=asserts,
                suggestion="Add at least one assertion, like '- isKind: {of: Deployment}'"
            )
            return

        for i, assertion in enumerate(asserts):
            self._validate_assert(f"{path}.asserts[{i}]", assertion)

    def _validate_assert(self, path: str, assertion: Any) -> None:
        if not isinstance(assertion, dict):
            self.result.add_error(
                path,
                "Assertion must be an object",
                value=assertion
            )
            return

        kinds = [key for key in assertion if key in self.VALID_ASSERTS]
        others = [key for key in assertion if key not in self.VALID_ASSERTS and key not in self.ASSERT_MODIFIERS]

        if len(kinds) != 1:
            self.result.add_error(
                path,
                "Assertion must name exactly one assertion type" if kinds else "Unknown assertion type",
                value=kinds or others or None,
                suggestion=f"Valid types: {', '.join(sorted(self.VALID_ASSERTS))}"
            )
            return

        for key in others:
            self._unknown(f"{path}.", str(key), self.ASSERT_MODIFIERS | {kinds[0]})

        negate = assertion.get("not")
        if negate is not None and not isinstance(negate, bool):
            self.result.add_error(f"{path}.not", "Must be true or false", value=negate)

        template = assertion.get("template")
        if template is not None and not isinstance(template, str):
            self.result.add_error(f"{path}.template", "Must be a string", value=template)

        self._validate_document_index(f"{path}.documentIndex", assertion.get("documentIndex"))
        self._validate_params(f"{path}.{kinds[0]}", kinds[0], assertion[kinds[0]])

    def _validate_params(self, path: str, kind: str, params: Any) -> None:
        validator_cls, _ = VALIDATORS[kind]

        if params is None:
            params = {}
        if not isinstance(params, dict):
            self.result.add_error(
                path,
                "Parameters must be an object",
                value=params
            )
            return

        for key in sorted(validator_cls.REQUIRED - set(params)):
            self.result.add_error(
                f"{path}.{key}",
                f"Assertion '{kind}' requires a '{key}' field"
            )

        for key, value in params.items():
            if key not in validator_cls.PARAMS:
                self._unknown(f"{path}.", str(key), set(validator_cls.PARAMS))
            elif key in self.STRING_PARAMS and value is not None and not isinstance(value, str):
                self.result.add_error(f"{path}.{key}", "Must be a string", value=value)
            elif key in self.COUNT_PARAMS and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
                self.result.add_error(f"{path}.{key}", "Must be a non-negative integer", value=value)
            elif key in self.BOOL_PARAMS and not isinstance(value, bool):
                self.result.add_error(f"{path}.{key}", "Must be true or false", value=value)

    def _validate_document_index(self, path: str, value: Any) -> None:
        if value is None:
            return
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            self.result.add_error(
                path,
                "Must be a non-negative integer",
                value=value
            )
