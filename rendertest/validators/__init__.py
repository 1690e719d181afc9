"""
Validators for rendered manifests

This package provides one validator per assertion kind. Every
validator is an immutable value built from the parameters declared in
a test file, evaluated against a ValidateContext.

Supported assertions (the not*/isNot* spellings are the same validator
with negation applied):
    - equal, equalRaw
    - matchRegex, matchRegexRaw
    - contains, isSubset
    - exists, isNull, isNullOrEmpty (isEmpty), lengthEqual
    - isKind, isAPIVersion, hasDocuments, containsDocument
    - matchSnapshot, matchSnapshotRaw
    - failedTemplate

Usage:
    from rendertest.validators import ValidateContext, build_validator

    validator, negative = build_validator("isKind", {"of": "Deployment"})
    passed, diagnostics = validator.validate(
        ValidateContext(manifests=result.manifests, negative=negative)
    )
"""

from __future__ import annotations

from typing import Any

# Context
from .context import ValidateContext

# Base
from .base import Validator

# Validators
from .documents import (
    ContainsDocumentValidator,
    HasDocumentsValidator,
    IsAPIVersionValidator,
    IsKindValidator,
)
from .equality import EqualRawValidator, EqualValidator
from .failed_template import FailedTemplateValidator
from .membership import ContainsValidator, IsSubsetValidator
from .paths import ExistsValidator, IsNullOrEmptyValidator, IsNullValidator, LengthEqualValidator
from .regex import MatchRegexRawValidator, MatchRegexValidator
from .snapshot import MatchSnapshotRawValidator, MatchSnapshotValidator

# Assertion key -> (validator class, negated)
VALIDATORS: dict[str, tuple[type[Validator], bool]] = {
    "equal": (EqualValidator, False),
    "notEqual": (EqualValidator, True),
    "equalRaw": (EqualRawValidator, False),
    "notEqualRaw": (EqualRawValidator, True),
    "matchRegex": (MatchRegexValidator, False),
    "notMatchRegex": (MatchRegexValidator, True),
    "matchRegexRaw": (MatchRegexRawValidator, False),
    "notMatchRegexRaw": (MatchRegexRawValidator, True),
    "contains": (ContainsValidator, False),
    "notContains": (ContainsValidator, True),
    "isSubset": (IsSubsetValidator, False),
    "isNotSubset": (IsSubsetValidator, True),
    "exists": (ExistsValidator, False),
    "notExists": (ExistsValidator, True),
    "isNull": (IsNullValidator, False),
    "isNotNull": (IsNullValidator, True),
    "isNullOrEmpty": (IsNullOrEmptyValidator, False),
    "isNotNullOrEmpty": (IsNullOrEmptyValidator, True),
    "isEmpty": (IsNullOrEmptyValidator, False),
    "isNotEmpty": (IsNullOrEmptyValidator, True),
    "lengthEqual": (LengthEqualValidator, False),
    "notLengthEqual": (LengthEqualValidator, True),
    "isKind": (IsKindValidator, False),
    "isAPIVersion": (IsAPIVersionValidator, False),
    "hasDocuments": (HasDocumentsValidator, False),
    "containsDocument": (ContainsDocumentValidator, False),
    "matchSnapshot": (MatchSnapshotValidator, False),
    "matchSnapshotRaw": (MatchSnapshotRawValidator, False),
    "failedTemplate": (FailedTemplateValidator, False),
    "notFailedTemplate": (FailedTemplateValidator, True),
}


def build_validator(kind: str, params: dict[str, Any] | None) -> tuple[Validator, bool]:
    """
    Build the validator for an assertion key.

    Returns:
        Tuple of (validator, negated-by-name)

    Raises:
        KeyError: If the assertion key is unknown
    """
    validator_cls, negated = VALIDATORS[kind]
    return validator_cls.from_params(params), negated


def display_kind(kind: str, negative: bool) -> str:
    """Assertion label as users write it: notEqual, or "not equal" for `not: true`."""
    _, negated = VALIDATORS.get(kind, (None, False))
    return kind if negative == negated else f"not {kind}"


__all__ = [
    # Context
    "ValidateContext",
    # Base
    "Validator",
    # Registry
    "VALIDATORS",
    "build_validator",
    "display_kind",
    # Validators
    "ContainsDocumentValidator",
    "ContainsValidator",
    "EqualRawValidator",
    "EqualValidator",
    "ExistsValidator",
    "FailedTemplateValidator",
    "HasDocumentsValidator",
    "IsAPIVersionValidator",
    "IsKindValidator",
    "IsNullOrEmptyValidator",
    "IsNullValidator",
    "IsSubsetValidator",
    "LengthEqualValidator",
    "MatchRegexRawValidator",
    "MatchRegexValidator",
    "MatchSnapshotRawValidator",
    "MatchSnapshotValidator",
]
