"""
Base validator interface.

Every assertion kind is an immutable value holding its declared
parameters, with one validate() implementation per kind.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar

from ..rendering import Manifest
from .common import PathError, determine_success, error_info, resolve_path
from .context import ValidateContext

CheckResult = tuple[bool, list[str]]


class Validator(ABC):
    """
    Abstract base class for assertion validators.

    Subclasses are frozen dataclasses. PARAMS maps the keys accepted in
    test files to dataclass fields; REQUIRED lists the keys that must be
    present.
    """

    PARAMS: ClassVar[dict[str, str]] = {}
    REQUIRED: ClassVar[frozenset[str]] = frozenset()
    # False for validators that judge the collection as a whole
    requires_documents: ClassVar[bool] = True

    @abstractmethod
    def validate(self, context: ValidateContext) -> CheckResult:
        """
        Evaluate the assertion.

        Args:
            context: Manifests, render error and polarity for this assertion

        Returns:
            Tuple of (passed, diagnostic lines)
        """
        pass

    @classmethod
    def from_params(cls, params: dict[str, Any] | None) -> Validator:
        """Build the validator from the parameters declared in a test file."""
        params = params or {}
        return cls(**{cls.PARAMS[key]: value for key, value in params.items() if key in cls.PARAMS})

    def validate_each(
        self,
        context: ValidateContext,
        check: Callable[[Manifest], CheckResult],
    ) -> CheckResult:
        """
        Run check on every manifest in index order.

        Failures are folded monotonically; fail-fast stops after the
        first failing manifest.
        """
        success = True
        errors: list[str] = []
        for manifest in context.get_manifests():
            current, single_errors = check(manifest)
            errors.extend(single_errors)
            success = determine_success(success, current)
            if not success and context.fail_fast:
                break
        return success, errors


def values_at(manifest: Manifest, path: str) -> tuple[list[Any] | None, list[str]]:
    """Resolve path on a manifest. Returns (values, []) or (None, diagnostics)."""
    try:
        return resolve_path(manifest.tree, path), []
    except PathError as e:
        return None, error_info(str(e), manifest, path)


def required_values_at(manifest: Manifest, path: str) -> tuple[list[Any] | None, list[str]]:
    """Like values_at, but an unresolved path is an error too."""
    values, errors = values_at(manifest, path)
    if values is not None and not values:
        return None, error_info(f"unknown path {path}", manifest, path)
    return values, errors
