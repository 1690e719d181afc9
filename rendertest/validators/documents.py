"""
Document validators: isKind, isAPIVersion, hasDocuments, containsDocument.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from ..rendering import Manifest
from .base import CheckResult, Validator
from .common import deep_equal, fail_info
from .context import ValidateContext


@dataclass(frozen=True)
class IsKindValidator(Validator):
    """Assert that every document has the given kind."""
    of: str = ""

    PARAMS: ClassVar[dict[str, str]] = {"of": "of"}
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"of"})

    def validate(self, context: ValidateContext) -> CheckResult:
        def check(manifest: Manifest) -> CheckResult:
            if deep_equal(self.of, manifest.kind) == context.negative:
                return False, fail_info(
                    manifest,
                    negative=context.negative,
                    verb="to be kind",
                    expected=self.of,
                    actual=manifest.kind,
                )
            return True, []

        return self.validate_each(context, check)


@dataclass(frozen=True)
class IsAPIVersionValidator(Validator):
    """Assert that every document has the given apiVersion."""
    of: str = ""

    PARAMS: ClassVar[dict[str, str]] = {"of": "of"}
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"of"})

    def validate(self, context: ValidateContext) -> CheckResult:
        def check(manifest: Manifest) -> CheckResult:
            if deep_equal(self.of, manifest.api_version) == context.negative:
                return False, fail_info(
                    manifest,
                    negative=context.negative,
                    verb="to be apiVersion",
                    expected=self.of,
                    actual=manifest.api_version,
                )
            return True, []

        return self.validate_each(context, check)


@dataclass(frozen=True)
class HasDocumentsValidator(Validator):
    """Assert the number of selected documents."""
    count: int = 0

    PARAMS: ClassVar[dict[str, str]] = {"count": "count"}
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"count"})
    requires_documents: ClassVar[bool] = False

    def validate(self, context: ValidateContext) -> CheckResult:
        actual = len(context.get_manifests())
        if (actual == self.count) == context.negative:
            return False, fail_info(
                None,
                negative=context.negative,
                verb="documents count to be",
                expected=self.count,
                actual=actual,
            )
        return True, []


@dataclass(frozen=True)
class ContainsDocumentValidator(Validator):
    """Assert that some selected document has the given identity."""
    kind: str = ""
    api_version: str = ""
    name: str | None = None
    namespace: str | None = None

    PARAMS: ClassVar[dict[str, str]] = {
        "kind": "kind",
        "apiVersion": "api_version",
        "name": "name",
        "namespace": "namespace",
    }
    REQUIRED: ClassVar[frozenset[str]] = frozenset({"kind", "apiVersion"})
    requires_documents: ClassVar[bool] = False

    def validate(self, context: ValidateContext) -> CheckResult:
        found = any(self._matches(manifest) for manifest in context.get_manifests())
        if found == context.negative:
            return False, fail_info(
                None,
                negative=context.negative,
                verb="to contain document",
                expected=self._identity(),
                actual="no matching document",
            )
        return True, []

    def _matches(self, manifest: Manifest) -> bool:
        if manifest.kind != self.kind or manifest.api_version != self.api_version:
            return False
        if self.name is not None and manifest.name != self.name:
            return False
        if self.namespace is not None and manifest.namespace != self.namespace:
            return False
        return True

    def _identity(self) -> dict[str, str]:
        identity = {"kind": self.kind, "apiVersion": self.api_version}
        if self.name is not None:
            identity["name"] = self.name
        if self.namespace is not None:
            identity["namespace"] = self.namespace
        return identity
