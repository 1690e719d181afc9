"""
Helpers shared by the validators.

Path evaluation, typed extraction, structural equality and the
diagnostic line format live here so every assertion kind reports
failures the same way.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

import yaml
from jsonpath_ng import parse as parse_jsonpath
from jsonpath_ng.exceptions import JsonPathParserError

from ..compare import deep_equal
from ..rendering import Manifest

MISSING = object()


class PathError(ValueError):
    """A document path could not be parsed."""


def resolve_path(tree: Any, path: str) -> list[Any]:
    """
    Evaluate a JSONPath expression on a document.

    Args:
        tree: The document to search
        path: JSONPath expression ("spec.replicas", "$.spec.containers[0].image")

    Returns:
        The matched values, empty when the path does not resolve

    Raises:
        PathError: If the expression cannot be parsed
    """
    expression = _compile_path(path)
    try:
        return [match.value for match in expression.find(tree)]
    except Exception as e:
        raise PathError(f"failed to evaluate path '{path}': {type(e).__name__}: {e}") from e


@lru_cache(maxsize=256)
def _compile_path(path: str):
    try:
        return parse_jsonpath(path)
    except JsonPathParserError as e:
        raise PathError(f"invalid path '{path}': {e}") from e
    except Exception as e:
        raise PathError(f"failed to parse path '{path}': {type(e).__name__}: {e}") from e


def compile_pattern(pattern: str) -> tuple[re.Pattern | None, list[str]]:
    """Compile a regular expression. Returns (pattern, []) or (None, diagnostics)."""
    try:
        return re.compile(pattern), []
    except re.error as e:
        return None, error_info(f"invalid regular expression '{pattern}': {e}")


def extract_string(value: Any, where: str) -> tuple[str | None, list[str]]:
    """
    Read a value that has to be a string.

    None passes through (it never matches); any other non-string
    value is reported instead of being coerced.

    Returns:
        Tuple of (string or None, diagnostics). Diagnostics are empty on success.
    """
    if value is None or isinstance(value, str):
        return value, []
    return None, [f"expected a string at {where}, got {type(value).__name__}"]


def is_subset(container: Any, content: Any) -> bool:
    """Check that every key of content is in container with an equal value (mappings recurse)."""
    if isinstance(container, dict) and isinstance(content, dict):
        return all(
            key in container and is_subset(container[key], value)
            for key, value in content.items()
        )
    return deep_equal(content, container)


def is_empty(value: Any) -> bool:
    """Null, "", [], {}, 0 and false count as empty."""
    if value is None or isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (str, list, dict)):
        return len(value) == 0
    return False


def determine_success(total: bool, current: bool) -> bool:
    """Fold one document's result into the running verdict; a failure is never undone."""
    return total and current


def format_value(value: Any) -> list[str]:
    """Format a value as display lines (YAML for collections)."""
    if value is None:
        return ["null"]
    if isinstance(value, str):
        return value.splitlines() or [""]
    if isinstance(value, bool):
        return ["true" if value else "false"]
    if isinstance(value, (list, dict)):
        return yaml.safe_dump(value, default_flow_style=False, sort_keys=False).rstrip("\n").splitlines()
    return [str(value)]


def fail_info(
    manifest: Manifest | None,
    *,
    negative: bool,
    verb: str,
    expected: Any = MISSING,
    actual: Any = MISSING,
    path: str | None = None,
) -> list[str]:
    """
    Build the diagnostic lines for a failed comparison.

    With an expected value:
        Expected to equal:          (negative: Expected NOT to equal:)
            <expected>
        Actual:                     (omitted when negative)
            <actual>

    Without one:
        Expected to be null, got:
            <actual>
    """
    lines = _location(manifest)
    if path:
        lines.append(f"Path:\t{path}")

    not_part = "NOT " if negative else ""
    if expected is MISSING:
        if actual is MISSING:
            lines.append(f"Expected {not_part}{verb}")
        else:
            lines.append(f"Expected {not_part}{verb}, got:")
            lines.extend(_indent(format_value(actual)))
        return lines

    lines.append(f"Expected {not_part}{verb}:")
    lines.extend(_indent(format_value(expected)))
    if actual is not MISSING and not negative:
        lines.append("Actual:")
        lines.extend(_indent(format_value(actual)))
    return lines


def error_info(message: str | list[str], manifest: Manifest | None = None, path: str | None = None) -> list[str]:
    """Build diagnostic lines for a problem that is not a comparison failure."""
    lines = _location(manifest)
    if path:
        lines.append(f"Path:\t{path}")
    lines.append("Error:")
    messages = [message] if isinstance(message, str) else message
    for item in messages:
        lines.extend(_indent(item.splitlines() or [""]))
    return lines


def _location(manifest: Manifest | None) -> list[str]:
    if manifest is None:
        return []
    return [f"Template:\t{manifest.source}", f"DocumentIndex:\t{manifest.index}"]


def _indent(lines: list[str]) -> list[str]:
    return [f"\t{line}" for line in lines]
