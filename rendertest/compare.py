"""
Structural comparison of YAML trees.

Used by the validators for expected-vs-actual checks and by the
snapshot store, which must not report key-order differences.
"""

from __future__ import annotations

import difflib
from typing import Any

import yaml


def deep_equal(expected: Any, actual: Any) -> bool:
    """
    Structural equality over YAML trees.

    Mappings compare by key set and value, sequences in order.
    Booleans never equal numbers; ints and floats compare numerically.
    """
    if isinstance(expected, bool) or isinstance(actual, bool):
        return isinstance(expected, bool) and isinstance(actual, bool) and expected == actual

    if isinstance(expected, (int, float)) and isinstance(actual, (int, float)):
        return expected == actual

    if isinstance(expected, dict) and isinstance(actual, dict):
        if expected.keys() != actual.keys():
            return False
        return all(deep_equal(expected[key], actual[key]) for key in expected)

    if isinstance(expected, (list, tuple)) and isinstance(actual, (list, tuple)):
        if len(expected) != len(actual):
            return False
        return all(deep_equal(e, a) for e, a in zip(expected, actual))

    if type(expected) is not type(actual):
        return False
    return expected == actual


def diff_trees(expected: Any, actual: Any, expected_label: str = "expected", actual_label: str = "actual") -> list[str]:
    """Unified diff of the canonical (key-sorted) YAML dumps of two trees."""
    return [
        line.rstrip("\n")
        for line in difflib.unified_diff(
            _dump(expected),
            _dump(actual),
            fromfile=expected_label,
            tofile=actual_label,
            lineterm="",
        )
    ]


def _dump(tree: Any) -> list[str]:
    if isinstance(tree, str):
        return tree.splitlines()
    return yaml.safe_dump(tree, sort_keys=True, default_flow_style=False).splitlines()
