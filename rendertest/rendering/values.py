"""
Values handling: deep merge, --set style keys, and values files.
"""

from __future__ import annotations

import copy
import re
from pathlib import Path
from typing import Any, Iterable

import yaml

from .models import ChartError

# "name" or "name[2]"
_SEGMENT_PATTERN = re.compile(r"^([^\[\]]+)((?:\[\d+\])*)$")


def merge_values(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two values trees into a new one.

    Mappings merge recursively; any other value in override replaces base.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_values(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def parse_set_values(set_values: dict[str, Any]) -> dict[str, Any]:
    """
    Expand dotted keys into a nested values tree.

    Example:
        parse_set_values({"image.tag": "v2", "ports[0].name": "http"})
        # {"image": {"tag": "v2"}, "ports": [{"name": "http"}]}
    """
    result: dict[str, Any] = {}
    for dotted, value in set_values.items():
        _assign(result, _split_key(str(dotted)), value)
    return result


def load_values_files(paths: Iterable[str | Path]) -> dict[str, Any]:
    """Read and merge values files in order; later files win."""
    merged: dict[str, Any] = {}
    for raw_path in paths:
        path = Path(raw_path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ChartError(f"cannot read values file {path}: {e.strerror or e}") from e
        except yaml.YAMLError as e:
            raise ChartError(f"invalid YAML in values file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ChartError(f"values file {path} must contain a mapping, got {type(data).__name__}")
        merged = merge_values(merged, data)
    return merged


def _split_key(dotted: str) -> list[str | int]:
    segments: list[str | int] = []
    for part in dotted.split("."):
        match = _SEGMENT_PATTERN.match(part)
        if not match:
            raise ValueError(f"invalid set key: {dotted!r}")
        segments.append(match.group(1))
        segments.extend(int(i) for i in re.findall(r"\[(\d+)\]", match.group(2)))
    return segments


def _assign(target: Any, segments: list[str | int], value: Any) -> None:
    head, rest = segments[0], segments[1:]
    child_default: Any = [] if rest and isinstance(rest[0], int) else {}

    if isinstance(head, int):
        while len(target) <= head:
            target.append(None)
        if not rest:
            target[head] = value
            return
        if not isinstance(target[head], (dict, list)):
            target[head] = child_default
        _assign(target[head], rest, value)
        return

    if not rest:
        target[head] = value
        return
    if not isinstance(target.get(head), (dict, list)):
        target[head] = child_default
    _assign(target[head], rest, value)
