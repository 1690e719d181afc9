"""
Suite loader for test-suite files.

This module provides the public API for loading and validating
suite files from disk or YAML strings.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from .models import SuiteSpec
from .parser import SchemaParser
from .validation import SchemaValidator, ValidationResult


def load_suites(path: str | Path, strict: bool = False) -> tuple[list[SuiteSpec], ValidationResult]:
    """
    Load and validate every suite in a YAML file.

    A file may hold several suites as separate YAML documents.

    Args:
        path: Path to the suite file
        strict: Treat unknown fields as errors

    Returns:
        Tuple of (suites, ValidationResult)
        If validation fails, the list is empty.

    Example:
        suites, result = load_suites("tests/deployment_test.yaml")
        if not result.is_valid:
            print(result)
            sys.exit(1)
        # Use suites...
    """
    path = Path(path)

    # Check file exists
    if not path.exists():
        result = ValidationResult()
        result.add_error(
            str(path),
            "File not found",
            suggestion="Check the file path is correct"
        )
        return [], result

    try:
        text = path.read_text()
    except OSError as e:
        result = ValidationResult()
        result.add_error(str(path), f"Cannot read file: {e.strerror or e}")
        return [], result

    return validate_suite_yaml(text, strict=strict, file_path=path)


def validate_suite_yaml(
    yaml_string: str,
    strict: bool = False,
    file_path: str | Path = "suite.yaml",
) -> tuple[list[SuiteSpec], ValidationResult]:
    """
    Validate suites from a YAML string (useful for testing).

    Args:
        yaml_string: YAML content as a string
        strict: Treat unknown fields as errors
        file_path: Where the content came from; values paths resolve against it

    Returns:
        Tuple of (suites, ValidationResult)
    """
    result = ValidationResult()
    try:
        documents = [doc for doc in yaml.safe_load_all(yaml_string) if doc is not None]
    except yaml.YAMLError as e:
        result.add_error(
            str(file_path),
            f"Invalid YAML syntax: {e}",
            suggestion="Check YAML formatting (indentation, colons, etc.)"
        )
        return [], result

    if not documents:
        result.add_error(str(file_path), "File contains no suite")
        return [], result

    for i, data in enumerate(documents):
        prefix = f"documents[{i}]." if len(documents) > 1 else ""
        if not isinstance(data, dict):
            result.add_error(
                prefix.rstrip(".") or str(file_path),
                "Suite must be a YAML object (not a list or scalar)",
                value=type(data).__name__
            )
            continue
        result.extend(SchemaValidator(data, strict=strict).validate(), prefix)

    if not result.is_valid:
        return [], result

    return [SchemaParser(data, file_path).parse() for data in documents], result
