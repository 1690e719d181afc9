"""
Schema Parsing for Test-Suite Files

This package provides tools for parsing, validating, and working with
test-suite files.

Usage:
    from rendertest.schema_parsing import load_suites, validate_suite_yaml

    # Load from file
    suites, result = load_suites("tests/deployment_test.yaml")
    if not result.is_valid:
        print(result)

    # Or validate from string
    suites, result = validate_suite_yaml(yaml_string)
"""

# Public API
from .loader import load_suites, validate_suite_yaml

# Models (for type hints and isinstance checks)
from .models import AssertionSpec, JobSpec, SuiteSpec

# Validation (for custom validation if needed)
from .validation import SchemaValidator, ValidationError, ValidationResult

__all__ = [
    # Loader functions
    "load_suites",
    "validate_suite_yaml",
    # Models
    "AssertionSpec",
    "JobSpec",
    "SuiteSpec",
    # Validation
    "ValidationResult",
    "ValidationError",
    "SchemaValidator",
]
