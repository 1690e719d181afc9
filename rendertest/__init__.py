"""
rendertest - Unit Testing for Chart Templates

This package renders chart templates with test-specific values and checks
the rendered manifests against declarative YAML assertions.

Subpackages:
    - schema_parsing: Parse and validate suite YAML files
    - rendering: Chart loading, values merging and template rendering
    - validators: One validator per assertion kind
    - snapshot: Recorded snapshots for matchSnapshot
    - runner: Suite execution
    - reporting: Result tree and console output
    - formatting: JUnit, NUnit, XUnit and Sonar reports

Usage:
    from rendertest import RunnerConfig, TestRunner, create_formatter

    report = TestRunner(RunnerConfig()).run(["charts/web"])
    create_formatter("JUnit").write(report, "results.xml")
    print(report.passed)
"""

__version__ = "0.1.0"
__author__ = "Ahaan Chaudhuri"

# Re-export configuration
from .config import RunnerConfig

# Re-export schema_parsing for convenience
from .schema_parsing import (
    # Loader functions
    load_suites,
    validate_suite_yaml,
    # Models
    AssertionSpec,
    JobSpec,
    SuiteSpec,
    # Validation
    ValidationResult,
    ValidationError,
    SchemaValidator,
)

# Re-export rendering for convenience
from .rendering import (
    BaseRenderer,
    Chart,
    ChartError,
    HelmRenderer,
    Manifest,
    RenderError,
    RendererUnavailable,
    RenderRequest,
    RenderResult,
    TemplateRenderer,
    create_renderer,
    load_chart,
)

# Re-export validators for convenience
from .validators import (
    VALIDATORS,
    FailedTemplateValidator,
    ValidateContext,
    Validator,
    build_validator,
)

# Re-export snapshot for convenience
from .snapshot import SnapshotCache, SnapshotComparer, SnapshotStats

# Re-export runner and reporting for convenience
from .runner import TestRunner, discover_test_files
from .reporting import (
    AssertionRecord,
    JobRecord,
    Printer,
    ResultStatus,
    RunReport,
    RunStatus,
    SuiteRecord,
)
from .formatting import create_formatter

__all__ = [
    # Package info
    "__version__",
    "__author__",
    # Configuration
    "RunnerConfig",
    # Schema parsing
    "load_suites",
    "validate_suite_yaml",
    "AssertionSpec",
    "JobSpec",
    "SuiteSpec",
    "ValidationResult",
    "ValidationError",
    "SchemaValidator",
    # Rendering
    "BaseRenderer",
    "Chart",
    "ChartError",
    "HelmRenderer",
    "Manifest",
    "RenderError",
    "RendererUnavailable",
    "RenderRequest",
    "RenderResult",
    "TemplateRenderer",
    "create_renderer",
    "load_chart",
    # Validators
    "VALIDATORS",
    "FailedTemplateValidator",
    "ValidateContext",
    "Validator",
    "build_validator",
    # Snapshot
    "SnapshotCache",
    "SnapshotComparer",
    "SnapshotStats",
    # Runner
    "TestRunner",
    "discover_test_files",
    # Reporting
    "AssertionRecord",
    "JobRecord",
    "Printer",
    "ResultStatus",
    "RunReport",
    "RunStatus",
    "SuiteRecord",
    # Formatting
    "create_formatter",
]
