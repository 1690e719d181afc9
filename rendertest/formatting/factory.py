"""
Formatter factory.

Creates the report formatter selected with --output-type.
"""

from __future__ import annotations

from .base import BaseFormatter
from .junit import JUnitFormatter
from .nunit import NUnitFormatter
from .sonar import SonarFormatter
from .xunit import XUnitFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    cls.name.lower(): cls
    for cls in (JUnitFormatter, NUnitFormatter, XUnitFormatter, SonarFormatter)
}


def create_formatter(name: str) -> BaseFormatter:
    """
    Create a formatter by name (case-insensitive).

    Raises:
        ValueError: If the output type is unknown

    Example:
        formatter = create_formatter("JUnit")
        formatter.write(report, "results.xml")
    """
    try:
        formatter_cls = FORMATTERS[name.lower()]
    except KeyError:
        valid = ", ".join(cls.name for cls in FORMATTERS.values())
        raise ValueError(f"Unsupported output type: {name} (valid: {valid})") from None
    return formatter_cls()
