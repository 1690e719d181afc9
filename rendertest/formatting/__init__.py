"""
Structured report output

Writes a finished run as JUnit, NUnit, XUnit or Sonar XML.

Usage:
    from rendertest.formatting import create_formatter

    create_formatter("JUnit").write(report, "results.xml")
"""

from .base import BaseFormatter
from .factory import FORMATTERS, create_formatter
from .junit import JUnitFormatter
from .nunit import NUnitFormatter
from .sonar import SonarFormatter
from .xunit import XUnitFormatter

__all__ = [
    "BaseFormatter",
    "FORMATTERS",
    "JUnitFormatter",
    "NUnitFormatter",
    "SonarFormatter",
    "XUnitFormatter",
    "create_formatter",
]
