"""
Base renderer interface.

This module defines the abstract base class every rendering backend
follows, plus the helpers they share for selecting templates and
splitting rendered text into manifests.
"""

from __future__ import annotations

import fnmatch
from abc import ABC, abstractmethod

import yaml

from .models import Chart, Manifest, RenderError, RenderRequest, RenderResult

STRUCTURED_SUFFIXES = (".yaml", ".yml", ".tpl")


class BaseRenderer(ABC):
    """
    Abstract base class for chart renderers.

    A renderer turns a chart plus values into manifests. Template
    failures are returned as RenderResult.error, never raised.
    """

    name: str = ""

    @abstractmethod
    def render(self, chart: Chart, request: RenderRequest) -> RenderResult:
        """
        Render the chart.

        Args:
            chart: The chart to render
            request: Template selection, merged values and release info

        Returns:
            RenderResult with manifests in template order, or the render error
        """
        pass


def template_matches(source: str, name: str) -> bool:
    """
    Check whether a template reference selects a manifest source.

    "deployment.yaml", "templates/deployment.yaml" and globs such as
    "templates/*.yaml" all select "templates/deployment.yaml".
    """
    if source == name or source == f"templates/{name}":
        return True
    return fnmatch.fnmatchcase(source, name) or fnmatch.fnmatchcase(source, f"templates/{name}")


def split_documents(chart_name: str, source: str, text: str) -> list[Manifest]:
    """
    Split rendered template text into manifests.

    YAML templates yield one manifest per non-empty document; any other
    file yields one raw manifest.

    Raises:
        RenderError: If the rendered YAML cannot be parsed
    """
    if not source.endswith(STRUCTURED_SUFFIXES):
        return [Manifest(index=0, source=source, raw=text)] if text.strip() else []

    try:
        documents = list(yaml.safe_load_all(text))
    except yaml.YAMLError as e:
        raise RenderError(f"YAML parse error on {chart_name}/{source}: {e}") from e

    manifests: list[Manifest] = []
    for document in documents:
        if document is None:
            continue
        if isinstance(document, dict):
            manifests.append(Manifest(index=len(manifests), source=source, tree=document))
        else:
            raw = document if isinstance(document, str) else yaml.safe_dump(document)
            manifests.append(Manifest(index=len(manifests), source=source, tree=document, raw=raw))
    return manifests
