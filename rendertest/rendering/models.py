"""
Data models for rendered chart output.

This module defines the immutable values passed from the renderer
to the validators: rendered manifests, render errors, and the
request describing what to render.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


class RenderError(Exception):
    """A template failed to render. Carried as data, never raised past the renderer."""


class ChartError(Exception):
    """A chart or values file could not be read."""


class RendererUnavailable(RuntimeError):
    """The rendering backend cannot be used in this environment."""


@dataclass(frozen=True)
class Manifest:
    """
    One rendered document.

    Attributes:
        index: Position of the document inside its source template (0-based)
        source: Template path relative to the chart, e.g. "templates/service.yaml"
        tree: Parsed YAML document, None for plain-text templates
        raw: Raw text for documents that are not a mapping
    """
    index: int
    source: str
    tree: Any = None
    raw: str | None = None

    @property
    def kind(self) -> Any:
        return self.tree.get("kind") if isinstance(self.tree, dict) else None

    @property
    def api_version(self) -> Any:
        return self.tree.get("apiVersion") if isinstance(self.tree, dict) else None

    @property
    def name(self) -> Any:
        if not isinstance(self.tree, dict):
            return None
        metadata = self.tree.get("metadata")
        return metadata.get("name") if isinstance(metadata, dict) else None

    @property
    def namespace(self) -> Any:
        if not isinstance(self.tree, dict):
            return None
        metadata = self.tree.get("metadata")
        return metadata.get("namespace") if isinstance(metadata, dict) else None


@dataclass(frozen=True)
class RenderResult:
    """Outcome of rendering a chart once: either manifests or an error."""
    manifests: tuple[Manifest, ...] = ()
    error: RenderError | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class ReleaseInfo:
    """Release metadata exposed to templates as .Release."""
    name: str = "RELEASE-NAME"
    namespace: str = "NAMESPACE"
    revision: int = 1
    upgrade: bool = False


@dataclass
class Chart:
    """A chart directory with its metadata and default values."""
    path: Path
    name: str
    version: str = "0.1.0"
    app_version: str | None = None
    values: dict[str, Any] = field(default_factory=dict)

    @property
    def templates_dir(self) -> Path:
        return self.path / "templates"

    def subcharts(self) -> list[Chart]:
        """Load every chart unpacked under charts/."""
        from .chart import load_chart

        charts_dir = self.path / "charts"
        if not charts_dir.is_dir():
            return []
        return [
            load_chart(child)
            for child in sorted(charts_dir.iterdir())
            if (child / "Chart.yaml").is_file()
        ]


@dataclass(frozen=True)
class RenderRequest:
    """What to render: template selection, merged values, release info."""
    templates: tuple[str, ...] = ()
    values: dict[str, Any] = field(default_factory=dict)
    release: ReleaseInfo = field(default_factory=ReleaseInfo)
