"""
Rendering collaborators

This package turns a chart plus values into rendered manifests.

Backends:
    - builtin: placeholder renderer for plain value substitution
    - helm: delegates to `helm template`

Usage:
    from rendertest.rendering import create_renderer, load_chart, RenderRequest

    chart = load_chart("charts/web")
    renderer = create_renderer("builtin")
    result = renderer.render(chart, RenderRequest(values=chart.values))
    for manifest in result.manifests:
        print(manifest.source, manifest.index, manifest.kind)
"""

# Models
from .models import (
    Chart,
    ChartError,
    Manifest,
    ReleaseInfo,
    RenderError,
    RendererUnavailable,
    RenderRequest,
    RenderResult,
)

# Backends
from .base import BaseRenderer, split_documents, template_matches
from .chart import load_chart
from .factory import create_renderer
from .helm import HelmRenderer
from .template import TemplateRenderer

# Values
from .values import load_values_files, merge_values, parse_set_values

__all__ = [
    # Models
    "Chart",
    "ChartError",
    "Manifest",
    "ReleaseInfo",
    "RenderError",
    "RendererUnavailable",
    "RenderRequest",
    "RenderResult",
    # Backends
    "BaseRenderer",
    "HelmRenderer",
    "TemplateRenderer",
    "create_renderer",
    "load_chart",
    "split_documents",
    "template_matches",
    # Values
    "load_values_files",
    "merge_values",
    "parse_set_values",
]
