"""
Renderer factory.

Creates the rendering backend selected by name in the runner config.
"""

from __future__ import annotations

from .base import BaseRenderer
from .helm import HelmRenderer
from .template import TemplateRenderer

RENDERERS = {
    TemplateRenderer.name: TemplateRenderer,
    HelmRenderer.name: HelmRenderer,
}


def create_renderer(name: str) -> BaseRenderer:
    """
    Create a renderer instance by name.

    Args:
        name: "builtin" or "helm"

    Returns:
        The renderer instance

    Raises:
        ValueError: If the renderer name is unknown

    Example:
        renderer = create_renderer(config.renderer)
        result = renderer.render(chart, request)
    """
    try:
        renderer_cls = RENDERERS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported renderer: {name} (valid: {', '.join(sorted(RENDERERS))})"
        ) from None
    return renderer_cls()
