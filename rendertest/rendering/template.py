"""
Built-in template renderer.

Renders a chart's templates/ directory with a small placeholder
language modelled on the subset of Go templates most charts use for
plain value substitution:

    {{ .Values.image.tag }}
    {{ .Release.Name }}-web
    {{ .Values.port | default 8080 }}
    {{ required "image.repository is required" .Values.image.repository }}
    {{ fail "this chart cannot be installed" }}
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import yaml

from .base import BaseRenderer, split_documents, template_matches
from .models import Chart, Manifest, RenderError, RenderRequest, RenderResult

logger = logging.getLogger(__name__)

_ACTION_PATTERN = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
_TOKEN_PATTERN = re.compile(r'"(?:[^"\\]|\\.)*"|\||[^\s|]+')
_LEFT_TRIM = re.compile(r"\s*\{\{-\s")
_RIGHT_TRIM = re.compile(r"\s-\}\}\s*")


class TemplateRenderer(BaseRenderer):
    """
    Renderer for the built-in placeholder language.

    Example:
        renderer = TemplateRenderer()
        result = renderer.render(chart, RenderRequest(templates=("deployment.yaml",)))
        if result.failed:
            print(result.error)
    """

    name = "builtin"

    FUNCTIONS = {"fail", "required", "default", "quote", "upper", "lower"}

    def render(self, chart: Chart, request: RenderRequest) -> RenderResult:
        try:
            sources = self._select_templates(chart, request.templates)
            scope = self._build_scope(chart, request)
            manifests: list[Manifest] = []
            for source in sources:
                text = (chart.path / source).read_text()
                rendered = self._render_text(chart.name, source, text, scope)
                logger.debug(f"Rendered {source}:\n{rendered}")
                manifests.extend(split_documents(chart.name, source, rendered))
        except RenderError as e:
            logger.debug(f"Render failed: {e}")
            return RenderResult(error=e)
        return RenderResult(manifests=tuple(manifests))

    def _select_templates(self, chart: Chart, selection: tuple[str, ...]) -> list[str]:
        if not chart.templates_dir.is_dir():
            available: list[str] = []
        else:
            available = sorted(
                path.relative_to(chart.path).as_posix()
                for path in chart.templates_dir.rglob("*")
                if path.is_file() and not path.name.startswith("_")
            )
        if not selection:
            return available

        selected: list[str] = []
        for name in selection:
            matches = [source for source in available if template_matches(source, name)]
            if not matches:
                raise RenderError(f"could not find template {name} in chart")
            selected.extend(source for source in matches if source not in selected)
        return sorted(selected)

    def _build_scope(self, chart: Chart, request: RenderRequest) -> dict[str, Any]:
        return {
            "Values": request.values,
            "Release": {
                "Name": request.release.name,
                "Namespace": request.release.namespace,
                "Revision": request.release.revision,
                "IsUpgrade": request.release.upgrade,
                "IsInstall": not request.release.upgrade,
            },
            "Chart": {
                "Name": chart.name,
                "Version": chart.version,
                "AppVersion": chart.app_version,
            },
        }

    def _render_text(self, chart_name: str, source: str, text: str, scope: dict[str, Any]) -> str:
        text = _LEFT_TRIM.sub("{{ ", text)
        text = _RIGHT_TRIM.sub(" }}", text)

        def replace(match: re.Match) -> str:
            expression = match.group(1).strip()
            value = self._evaluate(chart_name, source, expression, scope)
            return _to_text(value)

        return _ACTION_PATTERN.sub(replace, text)

    def _evaluate(self, chart_name: str, source: str, expression: str, scope: dict[str, Any]) -> Any:
        if expression.startswith("/*") and expression.endswith("*/"):
            return None

        tokens = _TOKEN_PATTERN.findall(expression)
        commands: list[list[str]] = [[]]
        for token in tokens:
            if token == "|":
                commands.append([])
            else:
                commands[-1].append(token)
        if any(not command for command in commands):
            raise self._unsupported(source, expression)

        value = self._run_command(chart_name, source, expression, commands[0], scope)
        for command in commands[1:]:
            value = self._run_command(chart_name, source, expression, command, scope, piped=(value,))
        return value

    def _run_command(
        self,
        chart_name: str,
        source: str,
        expression: str,
        command: list[str],
        scope: dict[str, Any],
        piped: tuple[Any, ...] = (),
    ) -> Any:
        head, rest = command[0], command[1:]
        if head not in self.FUNCTIONS:
            if rest or piped:
                raise self._unsupported(source, expression)
            return self._operand(source, expression, head, scope)

        args = [self._operand(source, expression, token, scope) for token in rest] + list(piped)
        location = f"{chart_name}/{source}"

        if head == "fail" and len(args) == 1:
            raise RenderError(f"execution error at ({location}): {_to_text(args[0])}")
        if head == "required" and len(args) == 2:
            message, value = args
            if value is None or value == "":
                raise RenderError(f"execution error at ({location}): {_to_text(message)}")
            return value
        if head == "default" and len(args) == 2:
            fallback, value = args
            return fallback if _is_empty(value) else value
        if head == "quote" and len(args) == 1:
            return "" if args[0] is None else json.dumps(_to_text(args[0]))
        if head == "upper" and len(args) == 1:
            return _to_text(args[0]).upper()
        if head == "lower" and len(args) == 1:
            return _to_text(args[0]).lower()
        raise self._unsupported(source, expression)

    def _operand(self, source: str, expression: str, token: str, scope: dict[str, Any]) -> Any:
        if token.startswith('"'):
            return json.loads(token)
        if token.startswith("."):
            return _lookup(scope, token)
        try:
            literal = yaml.safe_load(token)
        except yaml.YAMLError:
            raise self._unsupported(source, expression)
        if isinstance(literal, (int, float, bool)) or literal is None:
            return literal
        raise self._unsupported(source, expression)

    def _unsupported(self, source: str, expression: str) -> RenderError:
        return RenderError(f'template: {source}: unsupported expression "{expression}"')


def _lookup(scope: dict[str, Any], reference: str) -> Any:
    """Resolve a dotted reference like .Values.image.tag; missing keys give None."""
    current: Any = scope
    for part in reference.strip(".").split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


def _is_empty(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    return value in ("", [], {})


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return yaml.safe_dump(value, default_flow_style=True).strip()
    return str(value)
