"""
Renderer backed by the helm binary.

Runs `helm template` in a subprocess and splits its output on the
`# Source:` headers helm writes before every document.
"""

from __future__ import annotations

import logging
import re
import subprocess
import tempfile
from pathlib import Path

import yaml

from .base import BaseRenderer, split_documents
from .models import Chart, Manifest, RenderError, RendererUnavailable, RenderRequest, RenderResult

logger = logging.getLogger(__name__)

_SEPARATOR_PATTERN = re.compile(r"^---\s*$", re.MULTILINE)
_SOURCE_PATTERN = re.compile(r"^# Source: (.+)$", re.MULTILINE)


class HelmRenderer(BaseRenderer):
    """
    Renderer that delegates to `helm template`.

    The helm executable must be on PATH (or given explicitly).
    """

    name = "helm"

    def __init__(self, executable: str = "helm", timeout_s: float = 120.0):
        self.executable = executable
        self.timeout_s = timeout_s

    def render(self, chart: Chart, request: RenderRequest) -> RenderResult:
        with tempfile.TemporaryDirectory(prefix="rendertest-") as tmp:
            values_file = Path(tmp) / "values.yaml"
            values_file.write_text(yaml.safe_dump(request.values))

            cmd = self._build_command(chart, request, values_file)
            logger.debug(f"Running: {' '.join(cmd)}")
            try:
                completed = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout_s,
                )
            except FileNotFoundError:
                raise RendererUnavailable(f"Command not found: {self.executable}")
            except PermissionError:
                raise RendererUnavailable(f"Permission denied: {self.executable}")
            except subprocess.TimeoutExpired:
                return RenderResult(error=RenderError(f"helm template timed out after {self.timeout_s}s"))

        if completed.returncode != 0:
            message = completed.stderr.strip()
            if message.startswith("Error: "):
                message = message[len("Error: "):]
            return RenderResult(error=RenderError(message))

        try:
            manifests = self._parse_output(chart, completed.stdout)
        except RenderError as e:
            return RenderResult(error=e)
        return RenderResult(manifests=tuple(manifests))

    def _build_command(self, chart: Chart, request: RenderRequest, values_file: Path) -> list[str]:
        cmd = [
            self.executable,
            "template",
            request.release.name,
            str(chart.path),
            "--namespace",
            request.release.namespace,
            "--values",
            str(values_file),
        ]
        if request.release.upgrade:
            cmd.append("--is-upgrade")
        for name in request.templates:
            if not name.startswith("templates/"):
                name = f"templates/{name}"
            cmd.extend(["--show-only", name])
        return cmd

    def _parse_output(self, chart: Chart, output: str) -> list[Manifest]:
        chunks: dict[str, list[str]] = {}
        for chunk in _SEPARATOR_PATTERN.split(output):
            match = _SOURCE_PATTERN.search(chunk)
            if not match:
                continue
            source = match.group(1).strip()
            prefix = f"{chart.name}/"
            if source.startswith(prefix):
                source = source[len(prefix):]
            chunks.setdefault(source, []).append(chunk)

        manifests: list[Manifest] = []
        for source, parts in chunks.items():
            manifests.extend(split_documents(chart.name, source, "\n---\n".join(parts)))
        return manifests
