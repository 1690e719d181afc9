"""
Shared pytest fixtures for rendertest tests.

This module provides:
- A small chart written to tmp_path (Deployment, Service, NOTES.txt)
- Helpers to write suite files into the chart's tests/ directory
- Manifest builders for validator tests

Usage:
    def test_something(chart_dir, write_suite):
        write_suite("deployment_test.yaml", SUITE_YAML)
        report = TestRunner(RunnerConfig()).run([chart_dir])
"""

from pathlib import Path
from textwrap import dedent
from typing import Any, Callable

import pytest

from rendertest.rendering import Manifest


CHART_YAML = """\
apiVersion: v2
name: web
version: 1.2.3
appVersion: "2.0"
"""

VALUES_YAML = """\
replicaCount: 1
image:
  repository: nginx
  tag: stable
service:
  port: 80
"""

DEPLOYMENT_YAML = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: {{ .Release.Name }}-web
  namespace: {{ .Release.Namespace }}
  labels:
    app: web
    chart: {{ .Chart.Name }}-{{ .Chart.Version }}
spec:
  replicas: {{ .Values.replicaCount }}
  template:
    spec:
      containers:
        - name: web
          image: {{ required "image.repository is required" .Values.image.repository }}:{{ .Values.image.tag }}
          ports:
            - containerPort: 8080
"""

SERVICE_YAML = """\
apiVersion: v1
kind: Service
metadata:
  name: {{ .Release.Name }}-web
spec:
  type: {{ .Values.service.type | default "ClusterIP" }}
  ports:
    - port: {{ .Values.service.port }}
---
apiVersion: v1
kind: ConfigMap
metadata:
  name: {{ .Release.Name }}-config
data:
  mode: {{ .Values.mode | default "prod" | quote }}
"""

NOTES_TXT = """\
Thanks for installing {{ .Chart.Name }}.
"""

HELPERS_TPL = """\
{{/* helpers are never rendered on their own */}}
"""


def write_chart(root: Path, name: str = "web") -> Path:
    """Write the test chart under root and return its directory."""
    chart = root / name
    templates = chart / "templates"
    templates.mkdir(parents=True)
    (chart / "Chart.yaml").write_text(CHART_YAML.replace("name: web", f"name: {name}"))
    (chart / "values.yaml").write_text(VALUES_YAML)
    (templates / "deployment.yaml").write_text(DEPLOYMENT_YAML)
    (templates / "service.yaml").write_text(SERVICE_YAML)
    (templates / "NOTES.txt").write_text(NOTES_TXT)
    (templates / "_helpers.tpl").write_text(HELPERS_TPL)
    (chart / "tests").mkdir()
    return chart


@pytest.fixture
def chart_dir(tmp_path: Path) -> Path:
    """A chart named 'web' with two templates and notes."""
    return write_chart(tmp_path)


@pytest.fixture
def write_suite(chart_dir: Path) -> Callable[[str, str], Path]:
    """Write a suite file into the chart's tests/ directory."""

    def _write(name: str, content: str) -> Path:
        path = chart_dir / "tests" / name
        path.write_text(dedent(content))
        return path

    return _write


def manifest(tree: Any = None, *, index: int = 0, source: str = "templates/deployment.yaml", raw: str | None = None) -> Manifest:
    return Manifest(index=index, source=source, tree=tree, raw=raw)


@pytest.fixture
def deployment() -> Manifest:
    """A rendered Deployment with one container."""
    return manifest({
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": "web", "labels": {"app": "web", "tier": "frontend"}},
        "spec": {
            "replicas": 2,
            "template": {
                "spec": {
                    "containers": [
                        {"name": "web", "image": "nginx:1.25", "ports": [{"containerPort": 8080}]},
                    ],
                },
            },
        },
    })


@pytest.fixture
def make_manifest() -> Callable[..., Manifest]:
    """Factory for ad-hoc manifests: make_manifest(tree, index=1, raw=...)."""
    return manifest
