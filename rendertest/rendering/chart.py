"""
Chart loader.

Reads Chart.yaml and values.yaml from a chart directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .models import Chart, ChartError

logger = logging.getLogger(__name__)


def load_chart(path: str | Path) -> Chart:
    """
    Load a chart directory.

    Args:
        path: Directory containing Chart.yaml

    Returns:
        Chart with metadata and default values

    Raises:
        ChartError: If Chart.yaml is missing or either file is not valid YAML
    """
    path = Path(path)
    chart_file = path / "Chart.yaml"
    if not chart_file.is_file():
        raise ChartError(f"{path} is not a chart: Chart.yaml not found")

    metadata = _read_yaml(chart_file)
    if not isinstance(metadata, dict) or not metadata.get("name"):
        raise ChartError(f"{chart_file}: 'name' is required")

    values_file = path / "values.yaml"
    values = _read_yaml(values_file) if values_file.is_file() else {}
    if values is None:
        values = {}
    if not isinstance(values, dict):
        raise ChartError(f"{values_file} must contain a mapping")

    chart = Chart(
        path=path,
        name=str(metadata["name"]),
        version=str(metadata.get("version", "0.1.0")),
        app_version=str(metadata["appVersion"]) if metadata.get("appVersion") is not None else None,
        values=values,
    )
    logger.debug(f"Loaded chart {chart.name} {chart.version} from {path}")
    return chart


def _read_yaml(path: Path):
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise ChartError(f"cannot read {path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise ChartError(f"invalid YAML in {path}: {e}") from e
