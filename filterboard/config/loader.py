from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from filterboard.config.model import (
    DEFAULT_API_KEY,
    DEFAULT_CHART_URL_TEMPLATE,
    DEFAULT_FETCH_TIMEOUT,
    ChartSlot,
    ControlConfig,
    DashboardConfig,
)
from filterboard.core.controls import ControlKind
from filterboard.core.exceptions import ConfigError
from filterboard.core.filter_engine import DEFAULT_NOTICE_DURATION_MS

logger = logging.getLogger(__name__)


def load_dashboard_config(root: Path | str) -> DashboardConfig:
    """
    Load configuration from a config directory.

    Expected structure:

        root/
            global.json
            charts/            (optional, local chart definitions)
                <chart_id>.json

    global.json keys:

    - data_path: CSV dataset, relative paths are resolved against 'root' (required)
    - charts: list of {"id", "container"} chart slots, in display order
    - controls: list of {"column", "kind"}; kind is one of multi_select, quantile_dropdown, range_slider
    - ui_title, api_key, chart_url_template, notice_duration_ms, fetch_timeout: optional

    :param root: directory containing 'global.json'
    :return: a validated DashboardConfig
    :raises ConfigError: if global.json is missing, not JSON, or inconsistent
    """
    root = Path(root)
    logger.info("Loading dashboard config", extra={"config_root": str(root)})

    global_path = root / "global.json"
    if not global_path.is_file():
        raise ConfigError(f"File not found at {global_path}")

    try:
        with global_path.open() as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{global_path} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{global_path} must contain a JSON object")

    data_path_raw = raw.get("data_path")
    if not data_path_raw:
        raise ConfigError("global.json: 'data_path' is required")
    data_path = Path(data_path_raw)
    if not data_path.is_absolute():
        data_path = (root / data_path).resolve()

    config = DashboardConfig(
        config_root=root,
        data_path=data_path,
        ui_title=raw.get("ui_title", "Filterboard"),
        api_key=raw.get("api_key", DEFAULT_API_KEY),
        chart_url_template=raw.get("chart_url_template", DEFAULT_CHART_URL_TEMPLATE),
        notice_duration_ms=int(raw.get("notice_duration_ms", DEFAULT_NOTICE_DURATION_MS)),
        fetch_timeout=float(raw.get("fetch_timeout", DEFAULT_FETCH_TIMEOUT)),
        charts=_parse_charts(raw.get("charts", [])),
        controls=_parse_controls(raw.get("controls", [])),
        raw=raw,
    )

    if "{chart_id}" not in config.chart_url_template:
        raise ConfigError("global.json: 'chart_url_template' must contain '{chart_id}'")
    if config.notice_duration_ms <= 0:
        raise ConfigError("global.json: 'notice_duration_ms' must be positive")

    logger.info(
        "Dashboard config loaded",
        extra={
            "config_root": str(root),
            "data_path": str(config.data_path),
            "chart_ids": [c.chart_id for c in config.charts],
            "managed_columns": config.managed_columns,
        },
    )
    return config


def _parse_charts(raw_charts: List[Dict[str, Any]]) -> List[ChartSlot]:
    charts: List[ChartSlot] = []
    seen_ids: set[str] = set()
    seen_containers: set[str] = set()

    for idx, entry in enumerate(raw_charts):
        chart_id = str(entry.get("id", "")).strip()
        if not chart_id:
            raise ConfigError(f"global.json: charts[{idx}] has no 'id'")
        container = str(entry.get("container") or f"chart-{idx}")

        if chart_id in seen_ids:
            raise ConfigError(f"global.json: duplicate chart id '{chart_id}'")
        if container in seen_containers:
            raise ConfigError(f"global.json: duplicate chart container '{container}'")
        seen_ids.add(chart_id)
        seen_containers.add(container)

        charts.append(ChartSlot(chart_id=chart_id, container=container))
    return charts


def _parse_controls(raw_controls: List[Dict[str, Any]]) -> List[ControlConfig]:
    controls: List[ControlConfig] = []
    seen: set[str] = set()

    for idx, entry in enumerate(raw_controls):
        column = entry.get("column")
        if not column:
            raise ConfigError(f"global.json: controls[{idx}] has no 'column'")
        try:
            kind = ControlKind(entry.get("kind"))
        except ValueError:
            valid = [k.value for k in ControlKind]
            raise ConfigError(
                f"global.json: controls[{idx}] has unknown kind {entry.get('kind')!r}; expected one of {valid}"
            )
        if column in seen:
            raise ConfigError(f"global.json: column '{column}' has more than one control")
        seen.add(column)
        controls.append(ControlConfig(column=column, kind=kind))
    return controls
