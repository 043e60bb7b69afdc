from __future__ import annotations

import json
from pathlib import Path

import pytest

CSV_TEXT = (
    "Country,Region,GDP\n"
    "France,EU,100\n"
    "Germany,EU,200\n"
    "Japan,AS,300\n"
)

SCATTER_CONFIG = {
    "template": "scatter",
    "bindings": {"x": "GDP", "y": "GDP", "color": "Region", "hover_name": "Country"},
    "settings": {"title": "GDP"},
}

BAR_CONFIG = {
    "template": "bar",
    "bindings": {"x": "Country", "y": "GDP"},
    "settings": {"title": "GDP by country"},
}


def write_config_root(tmp_path: Path, chart_files: dict | None = None, **overrides) -> Path:
    """
    Build a config dir:

        root/
            global.json
            charts/<id>.json
        data.csv
    """
    root = tmp_path / "config"
    (root / "charts").mkdir(parents=True)
    (tmp_path / "data.csv").write_text(CSV_TEXT)

    chart_files = {"c1": SCATTER_CONFIG, "c2": BAR_CONFIG} if chart_files is None else chart_files
    for chart_id, cfg in chart_files.items():
        (root / "charts" / f"{chart_id}.json").write_text(json.dumps(cfg))

    global_json = {
        "ui_title": "Test Board",
        "api_key": "test-key",
        "data_path": "../data.csv",
        "chart_url_template": "charts/{chart_id}.json",
        "charts": [{"id": cid, "container": f"chart-{i}"} for i, cid in enumerate(chart_files)],
        "controls": [
            {"column": "Region", "kind": "multi_select"},
            {"column": "GDP", "kind": "range_slider"},
        ],
    }
    global_json.update(overrides)
    (root / "global.json").write_text(json.dumps(global_json))
    return root


@pytest.fixture
def config_root(tmp_path: Path) -> Path:
    return write_config_root(tmp_path)


@pytest.fixture
def make_config_root(tmp_path: Path):
    def _make(chart_files: dict | None = None, **overrides) -> Path:
        return write_config_root(tmp_path, chart_files=chart_files, **overrides)

    return _make
