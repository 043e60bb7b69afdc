from __future__ import annotations

import logging
from pathlib import Path

import dash_bootstrap_components as dbc
from dash import Dash

from filterboard.charts.registry import ChartRegistry
from filterboard.config.loader import load_dashboard_config
from filterboard.config.model import DashboardConfig
from filterboard.core.controls import build_control
from filterboard.core.exceptions import DataLoadError
from filterboard.services.data_loader import LoadedData, load_all
from filterboard.ui.callbacks.callbacks_filters import register_filter_callbacks
from filterboard.ui.callbacks.callbacks_io import register_io_callbacks
from filterboard.ui.callbacks.callbacks_sliders import register_slider_callbacks
from filterboard.ui.config import AppConfig
from filterboard.ui.layout.build_layout import build_error_layout, build_layout

logger = logging.getLogger(__name__)


def build_app_context(config: DashboardConfig, loaded: LoadedData) -> AppConfig:
    """
    Wire the loaded data into charts and controls.

    Order matters: charts are built first from the full dataset, then one control
    model per configured column (in config order).
    """
    registry = ChartRegistry(api_key=config.api_key)
    for slot in config.charts:
        registry.register(slot.chart_id, slot.container)
    registry.build_charts(loaded.dataset, loaded.chart_configs)

    controls = {
        c.column: build_control(loaded.dataset, c.column, c.kind)
        for c in config.controls
    }

    ctx = AppConfig(
        dashboard_config=config,
        dataset=loaded.dataset,
        registry=registry,
        controls=controls,
    )
    ctx.validate()
    return ctx


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    # 1) Load Config
    config = load_dashboard_config(Path(config_root))

    assets_path = Path(__file__).parent / "assets"
    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(assets_path),
    )
    app.title = config.ui_title

    # 2) Fetch dataset + chart configs (all or nothing)
    try:
        loaded = load_all(config)
    except DataLoadError as e:
        logger.exception("Startup fetch failed; serving error page", extra={"source": e.source})
        app.layout = build_error_layout(config.ui_title, e)
        return app

    # 3) Charts, controls, layout
    ctx = build_app_context(config, loaded)
    app.layout = build_layout(ctx)

    # Register callbacks
    register_filter_callbacks(app, ctx)
    register_slider_callbacks(app, ctx)
    register_io_callbacks(app, ctx)

    return app
