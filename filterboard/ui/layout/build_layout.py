from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc, html

from filterboard.ui.ids import IDs
from filterboard.ui.layout.build_chart_panel import build_chart_panel
from filterboard.ui.layout.build_controls_panel import build_controls_panel
from filterboard.ui.layout.build_navbar import build_navbar

if TYPE_CHECKING:
    from filterboard.core.exceptions import DataLoadError
    from filterboard.ui.config import AppConfig


def status_text(n_rows: int, n_total: int) -> str:
    return f"Showing {n_rows:,} of {n_total:,} rows"


def build_layout(ctx: AppConfig) -> dbc.Container:
    ctx.validate()
    n_total = ctx.dataset.n_rows

    notice = dbc.Alert(
        "No data matches the current filters. The charts still show the last matching rows.",
        id=IDs.Control.NO_RESULTS_NOTICE,
        color="warning",
        is_open=False,
        dismissable=True,
        # fire-once auto dismiss
        duration=ctx.dashboard_config.notice_duration_ms,
        className="my-2",
    )

    return dbc.Container(
        fluid=True,
        className="fb-root",
        children=[
            build_navbar(ctx.dashboard_config.ui_title),
            notice,
            # Reset on reload, together with the controls
            dcc.Store(id=IDs.Store.FILTER_STATE, data=ctx.initial_state().to_dict(), storage_type="memory"),
            dbc.Row(
                [
                    dbc.Col(build_controls_panel(ctx.controls.values()), md=3, className="mt-3"),
                    dbc.Col(
                        build_chart_panel(ctx.registry, status=status_text(n_total, n_total)),
                        md=9,
                        className="mt-3",
                    ),
                ],
                className="gx-3",
            ),
        ],
    )


def build_error_layout(title: str, error: DataLoadError) -> dbc.Container:
    """Shown instead of the dashboard when the startup fetch fails."""
    return dbc.Container(
        fluid=True,
        className="fb-root",
        children=[
            build_navbar(title),
            dbc.Alert(
                [
                    html.H4("The dashboard could not be loaded", className="alert-heading"),
                    html.P(["Failed source: ", html.Code(error.source)]),
                    html.P(str(error), className="mb-0 small"),
                ],
                id=IDs.Control.LOAD_ERROR,
                color="danger",
                className="mt-3",
            ),
        ],
    )
