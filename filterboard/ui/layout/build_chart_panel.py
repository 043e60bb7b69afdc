from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from filterboard.charts.registry import ChartEntry, ChartRegistry
from filterboard.ui.ids import IDs, chart_graph_id


def _chart_card(entry: ChartEntry) -> dbc.Card:
    return dbc.Card(
        dbc.CardBody(
            dcc.Graph(
                id=chart_graph_id(entry.container),
                figure=entry.figure,
                style={"height": "460px"},
                config={"responsive": True},
            ),
        ),
        id=entry.container,
        className="fb-chart mb-3",
    )


def build_chart_panel(registry: ChartRegistry, status: str = "") -> html.Div:
    return html.Div(
        [
            html.Div(
                [
                    html.Div(status, id=IDs.Control.STATUS_BAR, className="text-muted small"),
                    dbc.Button(
                        "Download rows (CSV)",
                        id=IDs.Control.DOWNLOAD_DATA_BTN,
                        color="secondary",
                        size="sm",
                        className="ms-auto",
                    ),
                    dcc.Download(id=IDs.Control.DOWNLOAD_DATA),
                ],
                className="d-flex align-items-center mb-2",
            ),
            *[_chart_card(entry) for entry in registry.entries],
        ],
        id=IDs.Control.CHARTS_CONTAINER,
    )
