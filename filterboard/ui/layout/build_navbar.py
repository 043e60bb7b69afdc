from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import html


def build_navbar(title: str, subtitle: str = "Filter the rows behind every chart") -> dbc.Navbar:
    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                html.Div(
                    [
                        html.H2(title, className="mb-0"),
                        html.Small(subtitle, className="text-muted"),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),
            ],
        ),
        dark=False,
        className="shadow-sm fb-navbar",
    )
