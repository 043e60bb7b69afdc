from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, State, dcc, exceptions

from filterboard.core.filter_engine import apply_filters
from filterboard.core.filter_state import FilterState
from filterboard.ui.ids import IDs

if TYPE_CHECKING:
    from filterboard.ui.config import AppConfig

logger = logging.getLogger(__name__)


def download_filename(dataset_name: str) -> str:
    return f"{dataset_name.replace(' ', '_')}_filtered.csv"


def register_io_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Download the rows that pass the current filters
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.DOWNLOAD_DATA, "data"),
        Input(IDs.Control.DOWNLOAD_DATA_BTN, "n_clicks"),
        State(IDs.Store.FILTER_STATE, "data"),
        prevent_initial_call=True,
    )
    def download_filtered_rows(n_clicks, fs_data):
        if not n_clicks:
            raise exceptions.PreventUpdate

        state = FilterState.from_dict(fs_data) if fs_data else ctx.initial_state()
        rows = apply_filters(ctx.dataset, state)
        if rows.empty:
            raise exceptions.PreventUpdate

        logger.info("Filtered rows downloaded", extra={"n_rows": len(rows)})
        return dcc.send_data_frame(rows.to_csv, download_filename(ctx.dataset.name), index=False)
