from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Tuple

import dash
from dash import MATCH, Input, Output, State

from filterboard.core.controls import MAX_HANDLE, MIN_HANDLE, RangeSliderControl, format_number
from filterboard.ui.ids import IDs

if TYPE_CHECKING:
    from filterboard.ui.config import AppConfig

logger = logging.getLogger(__name__)


def clamp_slider_drag(
    control: RangeSliderControl,
    handle: str,
    live: float,
    other: Optional[float],
) -> Tuple[int, str, bool]:
    """
    Live-drag handling for one handle of a dual slider.

    :param control: the slider model (bounds)
    :param handle: MIN_HANDLE or MAX_HANDLE, the handle being dragged
    :param live: the dragged handle's live position
    :param other: the other handle's current value
    :return: (corrected value, formatted label, whether a clamp happened)

    Only positions and labels are corrected here; no predicate is built. A corrected
    value never equals the live drag position, which is how the filter callback
    tells it apart from a release.
    """
    if handle == MIN_HANDLE:
        handles = control.with_handles(None, other)
        value, clamped = handles.drag_min(live)
    elif handle == MAX_HANDLE:
        handles = control.with_handles(other, None)
        value, clamped = handles.drag_max(live)
    else:
        raise ValueError(f"Unknown slider handle: {handle!r}")
    return value, format_number(value), clamped


def register_slider_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    def _slider(column: str) -> RangeSliderControl:
        control = ctx.controls.get(column)
        if not isinstance(control, RangeSliderControl):
            logger.error("Slider event for column without a range slider", extra={"column": column})
            raise dash.exceptions.PreventUpdate
        return control

    @app.callback(
        Output({"type": IDs.Pattern.SLIDER_MIN, "column": MATCH}, "value"),
        Output({"type": IDs.Pattern.SLIDER_MIN_LABEL, "column": MATCH}, "children"),
        Input({"type": IDs.Pattern.SLIDER_MIN, "column": MATCH}, "drag_value"),
        State({"type": IDs.Pattern.SLIDER_MAX, "column": MATCH}, "value"),
        prevent_initial_call=True,
    )
    def on_min_drag(live, max_value):
        if live is None:
            raise dash.exceptions.PreventUpdate
        control = _slider(dash.ctx.triggered_id["column"])
        value, label, clamped = clamp_slider_drag(control, MIN_HANDLE, live, max_value)
        return (value if clamped else dash.no_update), label

    @app.callback(
        Output({"type": IDs.Pattern.SLIDER_MAX, "column": MATCH}, "value"),
        Output({"type": IDs.Pattern.SLIDER_MAX_LABEL, "column": MATCH}, "children"),
        Input({"type": IDs.Pattern.SLIDER_MAX, "column": MATCH}, "drag_value"),
        State({"type": IDs.Pattern.SLIDER_MIN, "column": MATCH}, "value"),
        prevent_initial_call=True,
    )
    def on_max_drag(live, min_value):
        if live is None:
            raise dash.exceptions.PreventUpdate
        control = _slider(dash.ctx.triggered_id["column"])
        value, label, clamped = clamp_slider_drag(control, MAX_HANDLE, live, min_value)
        return (value if clamped else dash.no_update), label
