from __future__ import annotations

from typing import Iterable, List

import dash_bootstrap_components as dbc
from dash import dcc, html

from filterboard.core.controls import (
    Control,
    MultiSelectControl,
    QuantileDropdownControl,
    RangeSliderControl,
    format_number,
)
from filterboard.ui.ids import IDs, control_id


def _control_block(column: str, body: List) -> dbc.Card:
    """Shared block: header with the column name, body with the control's inputs."""
    return dbc.Card(
        [
            dbc.CardHeader(html.H3(column, className="control-header h6 mb-0")),
            dbc.CardBody(body, className="control-body"),
        ],
        className="control mb-3",
    )


def build_multi_select(control: MultiSelectControl) -> dbc.Card:
    dropdown = dcc.Dropdown(
        id=control_id(IDs.Pattern.MULTI_SELECT, control.column),
        options=control.dropdown_options,
        value=control.initial_value,
        multi=True,
        placeholder="Nothing selected",
    )
    return _control_block(control.column, [dropdown])


def build_quantile_dropdown(control: QuantileDropdownControl) -> dbc.Card:
    dropdown = dcc.Dropdown(
        id=control_id(IDs.Pattern.QUANTILE_DROPDOWN, control.column),
        options=control.options,
        value=control.initial_value,
        clearable=False,
    )
    return _control_block(control.column, [dropdown])


def _slider_row(label: str, slider_pattern: str, label_pattern: str, control: RangeSliderControl, value: int):
    return html.Div(
        [
            html.Label(label, className="form-label mb-0"),
            dcc.Slider(
                id=control_id(slider_pattern, control.column),
                min=control.lower_bound,
                max=control.upper_bound,
                step=1,
                value=value,
                marks=None,
                # value commits on release; drag_value streams while dragging
                updatemode="mouseup",
            ),
            html.Div(
                format_number(value),
                id=control_id(label_pattern, control.column),
                className="slider-value small text-muted",
            ),
        ],
        className="slider-wrap",
    )


def build_range_slider(control: RangeSliderControl) -> dbc.Card:
    return _control_block(
        control.column,
        [
            _slider_row("Min", IDs.Pattern.SLIDER_MIN, IDs.Pattern.SLIDER_MIN_LABEL, control, control.min_value),
            _slider_row("Max", IDs.Pattern.SLIDER_MAX, IDs.Pattern.SLIDER_MAX_LABEL, control, control.max_value),
        ],
    )


def build_control_block(control: Control) -> dbc.Card:
    if isinstance(control, MultiSelectControl):
        return build_multi_select(control)
    if isinstance(control, QuantileDropdownControl):
        return build_quantile_dropdown(control)
    if isinstance(control, RangeSliderControl):
        return build_range_slider(control)
    raise TypeError(f"Unsupported control type: {type(control).__name__}")


def build_controls_panel(controls: Iterable[Control]) -> html.Div:
    return html.Div(
        [build_control_block(control) for control in controls],
        id=IDs.Control.CONTROLS_CONTAINER,
        className="fb-controls",
    )
