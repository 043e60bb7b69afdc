from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

import dash
from dash import ALL, Input, Output, State

from filterboard.core.controls import (
    MAX_HANDLE,
    MIN_HANDLE,
    MultiSelectControl,
    QuantileDropdownControl,
    RangeSliderControl,
)
from filterboard.core.exceptions import UnknownColumnError
from filterboard.core.filter_engine import run_filters
from filterboard.core.filter_state import FilterState
from filterboard.core.predicates import Predicate
from filterboard.ui.ids import IDs
from filterboard.ui.layout.build_layout import status_text

if TYPE_CHECKING:
    from filterboard.ui.config import AppConfig

logger = logging.getLogger(__name__)

CONTROL_PATTERNS = (
    IDs.Pattern.MULTI_SELECT,
    IDs.Pattern.QUANTILE_DROPDOWN,
    IDs.Pattern.SLIDER_MIN,
    IDs.Pattern.SLIDER_MAX,
)
SLIDER_PATTERNS = (IDs.Pattern.SLIDER_MIN, IDs.Pattern.SLIDER_MAX)


@dataclass
class ControlChangeResult:
    figures: Any
    state: Any
    show_notice: Any
    status: Any

    def as_tuple(self):
        return self.figures, self.state, self.show_notice, self.status


def predicate_for_control(
    ctx: AppConfig,
    pattern: str,
    column: str,
    values: Dict[str, Dict[str, Any]],
) -> Predicate:
    """
    Turn the current widget value(s) of one control into its predicate

    :param ctx: app context holding the control models
    :param pattern: the pattern type of the widget that fired
    :param column: the managed column of that widget
    :param values: pattern -> {column: current value} for every control widget

    Raises:
        UnknownColumnError: if no control is registered for the column
    """
    try:
        control = ctx.controls[column]
    except KeyError:
        raise UnknownColumnError(column, where="registered controls")

    if isinstance(control, MultiSelectControl):
        return control.predicate_for(values[IDs.Pattern.MULTI_SELECT].get(column))

    if isinstance(control, QuantileDropdownControl):
        return control.predicate_for(values[IDs.Pattern.QUANTILE_DROPDOWN].get(column))

    if isinstance(control, RangeSliderControl):
        handles = control.with_handles(
            values[IDs.Pattern.SLIDER_MIN].get(column),
            values[IDs.Pattern.SLIDER_MAX].get(column),
        )
        moved = MAX_HANDLE if pattern == IDs.Pattern.SLIDER_MAX else MIN_HANDLE
        return handles.predicate(moved)

    raise TypeError(f"Unsupported control for '{column}' ({pattern})")


def is_user_commit(
    pattern: str,
    column: str,
    values: Mapping[str, Mapping[str, Any]],
    drag_values: Mapping[str, Mapping[str, Any]],
) -> bool:
    """
    Whether a slider 'value' change came from the user releasing the handle.

    A release commits the handle's last drag position. A live-drag clamp writes a
    corrected 'value' that never equals the (crossed) drag position, and must not
    re-filter. Widgets other than sliders always commit.
    """
    if pattern not in SLIDER_PATTERNS:
        return True
    dragged = drag_values.get(pattern, {}).get(column)
    return dragged is None or dragged == values[pattern].get(column)


def handle_control_change(
    ctx: AppConfig,
    state_data: Optional[Dict[str, Any]],
    column: str,
    predicate: Predicate,
) -> ControlChangeResult:
    """
    Replace one column's predicate, re-filter and decide what the page should show.

    - non-empty result: new figures for every chart, an open notice runs out its delay
    - empty result: charts untouched (no_update), notice opens
    - unknown column: nothing changes
    """
    state = FilterState.from_dict(state_data) if state_data else ctx.initial_state()

    try:
        state.set_predicate(column, predicate)
    except UnknownColumnError:
        logger.exception("Control change for unmanaged column", extra={"column": column})
        return ControlChangeResult(dash.no_update, dash.no_update, dash.no_update, dash.no_update)

    outcome = run_filters(ctx.dataset, state, ctx.registry, changed_column=column)

    if outcome.show_notice:
        # status keeps describing what the charts still show
        return ControlChangeResult(
            figures=dash.no_update,
            state=state.to_dict(),
            show_notice=True,
            status=dash.no_update,
        )

    return ControlChangeResult(
        figures=outcome.figures,
        state=state.to_dict(),
        show_notice=dash.no_update,
        status=status_text(outcome.n_rows, outcome.n_total),
    )


def handle_control_event(
    ctx: AppConfig,
    triggered: Any,
    values: Dict[str, Dict[str, Any]],
    drag_values: Mapping[str, Mapping[str, Any]],
    state_data: Optional[Dict[str, Any]],
) -> ControlChangeResult:
    """
    Everything the filter callback does, minus Dash's request context.

    Raises:
        PreventUpdate: no control fired, the value is a slider clamp correction,
            or the widget value can't be turned into a predicate
    """
    if not isinstance(triggered, Mapping):
        raise dash.exceptions.PreventUpdate

    pattern = triggered["type"]
    column = triggered["column"]

    if not is_user_commit(pattern, column, values, drag_values):
        logger.debug("Skipping slider clamp correction", extra={"column": column, "control": pattern})
        raise dash.exceptions.PreventUpdate

    try:
        predicate = predicate_for_control(ctx, pattern, column, values)
    except (UnknownColumnError, ValueError, TypeError):
        logger.exception(
            "Could not build predicate from control",
            extra={"column": column, "control": pattern},
        )
        raise dash.exceptions.PreventUpdate

    return handle_control_change(ctx, state_data, column, predicate)


def _values_by_column(
    groups: List[List[Dict[str, Any]]],
    patterns: Sequence[str] = CONTROL_PATTERNS,
) -> Dict[str, Dict[str, Any]]:
    """Map one dash.ctx inputs/states group per pattern to pattern -> {column: value}."""
    values: Dict[str, Dict[str, Any]] = {pattern: {} for pattern in patterns}
    for pattern, group in zip(patterns, groups):
        for item in group:
            values[pattern][item["id"]["column"]] = item.get("value")
    return values


def register_filter_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Any committed control change -> filter state -> charts
    # ---------------------------------------------------------
    @app.callback(
        Output({"type": IDs.Pattern.CHART, "container": ALL}, "figure"),
        Output(IDs.Store.FILTER_STATE, "data"),
        Output(IDs.Control.NO_RESULTS_NOTICE, "is_open"),
        Output(IDs.Control.STATUS_BAR, "children"),
        Input({"type": IDs.Pattern.MULTI_SELECT, "column": ALL}, "value"),
        Input({"type": IDs.Pattern.QUANTILE_DROPDOWN, "column": ALL}, "value"),
        Input({"type": IDs.Pattern.SLIDER_MIN, "column": ALL}, "value"),
        Input({"type": IDs.Pattern.SLIDER_MAX, "column": ALL}, "value"),
        State({"type": IDs.Pattern.SLIDER_MIN, "column": ALL}, "drag_value"),
        State({"type": IDs.Pattern.SLIDER_MAX, "column": ALL}, "drag_value"),
        State(IDs.Store.FILTER_STATE, "data"),
        prevent_initial_call=True,
    )
    def on_control_change(_multi, _dropdowns, _mins, _maxes, _min_drags, _max_drags, state_data):
        values = _values_by_column(dash.ctx.inputs_list)
        drag_values = _values_by_column(dash.ctx.states_list[:2], SLIDER_PATTERNS)
        return handle_control_event(
            ctx, dash.ctx.triggered_id, values, drag_values, state_data
        ).as_tuple()
