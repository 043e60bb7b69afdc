from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping

import pandas as pd
import plotly.express as px
import plotly.graph_objs as go

from filterboard.core.exceptions import ChartConfigError

logger = logging.getLogger(__name__)

TEMPLATES: Dict[str, Callable[..., go.Figure]] = {
    "scatter": px.scatter,
    "bar": px.bar,
    "line": px.line,
    "histogram": px.histogram,
    "box": px.box,
}

BINDING_ROLES = ("x", "y", "color", "size", "hover_name", "facet_col", "text")


class ChartVisual:
    """
    Renderer adapter around a Plotly figure.

    Mirrors the construct/update contract of a hosted chart widget: both calls take
    the complete options bag

        {api_key, container, template, bindings, settings, data: {data: rows}}

    and re-render from scratch. There is no diffing between updates.
    """

    def __init__(self, options: Mapping[str, Any]):
        self.container = options.get("container")
        self.options: Dict[str, Any] = dict(options)
        self.figure: go.Figure = render_figure(self.options)

    @classmethod
    def construct(cls, options: Mapping[str, Any]) -> ChartVisual:
        return cls(options)

    def update(self, options: Mapping[str, Any]) -> go.Figure:
        self.options = dict(options)
        self.figure = render_figure(self.options)
        return self.figure


def _rows(options: Mapping[str, Any]) -> List[Dict[str, Any]]:
    data = options.get("data") or {}
    return list(data.get("data") or [])


def render_figure(options: Mapping[str, Any]) -> go.Figure:
    """
    Build the figure described by a chart options bag

    :param options: merged chart config + runtime options
    :return: the Plotly figure

    Raises:
        ChartConfigError: unknown template, or a binding names a column the rows don't have
    """
    template = options.get("template", "scatter")
    try:
        plot_fn = TEMPLATES[template]
    except KeyError:
        raise ChartConfigError(
            f"Chart '{options.get('container')}' uses unknown template '{template}'. "
            f"Available: {sorted(TEMPLATES)}"
        )

    frame = pd.DataFrame.from_records(_rows(options))
    bindings = {
        role: column
        for role, column in (options.get("bindings") or {}).items()
        if role in BINDING_ROLES and column
    }

    missing = [column for column in bindings.values() if column not in frame.columns]
    if missing and not frame.empty:
        raise ChartConfigError(
            f"Chart '{options.get('container')}' binds columns missing from the data: {missing}"
        )

    settings = options.get("settings") or {}
    express_kwargs = dict(settings.get("express") or {})

    if frame.empty:
        fig = go.Figure()
    else:
        fig = plot_fn(frame, **bindings, **express_kwargs)

    layout = {"title": settings.get("title"), "margin": dict(l=40, r=40, t=60, b=40)}
    layout.update(settings.get("layout") or {})
    fig.update_layout(**layout)
    return fig
