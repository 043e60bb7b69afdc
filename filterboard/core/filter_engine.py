from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import pandas as pd
import plotly.graph_objs as go

from .dataset import Dataset
from .filter_state import FilterState

if TYPE_CHECKING:
    from filterboard.charts.registry import ChartRegistry

logger = logging.getLogger(__name__)

DEFAULT_NOTICE_DURATION_MS = 4000


@dataclass
class FilterOutcome:
    """
    Result of one filter pass.

    - rows: the surviving rows (empty list when nothing matched)
    - n_total: size of the full dataset
    - figures: re-rendered chart figures, or None when the charts were left alone
    - show_notice: True when the 'no results' notice should be raised
    """

    rows: List[Dict[str, Any]]
    n_total: int
    figures: Optional[List[go.Figure]] = None
    show_notice: bool = False

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows


def apply_filters(dataset: Dataset, state: FilterState) -> pd.DataFrame:
    """
    Rows of the dataset for which every predicate in 'state' holds.

    The full set is recomputed on each call (no incremental filtering), so the
    result depends only on the dataset and the predicates. Row order is kept.
    """
    frame = dataset.frame
    keep = pd.Series(True, index=frame.index)
    for _column, predicate in state:
        keep &= predicate.mask(frame).fillna(False).astype(bool)
    return frame.loc[keep]


def run_filters(
    dataset: Dataset,
    state: FilterState,
    registry: ChartRegistry,
    changed_column: Optional[str] = None,
) -> FilterOutcome:
    """
    Filter the dataset and push the result into every chart.

    An empty result skips the chart update entirely so each chart keeps its last
    non-empty view, and asks for the 'no results' notice instead.
    """
    filtered = apply_filters(dataset, state)
    rows = dataset.records(filtered)

    logger.info(
        "Filters applied",
        extra={
            "changed_column": changed_column,
            "active_predicates": [p.kind.value for p in state.active()],
            "n_rows": len(rows),
            "n_total": dataset.n_rows,
        },
    )

    if not rows:
        return FilterOutcome(rows=[], n_total=dataset.n_rows, figures=None, show_notice=True)

    figures = registry.update_charts(rows)
    return FilterOutcome(rows=rows, n_total=dataset.n_rows, figures=figures, show_notice=False)
