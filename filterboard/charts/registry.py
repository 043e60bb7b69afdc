from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

import plotly.graph_objs as go

from filterboard.core.dataset import Dataset
from .visual import ChartVisual

logger = logging.getLogger(__name__)


@dataclass
class ChartEntry:
    """
    One chart slot: where it mounts, the live visual and the options it was last rendered with.

    The visual is created once during build_charts and then only updated in place.
    """

    chart_id: str
    container: str
    visual: Optional[ChartVisual] = None
    options: Optional[Dict[str, Any]] = None

    @property
    def figure(self) -> Optional[go.Figure]:
        return self.visual.figure if self.visual is not None else None


class ChartRegistry:
    """
    Static, ordered list of chart slots

    Purpose:
    - Holds the {chart_id, container} pairs taken from config, in display order
    - Builds every visual from its fetched configuration plus the full dataset
    - Pushes filtered rows into all visuals on each successful filter

    Design Notes:
    - Enforces that each chart_id and each container is unique across the registry
    - Build order is registry order; a failing chart aborts the remaining builds
    - Shared by every session; updates render from a fresh options bag and swap it in under a lock
    """

    def __init__(self, api_key: str):
        self.api_key = api_key
        self._entries: List[ChartEntry] = []
        self._lock = threading.Lock()

    def register(self, chart_id: str, container: str) -> ChartEntry:
        """
        Add a chart slot

        Raises:
            ValueError: if the chart_id or container is already registered
        """
        for entry in self._entries:
            if entry.chart_id == chart_id:
                raise ValueError(f"Chart '{chart_id}' already registered")
            if entry.container == container:
                raise ValueError(f"Container '{container}' already used by chart '{entry.chart_id}'")

        entry = ChartEntry(chart_id=chart_id, container=container)
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> List[ChartEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def build_charts(self, dataset: Dataset, chart_configs: Sequence[Mapping[str, Any]]) -> None:
        """
        Construct one visual per slot from the fetched configuration at the same position

        :param dataset: the full dataset, used as each chart's initial data
        :param chart_configs: fetched configs, one per registered slot, in registry order

        Raises:
            ValueError: if the number of configs doesn't match the number of slots
            ChartConfigError: if a configuration can't be rendered (remaining charts are not built)
        """
        if len(chart_configs) != len(self._entries):
            raise ValueError(
                f"Got {len(chart_configs)} chart configs for {len(self._entries)} chart slots"
            )

        rows = dataset.records()
        for entry, base in zip(self._entries, chart_configs):
            options = dict(base)
            options.update(
                api_key=self.api_key,
                container=entry.container,
                data={"data": rows},
            )
            entry.options = options
            entry.visual = ChartVisual.construct(options)
            logger.info(
                "Chart built",
                extra={"chart_id": entry.chart_id, "container": entry.container, "n_rows": len(rows)},
            )

    def update_charts(self, rows: List[Dict[str, Any]]) -> List[go.Figure]:
        """
        Replace the data of every chart and re-render it with its full options bag

        :param rows: the filtered rows
        :return: the new figures, in registry order, rendered from these rows only
        """
        figures: List[go.Figure] = []
        for entry in self._entries:
            if entry.visual is None or entry.options is None:
                raise RuntimeError(f"Chart '{entry.chart_id}' was never built")
            # entry.options is swapped for a new bag, never edited in place
            options = dict(entry.options)
            options["data"] = {"data": rows}
            with self._lock:
                entry.options = options
                figures.append(entry.visual.update(options))
        return figures

    def figures(self) -> List[go.Figure]:
        return [entry.figure for entry in self._entries]
