from __future__ import annotations

__all__ = ["IDs", "control_id", "chart_graph_id"]


class IDs:
    class Store:
        FILTER_STATE = "filter-state"

    class Control:
        CONTROLS_CONTAINER = "controls"
        CHARTS_CONTAINER = "charts"

        # Notice + status
        NO_RESULTS_NOTICE = "data-note"
        STATUS_BAR = "status-bar"
        LOAD_ERROR = "load-error"

        # Downloads
        DOWNLOAD_DATA = "download-data"
        DOWNLOAD_DATA_BTN = "download-data-btn"

    class Pattern:
        # pattern-matching "type" strings, keyed by column (controls) or container (charts)
        MULTI_SELECT = "multi-select"
        QUANTILE_DROPDOWN = "quantile-dropdown"
        SLIDER_MIN = "slider-min"
        SLIDER_MAX = "slider-max"
        SLIDER_MIN_LABEL = "slider-min-label"
        SLIDER_MAX_LABEL = "slider-max-label"
        CHART = "chart"


def control_id(pattern: str, column: str) -> dict:
    return {"type": pattern, "column": column}


def chart_graph_id(container: str) -> dict:
    return {"type": IDs.Pattern.CHART, "container": container}
