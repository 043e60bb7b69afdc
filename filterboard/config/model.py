from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from filterboard.core.controls import ControlKind
from filterboard.core.filter_engine import DEFAULT_NOTICE_DURATION_MS

DEFAULT_API_KEY = "<INSERT YOUR API KEY HERE>"
DEFAULT_CHART_URL_TEMPLATE = "charts/{chart_id}.json"
DEFAULT_FETCH_TIMEOUT = 30.0


@dataclass(frozen=True)
class ChartSlot:
    """A chart to fetch (chart_id) and the container it mounts into."""
    chart_id: str
    container: str


@dataclass(frozen=True)
class ControlConfig:
    """A managed column and the kind of control that filters it."""
    column: str
    kind: ControlKind


@dataclass
class DashboardConfig:
    """
    Parsed global.json.
    """
    config_root: Path
    data_path: Path
    ui_title: str = "Filterboard"
    api_key: str = DEFAULT_API_KEY
    chart_url_template: str = DEFAULT_CHART_URL_TEMPLATE
    notice_duration_ms: int = DEFAULT_NOTICE_DURATION_MS
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    charts: List[ChartSlot] = field(default_factory=list)
    controls: List[ControlConfig] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def managed_columns(self) -> List[str]:
        return [c.column for c in self.controls]
