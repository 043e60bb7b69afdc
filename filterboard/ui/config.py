from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from filterboard.charts.registry import ChartRegistry
from filterboard.config.model import DashboardConfig
from filterboard.core.controls import Control
from filterboard.core.dataset import Dataset
from filterboard.core.filter_state import FilterState


@dataclass
class AppConfig:
    dashboard_config: DashboardConfig
    dataset: Optional[Dataset] = None
    registry: Optional[ChartRegistry] = None
    controls: Dict[str, Control] = field(default_factory=dict)

    def initial_state(self) -> FilterState:
        return FilterState.seed(self.controls.keys())

    def validate(self) -> None:
        """Ensure all required pieces are attached before the app starts."""
        if self.dataset is None:
            raise RuntimeError("AppConfig.dataset must be loaded.")
        if self.registry is None:
            raise RuntimeError("AppConfig.registry must be initialized.")
