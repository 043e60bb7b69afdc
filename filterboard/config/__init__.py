"""
Config package for filterboard.

Responsible for:
- config models (DashboardConfig, ChartSlot, ControlConfig)
- loading and validating global.json
"""

from .model import ChartSlot, ControlConfig, DashboardConfig
from .loader import load_dashboard_config

__all__ = ["ChartSlot", "ControlConfig", "DashboardConfig", "load_dashboard_config"]
