"""
Chart layer: the renderer adapter and the registry of chart slots.
"""

from .registry import ChartEntry, ChartRegistry
from .visual import ChartVisual

__all__ = ["ChartEntry", "ChartRegistry", "ChartVisual"]
