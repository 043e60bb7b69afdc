"""
Core domain layer: dataset, predicates, filter state, filter engine
and the UI-agnostic control models
"""

from .dataset import Dataset
from .filter_state import FilterState
from .filter_engine import FilterOutcome, apply_filters, run_filters
from .controls import ControlKind, build_control

__all__ = [
    "Dataset",
    "FilterState",
    "FilterOutcome",
    "apply_filters",
    "run_filters",
    "ControlKind",
    "build_control",
]
