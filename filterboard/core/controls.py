"""
UI-agnostic models behind the filter controls.

Each control is bound to one managed column and turns a widget value into a
predicate. The Dash layer only renders these models and forwards widget values;
all bucketing and clamping rules live here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .dataset import Dataset
from .exceptions import ConfigError
from .predicates import MISSING_VALUE, BucketChoice, MembershipSet, Predicate, Range, Unconditional

QUANTILE_THRESHOLDS: Tuple[float, ...] = (0.0, 0.33, 0.66, 1.0)
ALL_OPTION = "All"
BLANK_LABEL = "(blank)"
MIN_HANDLE = "min"
MAX_HANDLE = "max"


class ControlKind(str, Enum):
    MULTI_SELECT = "multi_select"
    QUANTILE_DROPDOWN = "quantile_dropdown"
    RANGE_SLIDER = "range_slider"


# ---------------------------------------------------------------------------
# Multi-select
# ---------------------------------------------------------------------------
@dataclass
class MultiSelectControl:
    column: str
    options: List[Any] = field(default_factory=list)
    kind = ControlKind.MULTI_SELECT

    @classmethod
    def build(cls, dataset: Dataset, column: str) -> MultiSelectControl:
        return cls(column=column, options=dataset.distinct_values(column))

    @property
    def initial_value(self) -> List[Any]:
        # every option starts selected
        return list(self.options)

    @property
    def dropdown_options(self) -> List[dict]:
        return [
            {"label": BLANK_LABEL if value == MISSING_VALUE else str(value), "value": value}
            for value in self.options
        ]

    def predicate_for(self, selected: Optional[Iterable[Any]]) -> Predicate:
        return MembershipSet(self.column, tuple(selected or ()))


# ---------------------------------------------------------------------------
# Quantile dropdown
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class QuantileBucket:
    label: str
    predicate: BucketChoice


def quantile_buckets(
    column: str,
    values: Sequence[float],
    thresholds: Sequence[float] = QUANTILE_THRESHOLDS,
) -> List[QuantileBucket]:
    """
    Partition a numeric column at quantile cut points.

    Cut points use linear interpolation between the sorted values (numpy's default
    'linear' method). Every bucket is half-open ``[lower, upper)`` except the last,
    which closes its upper end so the column maximum lands in exactly one bucket.

    :param column: the column the bucket predicates test
    :param values: numeric column values, any order
    :param thresholds: increasing quantile levels, first 0 and last 1
    :return: len(thresholds) - 1 buckets labelled 'floor(lower) - floor(upper)'

    Raises:
        ValueError: if values is empty
    """
    arr = np.sort(np.asarray(values, dtype=float))
    arr = arr[~np.isnan(arr)]
    if arr.size == 0:
        raise ValueError(f"Cannot compute quantiles for '{column}': no numeric values")

    cuts = np.quantile(arr, thresholds)
    last = len(thresholds) - 2

    buckets: List[QuantileBucket] = []
    for i in range(len(thresholds) - 1):
        lower, upper = float(cuts[i]), float(cuts[i + 1])
        label = f"{math.floor(lower)} - {math.floor(upper)}"
        buckets.append(
            QuantileBucket(
                label=label,
                predicate=BucketChoice(column, label, lower, upper, inclusive_upper=(i == last)),
            )
        )
    return buckets


@dataclass
class QuantileDropdownControl:
    """
    Dropdown with an 'All' option followed by the quantile buckets.

    Option values are positions (0 = All, 1.. = buckets) since two buckets can share
    a label when the column has few distinct values.
    """

    column: str
    buckets: List[QuantileBucket] = field(default_factory=list)
    kind = ControlKind.QUANTILE_DROPDOWN

    @classmethod
    def build(cls, dataset: Dataset, column: str) -> QuantileDropdownControl:
        values = dataset.numeric_values(column)
        if values.empty:
            raise ConfigError(f"Quantile dropdown column '{column}' has no numeric values")
        return cls(column=column, buckets=quantile_buckets(column, values.tolist()))

    @property
    def options(self) -> List[dict]:
        labels = [ALL_OPTION] + [b.label for b in self.buckets]
        return [{"label": label, "value": i} for i, label in enumerate(labels)]

    @property
    def initial_value(self) -> int:
        return 0

    def predicate_for(self, choice: Optional[int]) -> Predicate:
        if not choice:
            return Unconditional(self.column)
        index = int(choice) - 1
        if not 0 <= index < len(self.buckets):
            raise ValueError(f"No bucket #{choice} for column '{self.column}'")
        return self.buckets[index].predicate


# ---------------------------------------------------------------------------
# Dual-handle range slider
# ---------------------------------------------------------------------------
def slider_bounds(values: Iterable[float]) -> Tuple[int, int]:
    """[floor(min), ceil(max)], widened by one when the column is constant."""
    arr = np.asarray(list(values), dtype=float)
    arr = arr[~np.isnan(arr)]
    if arr.size == 0:
        raise ValueError("Cannot compute slider bounds: no numeric values")
    lower, upper = math.floor(arr.min()), math.ceil(arr.max())
    if upper <= lower:
        upper = lower + 1
    return lower, upper


@dataclass
class RangeSliderControl:
    """
    Two handles over a shared [lower_bound, upper_bound].

    Invariant: lower_bound <= min_value <= max_value - 1 and max_value <= upper_bound.
    Dragging only corrects handle positions; a predicate is only built on commit.
    """

    column: str
    lower_bound: int
    upper_bound: int
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    kind = ControlKind.RANGE_SLIDER

    def __post_init__(self):
        if self.upper_bound - self.lower_bound < 1:
            raise ValueError(
                f"Slider for '{self.column}' needs upper_bound > lower_bound, "
                f"got [{self.lower_bound}, {self.upper_bound}]"
            )
        self.min_value = self._within(self.lower_bound if self.min_value is None else self.min_value)
        self.max_value = self._within(self.upper_bound if self.max_value is None else self.max_value)
        if self.min_value >= self.max_value:
            self.min_value = self.lower_bound
            self.max_value = self.upper_bound

    @classmethod
    def build(cls, dataset: Dataset, column: str) -> RangeSliderControl:
        values = dataset.numeric_values(column)
        if values.empty:
            raise ConfigError(f"Range slider column '{column}' has no numeric values")
        lower, upper = slider_bounds(values.tolist())
        return cls(column=column, lower_bound=lower, upper_bound=upper)

    def with_handles(self, min_value: Optional[float], max_value: Optional[float]) -> RangeSliderControl:
        """Copy of this control with the handles at the given (possibly crossed) positions."""
        handles = RangeSliderControl(self.column, self.lower_bound, self.upper_bound)
        if min_value is not None:
            handles.min_value = handles._within(min_value)
        if max_value is not None:
            handles.max_value = handles._within(max_value)
        return handles

    def _within(self, value: float) -> int:
        return int(min(max(round(value), self.lower_bound), self.upper_bound))

    def drag_min(self, live: float) -> Tuple[int, bool]:
        """
        Move the min handle to a live (uncommitted) position.

        :return: (value the handle should show, whether it was clamped)
        """
        value = self._within(live)
        if value >= self.max_value:
            self.min_value = max(self.max_value - 1, self.lower_bound)
            # max can only sit on lower_bound if the handles arrived crossed
            self.max_value = max(self.max_value, self.min_value + 1)
            return self.min_value, True
        self.min_value = value
        return value, False

    def drag_max(self, live: float) -> Tuple[int, bool]:
        value = self._within(live)
        if value <= self.min_value:
            self.max_value = min(self.min_value + 1, self.upper_bound)
            self.min_value = min(self.min_value, self.max_value - 1)
            return self.max_value, True
        self.max_value = value
        return value, False

    def predicate(self, moved: str = MIN_HANDLE) -> Range:
        """
        Inclusive range for the committed handles.

        :param moved: MIN_HANDLE or MAX_HANDLE, the handle whose release committed.
            Crossed handles are resolved by clamping that handle, as a live drag would.
        """
        if self.min_value >= self.max_value:
            if moved == MAX_HANDLE:
                self.drag_max(self.max_value)
            elif moved == MIN_HANDLE:
                self.drag_min(self.min_value)
            else:
                raise ValueError(f"Unknown slider handle: {moved!r}")
        return Range(self.column, float(self.min_value), float(self.max_value))


Control = MultiSelectControl | QuantileDropdownControl | RangeSliderControl

_BUILDERS = {
    ControlKind.MULTI_SELECT: MultiSelectControl.build,
    ControlKind.QUANTILE_DROPDOWN: QuantileDropdownControl.build,
    ControlKind.RANGE_SLIDER: RangeSliderControl.build,
}


def build_control(dataset: Dataset, column: str, kind: ControlKind) -> Control:
    return _BUILDERS[ControlKind(kind)](dataset, column)


def format_number(value: float) -> str:
    if float(value).is_integer():
        return format(int(value), ",")
    return format(value, ",")
