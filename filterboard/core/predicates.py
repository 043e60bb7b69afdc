from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from numbers import Number
from typing import Any, Dict, Mapping, Tuple

import pandas as pd


# missing cells take part in membership tests as this value
MISSING_VALUE = ""


class PredicateKind(str, Enum):
    UNCONDITIONAL = "unconditional"
    MEMBERSHIP = "membership"
    RANGE = "range"
    BUCKET = "bucket"


def _as_number(value: Any) -> float | None:
    """Coerce a single cell to a float, or None when it is not numeric / missing."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Number):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except (TypeError, ValueError):
            return None
    if math.isnan(number):
        return None
    return number


def _numeric_column(frame: pd.DataFrame, column: str) -> pd.Series:
    return pd.to_numeric(frame[column], errors="coerce")


def _blank_missing(values: pd.Series) -> pd.Series:
    return values.astype(object).where(values.notna(), MISSING_VALUE)


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


@dataclass(frozen=True)
class Unconditional:
    """Accepts every row. Seed value for each managed column."""

    column: str
    kind = PredicateKind.UNCONDITIONAL

    def matches(self, row: Mapping[str, Any]) -> bool:
        return True

    def mask(self, frame: pd.DataFrame) -> pd.Series:
        return pd.Series(True, index=frame.index)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "column": self.column}


@dataclass(frozen=True)
class MembershipSet:
    """
    Row value is one of ``values``. An empty set matches nothing.

    Missing cells compare as MISSING_VALUE, the option the multi-select offers for them.
    """

    column: str
    values: Tuple[Any, ...] = ()
    kind = PredicateKind.MEMBERSHIP

    def matches(self, row: Mapping[str, Any]) -> bool:
        value = row.get(self.column)
        return (MISSING_VALUE if _is_missing(value) else value) in self.values

    def mask(self, frame: pd.DataFrame) -> pd.Series:
        return _blank_missing(frame[self.column]).isin(list(self.values))

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "column": self.column, "values": list(self.values)}


@dataclass(frozen=True)
class Range:
    """``lower <= value <= upper``; both ends inclusive. Used by the range slider."""

    column: str
    lower: float
    upper: float
    kind = PredicateKind.RANGE

    def matches(self, row: Mapping[str, Any]) -> bool:
        value = _as_number(row.get(self.column))
        return value is not None and self.lower <= value <= self.upper

    def mask(self, frame: pd.DataFrame) -> pd.Series:
        values = _numeric_column(frame, self.column)
        return (values >= self.lower) & (values <= self.upper)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "column": self.column,
            "lower": self.lower,
            "upper": self.upper,
        }


@dataclass(frozen=True)
class BucketChoice:
    """
    One quantile bucket picked from the dropdown.

    ``[lower, upper)`` unless ``inclusive_upper`` is set, in which case ``[lower, upper]``.
    Only the last bucket of a column is inclusive so that the maximum is covered once.
    """

    column: str
    label: str
    lower: float
    upper: float
    inclusive_upper: bool = False
    kind = PredicateKind.BUCKET

    def matches(self, row: Mapping[str, Any]) -> bool:
        value = _as_number(row.get(self.column))
        if value is None or value < self.lower:
            return False
        return value <= self.upper if self.inclusive_upper else value < self.upper

    def mask(self, frame: pd.DataFrame) -> pd.Series:
        values = _numeric_column(frame, self.column)
        upper = values <= self.upper if self.inclusive_upper else values < self.upper
        return (values >= self.lower) & upper

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "column": self.column,
            "label": self.label,
            "lower": self.lower,
            "upper": self.upper,
            "inclusive_upper": self.inclusive_upper,
        }


Predicate = Unconditional | MembershipSet | Range | BucketChoice


def predicate_from_dict(data: Mapping[str, Any]) -> Predicate:
    """
    Rebuild a predicate from its ``to_dict()`` form (e.g. out of a dcc.Store)

    Raises:
        ValueError: if the kind tag is unknown
    """
    try:
        kind = PredicateKind(data.get("kind"))
    except ValueError:
        raise ValueError(f"Unknown predicate kind: {data.get('kind')!r}")

    column = data["column"]
    if kind is PredicateKind.UNCONDITIONAL:
        return Unconditional(column)
    if kind is PredicateKind.MEMBERSHIP:
        return MembershipSet(column, tuple(data.get("values", [])))
    if kind is PredicateKind.RANGE:
        return Range(column, float(data["lower"]), float(data["upper"]))
    return BucketChoice(
        column,
        label=str(data.get("label", "")),
        lower=float(data["lower"]),
        upper=float(data["upper"]),
        inclusive_upper=bool(data.get("inclusive_upper", False)),
    )
