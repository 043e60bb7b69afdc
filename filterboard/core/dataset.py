from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from .exceptions import UnknownColumnError
from .predicates import MISSING_VALUE

logger = logging.getLogger(__name__)


class Dataset:
    """
    The full, immutable row set behind the dashboard.

    Purpose:
    - Wraps the loaded pandas DataFrame so the rest of the app never mutates it
    - Provides the per-column helpers the control builders need (distinct values, numeric values)
    - Every filtered view is derived from ``frame``; nothing writes back to it

    Design Notes:
    - Row order is the file order and is preserved by every filter
    - ``frame`` hands out a copy so callers cannot edit the loaded rows in place
    """

    def __init__(self, frame: pd.DataFrame, name: str = "dataset", source_path: Optional[Path] = None):
        self._frame = frame.reset_index(drop=True)
        self.name = name
        self.source_path = source_path

    @classmethod
    def from_records(cls, records: List[Dict[str, Any]], name: str = "dataset") -> Dataset:
        return cls(pd.DataFrame.from_records(records), name=name)

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame.copy()

    @property
    def columns(self) -> List[str]:
        return [str(c) for c in self._frame.columns]

    @property
    def n_rows(self) -> int:
        return len(self._frame)

    def __len__(self) -> int:
        return self.n_rows

    def column(self, column: str) -> pd.Series:
        """
        :param column: the column name as it appears in the header row
        :return: the raw column

        Raises:
            UnknownColumnError: if the dataset has no such column
        """
        if column not in self._frame.columns:
            raise UnknownColumnError(column, where=f"dataset '{self.name}'")
        return self._frame[column]

    def distinct_values(self, column: str) -> List[Any]:
        """Distinct values in first-seen order; missing cells show up once as MISSING_VALUE."""
        values = self.column(column)
        values = values.astype(object).where(values.notna(), MISSING_VALUE)
        return [_to_python(v) for v in pd.unique(values)]

    def numeric_values(self, column: str) -> pd.Series:
        """Column coerced to numbers; cells that are not numeric are dropped."""
        values = pd.to_numeric(self.column(column), errors="coerce").dropna()
        dropped = int(self.column(column).notna().sum()) - len(values)
        if dropped:
            logger.warning(
                "Ignoring non-numeric values in numeric column",
                extra={"dataset": self.name, "column": column, "n_dropped": dropped},
            )
        return values

    def records(self, frame: Optional[pd.DataFrame] = None) -> List[Dict[str, Any]]:
        """Rows as attribute/value mappings (the shape pushed into chart options)."""
        source = self._frame if frame is None else frame
        # NaN is not valid JSON; None serialises to null
        cleaned = source.astype(object).where(source.notna(), None)
        return cleaned.to_dict("records")


def _to_python(value: Any) -> Any:
    # numpy scalars -> builtins so Dash can serialise dropdown options
    return value.item() if hasattr(value, "item") else value
