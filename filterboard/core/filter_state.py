from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from .exceptions import UnknownColumnError
from .predicates import Predicate, Unconditional, predicate_from_dict

logger = logging.getLogger(__name__)


@dataclass
class FilterState:
    """
    Represents the current user selection as one predicate per managed column.

    Fields:

    - predicates: ordered mapping column -> predicate. Order follows the control order
      in config, which is also the order predicates are evaluated in.

    Invariant: exactly one predicate per managed column. Entries are seeded as
    Unconditional and only ever replaced, never removed.
    """

    predicates: Dict[str, Predicate] = field(default_factory=dict)

    @classmethod
    def seed(cls, columns: Iterable[str]) -> FilterState:
        return cls(predicates={column: Unconditional(column) for column in columns})

    @property
    def columns(self) -> List[str]:
        return list(self.predicates.keys())

    def __iter__(self) -> Iterator[Tuple[str, Predicate]]:
        return iter(self.predicates.items())

    def __len__(self) -> int:
        return len(self.predicates)

    def get(self, column: str) -> Predicate:
        try:
            return self.predicates[column]
        except KeyError:
            raise UnknownColumnError(column)

    def set_predicate(self, column: str, predicate: Predicate) -> None:
        """
        Replace the stored predicate for 'column'

        :param column: a managed column (one that has a control)
        :param predicate: the new predicate; must be bound to the same column

        Raises:
            UnknownColumnError: if no control was registered for the column. The state is left unchanged.
        """
        if column not in self.predicates:
            logger.error(
                "Predicate set for unmanaged column",
                extra={"column": column, "managed_columns": self.columns},
            )
            raise UnknownColumnError(column)
        if predicate.column != column:
            raise UnknownColumnError(predicate.column, where=f"control for '{column}'")

        self.predicates[column] = predicate

    def active(self) -> List[Predicate]:
        """Predicates that actually narrow the rows."""
        return [p for p in self.predicates.values() if not isinstance(p, Unconditional)]

    def to_dict(self) -> Dict[str, Any]:
        return {"predicates": [p.to_dict() for p in self.predicates.values()]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FilterState:
        predicates: Dict[str, Predicate] = {}
        for raw in data.get("predicates", []):
            predicate = predicate_from_dict(raw)
            predicates[predicate.column] = predicate
        return cls(predicates=predicates)
