"""Join executors: nested loop joins and hash joins."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional

from .aggregation import _value_key
from .query import _evaluate, _source_query
from .results import InternalError, Query, SQLValueError


def _nested_loop_rows(
    left: Iterator[list],
    right: list[list],
    right_width: int,
    predicate: Any,
    outer: bool,
) -> Iterator[list]:
    for left_row in left:
        hit = False
        for right_row in right:
            row = list(left_row) + list(right_row)
            if predicate is not None:
                value = _evaluate(predicate, row)
                if value is False or value is None:
                    continue
                if value is not True:
                    raise SQLValueError(
                        f"Join predicate returned {value}, expected boolean"
                    )
            hit = True
            yield row
        # An outer join emits unmatched left rows padded with NULLs.
        if outer and not hit:
            yield list(left_row) + [None] * right_width


@dataclass
class NestedLoopJoin:
    """Checks each left row against every right row using an optional predicate."""

    left: Any
    right: Any
    predicate: Optional[Any] = None
    outer: bool = False

    def execute(self, txn: Any) -> Query:
        left = _source_query(self.left, txn)
        right = _source_query(self.right, txn)
        right_rows = [list(row) for row in right.rows]
        columns = list(left.columns) + list(right.columns)
        rows = _nested_loop_rows(
            left.rows, right_rows, len(right.columns), self.predicate, self.outer
        )
        return Query(columns, rows)


@dataclass
class HashJoin:
    """Joins rows whose left and right fields hold equal values."""

    left: Any
    left_field: int
    right: Any
    right_field: int
    outer: bool = False

    def execute(self, txn: Any) -> Query:
        left = _source_query(self.left, txn)
        right = _source_query(self.right, txn)
        r = self.right_field
        table: dict[tuple, list] = {}
        for row in right.rows:
            if len(row) <= r:
                raise InternalError(f"Right index {r} out of bounds")
            table[_value_key(row[r])] = list(row)
        columns = list(left.columns) + list(right.columns)
        rows = self._rows(left.rows, table, len(right.columns))
        return Query(columns, rows)

    def _rows(
        self, rows: Iterator[list], table: dict[tuple, list], right_width: int
    ) -> Iterator[list]:
        l = self.left_field
        for row in rows:
            if len(row) <= l:
                raise SQLValueError(f"Left index {l} out of bounds")
            hit = table.get(_value_key(row[l]))
            if hit is not None:
                yield list(row) + list(hit)
            elif self.outer:
                yield list(row) + [None] * right_width