"""Query executors: filtering, projection, ordering, limit and offset."""

from __future__ import annotations

import enum
import functools
import itertools
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from .aggregation import _compare
from .ast import ColumnIndex, Literal
from .results import InternalError, Query, ResultColumn, SQLValueError


class Direction(enum.Enum):
    """Sort direction."""

    ASCENDING = "ascending"
    DESCENDING = "descending"


def _evaluate(expression: Any, row: list) -> Any:
    """Evaluates an expression against a row."""
    evaluate = getattr(expression, "evaluate", None)
    if callable(evaluate):
        return evaluate(row)
    if isinstance(expression, ColumnIndex):
        return row[expression.index]
    if isinstance(expression, Literal):
        return expression.value
    raise InternalError(f"Cannot evaluate expression {expression!r}")


def _source_query(source: Any, txn: Any) -> Query:
    result = source.execute(txn)
    if not isinstance(result, Query):
        raise InternalError(f"Unexpected result {result!r}")
    return result


@dataclass
class Filter:
    """Keeps rows for which the predicate is true."""

    source: Any
    predicate: Any

    def execute(self, txn: Any) -> Query:
        result = _source_query(self.source, txn)
        return Query(result.columns, self._filter(result.rows))

    def _filter(self, rows: Iterator[list]) -> Iterator[list]:
        for row in rows:
            value = _evaluate(self.predicate, row)
            if value is True:
                yield row
            elif value is False or value is None:
                continue
            else:
                raise SQLValueError(f"Filter returned {value}, expected boolean")


@dataclass
class Projection:
    """Evaluates expressions for each row, with optional column labels."""

    source: Any
    expressions: list[tuple[Any, Optional[str]]]

    def execute(self, txn: Any) -> Query:
        result = _source_query(self.source, txn)
        columns = [
            self._column(expression, label, result.columns)
            for expression, label in self.expressions
        ]
        expressions = [expression for expression, _ in self.expressions]
        rows = ([_evaluate(e, row) for e in expressions] for row in result.rows)
        return Query(columns, rows)

    @staticmethod
    def _column(
        expression: Any, label: Optional[str], columns: list[ResultColumn]
    ) -> ResultColumn:
        if label is not None:
            return ResultColumn(label)
        if isinstance(expression, ColumnIndex) and 0 <= expression.index < len(columns):
            return columns[expression.index]
        return ResultColumn()


@dataclass
class Order:
    """Sorts rows by a list of expressions and directions. The sort is stable."""

    source: Any
    orders: list[tuple[Any, Direction]]

    def execute(self, txn: Any) -> Query:
        result = _source_query(self.source, txn)
        items = [
            (row, [_evaluate(expression, row) for expression, _ in self.orders])
            for row in result.rows
        ]
        directions = [direction for _, direction in self.orders]

        def compare(a: tuple, b: tuple) -> int:
            for direction, value_a, value_b in zip(directions, a[1], b[1]):
                order = _compare(value_a, value_b)
                if order:
                    return order if direction == Direction.ASCENDING else -order
            return 0

        items.sort(key=functools.cmp_to_key(compare))
        return Query(result.columns, (row for row, _ in items))


@dataclass
class Limit:
    """Passes on at most the given number of rows."""

    source: Any
    limit: int

    def execute(self, txn: Any) -> Query:
        result = _source_query(self.source, txn)
        return Query(result.columns, itertools.islice(result.rows, self.limit))


@dataclass
class Offset:
    """Skips the given number of rows."""

    source: Any
    offset: int

    def execute(self, txn: Any) -> Query:
        result = _source_query(self.source, txn)
        return Query(result.columns, itertools.islice(result.rows, self.offset, None))