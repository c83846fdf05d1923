"""Executors for INSERT, UPDATE and DELETE."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from . import results
from .aggregation import _value_key
from .query import _evaluate
from .results import InternalError, Query, SQLValueError


@dataclass
class Insert:
    """Inserts rows of evaluated expressions into a table."""

    table: str
    columns: list[str] = field(default_factory=list)
    rows: list[list[Any]] = field(default_factory=list)

    @staticmethod
    def make_row(table: Any, columns: Sequence[str], values: Sequence[Any]) -> list:
        """Builds a row from column names and values, filling in defaults."""
        if len(columns) != len(values):
            raise SQLValueError("Column and value counts do not match")
        inputs: dict[str, Any] = {}
        for name, value in zip(columns, values):
            table.get_column(name)
            if name in inputs:
                raise SQLValueError(f"Column {name} given multiple times")
            inputs[name] = value
        row = []
        for column in table.columns:
            if column.name in inputs:
                row.append(inputs[column.name])
            elif column.default is not None:
                row.append(column.default)
            else:
                raise SQLValueError(f"No value given for column {column.name}")
        return row

    @staticmethod
    def pad_row(table: Any, row: Sequence[Any]) -> list:
        """Pads a row with default values for the columns it lacks."""
        padded = list(row)
        for column in table.columns[len(padded):]:
            if column.default is None:
                raise SQLValueError(f"No default value for column {column.name}")
            padded.append(column.default)
        return padded

    def execute(self, txn: Any) -> results.Create:
        table = txn.must_read_table(self.table)
        count = 0
        for expressions in self.rows:
            row = [_evaluate(expression, None) for expression in expressions]
            if self.columns:
                row = self.make_row(table, self.columns, row)
            else:
                row = self.pad_row(table, row)
            txn.create(table.name, row)
            count += 1
        return results.Create(count)


@dataclass
class Update:
    """Updates source rows by evaluating expressions into given fields."""

    table: str
    source: Any
    expressions: list[tuple[int, Any]] = field(default_factory=list)

    def execute(self, txn: Any) -> results.Update:
        result = self.source.execute(txn)
        if not isinstance(result, Query):
            raise InternalError(f"Unexpected response {result!r}")
        table = txn.must_read_table(self.table)
        # The source may see our own changes, so skip rows already updated.
        updated: set[tuple] = set()
        for row in result.rows:
            key = table.get_row_key(row)
            if _value_key(key) in updated:
                continue
            new = list(row)
            for index, expression in self.expressions:
                new[index] = _evaluate(expression, row)
            txn.update(table.name, key, new)
            updated.add(_value_key(key))
        return results.Update(len(updated))


@dataclass
class Delete:
    """Deletes every row produced by the source."""

    table: str
    source: Any

    def execute(self, txn: Any) -> results.Delete:
        table = txn.must_read_table(self.table)
        result = self.source.execute(txn)
        if not isinstance(result, Query):
            raise InternalError(f"Unexpected result {result!r}")
        count = 0
        for row in result.rows:
            txn.delete(table.name, table.get_row_key(row))
            count += 1
        return results.Delete(count)