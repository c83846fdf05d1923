"""Executors that produce rows from storage."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .aggregation import _value_key
from .results import Query, ResultColumn


def _table_columns(table: Any) -> list[ResultColumn]:
    return [ResultColumn(column.name) for column in table.columns]


@dataclass
class Scan:
    """Scans all rows of a table, with an optional filter."""

    table: str
    filter: Optional[Any] = None

    def execute(self, txn: Any) -> Query:
        table = txn.must_read_table(self.table)
        return Query(_table_columns(table), txn.scan(table.name, self.filter))


@dataclass
class KeyLookup:
    """Looks up rows by primary key; missing keys are skipped."""

    table: str
    keys: list[Any] = field(default_factory=list)

    def execute(self, txn: Any) -> Query:
        table = txn.must_read_table(self.table)
        rows = [
            row
            for row in (txn.read(table.name, key) for key in self.keys)
            if row is not None
        ]
        return Query(_table_columns(table), rows)


@dataclass
class IndexLookup:
    """Looks up rows through a secondary index on a column."""

    table: str
    column: str
    values: list[Any] = field(default_factory=list)

    def execute(self, txn: Any) -> Query:
        table = txn.must_read_table(self.table)
        keys: dict[tuple, Any] = {}
        for value in self.values:
            for key in txn.read_index(self.table, self.column, value):
                keys.setdefault(_value_key(key), key)
        rows = [
            row
            for row in (txn.read(table.name, key) for key in keys.values())
            if row is not None
        ]
        return Query(_table_columns(table), rows)


@dataclass
class Nothing:
    """Produces a single empty row."""

    def execute(self, txn: Any) -> Query:
        return Query([], [[]])