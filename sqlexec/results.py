"""Result sets produced by executors, and the errors they raise."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional


class SQLError(Exception):
    """Base class of SQL errors."""


class SQLValueError(SQLError, ValueError):
    """An error caused by invalid user input or data."""


class InternalError(SQLError):
    """An unexpected internal error."""


@dataclass(frozen=True)
class ResultColumn:
    """A result column, optionally named."""

    name: Optional[str] = None


class ResultSet:
    """Base class of executor results."""

    def into_row(self) -> list:
        """Returns the first row of a query result."""
        if not isinstance(self, Query):
            raise SQLValueError(f"Not a query result: {self!r}")
        row = next(self.rows, None)
        if row is None:
            raise SQLValueError("No rows returned")
        return row

    def into_value(self) -> Any:
        """Returns the first value of the first row of a query result."""
        row = self.into_row()
        if not row:
            raise SQLValueError("No value returned")
        return row[0]


@dataclass
class Begin(ResultSet):
    id: int
    mode: Any


@dataclass
class Commit(ResultSet):
    id: int


@dataclass
class Rollback(ResultSet):
    id: int


@dataclass
class Create(ResultSet):
    count: int


@dataclass
class Delete(ResultSet):
    count: int


@dataclass
class Update(ResultSet):
    count: int


@dataclass
class CreateTable(ResultSet):
    name: str


@dataclass
class DropTable(ResultSet):
    name: str


def _empty_rows() -> Iterator[list]:
    return iter(())


@dataclass
class Query(ResultSet):
    """A query result: columns and a lazy iterator of rows."""

    columns: list[ResultColumn] = field(default_factory=list)
    rows: Iterator[list] = field(default_factory=_empty_rows, compare=False, repr=False)

    def __post_init__(self) -> None:
        self.rows = iter(self.rows)


@dataclass
class Explain(ResultSet):
    node: Any