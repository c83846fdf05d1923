"""Aggregation executor and the accumulators behind aggregate functions."""

from __future__ import annotations

import abc
import enum
import math
from dataclasses import dataclass, field
from typing import Any, Optional

from .results import InternalError, Query, ResultColumn

_UNSET = object()


class Aggregate(enum.Enum):
    """Aggregate functions."""

    AVERAGE = "average"
    COUNT = "count"
    MAX = "max"
    MIN = "min"
    SUM = "sum"


def _datatype(value: Any) -> Optional[type]:
    """Returns the data type of a value, or None for NULL."""
    return None if value is None else type(value)


def _compare(a: Any, b: Any) -> Optional[int]:
    """Compares two values: -1, 0 or 1, or None where they have no ordering."""
    if a is None or b is None:
        return None
    if isinstance(a, bool) or isinstance(b, bool):
        if type(a) is not type(b):
            return None
    elif isinstance(a, (int, float)) and isinstance(b, (int, float)):
        if (isinstance(a, float) and math.isnan(a)) or (
            isinstance(b, float) and math.isnan(b)
        ):
            return None
    elif type(a) is not type(b):
        return None
    try:
        if a < b:
            return -1
        if a > b:
            return 1
        if a == b:
            return 0
    except TypeError:
        return None
    return None


def _value_key(value: Any) -> tuple:
    """A hashable key that keeps values of different types apart."""
    return (type(value), value)


class Accumulator(abc.ABC):
    """Accumulates values into an aggregate."""

    @abc.abstractmethod
    def accumulate(self, value: Any) -> None:
        """Adds a value to the accumulator."""

    @abc.abstractmethod
    def aggregate(self) -> Any:
        """Returns the final aggregate value."""


@dataclass
class Count(Accumulator):
    """Counts non-NULL values."""

    count: int = 0

    def accumulate(self, value: Any) -> None:
        if value is not None:
            self.count += 1

    def aggregate(self) -> Any:
        return self.count


@dataclass
class Sum(Accumulator):
    """Sums integers or floats; any other mix yields NULL."""

    total: Any = _UNSET

    def accumulate(self, value: Any) -> None:
        current = self.total
        if current is _UNSET:
            self.total = value if type(value) in (int, float) else None
        elif type(current) is int and type(value) is int:
            self.total = current + value
        elif type(current) is float and type(value) is float:
            self.total = current + value
        else:
            self.total = None

    def aggregate(self) -> Any:
        return None if self.total is _UNSET else self.total


def _truncating_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


@dataclass
class Average(Accumulator):
    """Averages values; integer averages are truncated toward zero."""

    count: Count = field(default_factory=Count)
    sum: Sum = field(default_factory=Sum)

    def accumulate(self, value: Any) -> None:
        self.count.accumulate(value)
        self.sum.accumulate(value)

    def aggregate(self) -> Any:
        total, count = self.sum.aggregate(), self.count.aggregate()
        if type(total) is int:
            return _truncating_div(total, count)
        if type(total) is float:
            return total / count
        return None


@dataclass
class _Extreme(Accumulator):
    value: Any = _UNSET
    _wanted = 1

    def accumulate(self, value: Any) -> None:
        current = self.value
        if current is _UNSET:
            self.value = value
            return
        if _datatype(current) != _datatype(value):
            self.value = None
            return
        order = _compare(value, current)
        if order is None:
            self.value = None
        elif order == self._wanted:
            self.value = value

    def aggregate(self) -> Any:
        return None if self.value is _UNSET else self.value


@dataclass
class Max(_Extreme):
    """The greatest value; NULL if values are of mixed types or unordered."""

    _wanted = 1


@dataclass
class Min(_Extreme):
    """The smallest value; NULL if values are of mixed types or unordered."""

    _wanted = -1


_ACCUMULATORS = {
    Aggregate.AVERAGE: Average,
    Aggregate.COUNT: Count,
    Aggregate.MAX: Max,
    Aggregate.MIN: Min,
    Aggregate.SUM: Sum,
}


def accumulator_for(aggregate: Aggregate) -> Accumulator:
    """Creates a fresh accumulator for an aggregate function."""
    return _ACCUMULATORS[aggregate]()


@dataclass
class Aggregation:
    """Groups source rows and aggregates them.

    Each source row holds the aggregate inputs first, followed by the
    group-by values.
    """

    source: Any
    aggregates: list[Aggregate]

    def execute(self, txn: Any) -> Query:
        result = self.source.execute(txn)
        if not isinstance(result, Query):
            raise InternalError(f"Unexpected result {result!r}")
        width = len(self.aggregates)
        groups: dict[tuple, tuple[list, list[Accumulator]]] = {}
        for row in result.rows:
            row = list(row)
            bucket = row[width:]
            key = tuple(_value_key(v) for v in bucket)
            entry = groups.get(key)
            if entry is None:
                entry = (bucket, [accumulator_for(a) for a in self.aggregates])
                groups[key] = entry
            for accumulator, value in zip(entry[1], row[:width]):
                accumulator.accumulate(value)
        # With no rows and no GROUP BY, a single row of empty aggregates is returned.
        if not groups and width == len(result.columns):
            groups[()] = ([], [accumulator_for(a) for a in self.aggregates])
        columns = [
            ResultColumn() if i < width else column
            for i, column in enumerate(result.columns)
        ]
        rows = (
            [acc.aggregate() for acc in accumulators] + list(bucket)
            for bucket, accumulators in groups.values()
        )
        return Query(columns, rows)