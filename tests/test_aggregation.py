import pytest

from sqlexec.aggregation import (
    Aggregate,
    Aggregation,
    Average,
    Count,
    Max,
    Min,
    Sum,
    accumulator_for,
)
from sqlexec.results import Create, InternalError, Query, ResultColumn


class _Source:
    def __init__(self, result):
        self.result = result

    def execute(self, txn):
        return self.result


def _feed(acc, values):
    for value in values:
        acc.accumulate(value)
    return acc.aggregate()


def test_count_skips_nulls():
    assert _feed(Count(), [1, None, "a", None]) == 2


def test_sum_of_integers_matches_builtin():
    values = [4, 5, 6, -2]
    assert _feed(Sum(), values) == sum(values)


def test_sum_of_floats_matches_builtin():
    values = [0.5, 0.25]
    assert _feed(Sum(), values) == sum(values)


@pytest.mark.parametrize("values", [[1, 2.0], [1, None], ["a"], [True]])
def test_sum_of_mixed_or_non_numeric_is_null(values):
    assert _feed(Sum(), values) is None


def test_sum_stays_null_after_null():
    assert _feed(Sum(), [None, 1, 2]) is None


def test_average_of_integers_truncates_toward_zero():
    assert _feed(Average(), [-7, 2]) == -2


def test_average_of_floats():
    assert _feed(Average(), [1.0, 2.0]) == 1.5


def test_average_of_nothing_is_null():
    assert Average().aggregate() is None


def test_max_and_min_pick_from_inputs():
    values = [3, 9, 4]
    assert _feed(Max(), values) == max(values)
    assert _feed(Min(), values) == min(values)


def test_max_and_min_of_strings():
    values = ["b", "c", "a"]
    assert _feed(Max(), values) == "c"
    assert _feed(Min(), values) == "a"


@pytest.mark.parametrize("cls", [Max, Min])
def test_extremes_of_mixed_types_are_null(cls):
    assert _feed(cls(), [1, "x"]) is None
    assert _feed(cls(), [1, 2.5]) is None


@pytest.mark.parametrize("cls", [Max, Min])
def test_extremes_become_null_after_null(cls):
    assert _feed(cls(), [None, 5]) is None


@pytest.mark.parametrize(
    "aggregate", [Aggregate.AVERAGE, Aggregate.MAX, Aggregate.MIN, Aggregate.SUM]
)
def test_fresh_accumulators_aggregate_to_null(aggregate):
    assert accumulator_for(aggregate).aggregate() is None


def test_accumulator_for_returns_independent_instances():
    first = accumulator_for(Aggregate.COUNT)
    second = accumulator_for(Aggregate.COUNT)
    first.accumulate(1)
    assert second.aggregate() == 0
    assert first.aggregate() == second.aggregate() + 1


def test_aggregation_groups_rows():
    source = _Source(
        Query(
            [ResultColumn("v"), ResultColumn("g")],
            iter([[1, "a"], [2, "a"], [5, "b"]]),
        )
    )
    result = Aggregation(source, [Aggregate.MAX]).execute(None)
    assert result.columns == [ResultColumn(None), ResultColumn("g")]
    assert sorted(result.rows, key=lambda r: r[1]) == [[2, "a"], [5, "b"]]


def test_aggregation_keeps_groups_of_different_types_apart():
    source = _Source(
        Query(
            [ResultColumn("v"), ResultColumn("g")],
            iter([[1, 1], [1, True], [1, 1]]),
        )
    )
    rows = list(Aggregation(source, [Aggregate.COUNT]).execute(None).rows)
    assert len(rows) == 2
    assert {type(r[1]) for r in rows} == {int, bool}


def test_aggregation_without_rows_or_groups_yields_empty_aggregates():
    source = _Source(Query([ResultColumn("a"), ResultColumn("b")], iter([])))
    result = Aggregation(source, [Aggregate.COUNT, Aggregate.SUM]).execute(None)
    assert list(result.rows) == [[0, None]]


def test_aggregation_without_rows_but_with_groups_is_empty():
    source = _Source(Query([ResultColumn("a"), ResultColumn("g")], iter([])))
    result = Aggregation(source, [Aggregate.COUNT]).execute(None)
    assert list(result.rows) == []


def test_aggregation_rejects_non_query_source():
    with pytest.raises(InternalError):
        Aggregation(_Source(Create(1)), [Aggregate.COUNT]).execute(None)