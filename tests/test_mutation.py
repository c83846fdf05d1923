from dataclasses import dataclass, field

import pytest

from sqlexec import results
from sqlexec.ast import ColumnIndex, Literal
from sqlexec.mutation import Delete, Insert, Update
from sqlexec.results import InternalError, Query, ResultColumn, SQLValueError


@dataclass
class FakeColumn:
    name: str
    default: object = None


@dataclass
class FakeTable:
    name: str
    columns: list
    primary_key: int = 0

    def get_column(self, name):
        for column in self.columns:
            if column.name == name:
                return column
        raise SQLValueError(f"Unknown column {name}")

    def get_row_key(self, row):
        return row[self.primary_key]


@dataclass
class FakeTxn:
    tables: dict
    rows: dict = field(default_factory=dict)

    def __post_init__(self):
        for name in self.tables:
            self.rows.setdefault(name, {})

    def must_read_table(self, name):
        if name not in self.tables:
            raise SQLValueError(f"Table {name} does not exist")
        return self.tables[name]

    def create(self, table, row):
        key = self.tables[table].get_row_key(row)
        if key in self.rows[table]:
            raise SQLValueError("duplicate")
        self.rows[table][key] = list(row)

    def update(self, table, key, row):
        new_key = self.tables[table].get_row_key(row)
        if new_key != key:
            self.delete(table, key)
            self.create(table, row)
        else:
            self.rows[table][key] = list(row)

    def delete(self, table, key):
        self.rows[table].pop(key, None)


@dataclass
class Source:
    txn: FakeTxn
    table: str

    def execute(self, txn):
        return Query(
            [ResultColumn(c.name) for c in self.txn.tables[self.table].columns],
            [list(r) for r in self.txn.rows[self.table].values()],
        )


@dataclass
class Fixed:
    data: list

    def execute(self, txn):
        return Query([], [list(r) for r in self.data])


class NotQuery:
    def execute(self, txn):
        return results.Commit(1)


TABLE = FakeTable("t", [FakeColumn("id"), FakeColumn("name"), FakeColumn("score", default=0)])


def make_txn():
    return FakeTxn({"t": TABLE})


def test_make_row_orders_by_table_and_fills_defaults():
    row = Insert.make_row(TABLE, ["name", "id"], ["a", 1])
    assert row == [1, "a", 0]


def test_make_row_count_mismatch():
    with pytest.raises(SQLValueError, match="counts do not match"):
        Insert.make_row(TABLE, ["id"], [1, 2])


def test_make_row_duplicate_column():
    with pytest.raises(SQLValueError, match="given multiple times"):
        Insert.make_row(TABLE, ["id", "id"], [1, 2])


def test_make_row_unknown_column():
    with pytest.raises(SQLValueError, match="Unknown column"):
        Insert.make_row(TABLE, ["nope"], [1])


def test_make_row_missing_value():
    with pytest.raises(SQLValueError, match="No value given for column name"):
        Insert.make_row(TABLE, ["id"], [1])


def test_pad_row_uses_defaults():
    assert Insert.pad_row(TABLE, [1, "a"]) == [1, "a", 0]


def test_pad_row_without_default():
    with pytest.raises(SQLValueError, match="No default value for column name"):
        Insert.pad_row(TABLE, [1])


def test_insert_execute_creates_rows():
    txn = make_txn()
    insert = Insert(
        "t",
        [],
        [[Literal(1), Literal("a")], [Literal(2), Literal("b"), Literal(5)]],
    )
    result = insert.execute(txn)
    assert result == results.Create(2)
    assert txn.rows["t"][1] == [1, "a", 0]
    assert txn.rows["t"][2] == [2, "b", 5]


def test_insert_execute_with_columns():
    txn = make_txn()
    Insert("t", ["name", "id"], [[Literal("z"), Literal(9)]]).execute(txn)
    assert txn.rows["t"][9] == [9, "z", 0]


def test_insert_unknown_table():
    with pytest.raises(SQLValueError):
        Insert("missing", [], [[Literal(1)]]).execute(make_txn())


def test_update_sets_fields():
    txn = make_txn()
    txn.rows["t"] = {1: [1, "a", 0], 2: [2, "b", 0]}
    result = Update("t", Source(txn, "t"), [(2, Literal(3))]).execute(txn)
    assert result == results.Update(2)
    assert [r[2] for r in txn.rows["t"].values()] == [3, 3]


def test_update_evaluates_against_old_row():
    txn = make_txn()
    txn.rows["t"] = {1: [1, "a", 0]}
    Update("t", Source(txn, "t"), [(2, ColumnIndex(0)), (1, Literal("q"))]).execute(txn)
    assert txn.rows["t"][1] == [1, "q", 1]


def test_update_skips_repeated_keys():
    txn = make_txn()
    txn.rows["t"] = {1: [1, "a", 0]}
    source = Fixed([[1, "a", 0], [1, "a", 0]])
    assert Update("t", source, [(1, Literal("b"))]).execute(txn).count == 1


def test_update_rejects_non_query():
    with pytest.raises(InternalError):
        Update("t", NotQuery(), []).execute(make_txn())


def test_delete_removes_source_rows():
    txn = make_txn()
    txn.rows["t"] = {1: [1, "a", 0], 2: [2, "b", 0]}
    result = Delete("t", Fixed([[2, "b", 0]])).execute(txn)
    assert result == results.Delete(1)
    assert list(txn.rows["t"]) == [1]


def test_delete_rejects_non_query():
    with pytest.raises(InternalError):
        Delete("t", NotQuery()).execute(make_txn())