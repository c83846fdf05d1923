# sqlexec

Building blocks for a small SQL database engine: a syntax tree for SQL
statements and expressions, and a set of plan executors that run against a
transaction and return result sets.

## Modules

- `sqlexec.ast`: statement nodes (`Begin`, `Commit`, `Rollback`, `Explain`,
  `CreateTable`, `DropTable`, `Delete`, `Insert`, `Update`, `Select`), FROM
  items (`TableItem`, `JoinItem` with a `JoinType`), column definitions
  (`Column`), sort `Order`, and expression nodes (`Field`, `ColumnIndex`,
  `Literal`, `Function`, `Operation` with an `Operator`). Every `Expression`
  has `children()`, `walk(visitor)`, `contains(visitor)` and
  `transform(before, after)`. An `Operation` raises `ValueError` when given
  the wrong number of operands for its operator.
- `sqlexec.results`: the result sets executors return (`Query`, `Create`,
  `Update`, `Delete`, `CreateTable`, `DropTable`, `Begin`, `Commit`,
  `Rollback`, `Explain`), `ResultColumn`, and the errors `SQLError`,
  `SQLValueError` and `InternalError`. `ResultSet.into_row()` and
  `ResultSet.into_value()` return the first row or the first value of a
  `Query`, and raise `SQLValueError` when there is none or the result is not
  a query.
- Executors, each a dataclass with an `execute(txn)` method:
  - `sqlexec.source`: `Scan`, `KeyLookup`, `IndexLookup`, `Nothing`
  - `sqlexec.query`: `Filter`, `Projection`, `Order`, `Limit`, `Offset`,
    and the `Direction` enum
  - `sqlexec.aggregation`: `Aggregation`, the `Aggregate` enum, the
    accumulators `Count`, `Sum`, `Average`, `Min`, `Max`, and
    `accumulator_for(aggregate)`
  - `sqlexec.join`: `NestedLoopJoin`, `HashJoin`
  - `sqlexec.mutation`: `Insert` (with `make_row` and `pad_row`), `Update`,
    `Delete`
  - `sqlexec.ddl`: `CreateTable`, `DropTable`

## Installing

```
pip install .
```

## Using it

Executors are composed into a tree and run against a transaction object. A
query result is a `Query` whose `rows` is an iterator, so rows are produced
as the caller consumes them:

```python
from sqlexec.query import Filter, Limit
from sqlexec.source import Scan

plan = Limit(Filter(Scan("movies", None), predicate), 10)
result = plan.execute(txn)
for row in result.rows:
    print(row)
```

Expressions given to executors are evaluated against a row: an object with
an `evaluate(row)` method is called, a `ColumnIndex` picks a value from the
row by position, and a `Literal` yields its value. Anything else raises
`InternalError`. Filters and join predicates must yield `True`, `False` or
`None`; any other value raises `SQLValueError`.

`Aggregation` expects each source row to hold the aggregate inputs first,
followed by the group-by values. With no rows and no group-by columns it
returns a single row of empty aggregates. Integer averages are truncated
toward zero; sums, minimums and maximums over mixed types yield `None`.

`Order` sorts stably; values that cannot be compared (such as `None`) count
as equal.

## The transaction object

The package does not provide one. Executors call these methods on it:

- `must_read_table(name)`, returning a table with `name`, `columns` (each
  with `name` and `default`), `get_column(name)` and `get_row_key(row)`
- `scan(table, filter)`, `read(table, key)`, `read_index(table, column, value)`
- `create(table, row)`, `update(table, key, row)`, `delete(table, key)`
- `create_table(table)`, `delete_table(name)`

## What it does not do

There is no SQL parser, query planner, storage engine, transaction manager,
network server or command-line client here. Statements are built as syntax
tree objects by the caller, plans are assembled by hand from executors, and
storage comes from whatever transaction object is passed to `execute`.

## Running the tests

```
pip install .[test]
pytest
```