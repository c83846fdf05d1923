"""Abstract syntax tree for SQL statements and expressions."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

Transformer = Callable[["Expression"], "Expression"]
Visitor = Callable[["Expression"], bool]


class Expression:
    """Base class of all expression nodes."""

    def children(self) -> tuple[Expression, ...]:
        """Returns the direct sub-expressions of this node."""
        return ()

    def _with_children(self, children: Sequence[Expression]) -> Expression:
        return self

    def walk(self, visitor: Visitor) -> bool:
        """Calls visitor on every node, depth first. Stops and returns False
        as soon as the visitor returns False."""
        return visitor(self) and all(child.walk(visitor) for child in self.children())

    def contains(self, visitor: Visitor) -> bool:
        """Returns True as soon as visitor returns True for some node."""
        return not self.walk(lambda expr: not visitor(expr))

    def transform(self, before: Transformer, after: Transformer) -> Expression:
        """Rebuilds the tree, applying before on the way down and after on the way up."""
        expr = before(self)
        children = expr.children()
        if children:
            expr = expr._with_children(
                [child.transform(before, after) for child in children]
            )
        return after(expr)


@dataclass(frozen=True)
class Field(Expression):
    """A reference to a column, optionally qualified by a table name."""

    table: Optional[str]
    name: str


@dataclass(frozen=True)
class ColumnIndex(Expression):
    """A positional column reference, used while building plans."""

    index: int


@dataclass(frozen=True, eq=False)
class Literal(Expression):
    """A constant: None, bool, int, float or str."""

    value: Any = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Literal):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))


@dataclass(frozen=True)
class Function(Expression):
    """A function call by name."""

    name: str
    args: tuple[Expression, ...] = ()

    def children(self) -> tuple[Expression, ...]:
        return tuple(self.args)

    def _with_children(self, children: Sequence[Expression]) -> Expression:
        return dataclasses.replace(self, args=tuple(children))


class Operator(enum.Enum):
    """Operators, with the number of operands each takes."""

    AND = "and"
    NOT = "not"
    OR = "or"
    EQUAL = "equal"
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    IS_NULL = "is_null"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    NOT_EQUAL = "not_equal"
    ADD = "add"
    ASSERT = "assert"
    DIVIDE = "divide"
    EXPONENTIATE = "exponentiate"
    FACTORIAL = "factorial"
    MODULO = "modulo"
    MULTIPLY = "multiply"
    NEGATE = "negate"
    SUBTRACT = "subtract"
    LIKE = "like"

    @property
    def arity(self) -> int:
        return 1 if self in _UNARY else 2


_UNARY = frozenset(
    {Operator.NOT, Operator.IS_NULL, Operator.ASSERT, Operator.FACTORIAL, Operator.NEGATE}
)


@dataclass(frozen=True)
class Operation(Expression):
    """An operator applied to its operands."""

    operator: Operator
    operands: tuple[Expression, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "operands", tuple(self.operands))
        if len(self.operands) != self.operator.arity:
            raise ValueError(
                f"Operator {self.operator.value} takes {self.operator.arity} "
                f"operand(s), got {len(self.operands)}"
            )

    def children(self) -> tuple[Expression, ...]:
        return self.operands

    def _with_children(self, children: Sequence[Expression]) -> Expression:
        return Operation(self.operator, tuple(children))


class JoinType(enum.Enum):
    CROSS = "cross"
    INNER = "inner"
    LEFT = "left"
    RIGHT = "right"


class Order(enum.Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass
class Column:
    """A column definition in CREATE TABLE."""

    name: str
    datatype: Any
    primary_key: bool = False
    nullable: Optional[bool] = None
    default: Optional[Expression] = None
    unique: bool = False
    index: bool = False
    references: Optional[str] = None


class FromItem:
    """Base class of FROM clause items."""


@dataclass
class TableItem(FromItem):
    name: str
    alias: Optional[str] = None


@dataclass
class JoinItem(FromItem):
    left: FromItem
    right: FromItem
    join_type: JoinType
    predicate: Optional[Expression] = None


class Statement:
    """Base class of all statements."""


@dataclass
class Begin(Statement):
    readonly: bool = False
    version: Optional[int] = None


@dataclass
class Commit(Statement):
    pass


@dataclass
class Rollback(Statement):
    pass


@dataclass
class Explain(Statement):
    statement: Statement


@dataclass
class CreateTable(Statement):
    name: str
    columns: list[Column] = field(default_factory=list)


@dataclass
class DropTable(Statement):
    name: str


@dataclass
class Delete(Statement):
    table: str
    where: Optional[Expression] = None


@dataclass
class Insert(Statement):
    table: str
    columns: Optional[list[str]] = None
    values: list[list[Expression]] = field(default_factory=list)


@dataclass
class Update(Statement):
    table: str
    set: dict[str, Expression] = field(default_factory=dict)
    where: Optional[Expression] = None


@dataclass
class Select(Statement):
    select: list[tuple[Expression, Optional[str]]] = field(default_factory=list)
    from_: list[FromItem] = field(default_factory=list)
    where: Optional[Expression] = None
    group_by: list[Expression] = field(default_factory=list)
    having: Optional[Expression] = None
    order: list[tuple[Expression, Order]] = field(default_factory=list)
    offset: Optional[Expression] = None
    limit: Optional[Expression] = None