"""Abstract Syntax Tree nodes for rule expressions.

A rule is a tree of two node shapes:

- ``Operator``: AND / OR with two children, NOT with one.
- ``Operand``: a leaf comparing a context field with a typed literal.

Nodes are frozen once built, so a subtree can be shared by any number of
parents (the combiner relies on this) and evaluated from several threads at
once. Every node knows its depth; trees deeper than ``MAX_TREE_DEPTH`` cannot
be constructed, which keeps the recursive walks over a tree bounded.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .exceptions import RuleDepthError

# Generated == and hash take several frames per level, so every walk over a
# tree at this depth stays inside the default recursion limit
MAX_TREE_DEPTH = 128

LiteralValue = Union[int, float, bool, str]


class OperatorKind(str, Enum):
    """Logical operators."""
    AND = "AND"
    OR = "OR"
    NOT = "NOT"

    @property
    def arity(self) -> int:
        return 1 if self is OperatorKind.NOT else 2


class Comparator(str, Enum):
    """Comparison operators allowed in an operand."""
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    EQ = "=="
    NEQ = "!="

    @property
    def is_equality(self) -> bool:
        return self in (Comparator.EQ, Comparator.NEQ)


class LiteralType(str, Enum):
    """Type tags for literal values."""
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"

    @property
    def is_numeric(self) -> bool:
        return self in (LiteralType.INT, LiteralType.FLOAT)


def literal_type_of(value: object) -> LiteralType | None:
    """Return the literal type tag of a Python value, or None if it has none.

    bool is checked before int since ``True`` is also an ``int``.
    """
    if isinstance(value, bool):
        return LiteralType.BOOL
    if isinstance(value, int):
        return LiteralType.INT
    if isinstance(value, float):
        return LiteralType.FLOAT
    if isinstance(value, str):
        return LiteralType.STRING
    return None


@dataclass(frozen=True)
class Literal:
    """A typed literal value (integer, float, boolean or string).

    The tag takes part in equality, so ``Literal.of(1)``, ``Literal.of(1.0)``
    and ``Literal.of(True)`` are three different literals.
    """
    type: LiteralType
    value: LiteralValue

    def __post_init__(self) -> None:
        actual = literal_type_of(self.value)
        if actual is not self.type:
            raise ValueError(
                f"Literal value {self.value!r} does not match type '{self.type.value}'"
            )
        if self.type is LiteralType.FLOAT and not math.isfinite(self.value):
            raise ValueError(f"Float literal must be finite, got {self.value!r}")

    @classmethod
    def of(cls, value: LiteralValue) -> "Literal":
        """Build a literal, inferring its type tag from the value."""
        literal_type = literal_type_of(value)
        if literal_type is None:
            raise ValueError(f"Unsupported literal value: {value!r}")
        return cls(literal_type, value)


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""

    @property
    def depth(self) -> int:
        return 1


@dataclass(frozen=True)
class Operand(Node):
    """Represents a condition such as ``age > 30``."""
    field: str
    comparator: Comparator
    literal: Literal

    def __post_init__(self) -> None:
        if not isinstance(self.field, str) or not self.field:
            raise ValueError("Operand field must be a non-empty string")
        if not isinstance(self.comparator, Comparator):
            object.__setattr__(self, "comparator", Comparator(self.comparator))
        if not isinstance(self.literal, Literal):
            raise ValueError(f"Operand literal must be a Literal, got {self.literal!r}")


@dataclass(frozen=True)
class Operator(Node):
    """Represents a logical operation over one (NOT) or two (AND, OR) children."""
    kind: OperatorKind
    children: tuple[Node, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.kind, OperatorKind):
            object.__setattr__(self, "kind", OperatorKind(self.kind))
        children = tuple(self.children)
        object.__setattr__(self, "children", children)

        if len(children) != self.kind.arity:
            raise ValueError(
                f"{self.kind.value} takes {self.kind.arity} operand(s), got {len(children)}"
            )
        for child in children:
            if not isinstance(child, Node):
                raise ValueError(f"Operator child must be a Node, got {child!r}")

        depth = 1 + max(child.depth for child in children)
        if depth > MAX_TREE_DEPTH:
            raise RuleDepthError(depth, MAX_TREE_DEPTH)
        object.__setattr__(self, "_depth", depth)

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def left(self) -> Node:
        return self.children[0]

    @property
    def right(self) -> Node | None:
        return self.children[1] if len(self.children) > 1 else None


def operand(field: str, comparator: Comparator | str, value: LiteralValue) -> Operand:
    """Shorthand for building an Operand from a plain Python value."""
    return Operand(field, Comparator(comparator), Literal.of(value))


def and_(left: Node, right: Node) -> Operator:
    return Operator(OperatorKind.AND, (left, right))


def or_(left: Node, right: Node) -> Operator:
    return Operator(OperatorKind.OR, (left, right))


def not_(child: Node) -> Operator:
    return Operator(OperatorKind.NOT, (child,))
