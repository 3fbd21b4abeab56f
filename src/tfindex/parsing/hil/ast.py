"""Syntax tree for interpolation templates (``"${var.foo}-suffix"``).

Positions are ``Pos`` values in the expression parser's own coordinate
space: line and column only, there is no character offset.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True, slots=True)
class Pos:
    filename: str = ""
    line: int = 0
    column: int = 0


class LiteralKind(str, Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"


class ArithmeticOp(str, Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    AND = "&&"
    OR = "||"
    NOT = "!"


Visitor = Callable[["Node"], Any]


@dataclass(slots=True)
class LiteralNode:
    value: Any
    kind: LiteralKind
    pos: Pos

    def accept(self, visitor: Visitor) -> None:
        visitor(self)


@dataclass(slots=True)
class VariableAccess:
    """A dotted name such as ``var.region`` or ``aws_instance.web.*.id``."""

    name: str
    pos: Pos

    def accept(self, visitor: Visitor) -> None:
        visitor(self)


@dataclass(slots=True)
class Call:
    func: str
    args: list[Node]
    pos: Pos

    def accept(self, visitor: Visitor) -> None:
        for arg in self.args:
            arg.accept(visitor)
        visitor(self)


@dataclass(slots=True)
class Index:
    target: Node
    key: Node
    pos: Pos

    def accept(self, visitor: Visitor) -> None:
        self.target.accept(visitor)
        self.key.accept(visitor)
        visitor(self)


@dataclass(slots=True)
class Arithmetic:
    """Binary operation, or unary when ``exprs`` holds a single operand."""

    op: ArithmeticOp
    exprs: list[Node]
    pos: Pos

    def accept(self, visitor: Visitor) -> None:
        for expr in self.exprs:
            expr.accept(visitor)
        visitor(self)


@dataclass(slots=True)
class Conditional:
    cond: Node
    true_expr: Node
    false_expr: Node
    pos: Pos

    def accept(self, visitor: Visitor) -> None:
        self.cond.accept(visitor)
        self.true_expr.accept(visitor)
        self.false_expr.accept(visitor)
        visitor(self)


@dataclass(slots=True)
class Output:
    """Concatenation of template parts: literal text and interpolated expressions."""

    exprs: list[Node] = field(default_factory=list)
    pos: Pos = field(default_factory=Pos)

    def accept(self, visitor: Visitor) -> None:
        for expr in self.exprs:
            expr.accept(visitor)
        visitor(self)


Node = LiteralNode | VariableAccess | Call | Index | Arithmetic | Conditional | Output
