"""Interpolation template language: syntax tree and parser."""

from tfindex.parsing.hil.ast import (
    Arithmetic,
    ArithmeticOp,
    Call,
    Conditional,
    Index,
    LiteralKind,
    LiteralNode,
    Node,
    Output,
    Pos,
    VariableAccess,
)
from tfindex.parsing.hil.parser import parse, parse_with_position

__all__ = [
    "Arithmetic",
    "ArithmeticOp",
    "Call",
    "Conditional",
    "Index",
    "LiteralKind",
    "LiteralNode",
    "Node",
    "Output",
    "Pos",
    "VariableAccess",
    "parse",
    "parse_with_position",
]
