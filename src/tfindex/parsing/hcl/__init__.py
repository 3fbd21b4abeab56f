"""HCL configuration language: syntax tree and parser."""

from tfindex.parsing.hcl.ast import (
    Comment,
    File,
    ListType,
    LiteralType,
    Node,
    ObjectItem,
    ObjectKey,
    ObjectList,
    ObjectType,
    Pos,
    Token,
    TokenType,
    walk,
)
from tfindex.parsing.hcl.parser import parse

__all__ = [
    "Comment",
    "File",
    "ListType",
    "LiteralType",
    "Node",
    "ObjectItem",
    "ObjectKey",
    "ObjectList",
    "ObjectType",
    "Pos",
    "Token",
    "TokenType",
    "parse",
    "walk",
]
