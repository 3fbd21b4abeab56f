"""Syntax tree for the HCL configuration language.

The node set is closed: a file is an ``ObjectList`` of ``ObjectItem``s,
values are ``LiteralType``, ``ObjectType`` or ``ListType``. Positions are
``Pos`` values in the configuration parser's coordinate space (1-based
line and column, 0-based UTF-8 byte offset).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


@dataclass(frozen=True, slots=True)
class Pos:
    """Source position as produced by the configuration parser."""

    filename: str = ""
    offset: int = 0
    line: int = 0
    column: int = 0

    def is_valid(self) -> bool:
        return self.line > 0

    def with_filename(self, filename: str) -> Pos:
        return replace(self, filename=filename)

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "offset": self.offset,
            "line": self.line,
            "column": self.column,
        }


class TokenType(str, Enum):
    """Lexical class of a key or literal token."""

    IDENT = "IDENT"
    STRING = "STRING"
    HEREDOC = "HEREDOC"
    NUMBER = "NUMBER"
    FLOAT = "FLOAT"
    BOOL = "BOOL"


@dataclass(frozen=True, slots=True)
class Token:
    """A key or literal token. ``text`` is the raw source text, quotes included."""

    type: TokenType
    text: str
    pos: Pos

    def unquoted(self) -> str:
        return self.text.strip('"')

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "text": self.text, "pos": self.pos.to_dict()}


@dataclass(frozen=True, slots=True)
class Comment:
    """A single comment, markers preserved (``# ...``, ``// ...``, ``/* ... */``)."""

    text: str
    pos: Pos
    end_line: int

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "pos": self.pos.to_dict()}


@dataclass(slots=True)
class LiteralType:
    token: Token

    def pos(self) -> Pos:
        return self.token.pos

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "LiteralType", "token": self.token.to_dict()}


@dataclass(slots=True)
class ObjectKey:
    token: Token

    def pos(self) -> Pos:
        return self.token.pos

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "ObjectKey", "token": self.token.to_dict()}


@dataclass(slots=True)
class ObjectItem:
    """``key = value`` or ``key key... { ... }``.

    ``assign`` is the position of ``=`` for assignments, ``None`` for blocks.
    """

    keys: list[ObjectKey]
    val: Node | None
    assign: Pos | None = None
    lead_comment: list[Comment] = field(default_factory=list)

    def pos(self) -> Pos:
        if self.keys:
            return self.keys[0].pos()
        if self.val is not None:
            return self.val.pos()
        return Pos()

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "ObjectItem",
            "keys": [key.to_dict() for key in self.keys],
            "assign": self.assign.to_dict() if self.assign is not None else None,
            "val": self.val.to_dict() if self.val is not None else None,
            "leadComment": [comment.to_dict() for comment in self.lead_comment],
        }


@dataclass(slots=True)
class ObjectList:
    items: list[ObjectItem] = field(default_factory=list)

    def pos(self) -> Pos:
        return self.items[0].pos() if self.items else Pos()

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "ObjectList", "items": [item.to_dict() for item in self.items]}


@dataclass(slots=True)
class ObjectType:
    lbrace: Pos
    rbrace: Pos
    object_list: ObjectList

    def pos(self) -> Pos:
        return self.lbrace

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "ObjectType",
            "lbrace": self.lbrace.to_dict(),
            "rbrace": self.rbrace.to_dict(),
            "list": self.object_list.to_dict(),
        }


@dataclass(slots=True)
class ListType:
    lbrack: Pos
    rbrack: Pos
    elements: list[Node] = field(default_factory=list)

    def pos(self) -> Pos:
        return self.lbrack

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "ListType",
            "lbrack": self.lbrack.to_dict(),
            "rbrack": self.rbrack.to_dict(),
            "list": [node.to_dict() for node in self.elements],
        }


Node = ObjectList | ObjectItem | ObjectKey | ObjectType | ListType | LiteralType


@dataclass(slots=True)
class File:
    node: ObjectList
    comments: list[Comment] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "node": self.node.to_dict(),
            "comments": [comment.to_dict() for comment in self.comments],
        }


def walk(node: Node, fn: Callable[[Node], bool]) -> None:
    """Depth-first pre-order traversal.

    ``fn`` is called for every node; returning False skips that node's
    children.
    """
    if not fn(node):
        return

    match node:
        case ObjectList(items=items):
            for item in items:
                walk(item, fn)
        case ObjectItem(keys=keys, val=val):
            for key in keys:
                walk(key, fn)
            if val is not None:
                walk(val, fn)
        case ObjectType(object_list=object_list):
            walk(object_list, fn)
        case ListType(elements=elements):
            for element in elements:
                walk(element, fn)
        case ObjectKey() | LiteralType():
            pass
