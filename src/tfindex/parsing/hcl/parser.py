"""Lark-based parser for the HCL configuration language.

Produces the closed node set in ``tfindex.parsing.hcl.ast``. String
literals are single opaque tokens here: their ``${ ... }`` interpolations
are left for the expression parser, so a malformed interpolation never
fails the configuration parse.

Comments are ignored by the grammar but captured through a lexer
callback and attached afterwards as lead comments: the run of own-line
comments ending directly above an item.
"""

from __future__ import annotations

from contextvars import ContextVar

from lark import Lark, Token as LarkToken, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from tfindex.core.errors import HclSyntaxError
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

_GRAMMAR = r'''
start: _item*

_item: (assignment | block) _COMMA?

assignment: key EQUAL value
block: key+ object
key: IDENT | STRING

?value: literal
      | object
      | list

literal: STRING | HEREDOC | NUMBER | IDENT
object: LBRACE _item* RBRACE
list: LBRACKET (value (_COMMA value)* _COMMA?)? RBRACKET

EQUAL: "="
LBRACE: "{"
RBRACE: "}"
LBRACKET: "["
RBRACKET: "]"
_COMMA: ","

IDENT: /[A-Za-z_][A-Za-z0-9_\-.]*/
NUMBER: /-?(?:0[xX][0-9a-fA-F]+|\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)/
STRING: /"(?:[^"\\$\n]|\\.|\$\$\{|\$(?!\{)|\$\{(?:[^"}]|"(?:[^"\\]|\\.)*")*\})*"/
HEREDOC: /<<-?(?P<heredoc_tag>[A-Za-z_][A-Za-z0-9_\-]*)[ \t]*\r?\n(?:.*\n)*?[ \t]*(?P=heredoc_tag)(?=\r?\n|$)/

COMMENT: /#[^\n]*/
       | /\/\/[^\n]*/
       | /\/\*(?:.|\n)*?\*\//

%ignore /[ \t\f\r\n]+/
%ignore COMMENT
'''

_BOOL_LITERALS = frozenset({"true", "false"})

# Comments seen by the lexer during the parse running in this context.
_comment_sink: ContextVar[list[LarkToken] | None] = ContextVar("hcl_comment_sink", default=None)


def _collect_comment(token: LarkToken) -> LarkToken:
    sink = _comment_sink.get()
    if sink is not None:
        sink.append(token)
    return token


_PARSER = Lark(
    _GRAMMAR,
    parser="lalr",
    lexer="contextual",
    maybe_placeholders=False,
    lexer_callbacks={"COMMENT": _collect_comment},
)


# Deeper structures are rejected before tree building and traversal
# run out of interpreter stack.
MAX_NESTING = 100


def parse(content: bytes | str) -> File:
    """Parse HCL source into a ``File``.

    Raises:
        HclSyntaxError: The source is not valid HCL. ``pos`` carries the
            best-known location of the failure.
    """
    text = _decode(content)
    builder = _Builder(text)

    sink: list[LarkToken] = []
    reset = _comment_sink.set(sink)
    try:
        tree = _PARSER.parse(text)
    except UnexpectedInput as e:
        raise builder.syntax_error(e) from e
    finally:
        _comment_sink.reset(reset)

    root = ObjectList(items=[builder.item(child, 1) for child in _subtrees(tree)])
    comments = [builder.comment(token) for token in sink]
    own_line = [c for c, token in zip(comments, sink, strict=True) if builder.starts_line(token)]
    _attach_lead_comments(root, own_line)
    return File(node=root, comments=comments)


def _decode(content: bytes | str) -> str:
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise HclSyntaxError.at(f"invalid UTF-8 in source: {e.reason}", Pos(offset=e.start)) from e


def _subtrees(tree: Tree) -> list[Tree]:
    return [child for child in tree.children if isinstance(child, Tree)]


class _Builder:
    """Turns lark trees into nodes for one source text.

    Lark reports character offsets; ``Pos.offset`` is a UTF-8 byte offset.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._byte_offsets: list[int] | None = None
        if not text.isascii():
            offsets = [0]
            for ch in text:
                offsets.append(offsets[-1] + len(ch.encode("utf-8", "surrogatepass")))
            self._byte_offsets = offsets

    def byte_offset(self, char_offset: int) -> int:
        if self._byte_offsets is None:
            return char_offset
        return self._byte_offsets[min(char_offset, len(self._byte_offsets) - 1)]

    def pos(self, token: LarkToken) -> Pos:
        return Pos(
            offset=self.byte_offset(token.start_pos or 0),
            line=token.line or 0,
            column=token.column or 0,
        )

    def end_pos(self) -> Pos:
        text = self._text
        line = text.count("\n") + 1
        column = len(text) - (text.rfind("\n") + 1) + 1
        return Pos(offset=self.byte_offset(len(text)), line=line, column=column)

    def syntax_error(self, error: UnexpectedInput) -> HclSyntaxError:
        if isinstance(error, UnexpectedToken):
            token = error.token
            expected = " | ".join(sorted(name.lstrip("_") for name in error.expected))
            if token.type == "$END":
                return HclSyntaxError.at(
                    f"unexpected end of input, expected: {expected}", self.end_pos()
                )
            return HclSyntaxError.at(
                f"expected: {expected} got: {token.type.lstrip('_')} {token.value!r}",
                self.pos(token),
            )
        if isinstance(error, UnexpectedCharacters):
            return HclSyntaxError.at(
                f"illegal character {error.char!r}",
                Pos(
                    offset=self.byte_offset(error.pos_in_stream),
                    line=error.line,
                    column=error.column,
                ),
            )
        line = getattr(error, "line", -1)
        column = getattr(error, "column", -1)
        if line is None or line < 1:
            return HclSyntaxError.at("unexpected end of input", self.end_pos())
        return HclSyntaxError.at(str(error), Pos(line=line, column=column))

    def item(self, tree: Tree, depth: int) -> ObjectItem:
        if tree.data == "assignment":
            key, equal, value = tree.children
            return ObjectItem(
                keys=[self.key(key)],
                val=self.value(value, depth),
                assign=self.pos(equal),
            )

        *keys, body = tree.children
        return ObjectItem(keys=[self.key(key) for key in keys], val=self.value(body, depth))

    def key(self, tree: Tree) -> ObjectKey:
        (token,) = tree.children
        token_type = TokenType.IDENT if token.type == "IDENT" else TokenType.STRING
        return ObjectKey(token=Token(type=token_type, text=str(token), pos=self.pos(token)))

    def value(self, tree: Tree, depth: int) -> Node:
        if tree.data == "literal":
            (token,) = tree.children
            return LiteralType(token=self.literal_token(token))

        opening, closing = tree.children[0], tree.children[-1]
        if depth > MAX_NESTING:
            raise HclSyntaxError.at(f"nesting exceeds {MAX_NESTING} levels", self.pos(opening))

        if tree.data == "object":
            items = [self.item(child, depth + 1) for child in _subtrees(tree)]
            return ObjectType(
                lbrace=self.pos(opening),
                rbrace=self.pos(closing),
                object_list=ObjectList(items=items),
            )

        return ListType(
            lbrack=self.pos(opening),
            rbrack=self.pos(closing),
            elements=[self.value(child, depth + 1) for child in _subtrees(tree)],
        )

    def literal_token(self, token: LarkToken) -> Token:
        text = str(token)
        pos = self.pos(token)

        match token.type:
            case "STRING":
                token_type = TokenType.STRING
            case "HEREDOC":
                token_type = TokenType.HEREDOC
            case "NUMBER":
                is_float = not text.lstrip("-").lower().startswith("0x") and any(
                    ch in text for ch in ".eE"
                )
                token_type = TokenType.FLOAT if is_float else TokenType.NUMBER
            case _:
                if text not in _BOOL_LITERALS:
                    raise HclSyntaxError.at(f"Unknown token: IDENT {text}", pos)
                token_type = TokenType.BOOL

        return Token(type=token_type, text=text, pos=pos)

    def comment(self, token: LarkToken) -> Comment:
        return Comment(
            text=str(token).rstrip("\r\n"),
            pos=self.pos(token),
            end_line=token.end_line or token.line or 0,
        )

    def starts_line(self, token: LarkToken) -> bool:
        """True when only whitespace precedes the comment on its line."""
        start = token.start_pos or 0
        line_start = self._text.rfind("\n", 0, start) + 1
        return self._text[line_start:start].strip() == ""


def _attach_lead_comments(root: ObjectList, own_line: list[Comment]) -> None:
    """Attach each run of own-line comments to the item directly below it."""
    by_end_line = {comment.end_line: comment for comment in own_line}
    if not by_end_line:
        return

    def visit(node: Node) -> bool:
        if isinstance(node, ObjectItem) and node.keys:
            group: list[Comment] = []
            line = node.pos().line - 1
            while (comment := by_end_line.get(line)) is not None:
                group.insert(0, comment)
                line = comment.pos.line - 1
            node.lead_comment = group
        return True

    walk(root, visit)
