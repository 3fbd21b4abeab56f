"""Lark-based parser for interpolation templates.

A template is literal text with embedded ``${ ... }`` expressions.
Expressions support dotted variable access, function calls, indexing,
arithmetic, comparison, boolean operators, the conditional operator and
nested quoted strings which may interpolate again.

``parse_with_position`` anchors the template at a known source position,
typically the position of the string literal it was taken from, so that
every node carries an absolute location.
"""

from __future__ import annotations

from lark import Lark, Token as LarkToken, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from tfindex.core.errors import HilSyntaxError
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

# Top-level and nested-string interpolations are separate rules so the
# contextual lexer never offers TEXT inside a quoted string or STR_TEXT
# outside one.
_GRAMMAR = r'''
start: _tpart*
_tpart: TEXT | interpolation
interpolation: INTERP_START expr INTERP_END

string: QUOTE _spart* QUOTE
_spart: STR_TEXT | str_interpolation
str_interpolation: INTERP_START expr INTERP_END

?expr: or_expr
     | or_expr "?" expr ":" expr                            -> conditional

?or_expr: and_expr
        | or_expr OR and_expr                               -> binary

?and_expr: cmp_expr
         | and_expr AND cmp_expr                            -> binary

?cmp_expr: sum_expr
         | sum_expr (EQ | NEQ | LTE | GTE | LT | GT) sum_expr  -> binary

?sum_expr: product
         | sum_expr (PLUS | MINUS) product                  -> binary

?product: unary
        | product (STAR | SLASH | PERCENT) unary            -> binary

?unary: primary
      | (BANG | MINUS) unary                                -> unary

?primary: NUMBER                                            -> number
        | IDENT                                             -> variable
        | IDENT "(" [expr ("," expr)*] ")"                  -> call
        | IDENT "[" expr "]"                                -> index
        | "(" expr ")"
        | string

TEXT.2: /(?:\$\$\{|\$(?!\{)|[^$])+/
STR_TEXT.2: /(?:\\.|\$\$\{|\$(?!\{)|[^"\\$])+/
INTERP_START: "${"
INTERP_END: "}"
QUOTE: "\""

OR: "||"
AND: "&&"
EQ: "=="
NEQ: "!="
LTE: "<="
GTE: ">="
LT: "<"
GT: ">"
PLUS: "+"
MINUS: "-"
STAR: "*"
SLASH: "/"
PERCENT: "%"
BANG: "!"

NUMBER: /\d+(?:\.\d+)?(?:[eE][+-]?\d+)?/
IDENT: /[A-Za-z_][A-Za-z0-9_\-]*(?:\.(?:\*|[A-Za-z0-9_\-]+))*/

%ignore /[ \t\r\n]+/
'''

_PARSER = Lark(
    _GRAMMAR,
    parser="lalr",
    lexer="contextual",
    maybe_placeholders=False,
    propagate_positions=True,
)

# Expressions nested deeper than this are rejected as malformed.
MAX_NESTING = 100

_OPERATORS = {op.value: op for op in ArithmeticOp}

_STRING_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}


def parse(text: str) -> Output:
    """Parse a template positioned at line 1, column 1."""
    return parse_with_position(text, Pos(line=1, column=1))


def parse_with_position(text: str, pos: Pos) -> Output:
    """Parse a template whose first character sits at ``pos``.

    Raises:
        HilSyntaxError: The template is malformed. ``pos`` is absolute,
            computed from the given basis.
    """
    builder = _Builder(pos)
    try:
        tree = _PARSER.parse(text)
    except UnexpectedInput as e:
        raise builder.syntax_error(e, text) from e
    return builder.template(tree)


class _Builder:
    """Turns lark trees into template nodes, relocating positions onto a basis."""

    def __init__(self, basis: Pos) -> None:
        self._basis = basis
        self._depth = 0

    def locate(self, line: int | None, column: int | None) -> Pos:
        line = line or 1
        column = column or 1
        if line == 1:
            return Pos(self._basis.filename, self._basis.line, self._basis.column + column - 1)
        return Pos(self._basis.filename, self._basis.line + line - 1, column)

    def _pos(self, item: Tree | LarkToken) -> Pos:
        if isinstance(item, LarkToken):
            return self.locate(item.line, item.column)
        meta = item.meta
        if getattr(meta, "empty", True):
            return self.locate(1, 1)
        return self.locate(meta.line, meta.column)

    def syntax_error(self, error: UnexpectedInput, text: str) -> HilSyntaxError:
        if isinstance(error, UnexpectedToken):
            token = error.token
            expected = ", ".join(sorted(error.expected))
            if token.type == "$END":
                return HilSyntaxError.at(
                    f"unexpected end of template, expected one of: {expected}",
                    self._end_pos(text),
                )
            # Text tokens swallow the rest of the template; report the first char.
            value = str(token)[:1] if token.type in ("TEXT", "STR_TEXT") else str(token)
            return HilSyntaxError.at(
                f"unexpected {value!r}, expected one of: {expected}",
                self.locate(token.line, token.column),
            )
        if isinstance(error, UnexpectedCharacters):
            return HilSyntaxError.at(
                f"illegal character {error.char!r}",
                self.locate(error.line, error.column),
            )
        return HilSyntaxError.at(str(error), self._end_pos(text))

    def _end_pos(self, text: str) -> Pos:
        line = text.count("\n") + 1
        column = len(text) - (text.rfind("\n") + 1) + 1
        return self.locate(line, column)

    def template(self, tree: Tree) -> Output:
        return Output(exprs=[self._part(child) for child in tree.children], pos=self._basis)

    def _part(self, child: Tree | LarkToken) -> Node:
        if isinstance(child, LarkToken):
            text = str(child).replace("$${", "${")
            if child.type == "STR_TEXT":
                text = _unescape(text)
            return LiteralNode(text, LiteralKind.STRING, self._pos(child))
        # interpolation / str_interpolation: INTERP_START expr INTERP_END
        return self.expr(child.children[1])

    def expr(self, node: Tree | LarkToken) -> Node:
        if isinstance(node, LarkToken):
            raise HilSyntaxError.at(f"unexpected token {node.type}", self._pos(node))

        self._depth += 1
        try:
            if self._depth > MAX_NESTING:
                raise HilSyntaxError.at(
                    f"expression nesting exceeds {MAX_NESTING} levels", self._pos(node)
                )
            return self._expr(node)
        finally:
            self._depth -= 1

    def _expr(self, node: Tree) -> Node:
        children = node.children
        match node.data:
            case "number":
                (token,) = children
                text = str(token)
                if any(ch in text for ch in ".eE"):
                    return LiteralNode(float(text), LiteralKind.FLOAT, self._pos(token))
                return LiteralNode(int(text), LiteralKind.INT, self._pos(token))
            case "variable":
                (token,) = children
                name = str(token)
                if name in ("true", "false"):
                    return LiteralNode(name == "true", LiteralKind.BOOL, self._pos(token))
                return VariableAccess(name, self._pos(token))
            case "call":
                func, *args = children
                return Call(str(func), [self.expr(arg) for arg in args], self._pos(func))
            case "index":
                target, key = children
                return Index(
                    VariableAccess(str(target), self._pos(target)),
                    self.expr(key),
                    self._pos(target),
                )
            case "binary":
                left, op, right = children
                return Arithmetic(
                    _OPERATORS[str(op)], [self.expr(left), self.expr(right)], self._pos(node)
                )
            case "unary":
                op, operand = children
                return Arithmetic(_OPERATORS[str(op)], [self.expr(operand)], self._pos(op))
            case "conditional":
                cond, true_expr, false_expr = children
                return Conditional(
                    self.expr(cond), self.expr(true_expr), self.expr(false_expr), self._pos(node)
                )
            case "string":
                parts = [self._part(child) for child in children[1:-1]]
                if len(parts) == 1 and isinstance(parts[0], LiteralNode):
                    return parts[0]
                return Output(exprs=parts, pos=self._pos(children[0]))
            case other:
                raise HilSyntaxError.at(f"unsupported expression {other!r}", self._pos(node))


def _unescape(text: str) -> str:
    out: list[str] = []
    chars = iter(text)
    for ch in chars:
        if ch == "\\":
            nxt = next(chars, "")
            out.append(_STRING_ESCAPES.get(nxt, "\\" + nxt))
        else:
            out.append(ch)
    return "".join(out)
