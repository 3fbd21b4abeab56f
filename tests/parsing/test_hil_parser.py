"""Tests for the interpolation template parser."""

from __future__ import annotations

import pytest

from tfindex.core.errors import ErrorCode, HilSyntaxError
from tfindex.parsing.hil import (
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
    parse,
    parse_with_position,
)
from tfindex.parsing.hil.parser import MAX_NESTING


def _variables(root: Node) -> list[VariableAccess]:
    found: list[VariableAccess] = []

    def visit(node: Node) -> None:
        if isinstance(node, VariableAccess):
            found.append(node)

    root.accept(visit)
    return found


class TestTemplates:
    """Literal text and interpolation holes."""

    def test_plain_text(self) -> None:
        root = parse("hello world")

        assert root.exprs == [LiteralNode("hello world", LiteralKind.STRING, Pos("", 1, 1))]

    def test_empty_template(self) -> None:
        assert parse("").exprs == []

    def test_text_and_interpolation(self) -> None:
        root = parse("web-${var.region}-1")

        assert [type(expr) for expr in root.exprs] == [LiteralNode, VariableAccess, LiteralNode]
        assert root.exprs[1] == VariableAccess("var.region", Pos("", 1, 7))
        assert root.exprs[2].value == "-1"  # type: ignore[union-attr]

    def test_escaped_interpolation_is_text(self) -> None:
        root = parse("cost: $${literal} $5")

        assert root.exprs == [LiteralNode("cost: ${literal} $5", LiteralKind.STRING, Pos("", 1, 1))]

    def test_splat_and_numeric_segments(self) -> None:
        names = [node.name for node in _variables(parse("${aws_instance.web.*.id} ${list.0}"))]

        assert names == ["aws_instance.web.*.id", "list.0"]


class TestExpressions:
    """Operators, calls, indexing and nested strings."""

    def test_literals(self) -> None:
        root = parse("${1}${2.5}${true}")

        assert [(expr.value, expr.kind) for expr in root.exprs] == [  # type: ignore[union-attr]
            (1, LiteralKind.INT),
            (2.5, LiteralKind.FLOAT),
            (True, LiteralKind.BOOL),
        ]

    def test_precedence(self) -> None:
        (expr,) = parse("${1 + 2 * 3}").exprs

        assert isinstance(expr, Arithmetic)
        assert expr.op is ArithmeticOp.ADD
        right = expr.exprs[1]
        assert isinstance(right, Arithmetic)
        assert right.op is ArithmeticOp.MUL

    def test_left_associative(self) -> None:
        (expr,) = parse("${10 - 4 - 3}").exprs

        assert isinstance(expr, Arithmetic)
        assert expr.op is ArithmeticOp.SUB
        assert isinstance(expr.exprs[0], Arithmetic)

    def test_unary(self) -> None:
        (expr,) = parse("${!var.enabled}").exprs

        assert isinstance(expr, Arithmetic)
        assert expr.op is ArithmeticOp.NOT
        assert expr.exprs == [VariableAccess("var.enabled", Pos("", 1, 4))]

    def test_comparison_and_logic(self) -> None:
        (expr,) = parse("${var.a >= 1 && var.b != 2 || var.c}").exprs

        assert isinstance(expr, Arithmetic)
        assert expr.op is ArithmeticOp.OR
        assert [node.name for node in _variables(expr)] == ["var.a", "var.b", "var.c"]

    def test_conditional(self) -> None:
        (expr,) = parse('${var.prod ? "large" : "small"}').exprs

        assert isinstance(expr, Conditional)
        assert expr.cond == VariableAccess("var.prod", Pos("", 1, 3))
        assert isinstance(expr.true_expr, LiteralNode)
        assert expr.true_expr.value == "large"

    def test_call_with_nested_string(self) -> None:
        (expr,) = parse('${lookup(var.amis, "us-east-1")}').exprs

        assert isinstance(expr, Call)
        assert expr.func == "lookup"
        assert expr.args[0] == VariableAccess("var.amis", Pos("", 1, 10))
        assert expr.args[1] == LiteralNode("us-east-1", LiteralKind.STRING, Pos("", 1, 21))

    def test_call_without_arguments(self) -> None:
        (expr,) = parse("${timestamp()}").exprs

        assert isinstance(expr, Call)
        assert expr.args == []

    def test_nested_string_interpolates(self) -> None:
        (expr,) = parse('${upper("x-${var.name}")}').exprs

        assert isinstance(expr, Call)
        inner = expr.args[0]
        assert isinstance(inner, Output)
        assert [node.name for node in _variables(inner)] == ["var.name"]

    def test_index(self) -> None:
        (expr,) = parse("${var.zones[count.index]}").exprs

        assert isinstance(expr, Index)
        assert [node.name for node in _variables(expr)] == ["var.zones", "count.index"]

    def test_parentheses(self) -> None:
        (expr,) = parse("${(1 + 2) * 3}").exprs

        assert isinstance(expr, Arithmetic)
        assert expr.op is ArithmeticOp.MUL


class TestAccept:
    def test_children_visited_before_parent(self) -> None:
        order: list[str] = []
        parse("${f(var.a, var.b)}").accept(lambda node: order.append(type(node).__name__))

        assert order == ["VariableAccess", "VariableAccess", "Call", "Output"]


class TestPositions:
    """Positions are relocated onto the basis."""

    def test_first_line_is_offset_by_basis_column(self) -> None:
        root = parse_with_position('"${var.foo}"', Pos("main.tf", 2, 11))

        (access,) = _variables(root)
        assert access.pos == Pos("main.tf", 2, 14)

    def test_later_lines_start_at_column_one(self) -> None:
        text = "<<EOF\n  name ${var.name}\nEOF"
        root = parse_with_position(text, Pos("", 5, 9))

        (access,) = _variables(root)
        assert access.pos == Pos("", 6, 10)

    def test_output_carries_basis(self) -> None:
        basis = Pos("a.tf", 3, 4)

        assert parse_with_position("text", basis).pos == basis


class TestErrors:
    """Malformed templates raise with an absolute position."""

    def test_dangling_operator(self) -> None:
        with pytest.raises(HilSyntaxError) as exc_info:
            parse_with_position('"${1 +}"', Pos("", 2, 11))

        error = exc_info.value
        assert error.code is ErrorCode.EXPRESSION_SYNTAX_ERROR
        assert error.pos.line == 2
        assert 11 <= error.pos.column <= 18

    def test_unterminated_interpolation_reports_end_of_text(self) -> None:
        with pytest.raises(HilSyntaxError) as exc_info:
            parse_with_position("${var.x", Pos("", 1, 1))

        assert exc_info.value.pos == Pos("", 1, 8)

    def test_empty_interpolation(self) -> None:
        with pytest.raises(HilSyntaxError):
            parse("${}")

    def test_illegal_character(self) -> None:
        with pytest.raises(HilSyntaxError):
            parse("${var.a @ 1}")

    def test_excessive_nesting(self) -> None:
        with pytest.raises(HilSyntaxError, match="nesting exceeds") as exc_info:
            parse("${" + "!" * (MAX_NESTING * 3) + "true}")

        assert exc_info.value.pos.line == 1

    def test_nesting_within_limit(self) -> None:
        output = parse("${" + "!" * (MAX_NESTING - 1) + "true}")

        assert isinstance(output.exprs[0], Arithmetic)
