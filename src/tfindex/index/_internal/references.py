"""Reference extraction from interpolations inside literals.

Every literal is parsed as a template anchored at the literal's own
position. Each variable access ``kind.name[.path]`` found in it becomes
one location under ``index.references[name]``; ``var`` is reported as
``variable``. The map is keyed by name alone, so ``var.x`` and
``aws_instance.x`` share an entry.
"""

from __future__ import annotations

import structlog

from tfindex.core.errors import HilSyntaxError
from tfindex.index._internal.positions import from_expr_pos, to_expr_pos
from tfindex.index.models import Error, Index, Position
from tfindex.parsing import hil
from tfindex.parsing.hcl import LiteralType

log = structlog.get_logger(__name__)

_KIND_ALIASES = {"var": "variable"}


def resolve_literal(
    index: Index,
    literal: LiteralType,
    path: str,
    *,
    strict: bool = False,
) -> None:
    """Record references found in ``literal``.

    A malformed interpolation is recorded as an ``Error`` at the reported
    position and the literal is skipped.
    """
    token = literal.token
    try:
        root = hil.parse_with_position(token.text, to_expr_pos(token.pos))
    except HilSyntaxError as e:
        location = from_expr_pos(e.pos, path) if e.pos is not None else Position(filename=path)
        log.debug("reference.parse_failed", path=path, message=e.message, line=location.line)
        index.errors.append(Error(message=e.message, location=location))
        return

    def visit(node: hil.Node) -> None:
        if isinstance(node, hil.VariableAccess):
            add_reference(index, node.name, from_expr_pos(node.pos, path), strict=strict)

    root.accept(visit)


def add_reference(index: Index, reference: str, location: Position, *, strict: bool = False) -> None:
    """Record one occurrence of a dotted ``reference``.

    References with fewer than two components cannot be attributed to a
    declaration; they are logged and, with ``strict``, recorded as errors.
    """
    parts = reference.split(".", 2)
    if len(parts) < 2:
        log.warning(
            "reference.unresolved",
            reference=reference,
            path=location.filename,
            line=location.line,
            column=location.column,
        )
        if strict:
            index.errors.append(
                Error(message=f"Cannot understand reference {reference}", location=location)
            )
        return

    kind, name = parts[0], parts[1]
    index.add_reference(
        name,
        _KIND_ALIASES.get(kind, kind),
        parts[2] if len(parts) > 2 else None,
        location,
    )
