"""One-pass traversal that feeds a parsed file into an ``Index``.

The file's top-level item list goes to the declaration classifier; every
literal anywhere in the tree goes to the reference resolver. Only a
configuration syntax error stops a file from being traversed, and even
that is recorded rather than raised by ``collect_bytes``.
"""

from __future__ import annotations

import structlog

from tfindex.core.errors import HclSyntaxError
from tfindex.index._internal.declarations import classify
from tfindex.index._internal.positions import from_config_pos
from tfindex.index._internal.references import resolve_literal
from tfindex.index.models import Error, Index, Position
from tfindex.parsing import hcl

log = structlog.get_logger(__name__)


def collect(
    index: Index,
    file: hcl.File,
    path: str,
    keep_raw_tree: bool = False,
    *,
    strict_references: bool = False,
) -> None:
    root = file.node

    def visit(node: hcl.Node) -> bool:
        match node:
            case hcl.ObjectList() if node is root:
                classify(index, node, path)
            case hcl.LiteralType():
                resolve_literal(index, node, path, strict=strict_references)
        return True

    hcl.walk(root, visit)

    if keep_raw_tree:
        index.raw_ast = file


def collect_bytes(
    index: Index,
    content: bytes | str,
    path: str,
    keep_raw_tree: bool = False,
    *,
    strict_references: bool = False,
) -> HclSyntaxError | None:
    try:
        file = hcl.parse(content)
    except HclSyntaxError as e:
        log.debug("collect.parse_failed", path=path, message=e.message)
        index.errors.append(Error(message=e.message, location=_error_location(e, path)))
        return e

    collect(index, file, path, keep_raw_tree, strict_references=strict_references)
    return None


def _error_location(error: HclSyntaxError, path: str) -> Position:
    if isinstance(error.pos, hcl.Pos):
        return from_config_pos(error.pos, path)
    return Position(filename=path)
