"""Classification of top-level blocks into declarations.

Recognized block keywords and the records they produce:

    variable "name"            -> UntypedSection in variables
    resource "type" "name"     -> TypedSection in resources (located at name)
    data "type" "name"         -> TypedSection in data_resources (located at name)
    provider "type"            -> UntypedSection in default_providers
    provider "type" {alias=..} -> TypedSection in providers (named by alias)
    module "name"              -> UntypedSection in modules
    output "name"              -> UntypedSection in outputs

Anything else, including items whose first key is a quoted string, is
not a declaration and is skipped without comment. Items without keys, or
with fewer keys than their keyword needs, are skipped with a warning.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from tfindex.index._internal.positions import from_config_pos
from tfindex.index._internal.properties import extract_property
from tfindex.index.models import Index, TypedSection, UntypedSection
from tfindex.parsing.hcl import ObjectItem, ObjectList, TokenType

log = structlog.get_logger(__name__)

# Minimum number of keys each keyword needs, keyword included.
_REQUIRED_KEYS = {
    "variable": 2,
    "resource": 3,
    "data": 3,
    "provider": 1,
    "module": 2,
    "output": 2,
}


def classify(index: Index, object_list: ObjectList, path: str) -> None:
    """Record every declaration in ``object_list``, in document order."""
    for item in object_list.items:
        if not item.keys:
            pos = item.pos()
            log.warning(
                "declaration.empty_keys",
                path=path,
                line=pos.line,
                column=pos.column,
            )
            continue

        first = item.keys[0].token
        if first.type is not TokenType.IDENT:
            continue

        handler = _HANDLERS.get(first.text)
        if handler is None:
            continue

        if len(item.keys) < _REQUIRED_KEYS[first.text]:
            log.warning(
                "declaration.missing_keys",
                keyword=first.text,
                path=path,
                line=first.pos.line,
                column=first.pos.column,
            )
            continue

        handler(index, item, path)


def _documentation(item: ObjectItem) -> list[str]:
    return [comment.text for comment in item.lead_comment if comment.text]


def _untyped(item: ObjectItem, key: int, path: str) -> UntypedSection:
    token = item.keys[key].token
    return UntypedSection(
        name=token.unquoted(),
        location=from_config_pos(token.pos, path),
        documentation=_documentation(item),
    )


def _typed(item: ObjectItem, path: str) -> TypedSection:
    type_token = item.keys[1].token
    name_token = item.keys[2].token
    return TypedSection(
        type=type_token.unquoted(),
        name=name_token.unquoted(),
        # Point at the name so editors jump to the identifying token.
        location=from_config_pos(name_token.pos, path),
        documentation=_documentation(item),
    )


def _variable(index: Index, item: ObjectItem, path: str) -> None:
    index.variables.append(_untyped(item, 1, path))


def _resource(index: Index, item: ObjectItem, path: str) -> None:
    index.resources.append(_typed(item, path))


def _data(index: Index, item: ObjectItem, path: str) -> None:
    index.data_resources.append(_typed(item, path))


def _module(index: Index, item: ObjectItem, path: str) -> None:
    index.modules.append(_untyped(item, 1, path))


def _output(index: Index, item: ObjectItem, path: str) -> None:
    index.outputs.append(_untyped(item, 1, path))


def _provider(index: Index, item: ObjectItem, path: str) -> None:
    alias = extract_property(item, "alias")
    if alias is None:
        index.default_providers.append(_untyped(item, 0, path))
        return

    if len(item.keys) < 2:
        log.warning(
            "declaration.missing_keys",
            keyword="provider",
            path=path,
            line=item.keys[0].token.pos.line,
            column=item.keys[0].token.pos.column,
        )
        return

    type_token = item.keys[1].token
    index.providers.append(
        TypedSection(
            type=type_token.unquoted(),
            name=alias,
            location=from_config_pos(type_token.pos, path),
            documentation=_documentation(item),
        )
    )


_HANDLERS: dict[str, Callable[[Index, ObjectItem, str], None]] = {
    "variable": _variable,
    "resource": _resource,
    "data": _data,
    "provider": _provider,
    "module": _module,
    "output": _output,
}
