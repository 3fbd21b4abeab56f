"""Scalar property lookup inside a block body."""

from __future__ import annotations

from tfindex.parsing.hcl import LiteralType, ObjectItem, ObjectType


def extract_property(item: ObjectItem, name: str) -> str | None:
    """Return the unquoted literal bound to ``name`` in ``item``'s body.

    None when the body is not an object, or holds no such key bound to a
    literal. The first matching literal wins.
    """
    if not isinstance(item.val, ObjectType):
        return None

    for candidate in item.val.object_list.items:
        if not candidate.keys or candidate.keys[0].token.unquoted() != name:
            continue
        if isinstance(candidate.val, LiteralType):
            return candidate.val.token.unquoted()
    return None
