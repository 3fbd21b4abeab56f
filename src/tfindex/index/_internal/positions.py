"""Translation between parser position spaces and index ``Position``.

The configuration parser and the interpolation parser each have their own
position type. These adapters are the only place either one is turned
into a ``Position``; every result carries the file path it came from.
"""

from __future__ import annotations

from tfindex.index.models import Position
from tfindex.parsing import hcl, hil


def from_config_pos(pos: hcl.Pos, path: str) -> Position:
    return Position(filename=path, offset=pos.offset, line=pos.line, column=pos.column)


def from_expr_pos(pos: hil.Pos, path: str) -> Position:
    """Interpolation positions have no offset; it is reported as 0."""
    return Position(filename=path, offset=0, line=pos.line, column=pos.column)


def to_expr_pos(pos: hcl.Pos) -> hil.Pos:
    return hil.Pos(filename=pos.filename, line=pos.line, column=pos.column)
