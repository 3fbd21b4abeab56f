"""Index data model.

An ``Index`` is created empty and mutated by every ``collect`` call made
against it, so several files can share one instance. Nothing is ever
rolled back. Field and list order is document order; serialized field
names are camelCase.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from tfindex.core.errors import HclSyntaxError
    from tfindex.parsing.hcl import File

INDEX_VERSION = "1.2.0"


class _IndexModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Position(_IndexModel):
    """File-stamped source location.

    ``offset`` is 0 for locations that came out of the interpolation
    parser, which does not track character offsets.
    """

    filename: str = ""
    offset: int = 0
    line: int = 0
    column: int = 0


class UntypedSection(_IndexModel):
    """Variable, module, output or default (unaliased) provider."""

    name: str
    location: Position = Field(default_factory=Position)
    documentation: list[str] = Field(default_factory=list)


class TypedSection(_IndexModel):
    """Resource, data source or aliased provider."""

    type: str
    name: str
    location: Position = Field(default_factory=Position)
    documentation: list[str] = Field(default_factory=list)


class ReferenceList(_IndexModel):
    """Every occurrence of one canonical name.

    ``type`` and ``path`` reflect the most recently recorded occurrence.
    """

    name: str
    type: str = ""
    path: str | None = None
    locations: list[Position] = Field(default_factory=list)


class Error(_IndexModel):
    message: str
    location: Position = Field(default_factory=Position)


class Index(_IndexModel):
    version: str = INDEX_VERSION
    errors: list[Error] = Field(default_factory=list)
    variables: list[UntypedSection] = Field(default_factory=list)
    default_providers: list[UntypedSection] = Field(default_factory=list)
    providers: list[TypedSection] = Field(default_factory=list)
    resources: list[TypedSection] = Field(default_factory=list)
    data_resources: list[TypedSection] = Field(default_factory=list)
    modules: list[UntypedSection] = Field(default_factory=list)
    outputs: list[UntypedSection] = Field(default_factory=list)
    references: dict[str, ReferenceList] = Field(default_factory=dict)
    raw_ast: Any = None

    @field_serializer("raw_ast")
    def serialize_raw_ast(self, raw_ast: Any) -> Any:
        if hasattr(raw_ast, "to_dict"):
            return raw_ast.to_dict()
        return raw_ast

    def collect(
        self,
        file: File,
        path: str,
        keep_raw_tree: bool = False,
        *,
        strict_references: bool = False,
    ) -> None:
        """Index one parsed file into this index."""
        from tfindex.index.collector import collect

        collect(self, file, path, keep_raw_tree, strict_references=strict_references)

    def collect_bytes(
        self,
        content: bytes | str,
        path: str,
        keep_raw_tree: bool = False,
        *,
        strict_references: bool = False,
    ) -> HclSyntaxError | None:
        """Parse and index raw content.

        A configuration syntax error is recorded in ``errors`` and returned;
        it is never raised.
        """
        from tfindex.index.collector import collect_bytes

        return collect_bytes(
            self, content, path, keep_raw_tree, strict_references=strict_references
        )

    def add_reference(self, name: str, kind: str, path: str | None, location: Position) -> None:
        """Upsert the reference list for ``name`` and append one location."""
        entry = self.references.get(name)
        if entry is None:
            entry = self.references[name] = ReferenceList(name=name)
        entry.type = kind
        entry.path = path
        entry.locations.append(location)

    def merge(self, other: Index) -> None:
        """Fold ``other`` into this index.

        Lists are appended in order. References follow the same rules as
        during collection: locations accumulate, type and path are taken
        from ``other``.
        """
        self.errors.extend(other.errors)
        self.variables.extend(other.variables)
        self.default_providers.extend(other.default_providers)
        self.providers.extend(other.providers)
        self.resources.extend(other.resources)
        self.data_resources.extend(other.data_resources)
        self.modules.extend(other.modules)
        self.outputs.extend(other.outputs)
        for name, refs in other.references.items():
            entry = self.references.get(name)
            if entry is None:
                self.references[name] = refs.model_copy(deep=True)
                continue
            entry.type = refs.type
            entry.path = refs.path
            entry.locations.extend(loc.model_copy() for loc in refs.locations)
        if other.raw_ast is not None:
            self.raw_ast = other.raw_ast

    def to_json(self, *, indent: int | None = 2) -> str:
        exclude = {"raw_ast"} if self.raw_ast is None else None
        return self.model_dump_json(by_alias=True, indent=indent, exclude=exclude)

    @classmethod
    def from_json(cls, data: str | bytes) -> Index:
        return cls.model_validate_json(data)
