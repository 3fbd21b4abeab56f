"""Declaration and reference index for Terraform configuration."""

from tfindex.index.collector import collect, collect_bytes
from tfindex.index.models import (
    INDEX_VERSION,
    Error,
    Index,
    Position,
    ReferenceList,
    TypedSection,
    UntypedSection,
)

__all__ = [
    "INDEX_VERSION",
    "Error",
    "Index",
    "Position",
    "ReferenceList",
    "TypedSection",
    "UntypedSection",
    "collect",
    "collect_bytes",
]
