"""Cargo metadata models and indexing."""

from .indexed import (
    IndexedMetadata,
    MetadataError,
    load_metadata_file,
    load_metadata_json,
    run_cargo_metadata,
)
from .models import (
    Dependency,
    DependencyKind,
    Metadata,
    Node,
    NodeDep,
    Package,
    PackageId,
    Target,
)

__all__ = [
    "Dependency",
    "DependencyKind",
    "IndexedMetadata",
    "Metadata",
    "MetadataError",
    "Node",
    "NodeDep",
    "Package",
    "PackageId",
    "Target",
    "load_metadata_file",
    "load_metadata_json",
    "run_cargo_metadata",
]
