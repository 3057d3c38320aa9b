"""Pydantic models for the ``cargo metadata`` JSON document.

Only the fields the resolver consumes are modelled; everything else cargo
emits is ignored so newer cargo releases keep loading. All models are
frozen: the metadata is shared read-only by every per-crate resolution.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Cargo renders package ids as opaque strings, e.g.
# "serde 1.0.130 (registry+https://github.com/rust-lang/crates.io-index)".
PackageId = str

CRATES_IO_REGISTRY = "registry+https://github.com/rust-lang/crates.io-index"
CRATES_IO_SPARSE_REGISTRY = "sparse+https://index.crates.io/"

_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)


def validate_semver(value: str) -> str:
    """Reject strings that are not a full ``MAJOR.MINOR.PATCH`` version."""
    if not _SEMVER_RE.match(value):
        raise ValueError(f"Invalid semantic version: {value!r}")
    return value


class _MetadataModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class DependencyKind(str, Enum):
    """Kind of a declared dependency.

    Cargo emits ``null`` for normal dependencies; kinds this version does
    not know about map to UNKNOWN.
    """

    NORMAL = "normal"
    DEV = "dev"
    BUILD = "build"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "DependencyKind":
        if value is None:
            return cls.NORMAL
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return cls.UNKNOWN


class Dependency(_MetadataModel):
    """A dependency requirement as declared in a package manifest."""

    name: str
    source: Optional[str] = None
    req: str = "*"
    kind: DependencyKind = DependencyKind.NORMAL
    rename: Optional[str] = None
    optional: bool = False
    uses_default_features: bool = True
    features: List[str] = Field(default_factory=list)
    # cfg expression or target triple, e.g. "cfg(unix)"
    target: Optional[str] = None

    @field_validator("kind", mode="before")
    @classmethod
    def parse_kind(cls, v: Any) -> DependencyKind:
        return DependencyKind.parse(v)


class Target(_MetadataModel):
    """A build target (lib, bin, custom-build, ...) of a package."""

    name: str
    kind: List[str] = Field(default_factory=list)
    crate_types: List[str] = Field(default_factory=list)
    src_path: Path
    edition: Optional[str] = None

    def has_kind(self, *kinds: str) -> bool:
        return any(k in kinds for k in self.kind)


class Package(_MetadataModel):
    """One package entry of ``cargo metadata``."""

    id: PackageId
    name: str
    version: str
    source: Optional[str] = None
    dependencies: List[Dependency] = Field(default_factory=list)
    targets: List[Target] = Field(default_factory=list)
    features: Dict[str, List[str]] = Field(default_factory=dict)
    manifest_path: Path
    authors: List[str] = Field(default_factory=list)
    edition: str = "2015"

    @field_validator("version")
    @classmethod
    def check_version(cls, v: str) -> str:
        return validate_semver(v)

    def is_crates_io(self, extra_registries: Iterable[str] = ()) -> bool:
        """Return True if the package comes from the public crates.io registry."""
        if self.source is None:
            return False
        known = {CRATES_IO_REGISTRY, CRATES_IO_SPARSE_REGISTRY, *extra_registries}
        return self.source in known


class DepKindInfo(_MetadataModel):
    kind: DependencyKind = DependencyKind.NORMAL
    target: Optional[str] = None

    @field_validator("kind", mode="before")
    @classmethod
    def parse_kind(cls, v: Any) -> DependencyKind:
        return DependencyKind.parse(v)


class NodeDep(_MetadataModel):
    """A resolved edge from a resolve node to another package."""

    name: str
    pkg: PackageId
    dep_kinds: List[DepKindInfo] = Field(default_factory=list)


class Node(_MetadataModel):
    """A node of the resolve graph: one resolved package instance."""

    id: PackageId
    deps: List[NodeDep] = Field(default_factory=list)
    dependencies: List[PackageId] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)


class Resolve(_MetadataModel):
    nodes: List[Node] = Field(default_factory=list)
    root: Optional[PackageId] = None


class Metadata(_MetadataModel):
    """Top-level ``cargo metadata --format-version 1`` document."""

    packages: List[Package] = Field(default_factory=list)
    workspace_members: List[PackageId] = Field(default_factory=list)
    resolve: Optional[Resolve] = None
    workspace_root: Optional[Path] = None
    target_directory: Optional[Path] = None
    version: int = 1

    @field_validator("version")
    @classmethod
    def check_format_version(cls, v: int) -> int:
        if v != 1:
            raise ValueError(f"Unsupported cargo metadata format version: {v}")
        return v


__all__ = [
    "CRATES_IO_REGISTRY",
    "CRATES_IO_SPARSE_REGISTRY",
    "Dependency",
    "DependencyKind",
    "DepKindInfo",
    "Metadata",
    "Node",
    "NodeDep",
    "Package",
    "PackageId",
    "Resolve",
    "Target",
    "validate_semver",
]
