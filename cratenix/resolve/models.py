"""Resolved crate models.

These are the records handed to the code generation stage. ``ResolvedSource``
is a closed discriminated union keyed by ``type``; every model is frozen.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Annotated, Dict, List, Literal, Optional, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cratenix.metadata.models import PackageId, validate_semver


class _ResolvedModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class CratesIo(_ResolvedModel):
    """Fetched from crates.io.

    ``sha256`` is left empty here and filled in by a later prefetch pass.
    """

    type: Literal["CratesIo"] = "CratesIo"
    sha256: Optional[str] = None


class Git(_ResolvedModel):
    """Fetched from a git remote at a pinned revision."""

    type: Literal["Git"] = "Git"
    url: str
    rev: str
    ref: Optional[str] = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        parts = urlsplit(v)
        if parts.query or parts.fragment or "?" in v or "#" in v:
            raise ValueError(f"git url must not carry a query or fragment: {v}")
        return v

    @field_validator("rev")
    @classmethod
    def validate_rev(cls, v: str) -> str:
        if not v:
            raise ValueError("git rev must not be empty")
        return v


class LocalDirectory(_ResolvedModel):
    """Read from the local filesystem, relative to the output file."""

    type: Literal["LocalDirectory"] = "LocalDirectory"
    path: str


ResolvedSource = Annotated[
    Union[CratesIo, Git, LocalDirectory], Field(discriminator="type")
]


class BuildTarget(_ResolvedModel):
    """A build target with its source path relative to the package directory."""

    name: str
    src_path: str

    @field_validator("src_path")
    @classmethod
    def validate_src_path(cls, v: str) -> str:
        path = PurePosixPath(v)
        if path.is_absolute() or ".." in path.parts:
            raise ValueError(f"src_path must stay inside the package: {v}")
        return v


class ResolvedDependency(_ResolvedModel):
    """A dependency of a crate, matched against the resolve graph."""

    name: str
    # New name for the dependency if it is renamed.
    rename: Optional[str] = None
    package_id: PackageId
    # cfg expressions or target triples that enable the dependency.
    targets: List[str] = Field(default_factory=list)
    optional: bool = False
    uses_default_features: bool = True
    features: List[str] = Field(default_factory=list)


class CrateDerivation(_ResolvedModel):
    """All data necessary for creating a derivation for a crate."""

    package_id: PackageId
    crate_name: str
    edition: str
    authors: List[str] = Field(default_factory=list)
    version: str
    source: ResolvedSource
    dependencies: List[ResolvedDependency] = Field(default_factory=list)
    build_dependencies: List[ResolvedDependency] = Field(default_factory=list)
    # Which feature (key) enables which other features (values).
    features: Dict[str, List[str]] = Field(default_factory=dict)
    # Features cargo resolved for a default build.
    resolved_default_features: List[str] = Field(default_factory=list)
    build: Optional[BuildTarget] = None
    lib: Optional[BuildTarget] = None
    has_bin: bool = False
    proc_macro: bool = False
    is_root_or_workspace_member: bool = False

    @field_validator("version")
    @classmethod
    def check_version(cls, v: str) -> str:
        return validate_semver(v)

    @field_validator("features")
    @classmethod
    def sort_features(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        return {name: list(v[name]) for name in sorted(v)}


__all__ = [
    "BuildTarget",
    "CrateDerivation",
    "CratesIo",
    "Git",
    "LocalDirectory",
    "ResolvedDependency",
    "ResolvedSource",
]
