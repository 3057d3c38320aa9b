"""Indexed view of ``cargo metadata`` output.

The resolver looks packages and resolve nodes up by package id many times
per crate, so the raw metadata lists are indexed once up front.
"""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Union

from pydantic import ValidationError

from cratenix.config.schema import GenerateConfig
from cratenix.metadata.models import Metadata, Node, Package, PackageId

logger = logging.getLogger("cratenix.metadata.indexed")


class MetadataError(Exception):
    """Cargo metadata could not be obtained or is malformed."""

    pass


@dataclass(frozen=True)
class IndexedMetadata:
    """Package and resolve-node lookups keyed by package id.

    Attributes:
        root: Id of the root package, if the workspace has one.
        workspace_members: Ids of all workspace members.
        pkgs_by_id: Package records.
        nodes_by_id: Resolve graph nodes.
    """

    root: Optional[PackageId] = None
    workspace_members: FrozenSet[PackageId] = frozenset()
    pkgs_by_id: Dict[PackageId, Package] = field(default_factory=dict)
    nodes_by_id: Dict[PackageId, Node] = field(default_factory=dict)

    @classmethod
    def from_metadata(cls, metadata: Metadata) -> "IndexedMetadata":
        """Index a parsed metadata document.

        Raises:
            MetadataError: If the metadata has no resolve graph (cargo was
                run with ``--no-deps``).
        """
        if metadata.resolve is None:
            raise MetadataError(
                "cargo metadata has no resolve graph; do not use --no-deps"
            )

        pkgs_by_id: Dict[PackageId, Package] = {}
        for package in metadata.packages:
            if package.id in pkgs_by_id:
                logger.warning("Duplicate package id in metadata: %s", package.id)
            pkgs_by_id[package.id] = package

        nodes_by_id = {node.id: node for node in metadata.resolve.nodes}

        logger.debug(
            "Indexed %d packages and %d resolve nodes",
            len(pkgs_by_id),
            len(nodes_by_id),
        )
        return cls(
            root=metadata.resolve.root,
            workspace_members=frozenset(metadata.workspace_members),
            pkgs_by_id=pkgs_by_id,
            nodes_by_id=nodes_by_id,
        )

    def is_root_or_workspace_member(self, package_id: PackageId) -> bool:
        return package_id == self.root or package_id in self.workspace_members

    def sorted_packages(self) -> List[Package]:
        """Packages in ascending package-id order."""
        return [self.pkgs_by_id[pkg_id] for pkg_id in sorted(self.pkgs_by_id)]


def load_metadata_json(text: str) -> IndexedMetadata:
    """Parse and index a ``cargo metadata`` JSON string.

    Raises:
        MetadataError: If the text is not valid metadata JSON.
    """
    try:
        metadata = Metadata.model_validate_json(text)
    except ValidationError as exc:
        raise MetadataError(f"Invalid cargo metadata: {exc}") from exc
    return IndexedMetadata.from_metadata(metadata)


def load_metadata_file(path: Union[str, Path]) -> IndexedMetadata:
    """Load metadata previously captured with ``cargo metadata > file.json``."""
    path = Path(path)
    logger.info("Loading cargo metadata from %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataError(f"Cannot read {path}: {exc}") from exc
    return load_metadata_json(text)


def cargo_metadata_command(config: GenerateConfig) -> List[str]:
    cmd = [
        "cargo",
        "metadata",
        "--format-version",
        "1",
        "--manifest-path",
        str(config.cargo_toml),
    ]
    if config.locked:
        cmd.append("--locked")
    if config.offline:
        cmd.append("--offline")
    return cmd


def run_cargo_metadata(config: GenerateConfig) -> IndexedMetadata:
    """Run ``cargo metadata`` for the configured manifest and index the result.

    Raises:
        MetadataError: If cargo is missing, fails, or prints invalid output.
    """
    cmd = cargo_metadata_command(config)
    logger.debug("Running: %s", " ".join(cmd))
    try:
        res = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as exc:
        raise MetadataError(f"Failed to run cargo: {exc}") from exc

    if res.returncode != 0:
        logger.error("cargo metadata failed for %s: %s", config.cargo_toml, res.stderr)
        raise MetadataError(
            f"cargo metadata exited with status {res.returncode}: {res.stderr.strip()}"
        )

    return load_metadata_json(res.stdout)


def render_json(model) -> str:
    """Pretty JSON dump of a metadata model for diagnostics, or "ERROR"."""
    try:
        return json.dumps(model.model_dump(mode="json"), indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return "ERROR"


__all__ = [
    "IndexedMetadata",
    "MetadataError",
    "cargo_metadata_command",
    "load_metadata_file",
    "load_metadata_json",
    "render_json",
    "run_cargo_metadata",
]
