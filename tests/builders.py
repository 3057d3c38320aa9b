"""Builders for cargo metadata records used across the test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional

from cratenix.metadata import IndexedMetadata, Metadata, Package
from cratenix.metadata.models import CRATES_IO_REGISTRY

CRATES_IO = CRATES_IO_REGISTRY


def package_id(name: str, version: str, source: Optional[str], crate_dir: Path) -> str:
    """Render a package id the way cargo prints it."""
    origin = source if source is not None else f"path+file://{crate_dir}"
    return f"{name} {version} ({origin})"


def make_package(
    root: Path,
    name: str,
    version: str = "1.0.0",
    source: Optional[str] = None,
    dependencies: Iterable[dict] = (),
    targets: Optional[List[dict]] = None,
    crate_dir: Optional[str] = None,
    features: Optional[Dict[str, List[str]]] = None,
) -> Package:
    """Create a package directory under ``root`` and its metadata record."""
    directory = (root / (crate_dir or name)).resolve()
    directory.mkdir(parents=True, exist_ok=True)
    if targets is None:
        targets = [
            {
                "name": name.replace("-", "_"),
                "kind": ["lib"],
                "src_path": str(directory / "src" / "lib.rs"),
            }
        ]
    return Package.model_validate(
        {
            "id": package_id(name, version, source, directory),
            "name": name,
            "version": version,
            "source": source,
            "dependencies": list(dependencies),
            "targets": targets,
            "features": features or {},
            "manifest_path": str(directory / "Cargo.toml"),
            "authors": ["Jane Doe <jane@example.com>"],
            "edition": "2018",
        }
    )


def make_metadata(
    packages: Iterable[Package],
    edges: Optional[Dict[str, List[str]]] = None,
    root: Optional[str] = None,
    members: Iterable[str] = (),
    features: Optional[Dict[str, List[str]]] = None,
    omit_nodes: Iterable[str] = (),
) -> IndexedMetadata:
    """Build indexed metadata with one resolve node per package."""
    packages = list(packages)
    by_id = {p.id: p for p in packages}
    edges = edges or {}
    features = features or {}
    omit = set(omit_nodes)

    nodes = []
    for pkg in packages:
        if pkg.id in omit:
            continue
        dep_ids = edges.get(pkg.id, [])
        nodes.append(
            {
                "id": pkg.id,
                "dependencies": dep_ids,
                "deps": [
                    {
                        "name": by_id[d].name.replace("-", "_") if d in by_id else "missing",
                        "pkg": d,
                        "dep_kinds": [{"kind": None, "target": None}],
                    }
                    for d in dep_ids
                ],
                "features": features.get(pkg.id, []),
            }
        )

    metadata = Metadata.model_validate(
        {
            "packages": [p.model_dump(mode="json") for p in packages],
            "workspace_members": list(members),
            "resolve": {"nodes": nodes, "root": root},
            "version": 1,
        }
    )
    return IndexedMetadata.from_metadata(metadata)


def dep(name: str, kind: Optional[str] = None, **extra) -> dict:
    """A declared dependency entry as found in cargo metadata."""
    entry = {
        "name": name,
        "source": CRATES_IO,
        "req": "^1",
        "kind": kind,
        "rename": None,
        "optional": False,
        "uses_default_features": True,
        "features": [],
        "target": None,
    }
    entry.update(extra)
    return entry


