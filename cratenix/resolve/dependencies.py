"""Matching of resolve graph edges against declared dependencies.

The resolve graph tells us *which* package instance a crate depends on;
the manifest tells us *how* (rename, optional, features, cfg target). The
two are joined on the normalized crate name. A name may be declared more
than once, typically once per ``[target.'cfg(...)'.dependencies]`` table:
the first declaration provides the flags and all declarations contribute
their target expressions.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List

from cratenix.metadata.indexed import IndexedMetadata, render_json
from cratenix.metadata.models import Dependency, DependencyKind, Node, Package
from cratenix.resolve.errors import MissingNodeError, MissingPackageError
from cratenix.resolve.models import ResolvedDependency

logger = logging.getLogger("cratenix.resolve.dependencies")

DependencyFilter = Callable[[Dependency], bool]


def normalize_package_name(package_name: str) -> str:
    """Normalize a package name the way cargo does ("foo-bar" == "foo_bar")."""
    return package_name.replace("-", "_")


def is_build_dependency(dependency: Dependency) -> bool:
    return dependency.kind == DependencyKind.BUILD


def is_normal_dependency(dependency: Dependency) -> bool:
    return dependency.kind in (DependencyKind.NORMAL, DependencyKind.UNKNOWN)


def resolve_node(metadata: IndexedMetadata, package: Package) -> Node:
    """Return the resolve node of ``package``.

    Raises:
        MissingNodeError: If the resolve graph has no node for the package.
    """
    node = metadata.nodes_by_id.get(package.id)
    if node is None:
        raise MissingNodeError(
            f"Could not find node for {package.id}.\n"
            f"-- Package\n{render_json(package)}"
        )
    return node


def resolved_packages(metadata: IndexedMetadata, package: Package) -> List[Package]:
    """Packages the resolve graph links ``package`` to, sorted by package id.

    Raises:
        MissingNodeError: If the package has no resolve node.
        MissingPackageError: If an edge targets an unknown package id.
    """
    node = resolve_node(metadata, package)

    packages: List[Package] = []
    for dep in node.deps:
        target = metadata.pkgs_by_id.get(dep.pkg)
        if target is None:
            raise MissingPackageError(
                f"No matching package for dependency with package id {dep.pkg} "
                f"in {package.id}.\n"
                f"-- Package\n{render_json(package)}\n"
                f"-- Node\n{render_json(node)}"
            )
        packages.append(target)

    packages.sort(key=lambda p: p.id)
    return packages


def group_declarations(
    declarations: List[Dependency], kind_filter: DependencyFilter
) -> Dict[str, List[Dependency]]:
    """Group declarations passing ``kind_filter`` by normalized name.

    Insertion order is preserved both across and within groups.
    """
    groups: Dict[str, List[Dependency]] = {}
    for declaration in declarations:
        if not kind_filter(declaration):
            continue
        groups.setdefault(normalize_package_name(declaration.name), []).append(
            declaration
        )
    return groups


def merge_declarations(
    declarations: List[Dependency], package_id: str
) -> ResolvedDependency:
    """Merge the declarations of one dependency into a ResolvedDependency.

    Flags come from the first declaration; declarations of the same name
    are assumed to agree on them. Target expressions are concatenated in
    declaration order without deduplication.
    """
    first = declarations[0]
    targets = [d.target for d in declarations if d.target]
    return ResolvedDependency(
        name=first.name,
        rename=first.rename,
        package_id=package_id,
        targets=targets,
        optional=first.optional,
        uses_default_features=first.uses_default_features,
        features=list(first.features),
    )


def match_dependencies(
    metadata: IndexedMetadata,
    package: Package,
    kind_filter: DependencyFilter,
) -> List[ResolvedDependency]:
    """Resolve the dependencies of ``package`` selected by ``kind_filter``.

    Args:
        metadata: Indexed cargo metadata.
        package: Package whose dependencies are resolved.
        kind_filter: Predicate selecting declarations, e.g.
            ``is_build_dependency``.

    Returns:
        One ResolvedDependency per resolved package that has a matching
        declaration, ordered by the resolved package id.

    Raises:
        ResolveLookupError: If the resolve graph is inconsistent.
    """
    packages = resolved_packages(metadata, package)
    groups = group_declarations(package.dependencies, kind_filter)

    resolved: List[ResolvedDependency] = []
    for dep_package in packages:
        declarations = groups.get(normalize_package_name(dep_package.name))
        if not declarations:
            # Resolved through a declaration of another kind (e.g. dev).
            continue
        resolved.append(merge_declarations(declarations, dep_package.id))

    logger.debug(
        "%s: matched %d of %d resolved packages",
        package.id,
        len(resolved),
        len(packages),
    )
    return resolved


__all__ = [
    "DependencyFilter",
    "group_declarations",
    "is_build_dependency",
    "is_normal_dependency",
    "match_dependencies",
    "merge_declarations",
    "normalize_package_name",
    "resolve_node",
    "resolved_packages",
]
