"""Resolution of one cargo package into a CrateDerivation."""

from __future__ import annotations

import logging
from typing import List, Optional

from cratenix.config.schema import GenerateConfig
from cratenix.metadata.indexed import IndexedMetadata
from cratenix.metadata.models import Package
from cratenix.resolve.dependencies import (
    is_build_dependency,
    is_normal_dependency,
    match_dependencies,
)
from cratenix.resolve.errors import ResolveLookupError
from cratenix.resolve.models import CrateDerivation
from cratenix.resolve.paths import package_directory
from cratenix.resolve.source import classify_source
from cratenix.resolve.targets import find_build_target

logger = logging.getLogger("cratenix.resolve.crate")


def resolve_crate(
    config: GenerateConfig, metadata: IndexedMetadata, package: Package
) -> CrateDerivation:
    """Gather everything needed to build ``package``.

    Args:
        config: Generation config.
        metadata: Indexed cargo metadata containing ``package``.
        package: Package to resolve.

    Returns:
        CrateDerivation for the package.

    Raises:
        PackageDirectoryError: If the manifest directory does not exist.
        OutputDirectoryError: If the output directory does not exist.
        ResolveLookupError: If the resolve graph is inconsistent for this package.
    """
    build_dependencies = match_dependencies(metadata, package, is_build_dependency)
    dependencies = match_dependencies(metadata, package, is_normal_dependency)

    package_path = package_directory(package.manifest_path)

    lib = find_build_target(package, package_path, "lib", "proc-macro")
    build = find_build_target(package, package_path, "custom-build")
    proc_macro = any(t.has_kind("proc-macro") for t in package.targets)
    has_bin = any(t.has_kind("bin") for t in package.targets)

    node = metadata.nodes_by_id.get(package.id)

    return CrateDerivation(
        package_id=package.id,
        crate_name=package.name,
        edition=package.edition,
        authors=list(package.authors),
        version=package.version,
        source=classify_source(config, package, package_path),
        dependencies=dependencies,
        build_dependencies=build_dependencies,
        features={name: list(enabled) for name, enabled in package.features.items()},
        resolved_default_features=list(node.features) if node is not None else [],
        build=build,
        lib=lib,
        has_bin=has_bin,
        proc_macro=proc_macro,
        is_root_or_workspace_member=metadata.is_root_or_workspace_member(package.id),
    )


def resolve_all(
    config: GenerateConfig,
    metadata: IndexedMetadata,
    skip_errors: Optional[bool] = None,
) -> List[CrateDerivation]:
    """Resolve every package in ``metadata`` in ascending package-id order.

    Args:
        config: Generation config.
        metadata: Indexed cargo metadata.
        skip_errors: Log and skip crates with inconsistent resolve data
            instead of raising. Defaults to ``config.skip_errors``.

    Returns:
        The resolved crates. Fatal filesystem errors always propagate.
    """
    if skip_errors is None:
        skip_errors = config.skip_errors

    crates: List[CrateDerivation] = []
    skipped = 0
    for package in metadata.sorted_packages():
        try:
            crates.append(resolve_crate(config, metadata, package))
        except ResolveLookupError as err:
            if not skip_errors:
                raise
            skipped += 1
            logger.error("Skipping crate %s: %s", package.id, err)

    logger.info("Resolved %d crates (%d skipped)", len(crates), skipped)
    return crates


__all__ = ["resolve_all", "resolve_crate"]
