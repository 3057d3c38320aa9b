"""Resolution of cargo packages into crate derivation records."""

from .errors import (
    BuildTargetPathError,
    FatalResolveError,
    GitSourceError,
    MissingNodeError,
    MissingPackageError,
    OutputDirectoryError,
    PackageDirectoryError,
    ResolveError,
    ResolveLookupError,
)
from .models import (
    BuildTarget,
    CrateDerivation,
    CratesIo,
    Git,
    LocalDirectory,
    ResolvedDependency,
    ResolvedSource,
)
from .paths import relative_directory
from .source import classify_source
from .targets import normalize_build_target
from .dependencies import match_dependencies, normalize_package_name
from .crate import resolve_all, resolve_crate

__all__ = [
    "BuildTarget",
    "BuildTargetPathError",
    "CrateDerivation",
    "CratesIo",
    "FatalResolveError",
    "Git",
    "GitSourceError",
    "LocalDirectory",
    "MissingNodeError",
    "MissingPackageError",
    "OutputDirectoryError",
    "PackageDirectoryError",
    "ResolveError",
    "ResolveLookupError",
    "ResolvedDependency",
    "ResolvedSource",
    "classify_source",
    "match_dependencies",
    "normalize_build_target",
    "normalize_package_name",
    "relative_directory",
    "resolve_all",
    "resolve_crate",
]
