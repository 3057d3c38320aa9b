"""Exception hierarchy for crate resolution."""

from pathlib import Path
from typing import Optional


class ResolveError(Exception):
    """Base class for all errors raised while resolving a crate."""

    pass


class FatalResolveError(ResolveError):
    """A filesystem precondition of the whole run is broken.

    These are never skipped: a missing package or output directory means
    the generation target itself is unusable.
    """

    def __init__(self, message: str, path: Path, cause: Optional[OSError] = None) -> None:
        super().__init__(message)
        self.path = path
        self.cause = cause


class PackageDirectoryError(FatalResolveError):
    """The directory containing a package manifest cannot be canonicalized."""

    pass


class OutputDirectoryError(FatalResolveError):
    """The directory of the generated output file cannot be canonicalized."""

    pass


class ResolveLookupError(ResolveError, LookupError):
    """The resolve graph is inconsistent with the package list.

    The message embeds pretty-printed dumps of the offending package and
    node. Callers may skip the affected crate and continue.
    """

    pass


class MissingNodeError(ResolveLookupError):
    """No resolve node exists for a package id."""

    pass


class MissingPackageError(ResolveLookupError):
    """A resolve edge points at a package id with no package record."""

    pass


class BuildTargetPathError(ValueError):
    """A target's source file lies outside its package directory."""

    pass


class GitSourceError(ResolveError, ValueError):
    """A package source string is not a pinned git source.

    The message is the human-readable reason reported when the classifier
    falls back to the local directory.
    """

    pass


__all__ = [
    "BuildTargetPathError",
    "FatalResolveError",
    "GitSourceError",
    "MissingNodeError",
    "MissingPackageError",
    "OutputDirectoryError",
    "PackageDirectoryError",
    "ResolveError",
    "ResolveLookupError",
]
