"""Classification of a package's source into a retrieval strategy.

Cargo records where each package came from as a source string:

* ``None`` for path dependencies and workspace members,
* ``registry+https://github.com/rust-lang/crates.io-index`` for crates.io,
* ``git+https://host/repo?branch=main#<commit>`` for git dependencies.

Anything that cannot be expressed as a pinned git checkout falls back to
the package's local directory, which cargo has already populated.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import parse_qs, urlsplit, urlunsplit

from cratenix.config.schema import GenerateConfig
from cratenix.metadata.models import Package
from cratenix.resolve.errors import GitSourceError
from cratenix.resolve.models import CratesIo, Git, LocalDirectory, ResolvedSource
from cratenix.resolve.paths import relative_directory

logger = logging.getLogger("cratenix.resolve.source")

GIT_SOURCE_PREFIX = "git+"


def parse_git_source(source: str) -> Tuple[str, str, Optional[str]]:
    """Split a cargo git source string into ``(url, rev, branch)``.

    The returned URL has its query and fragment removed. An explicit
    ``rev`` query parameter takes precedence over the fragment, which cargo
    fills with the locked commit.

    Raises:
        GitSourceError: With the human-readable reason when the string is not a
            pinned git source.
    """
    if not source.startswith(GIT_SOURCE_PREFIX):
        raise GitSourceError("No 'git+' prefix found.")

    raw_url = source[len(GIT_SOURCE_PREFIX):]
    try:
        parts = urlsplit(raw_url)
    except ValueError as exc:
        raise GitSourceError(f"Invalid git URL ({exc}).") from exc
    if not parts.scheme or not (parts.netloc or parts.scheme == "file"):
        raise GitSourceError("Invalid git URL.")

    query = parse_qs(parts.query, keep_blank_values=True)
    branch = query["branch"][0] if query.get("branch") else None

    if query.get("rev") and query["rev"][0]:
        rev = query["rev"][0]
    elif parts.fragment:
        rev = parts.fragment
    else:
        raise GitSourceError("No git revision found.")

    url = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
    return url, rev, branch


def classify_source(
    config: GenerateConfig, package: Package, package_path: Path
) -> ResolvedSource:
    """Decide how the source of ``package`` is retrieved.

    Args:
        config: Generation config (anchors LocalDirectory paths).
        package: Package record from cargo metadata.
        package_path: Canonical directory of the package.

    Returns:
        CratesIo, Git or LocalDirectory. Never raises for a malformed
        source string; that degrades to LocalDirectory with a warning.

    Raises:
        OutputDirectoryError: If the output directory does not exist.
    """
    if package.source is None:
        return LocalDirectory(path=relative_directory(config, package_path))

    if package.is_crates_io(config.crates_io_sources):
        # sha256 is filled in later by the prefetch pass.
        return CratesIo(sha256=None)

    try:
        url, rev, branch = parse_git_source(package.source)
    except GitSourceError as reason:
        return fallback_to_local_directory(config, package, package_path, str(reason))

    logger.debug("Git source for %s: %s @ %s", package.id, url, rev)
    return Git(url=url, rev=rev, ref=branch)


def fallback_to_local_directory(
    config: GenerateConfig, package: Package, package_path: Path, warning: str
) -> LocalDirectory:
    path = relative_directory(config, package_path)
    logger.warning(
        "%s Falling back to local directory for crate %s with source %s: %s",
        warning,
        package.id,
        package.source if package.source is not None else "N/A",
        path,
    )
    return LocalDirectory(path=path)


__all__ = [
    "GIT_SOURCE_PREFIX",
    "classify_source",
    "fallback_to_local_directory",
    "parse_git_source",
]
