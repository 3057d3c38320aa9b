"""Path helpers for locating crates relative to the generated output file."""

import logging
import os
from pathlib import Path, PurePosixPath
from typing import Union

from cratenix.config.schema import GenerateConfig
from cratenix.resolve.errors import OutputDirectoryError, PackageDirectoryError

logger = logging.getLogger("cratenix.resolve.paths")

CURRENT_DIR_MARKER = "./."


def package_directory(manifest_path: Union[Path, str]) -> Path:
    """
    Return the canonical directory containing a package manifest.

    Args:
        manifest_path: Path to the package's Cargo.toml.

    Returns:
        Absolute path with symlinks resolved.

    Raises:
        PackageDirectoryError: If the directory does not exist.
    """
    directory = Path(manifest_path).parent
    try:
        return directory.resolve(strict=True)
    except OSError as exc:
        raise PackageDirectoryError(
            f"Cannot canonicalize package path '{directory}': {exc}",
            directory,
            exc,
        ) from exc


def output_directory(config: GenerateConfig) -> Path:
    """
    Return the canonical directory the generated output file will live in.

    A bare file name such as ``Cargo.nix`` has the parent ``""``; it is
    anchored at the current working directory.

    Raises:
        OutputDirectoryError: If the directory does not exist.
    """
    directory = config.output.parent
    if not directory.is_absolute():
        directory = Path(".") / directory
    try:
        return directory.resolve(strict=True)
    except OSError as exc:
        raise OutputDirectoryError(
            f"could not canonicalize output file directory '{directory}': {exc}",
            directory,
            exc,
        ) from exc


def relative_directory(config: GenerateConfig, package_path: Union[Path, str]) -> str:
    """
    Compute the path of ``package_path`` relative to the output directory.

    The result always starts with ``./`` or ``../`` so that consumers never
    mistake it for an absolute path or a bare identifier:

    Examples:
        >>> # output: /ws/Cargo.nix
        >>> relative_directory(config, Path("/ws"))
        './.'
        >>> relative_directory(config, Path("/ws/crates/a"))
        './crates/a'
        >>> relative_directory(config, Path("/"))
        '../.'
        >>> relative_directory(config, Path("/other"))
        '../other'

    Args:
        config: Generation config; only ``config.output`` is used.
        package_path: Canonical package directory.

    Returns:
        POSIX-style relative path string.
    """
    out_dir = output_directory(config)
    package_path = Path(package_path)

    if package_path == out_dir:
        return CURRENT_DIR_MARKER

    try:
        rel = PurePosixPath(Path(os.path.relpath(package_path, out_dir)).as_posix())
    except ValueError:
        # No relative path exists (e.g. different drives on Windows).
        logger.debug("No relative path from %s to %s", out_dir, package_path)
        return package_path.as_posix()

    if rel.parts == ("..",):
        # Some consumers cannot parse a bare "..".
        return "../."
    if rel.parts and rel.parts[0] == "..":
        return str(rel)
    return f"./{rel}"


__all__ = [
    "CURRENT_DIR_MARKER",
    "output_directory",
    "package_directory",
    "relative_directory",
]
