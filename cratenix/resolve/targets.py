"""Build target normalization."""

from pathlib import Path
from typing import Optional

from cratenix.metadata.models import Package, Target
from cratenix.resolve.errors import BuildTargetPathError
from cratenix.resolve.models import BuildTarget


def normalize_build_target(target: Target, package_path: Path) -> BuildTarget:
    """Make a target's source path relative to its package directory.

    Raises:
        BuildTargetPathError: If the source file is not under ``package_path``,
            including paths that leave it through ``..`` segments.
    """
    try:
        rel = Path(target.src_path).relative_to(package_path)
    except ValueError as exc:
        raise BuildTargetPathError(
            f"Target '{target.name}' source {target.src_path} is not under {package_path}"
        ) from exc
    if rel.is_absolute() or ".." in rel.parts:
        raise BuildTargetPathError(
            f"Target '{target.name}' source {target.src_path} escapes {package_path}"
        )
    return BuildTarget(name=target.name, src_path=rel.as_posix())


def find_build_target(
    package: Package, package_path: Path, *kinds: str
) -> Optional[BuildTarget]:
    """Normalized first target having any of ``kinds``, or None.

    A target that cannot be made relative counts as absent.
    """
    target = next((t for t in package.targets if t.has_kind(*kinds)), None)
    if target is None:
        return None
    try:
        return normalize_build_target(target, package_path)
    except BuildTargetPathError:
        return None


__all__ = ["find_build_target", "normalize_build_target"]
