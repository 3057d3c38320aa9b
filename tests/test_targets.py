"""Tests for build target normalization."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from cratenix.metadata.models import Target
from cratenix.resolve.errors import BuildTargetPathError
from cratenix.resolve.models import BuildTarget
from cratenix.resolve.targets import find_build_target, normalize_build_target

from tests.builders import make_package


def _target(src_path: str, kind: str = "lib") -> Target:
    return Target(name="demo", kind=[kind], src_path=src_path)


def test_normalize_nested_source(tmp_path: Path) -> None:
    """Sources below the package directory become relative POSIX paths."""
    target = _target(str(tmp_path / "src" / "bin" / "main.rs"), kind="bin")

    assert normalize_build_target(target, tmp_path) == BuildTarget(
        name="demo", src_path="src/bin/main.rs"
    )


def test_normalize_rejects_source_outside_package(tmp_path: Path) -> None:
    """A source in a sibling directory cannot be made relative."""
    package_path = tmp_path / "demo"
    target = _target(str(tmp_path / "other" / "lib.rs"))

    with pytest.raises(BuildTargetPathError, match="is not under"):
        normalize_build_target(target, package_path)


def test_normalize_rejects_parent_segments(tmp_path: Path) -> None:
    """A source reached through ``..`` from the package directory escapes it."""
    package_path = tmp_path / "demo"
    target = _target(str(package_path) + "/../x.rs")

    with pytest.raises(BuildTargetPathError, match="escapes"):
        normalize_build_target(target, package_path)


def test_build_target_model_rejects_parent_segments() -> None:
    """The output record itself never holds a path leaving the package."""
    with pytest.raises(ValidationError):
        BuildTarget(name="demo", src_path="../x.rs")
    with pytest.raises(ValidationError):
        BuildTarget(name="demo", src_path="/abs/lib.rs")


def test_find_build_target_treats_escaping_source_as_absent(tmp_path: Path) -> None:
    """The first matching target is used; an escaping source yields None."""
    package_dir = (tmp_path / "demo").resolve()
    pkg = make_package(
        tmp_path,
        "demo",
        targets=[
            {
                "name": "demo",
                "kind": ["lib"],
                "src_path": str(package_dir) + "/../shared/lib.rs",
            },
            {
                "name": "build-script-build",
                "kind": ["custom-build"],
                "src_path": str(package_dir / "build.rs"),
            },
        ],
    )

    assert find_build_target(pkg, package_dir, "lib") is None
    assert find_build_target(pkg, package_dir, "custom-build") == BuildTarget(
        name="build-script-build", src_path="build.rs"
    )
    assert find_build_target(pkg, package_dir, "bin") is None
