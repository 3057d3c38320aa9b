"""Tests for source classification."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from cratenix.config import GenerateConfig
from cratenix.resolve.models import CratesIo, Git, LocalDirectory
from cratenix.resolve.errors import GitSourceError, ResolveError
from cratenix.resolve.source import classify_source, parse_git_source

from tests.builders import CRATES_IO, make_package


def test_no_source_is_local_directory(config: GenerateConfig, workspace: Path) -> None:
    """Path dependencies resolve relative to the output directory."""
    pkg = make_package(workspace, "local-crate", crate_dir="crates/local")

    source = classify_source(config, pkg, workspace / "crates" / "local")

    assert source == LocalDirectory(path="./crates/local")


def test_crates_io_source_has_no_checksum(config: GenerateConfig, workspace: Path) -> None:
    """crates.io packages start without a sha256."""
    pkg = make_package(workspace, "serde", source=CRATES_IO)

    source = classify_source(config, pkg, workspace / "serde")

    assert isinstance(source, CratesIo)
    assert source.sha256 is None


def test_sparse_crates_io_index(config: GenerateConfig, workspace: Path) -> None:
    """The sparse crates.io index is recognized as crates.io."""
    pkg = make_package(workspace, "serde", source="sparse+https://index.crates.io/")

    assert isinstance(classify_source(config, pkg, workspace / "serde"), CratesIo)


def test_configured_mirror_counts_as_crates_io(workspace: Path) -> None:
    """Extra registry sources from the config map to CratesIo."""
    mirror = "registry+https://mirror.example.com/index"
    config = GenerateConfig(output=workspace / "Cargo.nix", crates_io_sources=[mirror])
    pkg = make_package(workspace, "serde", source=mirror)

    assert isinstance(classify_source(config, pkg, workspace / "serde"), CratesIo)


def test_rev_query_wins_over_fragment(config: GenerateConfig, workspace: Path) -> None:
    """Query and fragment are stripped; the rev parameter is preferred."""
    pkg = make_package(
        workspace, "repo", source="git+https://example.com/repo?rev=abc123#branchname"
    )

    source = classify_source(config, pkg, workspace / "repo")

    assert source == Git(url="https://example.com/repo", rev="abc123", ref=None)


def test_fragment_is_revision(config: GenerateConfig, workspace: Path) -> None:
    """Without a rev parameter the fragment is the locked commit."""
    pkg = make_package(workspace, "repo", source="git+https://example.com/repo#deadbeef")

    source = classify_source(config, pkg, workspace / "repo")

    assert source == Git(url="https://example.com/repo", rev="deadbeef", ref=None)


def test_branch_becomes_ref(config: GenerateConfig, workspace: Path) -> None:
    """The branch query parameter is kept as ref."""
    pkg = make_package(
        workspace, "b", source="git+https://github.com/a/b?branch=main#0123abcd"
    )

    source = classify_source(config, pkg, workspace / "b")

    assert source == Git(url="https://github.com/a/b", rev="0123abcd", ref="main")


@pytest.mark.parametrize(
    "raw, reason",
    [
        ("path+file:///somewhere", "No 'git+' prefix found."),
        ("git+https://example.com/repo", "No git revision found."),
        ("git+https://example.com/repo?branch=dev", "No git revision found."),
        ("git+not a url", "Invalid git URL."),
    ],
)
def test_fallback_to_local_directory_warns(
    config: GenerateConfig,
    workspace: Path,
    caplog: pytest.LogCaptureFixture,
    raw: str,
    reason: str,
) -> None:
    """Unusable sources degrade to LocalDirectory with a warning."""
    pkg = make_package(workspace, "odd", source=raw)

    with caplog.at_level(logging.WARNING, logger="cratenix.resolve.source"):
        source = classify_source(config, pkg, workspace / "odd")

    assert source == LocalDirectory(path="./odd")
    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(messages) == 1
    assert reason in messages[0]
    assert pkg.id in messages[0]
    assert raw in messages[0]
    assert "./odd" in messages[0]


def test_parse_git_source_errors() -> None:
    """parse_git_source raises GitSourceError for unusable strings."""
    with pytest.raises(GitSourceError):
        parse_git_source("registry+https://example.com/index")
    with pytest.raises(GitSourceError):
        parse_git_source("git+https://example.com/repo?rev=")


def test_git_source_error_is_a_resolve_error() -> None:
    """Git source errors belong to the resolve error hierarchy."""
    with pytest.raises(ResolveError, match="No git revision found"):
        parse_git_source("git+https://example.com/repo")
    assert issubclass(GitSourceError, ValueError)


def test_git_model_rejects_query() -> None:
    """Git urls with query or fragment are invalid."""
    with pytest.raises(ValueError):
        Git(url="https://example.com/repo?rev=1", rev="1")
    with pytest.raises(ValueError):
        Git(url="https://example.com/repo", rev="")
