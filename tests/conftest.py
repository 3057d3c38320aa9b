"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from cratenix.config import GenerateConfig


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Canonical workspace directory that also holds the output file."""
    root = (tmp_path / "ws").resolve()
    root.mkdir()
    return root


@pytest.fixture
def config(workspace: Path) -> GenerateConfig:
    """Config whose output file lives directly in the workspace."""
    return GenerateConfig(output=workspace / "Cargo.nix")
