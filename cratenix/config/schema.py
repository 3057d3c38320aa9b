"""Configuration schema definitions using Pydantic for validation.

``GenerateConfig`` carries everything a resolution run needs to know
about its surroundings. The only value the core resolver reads is
``output``: the generated build file's parent directory is the anchor for
every relative ``LocalDirectory`` path.
"""

from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GenerateConfig(BaseModel):
    """Top-level configuration for a generation run.

    Attributes:
        output: Path of the generated build file. Its parent directory must
            exist when crates are resolved.
        cargo_toml: Manifest passed to ``cargo metadata``.
        locked: Pass ``--locked`` to cargo.
        offline: Pass ``--offline`` to cargo.
        skip_errors: Skip crates whose resolve data is inconsistent instead
            of aborting the whole run.
        crates_io_sources: Additional source strings treated as crates.io
            (e.g. a mirror configured through source replacement).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    output: Path = Path("./Cargo.nix")
    cargo_toml: Path = Path("./Cargo.toml")
    locked: bool = False
    offline: bool = False
    skip_errors: bool = False
    crates_io_sources: List[str] = Field(default_factory=list)

    @field_validator("output")
    @classmethod
    def validate_output(cls, v: Path) -> Path:
        """The output must name a file, not a bare directory marker."""
        if str(v) in {"", ".", ".."} or v.name in {"", ".", ".."}:
            raise ValueError(f"output must be a file path, got '{v}'")
        return v

    @field_validator("crates_io_sources")
    @classmethod
    def validate_sources(cls, v: List[str]) -> List[str]:
        for source in v:
            if not source or "+" not in source:
                raise ValueError(
                    f"Invalid registry source '{source}': expected '<kind>+<url>'"
                )
        return v

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerateConfig":
        """Build a config from a plain mapping.

        Accepts either a flat mapping or one nested under a ``generate``
        table, so that both of these TOML files are valid:

            output = "nix/Cargo.nix"

            [generate]
            output = "nix/Cargo.nix"
        """
        section = data.get("generate", data)
        if not isinstance(section, dict):
            raise ValueError("[generate] section must be a table")
        return cls.model_validate(section)

    def with_overrides(self, **overrides: Any) -> "GenerateConfig":
        """Return a copy with the non-None overrides applied and re-validated."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        if not updates:
            return self
        return self.model_validate({**self.model_dump(), **updates})


__all__ = ["GenerateConfig"]
