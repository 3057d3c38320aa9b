"""Generate command implementation."""

import logging
from pathlib import Path
from typing import Optional

from cratenix.config import GenerateConfig, load_generate_config
from cratenix.export.json import export_json
from cratenix.metadata.indexed import (
    IndexedMetadata,
    MetadataError,
    load_metadata_file,
    run_cargo_metadata,
)
from cratenix.resolve import ResolveError, resolve_all

logger = logging.getLogger("cratenix.cli.generate")


def build_config(args) -> GenerateConfig:
    """Load the config file (if any) and apply command-line overrides."""
    config = load_generate_config(getattr(args, "config", None))
    return config.with_overrides(
        output=Path(args.output) if getattr(args, "output", None) else None,
        cargo_toml=Path(args.cargo_toml) if getattr(args, "cargo_toml", None) else None,
        locked=True if getattr(args, "locked", False) else None,
        offline=True if getattr(args, "offline", False) else None,
        skip_errors=True if getattr(args, "skip_errors", False) else None,
    )


def json_output_path(config: GenerateConfig, json_output: Optional[str]) -> Path:
    if json_output:
        return Path(json_output)
    return config.output.with_suffix(".json")


def generate_command(args) -> int:
    """Execute generate command.

    Args:
        args: Parsed command-line arguments containing:
            - config: Optional config file or inline TOML/JSON
            - cargo_toml: Manifest to run ``cargo metadata`` on
            - metadata: Optional pre-captured ``cargo metadata`` JSON file
            - output: Generated build file (anchor for local paths)
            - json_output: Where to write the resolved crates
            - locked / offline / skip_errors: Flags

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    logger.info("=== cratenix generate ===")

    try:
        config = build_config(args)

        metadata_path = getattr(args, "metadata", None)
        metadata: IndexedMetadata
        if metadata_path:
            metadata = load_metadata_file(Path(metadata_path))
        else:
            metadata = run_cargo_metadata(config)

        crates = resolve_all(config, metadata)

        out_path = json_output_path(config, getattr(args, "json_output", None))
        export_json(metadata, crates, out_path)
        logger.info("Wrote %d crates to %s", len(crates), out_path)
        return 0

    except (MetadataError, ResolveError, OSError, ValueError, TypeError) as err:
        logger.error("Generation failed: %s", err)
        return 1
