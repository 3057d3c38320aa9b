"""Helpers for loading generation configuration from TOML/JSON sources.

This module provides a single entry point `load_generate_config`
that accepts various configuration sources:

* None -> default GenerateConfig
* dict -> GenerateConfig.from_dict
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

from cratenix.config.schema import GenerateConfig

logger = logging.getLogger("cratenix.config.loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]


def _detect_format(text: str) -> str:
    stripped = text.lstrip()
    return "json" if stripped.startswith(("{", "[")) else "toml"


def load_generate_config(source: ConfigSource) -> GenerateConfig:
    """Load GenerateConfig from various configuration sources.

    Args:
        source: One of:
            * None: returns the default GenerateConfig
            * dict: treated as already-parsed configuration mapping
            * str/Path: either a filesystem path to a .toml/.json file,
              or an inline TOML/JSON string (auto-detected)

    Returns:
        GenerateConfig instance.

    Raises:
        ValueError: If the source cannot be parsed or fails validation.
        TypeError: If the source type is not supported.
    """
    if source is None:
        logger.debug("No config source provided; using default GenerateConfig")
        return GenerateConfig()

    if isinstance(source, dict):
        logger.debug("Loading GenerateConfig from provided dict")
        return GenerateConfig.from_dict(source)

    if isinstance(source, (str, Path)):
        path = Path(source)
        text: Optional[str] = None
        fmt: Optional[str] = None

        if path.is_file():
            text = path.read_text(encoding="utf-8")
            suffix = path.suffix.lower()
            if suffix in {".toml", ".tml"}:
                fmt = "toml"
            elif suffix == ".json":
                fmt = "json"
            else:
                fmt = _detect_format(text)
            logger.info("Loading configuration from file: %s (fmt=%s)", path, fmt)
        else:
            text = str(source)
            fmt = _detect_format(text)
            logger.info("Loading configuration from inline %s string", fmt)

        try:
            if fmt == "json":
                data = json.loads(text)
            else:
                data = tomllib.loads(text)
        except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
            raise ValueError(f"Invalid {fmt.upper()} configuration: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Top-level configuration must be a mapping/dict")

        return GenerateConfig.from_dict(data)

    raise TypeError(f"Unsupported config source type: {type(source)!r}")


__all__ = ["ConfigSource", "load_generate_config"]
