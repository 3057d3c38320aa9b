"""Configuration schema and loading for cratenix."""

from .loader import load_generate_config
from .schema import GenerateConfig

__all__ = [
    "GenerateConfig",
    "load_generate_config",
]
