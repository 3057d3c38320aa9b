"""cratenix: resolve cargo metadata into crate derivation records."""

__version__ = "0.1.0"
