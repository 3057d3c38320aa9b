"""Main CLI entry point for cratenix.

Provides commands: generate
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from cratenix.cli.generate import generate_command

logger = logging.getLogger("cratenix.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] [%(levelname)s] %(message)s",
        handlers=[handler],
    )


def main() -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = argparse.ArgumentParser(
        description="cratenix - Resolve cargo metadata into crate derivation records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    generate_parser = subparsers.add_parser(
        "generate",
        help="Resolve all crates of a cargo workspace",
    )
    generate_parser.add_argument(
        "-f",
        "--cargo-toml",
        help="Cargo.toml to run `cargo metadata` on (default: ./Cargo.toml)",
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        help=(
            "Path of the generated build file (default: ./Cargo.nix). Local "
            "crate paths are made relative to its directory, which must exist."
        ),
    )
    generate_parser.add_argument(
        "--metadata",
        help="Use captured `cargo metadata --format-version 1` JSON instead of running cargo",
    )
    generate_parser.add_argument(
        "--json-output",
        help="Where to write the resolved crates (default: <output> with .json suffix)",
    )
    generate_parser.add_argument(
        "-c",
        "--config",
        help="Configuration file (.toml/.json) or inline TOML/JSON string",
    )
    generate_parser.add_argument(
        "--locked",
        action="store_true",
        help="Pass --locked to cargo",
    )
    generate_parser.add_argument(
        "--offline",
        action="store_true",
        help="Pass --offline to cargo",
    )
    generate_parser.add_argument(
        "--skip-errors",
        action="store_true",
        help="Skip crates with inconsistent resolve data instead of failing",
    )

    args = parser.parse_args()

    setup_logging(args.verbose)

    if args.command == "generate":
        return generate_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
