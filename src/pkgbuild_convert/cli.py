"""Command-line interface for pkgbuild-convert."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pkgbuild_convert import __version__
from pkgbuild_convert.config.loader import load_config
from pkgbuild_convert.console import StatusPrinter
from pkgbuild_convert.core.converter import Converter
from pkgbuild_convert.errors import ConversionError
from pkgbuild_convert.recipe.formatter import run_formatter


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="pkgbuild-convert",
        description="Convert a PKGBUILD file into a Chromebrew style recipe",
        epilog="Example: pkgbuild-convert PKGBUILD -o foo.rb",
    )

    parser.add_argument(
        "pkgbuild",
        type=Path,
        metavar="PKGBUILD",
        help="PKGBUILD file to convert",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        metavar="FILE",
        help="Output recipe file (default: converted.rb)",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        metavar="FILE",
        help="Configuration file path (default: ~/.config/pkgbuild-convert/config.yaml)",
    )

    parser.add_argument(
        "--config-dir",
        type=Path,
        metavar="DIR",
        help="Drop-in configuration directory (default: ~/.config/pkgbuild-convert/conf.d/)",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colors",
    )

    parser.add_argument(
        "--no-format",
        action="store_true",
        help="Do not run the formatter on the generated recipe",
    )

    parser.add_argument(
        "--no-fetch",
        action="store_true",
        help="Never download sources to compute a missing sha256 checksum",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail if the input ends inside an unterminated statement",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug messages",
    )

    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(args)


def main(args: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        args: Command-line arguments

    Returns:
        Exit code
    """
    parsed = parse_args(args)

    logging.basicConfig(
        format="%(levelname)s: %(message)s",
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
    )

    # Load configuration
    try:
        config = load_config(
            config_path=parsed.config,
            dropin_dir=parsed.config_dir,
        )
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    # Override config options
    if parsed.no_color:
        config.config.color = False
    if parsed.no_format:
        config.formatter.enabled = False
    if parsed.no_fetch:
        config.checksum.fetch = False
    if parsed.strict:
        config.config.strict = True

    status = StatusPrinter(config.theme, color=config.config.color)
    output = parsed.output or Path(config.config.output)

    try:
        recipe = Converter(config, status=status).convert_file(parsed.pkgbuild)
        output.write_text(recipe, encoding="utf-8")
    except KeyboardInterrupt:
        return 130
    except (ConversionError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    status("success", f"Completed! Recipe written to {output}")

    if config.formatter.enabled:
        status("hint", f"Running {config.formatter.command} on {output}")
        run_formatter(config.formatter.argv(), output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
