"""
Command-line argument parsing for keyharvest.

This module defines the ``keyharvest extract`` command line and converts the
parsed namespace into a typed container with validated paths.
"""

import argparse
from pathlib import Path
from typing import NamedTuple

from ..core.version import get_version


class PathValidationError(Exception):
    """Raised when a path validation fails."""

    pass


class ParsedArgs(NamedTuple):
    """Container for parsed command-line arguments."""

    command: str
    patterns: list[str]
    config_file: Path | None
    extractor: str | None
    default_namespace: str | None
    exclude: list[str]
    workers: int | None
    isolation: str | None
    output: Path | None
    verbose: bool


def validate_config_file_path(config_file_str: str) -> Path:
    """
    Validate configuration file path.

    Args:
        config_file_str: String path to configuration file

    Returns:
        Resolved Path object for the configuration file

    Raises:
        PathValidationError: If the configuration file path is invalid
    """
    try:
        config_file = Path(config_file_str).expanduser().resolve()
    except (OSError, ValueError) as e:
        raise PathValidationError(f"Invalid config file path: {e}") from e

    if not config_file.exists():
        raise PathValidationError(f"Config file does not exist: {config_file}")

    if not config_file.is_file():
        raise PathValidationError(
            f"Config file path exists but is not a file: {config_file}"
        )

    return config_file


def validate_output_path(output_str: str) -> Path:
    """
    Validate the output file path.

    Raises:
        PathValidationError: If the parent directory is missing or the path
            is a directory
    """
    try:
        output = Path(output_str).expanduser().resolve()
    except (OSError, ValueError) as e:
        raise PathValidationError(f"Invalid output path: {e}") from e

    if output.exists() and output.is_dir():
        raise PathValidationError(f"Output path is a directory: {output}")

    if not output.parent.exists():
        raise PathValidationError(
            f"Parent directory for output file does not exist: {output.parent}"
        )

    return output


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from e
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for keyharvest.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="keyharvest",
        description="Extract localization keys from source files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  keyharvest extract "src/**/*.tsx"
    Extract keys with the built-in extractor

  keyharvest extract "src/**/*.ts" --default-namespace app --output keys.json
    Put keys without a namespace into "app" and write the result to a file

  keyharvest extract "lib/**/*.py" --extractor ./my_extractor.py
    Use a custom extractor module exposing extract(path, content)
""",
    )

    _ = parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_version()}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser(
        "extract",
        help="Extract keys and print them grouped by namespace",
        description="Extract keys and print them grouped by namespace as JSON",
    )

    _ = extract_parser.add_argument(
        "patterns",
        nargs="*",
        metavar="PATTERN",
        help="Glob patterns of the files to scan (quote them to avoid shell expansion)",
    )

    _ = extract_parser.add_argument(
        "--config",
        dest="config_file",
        type=str,
        default=None,
        metavar="PATH",
        help="YAML configuration file; command-line options take precedence",
    )

    _ = extract_parser.add_argument(
        "--extractor",
        type=str,
        default=None,
        metavar="PATH",
        help="Path to a custom extractor module (default: built-in extractor)",
    )

    _ = extract_parser.add_argument(
        "--default-namespace",
        type=str,
        default=None,
        metavar="NS",
        help="Namespace for keys that do not declare one",
    )

    _ = extract_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="DIR",
        help="Directory name to skip (can be used multiple times)",
    )

    _ = extract_parser.add_argument(
        "--workers",
        type=_positive_int,
        default=None,
        metavar="N",
        help="Maximum concurrent extractions (default: CPU count, capped at 32)",
    )

    _ = extract_parser.add_argument(
        "--isolation",
        choices=["process", "thread"],
        default=None,
        help="Run extractors in worker processes (default) or threads",
    )

    _ = extract_parser.add_argument(
        "--output",
        type=str,
        default=None,
        metavar="PATH",
        help="Write the JSON result to this file instead of stdout",
    )

    _ = extract_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )

    return parser


def parse_arguments(args: list[str] | None = None) -> ParsedArgs:
    """
    Parse command-line arguments.

    Args:
        args: List of arguments to parse (defaults to sys.argv[1:])

    Returns:
        ParsedArgs with validated and resolved paths

    Raises:
        SystemExit: If argument parsing fails or --help is requested
        PathValidationError: If path validation fails
    """
    parser = create_argument_parser()
    parsed = parser.parse_args(args)

    config_file_str: str | None = getattr(parsed, "config_file", None)
    output_str: str | None = getattr(parsed, "output", None)

    config_file = validate_config_file_path(config_file_str) if config_file_str else None
    output = validate_output_path(output_str) if output_str else None

    return ParsedArgs(
        command=getattr(parsed, "command", "extract"),
        patterns=list(getattr(parsed, "patterns", [])),
        config_file=config_file,
        extractor=getattr(parsed, "extractor", None),
        default_namespace=getattr(parsed, "default_namespace", None),
        exclude=list(getattr(parsed, "exclude", [])),
        workers=getattr(parsed, "workers", None),
        isolation=getattr(parsed, "isolation", None),
        output=output,
        verbose=bool(getattr(parsed, "verbose", False)),
    )
