"""
Main entry point for keyharvest.

This module wires the command line, configuration and logging to the
extraction pipeline and renders the aggregated keys as JSON. Errors are
reported with their user-facing message and mapped to exit codes:
0 on success, 1 on a handled error, 2 on usage errors, 130 on interrupt.
"""

import json
import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from .config.manager import ConfigManager
from .config.schema import KeyHarvestConfig
from .extraction.models import FilteredKeys
from .extraction.pipeline import run_extraction
from .utils.cli.args import ParsedArgs, PathValidationError, parse_arguments
from .utils.core.exceptions import ConfigurationError, ExtractionError, KeyHarvestError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def setup_logging(
    verbose: bool = False,
    level: str = "INFO",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
) -> None:
    """
    Configure console logging.

    Log records go to stderr so that stdout carries only the JSON result.

    Args:
        verbose: Enable debug logging regardless of the configured level
        level: Log level name used when not verbose
        log_format: Format string for log records
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else getattr(logging, level, logging.INFO))

    # Clear any existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(
        logging.Formatter(log_format, datefmt="%Y-%m-%d %H:%M:%S")
    )
    root_logger.addHandler(console_handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)


def format_filtered_keys(keys: FilteredKeys) -> dict[str, object]:
    """
    Convert FilteredKeys into a JSON-serializable structure.

    The null namespace is rendered as ``null`` and listed first; the other
    namespaces follow in alphabetical order.
    """
    ordered = sorted(keys.items(), key=lambda item: (item[0] is not None, item[0] or ""))
    return {
        "namespaces": [
            {"namespace": namespace, "keys": dict(bucket)}
            for namespace, bucket in ordered
        ]
    }


def build_config(args: ParsedArgs) -> KeyHarvestConfig:
    """
    Load the configuration file (if any) and apply command-line overrides.

    Raises:
        ConfigurationError: If the configuration cannot be loaded or is invalid
    """
    try:
        config = (
            ConfigManager.load_config(args.config_file)
            if args.config_file is not None
            else KeyHarvestConfig()
        )
        return ConfigManager.apply_overrides(
            config,
            patterns=args.patterns,
            extractor=args.extractor,
            default_namespace=args.default_namespace,
            exclude=args.exclude,
            max_workers=args.workers,
            isolation=args.isolation,
        )
    except (FileNotFoundError, yaml.YAMLError, ValidationError, ValueError) as e:
        raise ConfigurationError(
            f"Failed to load configuration: {e}",
            user_message=f"Invalid configuration: {e}",
            context={"config_file": str(args.config_file)},
        ) from e


def write_output(payload: dict[str, object], output: Path | None) -> None:
    """Write the JSON payload to the output file or stdout."""
    content = json.dumps(payload, indent=2, ensure_ascii=False)
    if output is None:
        _ = sys.stdout.write(content + "\n")
        sys.stdout.flush()
        return

    _ = output.write_text(content + "\n", encoding="utf-8")
    logger.info(f"Wrote extracted keys to {output}")


def main(argv: list[str] | None = None) -> int:
    """
    Run the keyharvest command line.

    Args:
        argv: Arguments to parse (defaults to sys.argv[1:])

    Returns:
        Process exit code
    """
    try:
        args = parse_arguments(argv)
    except PathValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(args.verbose)

    try:
        config = build_config(args)
    except ConfigurationError as e:
        logger.error(e.user_message)
        return EXIT_ERROR

    setup_logging(args.verbose, config.logging.level, config.logging.format)

    if not config.extraction.patterns:
        logger.error("No file patterns given. Pass them as arguments or in the config file.")
        return EXIT_USAGE

    try:
        keys = run_extraction(config.extraction)
        write_output(format_filtered_keys(keys), args.output)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return EXIT_INTERRUPTED
    except KeyHarvestError as e:
        logger.error(e.user_message)
        if isinstance(e, ExtractionError) and e.details and args.verbose:
            logger.debug(f"Extractor traceback for {e.file}:\n{e.details}")
        if args.verbose:
            logger.exception("Full traceback:")
        return EXIT_ERROR
    except OSError as e:
        logger.error(f"Failed to write output: {e}")
        return EXIT_ERROR
    except Exception as e:
        logger.exception(f"Fatal error in main: {e}")
        return EXIT_ERROR

    total = sum(len(bucket) for bucket in keys.values())
    logger.info(f"Extracted {total} keys in {len(keys)} namespaces")
    return EXIT_OK


def console_main() -> None:
    """Console script entry point."""
    sys.exit(main())
