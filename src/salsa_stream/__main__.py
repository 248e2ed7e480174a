"""
Salsa20 file encryption CLI entry point.

Encrypts or decrypts a file with the Salsa20/20 stream cipher. Both directions
are the same operation: run the tool on a ciphertext with the same key to get
the plaintext back.

Usage::

    python -m salsa_stream INPUT OUTPUT KEY
    python -m salsa_stream INPUT OUTPUT KEY --blocks-per-chunk 1024 --no-progress
    python -m salsa_stream INPUT OUTPUT KEY --config driver.yaml -v

KEY is the 32-byte key followed by the 8-byte nonce, written as 80 hex
characters. Never reuse a key and nonce pair for two different files.

Options:
    --blocks-per-chunk  Number of 64-byte blocks processed per read (default: 8192)
    --config            YAML file with driver settings
    --no-progress       Do not log progress percentages
    -v, --verbose       Enable debug logging
    --no-color          Disable colored logging output

Exit status:
    0  success
    1  invalid arguments, configuration or key
    2  the input could not be opened, the output could not be created, or
       reading or writing failed part way through
    130  interrupted

See http://cr.yp.to/snuffle.html for the cipher.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn, Sequence

import yaml
from pydantic import ValidationError

from salsa_stream.driver import (
    DriverConfig,
    InputOpenError,
    InvalidSecretError,
    OutputCreateError,
    ProcessingError,
    SamePathError,
    parse_secret,
    process_file,
)

EXIT_OK = 0
"""Processing finished."""

EXIT_INVALID_ARGUMENTS = 1
"""Bad command line, configuration file or key."""

EXIT_PROCESSING_FAILED = 2
"""Input could not be opened, output could not be created, or I/O failed mid-stream."""

EXIT_INTERRUPTED = 130
"""Stopped by Ctrl-C (128 + SIGINT)."""

_HANDLER_NAME = "salsa_stream.cli"

logger = logging.getLogger(__name__)


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)

        timestamp = self.formatTime(record, self.datefmt)
        colored_time = f"{self.CYAN}{timestamp}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"

        return f"{colored_time} {levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """
    Configure logging for the CLI with optional colors.

    Calling it again replaces the handler installed by the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    root.setLevel(level)
    root.addHandler(handler)


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors with the tool's own exit code."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_INVALID_ARGUMENTS, f"{self.prog}: error: {message}\n")


def _positive_int(value: str) -> int:
    """argparse type for strictly positive integers."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = _ArgumentParser(
        prog="salsa-stream",
        description="Encrypt or decrypt a file with the Salsa20/20 stream cipher",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("input", type=Path, help="File to read")
    parser.add_argument("output", type=Path, help="File to create or overwrite")
    parser.add_argument(
        "key",
        help="32-byte key concatenated with 8-byte IV, written as 80 hex characters",
    )
    parser.add_argument(
        "--blocks-per-chunk",
        type=_positive_int,
        default=None,
        help="Number of 64-byte blocks processed per read (default: 8192)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with driver settings",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not log progress percentages",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )
    return parser


def load_config(
    config_path: Path | None,
    blocks_per_chunk: int | None = None,
    no_progress: bool = False,
) -> DriverConfig:
    """
    Build the driver configuration from an optional YAML file and CLI flags.

    Flags given on the command line win over values from the file.

    Raises:
        OSError: If the configuration file cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
        pydantic.ValidationError: If a setting is invalid.
    """
    config = DriverConfig() if config_path is None else DriverConfig.from_yaml_file(config_path)

    overrides: dict[str, object] = {}
    if blocks_per_chunk is not None:
        overrides["blocks_per_chunk"] = blocks_per_chunk
    if no_progress:
        overrides["report_progress"] = False
    if not overrides:
        return config

    # DriverConfig is frozen, so validate a new instance rather than mutating.
    return DriverConfig.model_validate(config.model_dump() | overrides)


def run(args: argparse.Namespace) -> int:
    """
    Execute one encryption/decryption run.

    Returns:
        The process exit status.
    """
    try:
        secret = parse_secret(args.key)
    except InvalidSecretError as e:
        logger.error("%s", e)
        return EXIT_INVALID_ARGUMENTS

    try:
        config = load_config(args.config, args.blocks_per_chunk, args.no_progress)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        logger.error("Invalid configuration %s: %s", args.config, e)
        return EXIT_INVALID_ARGUMENTS

    logger.debug(
        "Using %d blocks per chunk (%d bytes)", config.blocks_per_chunk, config.chunk_size
    )

    try:
        process_file(args.input, args.output, secret, config)
    except SamePathError as e:
        logger.error("%s", e)
        return EXIT_INVALID_ARGUMENTS
    except (InputOpenError, OutputCreateError, ProcessingError) as e:
        logger.error("%s", e)
        return EXIT_PROCESSING_FAILED

    logger.info("OK")
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    try:
        return run(args)
    except KeyboardInterrupt:
        logger.info("Interrupted, output file may be incomplete")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
