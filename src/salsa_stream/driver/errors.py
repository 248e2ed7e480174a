"""Errors raised by the file driver."""

from __future__ import annotations

from pathlib import Path

from salsa_stream.types import SalsaError


class DriverError(SalsaError):
    """Base class for failures outside the cipher core."""


class InvalidSecretError(DriverError):
    """
    Raised when the hex secret cannot be decoded.

    Attributes:
        reason: What was wrong with the secret. Never includes the secret itself.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid key value: {reason}")


class SamePathError(DriverError):
    """Raised when input and output refer to the same file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Input and output files should be distinct: {path}")


class InputOpenError(DriverError):
    """Raised when the input file cannot be opened for reading."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Could not open input file {path}: {cause.strerror or cause}")


class OutputCreateError(DriverError):
    """Raised when the output file cannot be created."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Could not create output file {path}: {cause.strerror or cause}")


class ProcessingError(DriverError):
    """
    Raised when reading the input or writing the output fails part way through.

    The output file may hold a partial result and should not be trusted.
    """

    def __init__(self, input_path: Path, output_path: Path, cause: OSError) -> None:
        self.input_path = input_path
        self.output_path = output_path
        self.cause = cause
        super().__init__(
            f"Failed while processing {input_path} into {output_path}: {cause.strerror or cause}"
        )
