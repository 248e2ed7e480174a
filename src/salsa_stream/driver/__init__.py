"""File driver: hex secret decoding, configuration and chunked file processing."""

from .config import DriverConfig
from .errors import (
    DriverError,
    InputOpenError,
    InvalidSecretError,
    OutputCreateError,
    ProcessingError,
    SamePathError,
)
from .processor import ProcessingReport, process_file, process_stream
from .secret import Secret, parse_secret

__all__ = [
    "DriverConfig",
    "Secret",
    "parse_secret",
    "process_file",
    "process_stream",
    "ProcessingReport",
    # Exceptions
    "DriverError",
    "InvalidSecretError",
    "SamePathError",
    "InputOpenError",
    "OutputCreateError",
    "ProcessingError",
]
