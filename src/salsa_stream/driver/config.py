"""Configuration for the file driver."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import Field

from salsa_stream.config import BLOCKS_PER_CHUNK
from salsa_stream.salsa20 import BLOCK_SIZE
from salsa_stream.types import StrictBaseModel


class DriverConfig(StrictBaseModel):
    """
    Tuning knobs for chunked file processing.

    None of these settings change the output bytes. They only decide how much
    data is held in memory at once and what gets logged.

    Keys may be written in snake_case or camelCase::

        blocks_per_chunk: 4096
        report_progress: false
    """

    blocks_per_chunk: int = Field(default=BLOCKS_PER_CHUNK, gt=0)
    """Number of 64-byte blocks read, processed and written per chunk."""

    report_progress: bool = Field(default=True)
    """Whether to log the percentage of chunks completed."""

    @property
    def chunk_size(self) -> int:
        """Size of one chunk in bytes."""
        return self.blocks_per_chunk * BLOCK_SIZE

    @classmethod
    def from_yaml_file(cls, path: Path | str) -> DriverConfig:
        """
        Load configuration from a YAML file.

        An empty file yields the defaults.

        Raises:
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If the file is not valid YAML.
            pydantic.ValidationError: If the data fails validation.
        """
        path = Path(path)
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})

    @classmethod
    def from_yaml(cls, content: str) -> DriverConfig:
        """
        Load configuration from a YAML string.

        Useful for testing or programmatic config generation.
        """
        data = yaml.safe_load(content)
        return cls.model_validate(data or {})
