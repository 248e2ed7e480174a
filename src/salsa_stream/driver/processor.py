"""
Chunked file encryption and decryption.

The driver streams a file through a `CipherSession` in fixed-size chunks:

1. Every full chunk of `blocks_per_chunk * 64` bytes goes through
   `process_blocks` in place and is written out.
2. The last, short chunk is split into its whole blocks (`process_blocks`)
   and a final 1-63 byte remainder (`process_bytes`).

Output is written in input order and has exactly the input's length. There
is no header, padding or checksum. Running the driver twice with the same
secret restores the original file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from salsa_stream.salsa20 import BLOCK_SIZE, CipherSession

from .config import DriverConfig
from .errors import InputOpenError, OutputCreateError, ProcessingError, SamePathError
from .secret import Secret

logger = logging.getLogger(__name__)

PROGRESS_STEP_PERCENT: int = 10
"""Progress is logged at INFO each time another 10% of the chunks is done."""


@dataclass(frozen=True, slots=True)
class ProcessingReport:
    """Summary of one driver run."""

    bytes_processed: int
    """Bytes read from the input, which equals bytes written to the output."""

    full_chunks: int
    """Number of full-size chunks processed."""

    blocks_consumed: int
    """Keystream blocks used, including one for a trailing partial block."""


def _read_chunk(source: BinaryIO, size: int) -> bytes:
    """Read up to `size` bytes, stopping early only at end of input."""
    parts: list[bytes] = []
    remaining = size
    while remaining > 0:
        data = source.read(remaining)
        if not data:
            break
        parts.append(data)
        remaining -= len(data)
    return b"".join(parts)


def _total_size(source: BinaryIO) -> int | None:
    """Size of the underlying file, or None when it cannot be known (pipes)."""
    try:
        return os.fstat(source.fileno()).st_size
    except (AttributeError, OSError, ValueError):
        return None


class _ProgressLog:
    """Logs chunk progress as a percentage of the expected chunk count."""

    def __init__(self, total_chunks: int | None, enabled: bool) -> None:
        self.total_chunks = total_chunks
        self.enabled = enabled
        self._next_step = PROGRESS_STEP_PERCENT

    def chunk_done(self, done: int) -> None:
        if not self.enabled or not self.total_chunks:
            return
        percentage = 100.0 * done / self.total_chunks
        logger.debug("[%6.2f] chunk %d/%d", percentage, done, self.total_chunks)
        if percentage >= self._next_step:
            logger.info("[%6.2f]", percentage)
            while self._next_step <= percentage:
                self._next_step += PROGRESS_STEP_PERCENT


def process_stream(
    source: BinaryIO,
    sink: BinaryIO,
    session: CipherSession,
    config: DriverConfig,
) -> ProcessingReport:
    """
    Encrypt or decrypt everything readable from `source` into `sink`.

    Args:
        source: Binary stream positioned at the start of the data.
        sink: Binary stream that receives the result.
        session: Cipher session, normally fresh (counter zero).
        config: Chunk size and progress settings.

    Returns:
        A summary of the work done.

    Raises:
        OSError: If reading `source` or writing `sink` fails.
    """
    chunk_size = config.chunk_size
    start_counter = session.counter

    total_size = _total_size(source)
    progress = _ProgressLog(
        total_size // chunk_size if total_size is not None else None,
        config.report_progress,
    )

    processed = 0
    full_chunks = 0
    while True:
        buffer = bytearray(_read_chunk(source, chunk_size))
        length = len(buffer)

        if length == chunk_size:
            session.process_blocks(buffer, buffer, config.blocks_per_chunk)
            sink.write(buffer)
            processed += length
            full_chunks += 1
            progress.chunk_done(full_chunks)
            continue

        # Short (possibly empty) final chunk.
        whole_blocks, remainder = divmod(length, BLOCK_SIZE)
        session.process_blocks(buffer, buffer, whole_blocks)
        if remainder:
            tail = memoryview(buffer)[whole_blocks * BLOCK_SIZE :]
            session.process_bytes(tail, tail, remainder)
        sink.write(buffer)
        processed += length
        break

    return ProcessingReport(
        bytes_processed=processed,
        full_chunks=full_chunks,
        blocks_consumed=session.counter - start_counter,
    )


def _same_file(first: Path, second: Path) -> bool:
    """True when both paths name the same file, existing or not."""
    if first.resolve() == second.resolve():
        return True
    try:
        return first.exists() and second.exists() and os.path.samefile(first, second)
    except OSError:
        return False


def process_file(
    input_path: Path | str,
    output_path: Path | str,
    secret: Secret,
    config: DriverConfig | None = None,
) -> ProcessingReport:
    """
    Encrypt or decrypt `input_path` into `output_path`.

    The output file is created or truncated. The input is never modified.

    Raises:
        SamePathError: If both paths refer to the same file.
        InputOpenError: If the input cannot be opened.
        OutputCreateError: If the output cannot be created.
        ProcessingError: If reading or writing fails after both files are open.
            The output may then hold a partial result.
    """
    input_path = Path(input_path)
    output_path = Path(output_path)
    config = config if config is not None else DriverConfig()

    if _same_file(input_path, output_path):
        raise SamePathError(input_path)

    try:
        source = input_path.open("rb")
    except OSError as e:
        raise InputOpenError(input_path, e) from e

    with source:
        try:
            sink = output_path.open("wb")
        except OSError as e:
            raise OutputCreateError(output_path, e) from e

        # Closing the sink flushes buffered output, so it can fail too.
        try:
            with sink:
                logger.info('Processing file "%s"', input_path)
                report = process_stream(source, sink, secret.open_session(), config)
        except OSError as e:
            raise ProcessingError(input_path, output_path, e) from e

    logger.info(
        "Wrote %d bytes to %s (%d keystream blocks)",
        report.bytes_processed,
        output_path,
        report.blocks_consumed,
    )
    return report
