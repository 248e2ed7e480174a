"""
Global configuration for the Salsa20 tooling.

This module contains environment-specific settings read once at import time.
"""

import os

_DEFAULT_BLOCKS_PER_CHUNK: str = "8192"

_RAW_BLOCKS_PER_CHUNK = os.environ.get("SALSA_BLOCKS_PER_CHUNK", _DEFAULT_BLOCKS_PER_CHUNK).strip()

if not (
    _RAW_BLOCKS_PER_CHUNK.isascii()
    and _RAW_BLOCKS_PER_CHUNK.isdigit()
    and int(_RAW_BLOCKS_PER_CHUNK) > 0
):
    raise ValueError(
        f"Invalid SALSA_BLOCKS_PER_CHUNK environment variable: '{_RAW_BLOCKS_PER_CHUNK}'. "
        "Expected a positive integer."
    )

BLOCKS_PER_CHUNK: int = int(_RAW_BLOCKS_PER_CHUNK)
"""
Default number of 64-byte blocks the file driver handles per read.

8192 blocks (512 KiB) unless SALSA_BLOCKS_PER_CHUNK says otherwise.
Only throughput depends on it; the output bytes never do.
"""
