"""Pure Python Salsa20/20 stream cipher.

Salsa20 is a stream cipher designed by Daniel J. Bernstein. A 256-bit key and a
64-bit nonce select a keystream; each 64-byte block of it comes from running
20 rounds of add-rotate-XOR mixing over a 16-word state that includes a
64-bit block counter.

Usage::

    from salsa_stream.salsa20 import CipherSession, salsa20_xor

    # One-shot
    ciphertext = salsa20_xor(key, nonce, plaintext)

    # Incremental, e.g. over file chunks
    session = CipherSession(key, nonce)
    session.process_blocks(chunk, chunk, len(chunk) // 64)
    session.process_bytes(tail, tail, len(tail))

The round structure and test vectors follow the Salsa20 paper:
https://cr.yp.to/snuffle/spec.pdf
"""

from __future__ import annotations

from .constants import BLOCK_SIZE, IV_SIZE, KEY_SIZE, MAX_BLOCKS, SECRET_SIZE
from .core import (
    build_state,
    column_round,
    double_round,
    quarter_round,
    row_round,
    salsa20_block,
    salsa20_core,
)
from .stream import CipherSession, salsa20_xor

__all__ = [
    # Block engine
    "salsa20_block",
    "salsa20_core",
    "build_state",
    # Round functions
    "quarter_round",
    "row_round",
    "column_round",
    "double_round",
    # Stream processing
    "CipherSession",
    "salsa20_xor",
    # Sizes
    "BLOCK_SIZE",
    "KEY_SIZE",
    "IV_SIZE",
    "SECRET_SIZE",
    "MAX_BLOCKS",
]
