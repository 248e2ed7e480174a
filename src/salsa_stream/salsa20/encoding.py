"""
Word-level encoding primitives for Salsa20.

Salsa20 reads and writes all of its data as little-endian 32-bit words:

1. **Word arithmetic**: addition modulo 2**32 and circular left rotation,
   the only two operations besides XOR that the mixing function needs.

2. **Little-endian (de)serialization**: turning key, nonce and keystream bytes
   into words and back. All byte order handling lives here.

3. **Counter splitting**: the 64-bit block counter occupies two state words,
   low word first.
"""

from __future__ import annotations

import struct
from typing import Iterable

from salsa_stream.types import Uint32, Uint64

from .constants import WORD_BITS, WORD_MASK, WORD_SIZE

# Word arithmetic
#
# Python integers never overflow, so every sum is masked back to 32 bits.
# Rotation shifts left and ORs in the bits that fell off the top:
#
#   rotl(0x80000001, 1)
#
#     0x80000001 << 1          = 0x1_0000_0002
#     masked to 32 bits        = 0x0000_0002
#     0x80000001 >> (32 - 1)   = 0x0000_0001
#     OR                       = 0x0000_0003


def add32(a: int, b: int) -> int:
    """Add two words modulo 2**32."""
    return (a + b) & WORD_MASK


def rotl32(value: int, shift: int) -> int:
    """
    Rotate a 32-bit word left by `shift` bits.

    Args:
        value: Word to rotate. Must already fit in 32 bits.
        shift: Rotation amount in [0, 32).

    Returns:
        The rotated word.

    Raises:
        ValueError: If `shift` is outside [0, 32).
    """
    if not 0 <= shift < WORD_BITS:
        raise ValueError(f"Rotation amount must be in [0, {WORD_BITS}), got {shift}")
    return ((value << shift) & WORD_MASK) | (value >> (WORD_BITS - shift))


# Little-endian words
#
# Byte i of a word carries bits 8*i .. 8*i+7, so the bytes 01 02 03 04 decode
# to the word 0x04030201.


def load_le32(data: bytes, offset: int = 0) -> Uint32:
    """
    Decode one little-endian word from `data` at `offset`.

    Raises:
        ValueError: If fewer than 4 bytes are available at `offset`.
    """
    if offset < 0:
        raise ValueError(f"Offset must be non-negative, got {offset}")
    chunk = data[offset : offset + WORD_SIZE]
    if len(chunk) != WORD_SIZE:
        raise ValueError(f"Need {WORD_SIZE} bytes at offset {offset}, have {len(chunk)}")
    return Uint32.decode_bytes(bytes(chunk))


def words_from_bytes(data: bytes) -> list[int]:
    """
    Decode a byte string into little-endian words.

    Raises:
        ValueError: If the length is not a multiple of 4.
    """
    if len(data) % WORD_SIZE != 0:
        raise ValueError(f"Byte length must be a multiple of {WORD_SIZE}, got {len(data)}")
    return [int(load_le32(data, offset)) for offset in range(0, len(data), WORD_SIZE)]


def words_to_bytes(words: Iterable[int]) -> bytes:
    """
    Encode words as consecutive little-endian byte groups.

    Raises:
        struct.error: If a word does not fit in 32 bits.
    """
    values = list(words)
    return struct.pack(f"<{len(values)}I", *values)


# Counter words


def split_counter(counter: Uint64) -> tuple[int, int]:
    """Split a 64-bit block counter into its (low, high) state words."""
    value = int(Uint64(counter))
    return value & WORD_MASK, value >> WORD_BITS

