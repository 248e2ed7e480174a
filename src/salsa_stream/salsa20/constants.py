"""
Constants for the Salsa20/20 stream cipher.

Reference: https://cr.yp.to/snuffle/spec.pdf
"""

from __future__ import annotations

from typing import Final

# ===========================================================================
# Sizes
# ===========================================================================

BLOCK_SIZE: Final = 64
"""Size of one keystream block in bytes (16 words of 4 bytes)."""

KEY_SIZE: Final = 32
"""Size of a key in bytes. Only 256-bit keys are supported."""

IV_SIZE: Final = 8
"""Size of a nonce (IV) in bytes."""

SECRET_SIZE: Final = KEY_SIZE + IV_SIZE
"""Size of the combined secret: the key followed by the nonce."""

WORD_SIZE: Final = 4
"""Size of one state word in bytes."""

STATE_WORDS: Final = BLOCK_SIZE // WORD_SIZE
"""Number of 32-bit words in the state (16)."""

# ===========================================================================
# Word Arithmetic
# ===========================================================================

WORD_BITS: Final = 32
"""Width of a state word in bits."""

WORD_MASK: Final = 0xFFFFFFFF
"""Mask that reduces an integer modulo 2**32."""

MAX_BLOCKS: Final = 2**64
"""
Number of distinct block counter values.

This is the hard ceiling on one (key, nonce) stream: 2**64 blocks,
i.e. 2**70 bytes. Past it the counter would wrap and repeat keystream.
"""

# ===========================================================================
# State Layout
# ===========================================================================
#
# The 16 words form a 4x4 matrix. Constants sit on the diagonal, the key
# fills the rest of the first and last rows, and the middle holds the nonce
# and the counter:
#
#   [ c0  k0  k1  k2 ]
#   [ k3  c1  n0  n1 ]
#   [ b0  b1  c2  k4 ]
#   [ k5  k6  k7  c3 ]

SIGMA: Final = b"expand 32-byte k"
"""
The 16-byte constant used with 256-bit keys.

Decoded little-endian it gives the words 0x61707865, 0x3320646E, 0x79622D32,
0x6B206574 (see `core.SIGMA_WORDS`).
"""

CONSTANT_POSITIONS: Final = (0, 5, 10, 15)
"""State positions of the four SIGMA words (the diagonal)."""

KEY_POSITIONS: Final = (1, 2, 3, 4, 11, 12, 13, 14)
"""State positions of the eight key words, in key order."""

NONCE_POSITIONS: Final = (6, 7)
"""State positions of the two nonce words."""

COUNTER_POSITIONS: Final = (8, 9)
"""State positions of the counter words: low word first, then high word."""

# ===========================================================================
# Rounds
# ===========================================================================

DOUBLE_ROUNDS: Final = 10
"""Double rounds in Salsa20/20. Each is a column round plus a row round."""

ROTATIONS: Final = (7, 9, 13, 18)
"""Left-rotation amounts of the four quarter-round steps, in order."""

COLUMN_GROUPS: Final = (
    (0, 4, 8, 12),
    (5, 9, 13, 1),
    (10, 14, 2, 6),
    (15, 3, 7, 11),
)
"""
Quarter-round inputs for the column round.

Each group starts on the diagonal and walks down its column, wrapping around.
"""

ROW_GROUPS: Final = (
    (0, 1, 2, 3),
    (5, 6, 7, 4),
    (10, 11, 8, 9),
    (15, 12, 13, 14),
)
"""
Quarter-round inputs for the row round.

Each group starts on the diagonal and walks along its row, wrapping around.
"""
