"""
The Salsa20 block function.

Maps a (key, nonce, block index) triple to one 64-byte keystream block.

ALGORITHM
---------
1. Lay out the 16-word state: constants on the diagonal, key words around
   them, nonce and block counter in the middle (see `constants`).
2. Run 10 double rounds. A double round is a column round followed by a
   row round, and each of those is four quarter-rounds on disjoint words.
3. Add the original state back into the mixed words, word by word, modulo
   2**32. Without this feed-forward the rounds could simply be inverted.
4. Serialize the 16 words little-endian.

QUARTER-ROUND
-------------
On words (y0, y1, y2, y3), in this exact order::

    y1 ^= rotl(y0 + y3,  7)
    y2 ^= rotl(y1 + y0,  9)
    y3 ^= rotl(y2 + y1, 13)
    y0 ^= rotl(y3 + y2, 18)

Each step uses the word updated by the step before it.

Everything in this module is a pure function of its arguments.
"""

from __future__ import annotations

from typing import Any, Sequence

from salsa_stream.types import Bytes8, Bytes32, Bytes64, KeyMaterialError, Uint64

from .constants import (
    COLUMN_GROUPS,
    CONSTANT_POSITIONS,
    COUNTER_POSITIONS,
    DOUBLE_ROUNDS,
    IV_SIZE,
    KEY_POSITIONS,
    KEY_SIZE,
    NONCE_POSITIONS,
    ROTATIONS,
    ROW_GROUPS,
    SIGMA,
    STATE_WORDS,
    WORD_MASK,
)
from .encoding import add32, rotl32, split_counter, words_from_bytes, words_to_bytes

_R1, _R2, _R3, _R4 = ROTATIONS

SIGMA_WORDS: tuple[int, ...] = tuple(words_from_bytes(SIGMA))
"""SIGMA as the four little-endian words placed on the state diagonal."""


# =============================================================================
# Key Material
# =============================================================================


def _coerce_exact(value: Any, name: str, size: int) -> bytes:
    """Return `value` as bytes of exactly `size`, or raise KeyMaterialError."""
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"Salsa20 {name} must be bytes-like, got {type(value).__name__}")
    data = bytes(value)
    if len(data) != size:
        raise KeyMaterialError(name, expected=size, actual=len(data))
    return data


def coerce_key(key: Any) -> Bytes32:
    """
    Validate a 256-bit key.

    Raises:
        TypeError: If `key` is not bytes-like.
        KeyMaterialError: If `key` is not exactly 32 bytes.
    """
    if isinstance(key, Bytes32):
        return key
    return Bytes32(_coerce_exact(key, "key", KEY_SIZE))


def coerce_nonce(nonce: Any) -> Bytes8:
    """
    Validate a 64-bit nonce.

    Raises:
        TypeError: If `nonce` is not bytes-like.
        KeyMaterialError: If `nonce` is not exactly 8 bytes.
    """
    if isinstance(nonce, Bytes8):
        return nonce
    return Bytes8(_coerce_exact(nonce, "nonce", IV_SIZE))


# =============================================================================
# Mixing
# =============================================================================


def _quarter_round_at(x: list[int], a: int, b: int, c: int, d: int) -> None:
    """Apply the quarter-round in place to the words at positions a, b, c, d."""
    x[b] ^= rotl32(add32(x[a], x[d]), _R1)
    x[c] ^= rotl32(add32(x[b], x[a]), _R2)
    x[d] ^= rotl32(add32(x[c], x[b]), _R3)
    x[a] ^= rotl32(add32(x[d], x[c]), _R4)


def _mix(state: Sequence[int], double_rounds: int) -> list[int]:
    """Run `double_rounds` double rounds and the feed-forward on a well-formed state."""
    x = list(state)
    for _ in range(double_rounds):
        for a, b, c, d in COLUMN_GROUPS:
            _quarter_round_at(x, a, b, c, d)
        for a, b, c, d in ROW_GROUPS:
            _quarter_round_at(x, a, b, c, d)

    # `state` is untouched, so it can be added back word by word.
    return [add32(mixed, start) for mixed, start in zip(x, state)]


def _check_state(words: Sequence[int]) -> list[int]:
    """Copy `words` into a fresh list, checking there are 16 32-bit words."""
    x = list(words)
    if len(x) != STATE_WORDS:
        raise ValueError(f"Salsa20 state must have {STATE_WORDS} words, got {len(x)}")
    for word in x:
        if not 0 <= word <= WORD_MASK:
            raise ValueError(f"State word out of 32-bit range: {word}")
    return x


def quarter_round(y0: int, y1: int, y2: int, y3: int) -> tuple[int, int, int, int]:
    """
    Apply the quarter-round to four words.

    Returns:
        The four updated words in input order.
    """
    x = [y0, y1, y2, y3]
    _quarter_round_at(x, 0, 1, 2, 3)
    return x[0], x[1], x[2], x[3]


def column_round(words: Sequence[int]) -> list[int]:
    """Apply the quarter-round down each of the four columns."""
    x = _check_state(words)
    for a, b, c, d in COLUMN_GROUPS:
        _quarter_round_at(x, a, b, c, d)
    return x


def row_round(words: Sequence[int]) -> list[int]:
    """Apply the quarter-round along each of the four rows."""
    x = _check_state(words)
    for a, b, c, d in ROW_GROUPS:
        _quarter_round_at(x, a, b, c, d)
    return x


def double_round(words: Sequence[int]) -> list[int]:
    """A column round followed by a row round."""
    return row_round(column_round(words))


def salsa20_core(words: Sequence[int], double_rounds: int = DOUBLE_ROUNDS) -> list[int]:
    """
    Mix a 16-word state and add the input back in.

    Args:
        words: The 16-word input state. It is not modified.
        double_rounds: Number of double rounds. Salsa20/20 uses 10; the
            reduced Salsa20/8 core used by scrypt uses 4.

    Returns:
        The 16 output words, before serialization.

    Raises:
        ValueError: If the state is malformed or `double_rounds` is negative.
    """
    if double_rounds < 0:
        raise ValueError(f"double_rounds must be non-negative, got {double_rounds}")

    return _mix(_check_state(words), double_rounds)


# =============================================================================
# Block Function
# =============================================================================


def build_state(key: Any, nonce: Any, block_index: int = 0) -> list[int]:
    """
    Lay out the initial 16-word state for one block.

    Args:
        key: 32-byte key.
        nonce: 8-byte nonce.
        block_index: Block counter in [0, 2**64).

    Raises:
        KeyMaterialError: If the key or nonce has the wrong length.
        OverflowError: If `block_index` does not fit in 64 bits.
    """
    key_words = words_from_bytes(coerce_key(key))
    nonce_words = words_from_bytes(coerce_nonce(nonce))
    counter_words = split_counter(Uint64(block_index))

    state = [0] * STATE_WORDS
    for position, word in zip(CONSTANT_POSITIONS, SIGMA_WORDS):
        state[position] = word
    for position, word in zip(KEY_POSITIONS, key_words):
        state[position] = word
    for position, word in zip(NONCE_POSITIONS, nonce_words):
        state[position] = word
    for position, word in zip(COUNTER_POSITIONS, counter_words):
        state[position] = word
    return state


def keystream_block(state: Sequence[int]) -> Bytes64:
    """
    Run Salsa20/20 on a state from `build_state` and serialize the result.

    The state is trusted as laid out: unlike `salsa20_core`, the words are not
    re-checked on every block.
    """
    return Bytes64(words_to_bytes(_mix(state, DOUBLE_ROUNDS)))


def salsa20_block(key: Any, nonce: Any, block_index: int) -> Bytes64:
    """
    Produce the keystream block for `block_index` under (key, nonce).

    This is the block engine. It holds no state: identical arguments always
    give identical output, and concurrent callers cannot interfere.

    Args:
        key: 32-byte key.
        nonce: 8-byte nonce.
        block_index: Block counter in [0, 2**64).

    Returns:
        64 bytes of keystream.
    """
    return keystream_block(build_state(key, nonce, block_index))
