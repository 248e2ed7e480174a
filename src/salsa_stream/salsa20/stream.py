"""
Stream processing on top of the Salsa20 block function.

A `CipherSession` owns a key, a nonce and a block counter. Each 64-byte block
of caller data is XORed with the keystream block at the current counter, and
the counter then moves forward by one. Encryption and decryption are the same
operation.

SESSION LIFECYCLE
-----------------
::

    session = CipherSession(key, nonce)            counter = 0
    session.process_blocks(src, dst, n)            counter = n
    session.process_bytes(src_tail, dst_tail, k)   counter = n + 1   (0 <= k <= 64)
    session.set_nonce(other_nonce)                 counter = 0

The partial-block path always consumes a whole keystream block, even for
k == 0. A stream split into chunks produces the same bytes as the stream
processed at once, as long as only the final chunk goes through
`process_bytes`.

CONCURRENCY
-----------
The block function is pure. A session is not: every call mutates its counter,
so callers must not share one session between threads without their own lock.
"""

from __future__ import annotations

from typing import Any

from salsa_stream.types import (
    BufferContractError,
    Bytes8,
    Bytes32,
    Bytes64,
    KeystreamExhaustedError,
)

from .constants import BLOCK_SIZE, COUNTER_POSITIONS, MAX_BLOCKS
from .core import build_state, coerce_key, coerce_nonce, keystream_block
from .encoding import split_counter

_LOW, _HIGH = COUNTER_POSITIONS


def _byte_view(buffer: Any, operation: str, role: str) -> memoryview:
    """Return a flat byte view of `buffer`, or raise BufferContractError."""
    try:
        view = memoryview(buffer)
    except TypeError as e:
        raise BufferContractError(operation, f"{role} must support the buffer protocol") from e
    return view if view.format == "B" and view.ndim == 1 else view.cast("B")


def _check_count(value: Any, operation: str, name: str) -> int:
    """Validate a non-negative integer count argument."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{operation}: {name} must be int, got {type(value).__name__}")
    if value < 0:
        raise BufferContractError(operation, f"{name} must be non-negative, got {value}")
    return value


def xor_bytes(data: bytes, keystream: bytes) -> bytes:
    """
    XOR `data` with the first `len(data)` bytes of `keystream`.

    Each operand is folded into a single integer, so one XOR covers any
    number of blocks.
    """
    length = len(data)
    if length == 0:
        return b""
    mixed = int.from_bytes(data, "little") ^ int.from_bytes(keystream[:length], "little")
    return mixed.to_bytes(length, "little")


class CipherSession:
    """
    A Salsa20/20 keystream bound to one (key, nonce) pair.

    The key is fixed for the session's lifetime. The nonce may be replaced,
    which restarts the counter at zero.
    """

    __slots__ = ("_key", "_nonce", "_counter", "_state")

    def __init__(self, key: Any, nonce: Any) -> None:
        """
        Validate the key material and start the counter at zero.

        Raises:
            TypeError: If key or nonce is not bytes-like.
            KeyMaterialError: If key or nonce has the wrong length.
        """
        self._key: Bytes32 = coerce_key(key)
        self._nonce: Bytes8 = coerce_nonce(nonce)
        self._state: list[int] = build_state(self._key, self._nonce, 0)
        self._counter: int = 0

    def __repr__(self) -> str:
        # Never show the key.
        return f"CipherSession(nonce={self._nonce.hex()}, counter={self._counter})"

    @property
    def key(self) -> Bytes32:
        """The 32-byte session key."""
        return self._key

    @property
    def nonce(self) -> Bytes8:
        """The current 8-byte nonce."""
        return self._nonce

    @property
    def counter(self) -> int:
        """
        Index of the next keystream block.

        Ranges over [0, 2**64]. The value 2**64 means the keystream is used up.
        """
        return self._counter

    @property
    def remaining_blocks(self) -> int:
        """Number of keystream blocks this session can still produce."""
        return MAX_BLOCKS - self._counter

    def set_nonce(self, nonce: Any) -> None:
        """
        Switch to a new nonce and reset the counter to zero.

        Raises:
            KeyMaterialError: If `nonce` is not exactly 8 bytes. The session is
                left unchanged in that case.
        """
        new_nonce = coerce_nonce(nonce)
        self._state = build_state(self._key, new_nonce, 0)
        self._nonce = new_nonce
        self._counter = 0

    def _take_keystream(self, num_blocks: int) -> bytes:
        """
        Produce `num_blocks` consecutive keystream blocks and advance the counter.

        The range check happens before any block is computed, so a refused
        request leaves the session untouched.
        """
        if num_blocks > self.remaining_blocks:
            raise KeystreamExhaustedError(counter=self._counter, requested=num_blocks)

        state = self._state
        blocks = []
        for index in range(self._counter, self._counter + num_blocks):
            state[_LOW], state[_HIGH] = split_counter(index)
            blocks.append(keystream_block(state))
        self._counter += num_blocks
        return b"".join(blocks)

    def generate_keystream(self) -> Bytes64:
        """
        Return the raw keystream block at the current counter and advance it.

        Raises:
            KeystreamExhaustedError: If the counter has reached 2**64.
        """
        return Bytes64(self._take_keystream(1))

    def process_blocks(self, input: Any, output: Any, num_blocks: int) -> None:
        """
        Encrypt or decrypt `num_blocks` whole blocks.

        Reads the first `num_blocks * 64` bytes of `input` and writes the result
        to the same range of `output`. The two may be the same buffer.

        Args:
            input: Readable bytes-like object with at least `num_blocks * 64` bytes.
            output: Writable bytes-like object with at least `num_blocks * 64` bytes.
            num_blocks: Number of blocks to process; the counter advances by this much.

        Raises:
            BufferContractError: If a buffer is too small or `output` is read-only.
            KeystreamExhaustedError: If the counter would pass 2**64.
        """
        operation = "process_blocks"
        num_blocks = _check_count(num_blocks, operation, "num_blocks")
        size = num_blocks * BLOCK_SIZE
        src = _byte_view(input, operation, "input")
        dst = _byte_view(output, operation, "output")

        if src.nbytes < size:
            raise BufferContractError(
                operation, f"input holds {src.nbytes} bytes, {num_blocks} blocks need {size}"
            )
        if dst.readonly:
            raise BufferContractError(operation, "output buffer is read-only")
        if dst.nbytes < size:
            raise BufferContractError(
                operation, f"output holds {dst.nbytes} bytes, {num_blocks} blocks need {size}"
            )
        if num_blocks == 0:
            return

        keystream = self._take_keystream(num_blocks)
        # Copy the input out before writing, in case input and output overlap.
        dst[:size] = xor_bytes(src[:size].tobytes(), keystream)

    def process_bytes(self, input: Any, output: Any, length: int) -> None:
        """
        Encrypt or decrypt a final partial block of `length` bytes.

        Consumes exactly one keystream block and advances the counter by one,
        even when `length` is zero. Use it only for the last piece of a stream.

        Args:
            input: Readable bytes-like object with at least `length` bytes.
            output: Writable bytes-like object with at least `length` bytes.
            length: Number of bytes to process, in [0, 64].

        Raises:
            BufferContractError: If `length` exceeds one block, a buffer is too
                small, or `output` is read-only.
            KeystreamExhaustedError: If the counter has reached 2**64.
        """
        operation = "process_bytes"
        length = _check_count(length, operation, "length")
        if length > BLOCK_SIZE:
            raise BufferContractError(
                operation, f"length {length} exceeds one block of {BLOCK_SIZE} bytes"
            )
        src = _byte_view(input, operation, "input")
        dst = _byte_view(output, operation, "output")

        if src.nbytes < length:
            raise BufferContractError(operation, f"input holds {src.nbytes} bytes, need {length}")
        if dst.readonly:
            raise BufferContractError(operation, "output buffer is read-only")
        if dst.nbytes < length:
            raise BufferContractError(operation, f"output holds {dst.nbytes} bytes, need {length}")

        keystream = self._take_keystream(1)
        dst[:length] = xor_bytes(src[:length].tobytes(), keystream)


def salsa20_xor(key: Any, nonce: Any, data: bytes) -> bytes:
    """
    Encrypt or decrypt `data` in one call, starting at block counter zero.

    Whole blocks go through `process_blocks`; a trailing partial block, if
    any, goes through `process_bytes`. The result has the same length as
    `data`.
    """
    session = CipherSession(key, nonce)
    buffer = bytearray(data)
    full_blocks, tail = divmod(len(buffer), BLOCK_SIZE)

    session.process_blocks(buffer, buffer, full_blocks)
    if tail:
        rest = memoryview(buffer)[full_blocks * BLOCK_SIZE :]
        session.process_bytes(rest, rest, tail)

    return bytes(buffer)
