"""Exception hierarchy for the Salsa20 engine."""

from __future__ import annotations


class SalsaError(Exception):
    """
    Base exception for all errors raised by this package.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class SalsaValueError(SalsaError):
    """
    Base class for value-related errors.

    Raised when an argument has the right type but cannot be used.
    """


class KeyMaterialError(SalsaValueError):
    """
    Raised when a key or nonce has the wrong length.

    Attributes:
        name: Which input was rejected ("key" or "nonce").
        expected: The required length in bytes.
        actual: The length that was supplied.
    """

    def __init__(self, name: str, *, expected: int, actual: int) -> None:
        self.name = name
        self.expected = expected
        self.actual = actual

        super().__init__(f"Salsa20 {name} must be exactly {expected} bytes, got {actual}")


class BufferContractError(SalsaValueError):
    """
    Raised when a caller breaks the buffer contract of the stream processor.

    This is a programming error: a partial block longer than one block, a
    negative length, or a buffer too small for the requested block count.
    Nothing is written and the counter does not move.

    Attributes:
        operation: The processor operation that was called.
        detail: Description of the violated requirement.
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail

        super().__init__(f"{operation}: {detail}")


class KeystreamExhaustedError(SalsaValueError):
    """
    Raised when a request would move the block counter past its 64-bit range.

    A (key, nonce) pair yields at most 2**64 blocks. Wrapping around would
    reuse keystream, so the request is refused instead.

    Attributes:
        counter: The session counter when the request was made.
        requested: Number of blocks requested.
    """

    def __init__(self, *, counter: int, requested: int) -> None:
        self.counter = counter
        self.requested = requested

        super().__init__(
            f"Keystream exhausted: counter {counter} cannot advance by {requested} block(s)"
        )
