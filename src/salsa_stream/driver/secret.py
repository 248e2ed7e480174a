"""
Decoding of the command-line secret.

The driver takes its key material as one 80-character hexadecimal string:
the 32-byte key followed by the 8-byte nonce, two hex digits per byte::

    KEY = k0 k1 ... k31 n0 n1 ... n7      (80 hex characters)

Upper and lower case hex digits are both accepted. Nothing else is: no
"0x" prefix, no separators, no surrounding whitespace.
"""

from __future__ import annotations

from pydantic import Field

from salsa_stream.salsa20 import IV_SIZE, KEY_SIZE, SECRET_SIZE, CipherSession
from salsa_stream.types import Bytes8, Bytes32, Bytes40, StrictBaseModel

from .errors import InvalidSecretError

SECRET_HEX_LENGTH: int = 2 * SECRET_SIZE
"""Number of hex characters in an encoded secret (80)."""

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class Secret(StrictBaseModel):
    """A key and nonce pair decoded from the command line."""

    key: Bytes32 = Field(repr=False)
    """The 32-byte cipher key. Excluded from repr so it never reaches a log line."""

    nonce: Bytes8
    """The 8-byte nonce that follows the key."""

    @classmethod
    def from_bytes(cls, raw: bytes) -> Secret:
        """
        Split a 40-byte secret into key and nonce.

        Raises:
            ValueError: If `raw` is not exactly 40 bytes.
        """
        combined = Bytes40(raw)
        return cls(
            key=Bytes32(combined[:KEY_SIZE]),
            nonce=Bytes8(combined[KEY_SIZE : KEY_SIZE + IV_SIZE]),
        )

    def open_session(self) -> CipherSession:
        """Start a new cipher session at block counter zero."""
        return CipherSession(self.key, self.nonce)


def parse_secret(text: str) -> Secret:
    """
    Decode an 80-character hex string into a Secret.

    Raises:
        InvalidSecretError: If the length is wrong or a character is not a hex digit.
    """
    if len(text) != SECRET_HEX_LENGTH:
        raise InvalidSecretError(
            f"expected {SECRET_HEX_LENGTH} hex characters, got {len(text)}"
        )

    for position, char in enumerate(text):
        if char not in _HEX_DIGITS:
            raise InvalidSecretError(f"non-hex character at position {position}")

    return Secret.from_bytes(bytes.fromhex(text))
