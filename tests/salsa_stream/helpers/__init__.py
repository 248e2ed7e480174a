"""Test helpers for salsa_stream unit tests."""

from __future__ import annotations

from .builders import (
    make_key,
    make_nonce,
    make_payload,
    make_secret_hex,
    reference_keystream,
    reference_xor,
)

__all__ = [
    "make_key",
    "make_nonce",
    "make_payload",
    "make_secret_hex",
    "reference_keystream",
    "reference_xor",
]
