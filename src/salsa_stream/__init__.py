"""Salsa20/20 stream cipher engine and file encryption tool."""

from .salsa20 import CipherSession, salsa20_block, salsa20_xor

__all__ = ["CipherSession", "salsa20_block", "salsa20_xor"]
