"""
Shared pytest fixtures for all salsa_stream tests.

Import these fixtures automatically via pytest discovery.
"""

from __future__ import annotations

import pytest

from salsa_stream.salsa20 import CipherSession
from salsa_stream.types import Bytes8, Bytes32
from tests.salsa_stream.helpers import make_key, make_nonce


@pytest.fixture
def key() -> Bytes32:
    """A fixed, non-trivial 32-byte key."""
    return make_key(1)


@pytest.fixture
def nonce() -> Bytes8:
    """A fixed, non-trivial 8-byte nonce."""
    return make_nonce(1)


@pytest.fixture
def session(key: Bytes32, nonce: Bytes8) -> CipherSession:
    """A fresh cipher session at counter zero."""
    return CipherSession(key, nonce)
