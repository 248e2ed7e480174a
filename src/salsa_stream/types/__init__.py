"""Reusable type definitions for the Salsa20 engine."""

from .base import CamelModel, StrictBaseModel
from .byte_arrays import BaseBytes, Bytes8, Bytes32, Bytes40, Bytes64
from .exceptions import (
    BufferContractError,
    KeyMaterialError,
    KeystreamExhaustedError,
    SalsaError,
    SalsaValueError,
)
from .uint import BaseUint, Uint32, Uint64

__all__ = [
    # Core types
    "BaseUint",
    "Uint32",
    "Uint64",
    "BaseBytes",
    "Bytes8",
    "Bytes32",
    "Bytes40",
    "Bytes64",
    "CamelModel",
    "StrictBaseModel",
    # Exceptions
    "SalsaError",
    "SalsaValueError",
    "KeyMaterialError",
    "BufferContractError",
    "KeystreamExhaustedError",
]
