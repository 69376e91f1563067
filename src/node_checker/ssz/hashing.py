"""
Hashing Primitives

SHA-256 helpers used for SSZ merkleization of light-client data.
"""

import hmac
from hashlib import sha256
from typing import Union

from .utils.hex_helpers import hex_to_bytes

ZERO_HASH = b"\x00" * 32

# Padding that extends a 48-byte BLS public key to two 32-byte chunks
KEY_PADDING = b"\x00" * 16


def hash(*parts: Union[bytes, str]) -> bytes:
    """
    SHA-256 over the concatenation of the given parts.

    Args:
        parts: Raw bytes or 0x-prefixed hex strings

    Returns:
        32-byte digest
    """
    return sha256(b"".join(hex_to_bytes(part) for part in parts)).digest()


def hash_key(value: Union[bytes, str]) -> bytes:
    """
    Hash tree root of a 48-byte public key.

    The key is right-padded with 16 zero bytes so it spans exactly two chunks,
    then the two chunks are hashed together.
    """
    return hash(value, KEY_PADDING)


def bytes_equal(a: bytes, b: bytes) -> bool:
    """Compare two byte strings; different lengths are simply unequal."""
    if len(a) != len(b):
        return False
    return hmac.compare_digest(a, b)
