"""
Hex String Utilities

This module provides utilities for converting between the 0x-prefixed hex
strings used by the beacon API JSON encoding and raw bytes.
"""

from typing import Optional, Union

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def hex_to_bytes(value: Union[str, bytes, bytearray], expected_bytes: Optional[int] = None) -> bytes:
    """
    Convert a hex string to bytes. Bytes are passed through unchanged.

    Args:
        value: Hex string (with or without '0x' prefix) or bytes
        expected_bytes: Optional expected byte length for validation

    Returns:
        Bytes representation of the value

    Raises:
        ValueError: If the string is not valid hex or has the wrong length

    Examples:
        >>> hex_to_bytes("0x1234")
        b'\\x12\\x34'
    """
    if isinstance(value, (bytes, bytearray)):
        data = bytes(value)
    else:
        hex_str = value[2:] if value.startswith("0x") else value
        if not all(c in HEX_DIGITS for c in hex_str):
            raise ValueError(f"Invalid hex string: {value}")
        if len(hex_str) % 2 == 1:
            hex_str = "0" + hex_str
        data = bytes.fromhex(hex_str)

    if expected_bytes is not None and len(data) != expected_bytes:
        raise ValueError(f"Expected {expected_bytes} bytes, got {len(data)} bytes")
    return data


def bytes_to_hex(data: bytes, prefix: bool = True) -> str:
    """
    Convert bytes to a hex string.

    Examples:
        >>> bytes_to_hex(b'\\x12\\x34')
        "0x1234"
        >>> bytes_to_hex(b'\\x12\\x34', prefix=False)
        "1234"
    """
    hex_str = data.hex()
    return f"0x{hex_str}" if prefix else hex_str
