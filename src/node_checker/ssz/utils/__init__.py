"""
SSZ Utility Functions

This package provides hex string helpers used throughout the SSZ library.
"""

from .hex_helpers import (
    hex_to_bytes,
    bytes_to_hex,
)

__all__ = [
    'hex_to_bytes',
    'bytes_to_hex',
]
