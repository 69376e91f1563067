"""
Merkle Tree Reduction Utilities

This module reduces an ordered sequence of 32-byte roots to a single
merkle root by repeated pairwise hashing.
"""

from typing import List, Sequence

from ..hashing import ZERO_HASH, hash


def hash_roots(roots: Sequence[bytes]) -> List[bytes]:
    """
    Perform one level of pairwise hashing.

    An unmatched last element is paired with a zero hash.

    Args:
        roots: List of 32-byte roots at the current level

    Returns:
        List of parent roots, half the length (rounded up)

    Examples:
        >>> hash_roots([a, b, c])  # [hash(a, b), hash(c, ZERO_HASH)]
    """
    parents = []
    for i in range(0, len(roots), 2):
        left = roots[i]
        right = roots[i + 1] if i + 1 < len(roots) else ZERO_HASH
        parents.append(hash(left, right))
    return parents


def reduce_roots(roots: Sequence[bytes]) -> bytes:
    """
    Reduce a list of 32-byte roots to a single merkle root.

    Args:
        roots: Leaf roots in merkleization order

    Returns:
        32-byte merkle root

    Raises:
        ValueError: If no roots are given
    """
    if not roots:
        raise ValueError("Cannot reduce an empty list of roots")

    level = list(roots)
    while len(level) > 1:
        level = hash_roots(level)
    return level[0]


def get_tree_depth(leaf_count: int) -> int:
    """
    Number of reduction rounds needed for `leaf_count` leaves.

    Examples:
        >>> get_tree_depth(512)  # Returns 9
        >>> get_tree_depth(3)    # Returns 2
    """
    if leaf_count < 1:
        raise ValueError("leaf_count must be positive")
    return (leaf_count - 1).bit_length()
