"""
Merkle Branch Verification

This module recomputes an ancestor root from a leaf and its branch of
sibling hashes, using a generalized index to decide at every level whether
the current node is a left or a right child.
"""

from typing import Sequence

from ..hashing import bytes_equal, hash


class BranchLengthError(ValueError):
    """Raised when a merkle branch does not match the depth of its generalized index."""
    pass


def get_branch_depth(gindex: int) -> int:
    """
    Number of levels between the node at `gindex` and the tree root.

    Examples:
        >>> get_branch_depth(87)  # Returns 6
        >>> get_branch_depth(1)   # Returns 0
    """
    if gindex < 1:
        raise ValueError(f"Generalized index must be positive, got {gindex}")
    return gindex.bit_length() - 1


def merkle_root_from_branch(gindex: int, branch: Sequence[bytes], leaf: bytes) -> bytes:
    """
    Rebuild the root of the tree that contains `leaf` at `gindex`.

    Args:
        gindex: Generalized index of the leaf
        branch: Sibling hashes ordered from the leaf level upwards
        leaf: 32-byte root of the proven node

    Returns:
        The reconstructed 32-byte root

    Raises:
        BranchLengthError: If the branch length differs from the gindex depth
    """
    depth = get_branch_depth(gindex)
    if len(branch) != depth:
        raise BranchLengthError(
            f"Merkle branch has {len(branch)} entries, "
            f"generalized index {gindex} requires {depth}"
        )

    root = leaf
    for sibling in branch:
        if gindex % 2:
            # Right child, sibling is on the left
            root = hash(sibling, root)
        else:
            # Left child, sibling is on the right
            root = hash(root, sibling)
        gindex >>= 1
    return root


def is_valid_merkle_branch(gindex: int, branch: Sequence[bytes], leaf: bytes, root: bytes) -> bool:
    """
    Verify a merkle branch against a known root.

    Raises:
        BranchLengthError: If the branch length differs from the gindex depth
    """
    return bytes_equal(merkle_root_from_branch(gindex, branch, leaf), root)
