"""
SSZ Merkle Tree Operations

This package provides the merkle functionality needed for light-client
verification:
- tree: Pairwise reduction of a list of roots to a single root
- proof: Branch walking from a generalized index up to the root
"""

from .tree import (
    hash_roots,
    reduce_roots,
    get_tree_depth,
)

from .proof import (
    BranchLengthError,
    get_branch_depth,
    merkle_root_from_branch,
    is_valid_merkle_branch,
)

__all__ = [
    # Tree utilities
    "hash_roots",
    "reduce_roots",
    "get_tree_depth",
    # Proof functions
    "BranchLengthError",
    "get_branch_depth",
    "merkle_root_from_branch",
    "is_valid_merkle_branch",
]
