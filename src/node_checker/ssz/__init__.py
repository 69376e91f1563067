"""
SSZ support for light-client verification.

This package decodes LightClientUpdate payloads and provides the hashing and
merkle primitives used to check the next sync committee proof.

Usage:
    from node_checker.ssz import decode_light_client_update, merkle_root_from_branch

    update = decode_light_client_update(data, wrapped=True)
    root = merkle_root_from_branch(87, update.next_sync_committee_branch,
                                   update.next_sync_committee.merkle_root())
"""

from .hashing import ZERO_HASH, bytes_equal, hash, hash_key
from .merkle import (
    BranchLengthError,
    get_branch_depth,
    hash_roots,
    is_valid_merkle_branch,
    merkle_root_from_branch,
    reduce_roots,
)
from .containers import LightClientUpdate, SyncCommittee, calculate_next_sync_committee_root
from .serialization import (
    SSZDecodeError,
    decode_light_client_update,
    deserialize_uint32,
    deserialize_uint64,
    parse_light_client_update_json,
    unwrap_response_chunk,
)

__all__ = [
    # Hashing
    'ZERO_HASH',
    'bytes_equal',
    'hash',
    'hash_key',
    # Merkle
    'BranchLengthError',
    'get_branch_depth',
    'hash_roots',
    'is_valid_merkle_branch',
    'merkle_root_from_branch',
    'reduce_roots',
    # Containers
    'LightClientUpdate',
    'SyncCommittee',
    'calculate_next_sync_committee_root',
    # Serialization
    'SSZDecodeError',
    'decode_light_client_update',
    'deserialize_uint32',
    'deserialize_uint64',
    'parse_light_client_update_json',
    'unwrap_response_chunk',
]
