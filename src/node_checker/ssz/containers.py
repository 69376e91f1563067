"""
Light-Client Containers

This module defines the value objects produced when a light-client update is
decoded, together with the merkleization of the sync committee.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..constants import (
    BLS_PUBKEY_SIZE,
    ROOT_SIZE,
    SYNC_COMMITTEE_SIZE,
    ForkConfig,
    compute_sync_committee_period,
)
from .hashing import hash, hash_key
from .merkle import reduce_roots


@dataclass(frozen=True)
class SyncCommittee:
    """
    SyncCommittee container.

    Attributes:
        pubkeys: The 512 member public keys, in merkleization order
        aggregate_pubkey: Aggregate of all member keys
    """
    pubkeys: Tuple[bytes, ...]
    aggregate_pubkey: bytes

    def __post_init__(self):
        if len(self.pubkeys) != SYNC_COMMITTEE_SIZE:
            raise ValueError(
                f"Sync committee must have {SYNC_COMMITTEE_SIZE} pubkeys, got {len(self.pubkeys)}"
            )
        for i, pubkey in enumerate(self.pubkeys):
            if len(pubkey) != BLS_PUBKEY_SIZE:
                raise ValueError(f"Pubkey {i} must be {BLS_PUBKEY_SIZE} bytes, got {len(pubkey)}")
        if len(self.aggregate_pubkey) != BLS_PUBKEY_SIZE:
            raise ValueError(
                f"Aggregate pubkey must be {BLS_PUBKEY_SIZE} bytes, got {len(self.aggregate_pubkey)}"
            )

    def merkle_root(self) -> bytes:
        return calculate_next_sync_committee_root(self)


@dataclass(frozen=True)
class LightClientUpdate:
    """
    The parts of a LightClientUpdate needed to check the next sync committee proof.

    Attributes:
        attested_slot: Slot of the attested header
        state_root: State root of the attested header
        next_sync_committee: Committee for the following period
        next_sync_committee_branch: Proof of the committee against state_root
    """
    attested_slot: int
    state_root: bytes
    next_sync_committee: SyncCommittee
    next_sync_committee_branch: Tuple[bytes, ...]

    def __post_init__(self):
        if len(self.state_root) != ROOT_SIZE:
            raise ValueError(f"State root must be {ROOT_SIZE} bytes, got {len(self.state_root)}")
        for i, node in enumerate(self.next_sync_committee_branch):
            if len(node) != ROOT_SIZE:
                raise ValueError(f"Branch entry {i} must be {ROOT_SIZE} bytes, got {len(node)}")

    @property
    def period(self) -> int:
        return compute_sync_committee_period(self.attested_slot)

    @classmethod
    def from_json(cls, data: Dict[str, Any], fork: Optional[ForkConfig] = None) -> "LightClientUpdate":
        """
        Parse the `data` object of a beacon API JSON update.

        Raises:
            SSZDecodeError: On missing fields, bad hex or wrong sizes, including
                a branch that does not match the fork's depth
        """
        from .serialization import SSZDecodeError, parse_light_client_update_json

        update = parse_light_client_update_json(data)
        if fork is not None and len(update.next_sync_committee_branch) != fork.branch_depth:
            raise SSZDecodeError(
                f"Branch has {len(update.next_sync_committee_branch)} entries, "
                f"{fork.name} requires {fork.branch_depth}"
            )
        return update


def calculate_next_sync_committee_root(committee: SyncCommittee) -> bytes:
    """
    Compute the hash tree root of a sync committee.

    The container has two fields: the pubkeys vector, whose root is the
    reduction of the individual key roots, and the aggregate pubkey.
    """
    pubkeys_root = reduce_roots([hash_key(pubkey) for pubkey in committee.pubkeys])
    return hash(pubkeys_root, hash_key(committee.aggregate_pubkey))
