"""
Light-Client Constants and Fork Parameters

This module contains the constants used when decoding and verifying
light-client updates served by Ethereum beacon nodes.

References:
- Altair light client: https://github.com/ethereum/consensus-specs/blob/dev/specs/altair/light-client/sync-protocol.md
- Electra light client: https://github.com/ethereum/consensus-specs/blob/dev/specs/electra/light-client/sync-protocol.md
"""

from dataclasses import dataclass

# ====================
# Sync Committee Parameters
# ====================

# Number of validators in a sync committee
SYNC_COMMITTEE_SIZE = 512

# BLS public key size
BLS_PUBKEY_SIZE = 48

# Serialized size of a SyncCommittee container (512 keys + aggregate key)
SYNC_COMMITTEE_BYTES = (SYNC_COMMITTEE_SIZE + 1) * BLS_PUBKEY_SIZE

# Slots covered by one sync committee (EPOCHS_PER_SYNC_COMMITTEE_PERIOD * SLOTS_PER_EPOCH)
SLOTS_PER_SYNC_COMMITTEE_PERIOD = 8192

# ====================
# SSZ Layout Constants
# ====================

# Standard hash output size (32 bytes for SHA256)
ROOT_SIZE = 32

# Size of an SSZ offset
OFFSET_SIZE = 4

# Beacon API response chunk framing: 4-byte length, 4 more length bytes, 4-byte fork digest
RESPONSE_CHUNK_HEADER_SIZE = 12

# Position of state_root inside a serialized BeaconBlockHeader
# (slot: 8, proposer_index: 8, parent_root: 32)
HEADER_STATE_ROOT_OFFSET = 48

# ====================
# Verification Defaults
# ====================

# Number of sync committee periods checked by the historical verification
# (the current period plus 20 prior periods)
DEFAULT_HISTORY_DEPTH = 21


@dataclass(frozen=True)
class ForkConfig:
    """
    Fork-specific location of the next sync committee in the BeaconState tree.

    The branch depth is derived from the generalized index, so a fork change
    only ever updates one value.
    """
    name: str
    next_sync_committee_gindex: int

    @property
    def branch_depth(self) -> int:
        return self.next_sync_committee_gindex.bit_length() - 1

    @property
    def branch_bytes(self) -> int:
        return self.branch_depth * ROOT_SIZE


FORKS = {
    "altair": ForkConfig("altair", 55),
    "electra": ForkConfig("electra", 87),
}

DEFAULT_FORK = "electra"


def get_fork(name: str) -> ForkConfig:
    """Look up a fork configuration by name."""
    try:
        return FORKS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown fork '{name}', expected one of: {', '.join(FORKS)}")


def compute_sync_committee_period(slot: int) -> int:
    """Return the sync committee period that contains `slot`."""
    return slot // SLOTS_PER_SYNC_COMMITTEE_PERIOD
