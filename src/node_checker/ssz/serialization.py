"""
SSZ Deserialization of Light-Client Updates

This module decodes the parts of a LightClientUpdate that are needed to
verify the next sync committee proof, either from the SSZ bytes delivered
with `Accept: application/octet-stream` or from the beacon API JSON encoding.

Only the fixed layout of the update is supported:

    [0:4)                   offset of the attested header (uint32)
    [4:4+24624)             next_sync_committee (512 pubkeys + aggregate pubkey)
    [24628:24628+32*depth)  next_sync_committee_branch
    [offset:)               attested header, state_root at bytes [48:80)

References:
- SSZ Specification: https://github.com/ethereum/consensus-specs/blob/dev/ssz/simple-serialize.md
- Beacon API light client updates: https://ethereum.github.io/beacon-APIs/#/Beacon/getLightClientUpdatesByRange
"""

import logging
from typing import Any, Dict

from ..constants import (
    BLS_PUBKEY_SIZE,
    FORKS,
    DEFAULT_FORK,
    HEADER_STATE_ROOT_OFFSET,
    OFFSET_SIZE,
    RESPONSE_CHUNK_HEADER_SIZE,
    ROOT_SIZE,
    SYNC_COMMITTEE_BYTES,
    SYNC_COMMITTEE_SIZE,
    ForkConfig,
)
from .containers import LightClientUpdate, SyncCommittee
from .utils.hex_helpers import hex_to_bytes

logger = logging.getLogger(__name__)

# Smallest buffer that can hold the header offset plus anything else
MIN_UPDATE_SIZE = 8


class SSZDecodeError(ValueError):
    """Raised when SSZ or JSON data does not match the expected layout."""
    pass


def deserialize_uint32(data: bytes) -> int:
    """
    Deserialize a uint32 from SSZ format.

    Raises:
        SSZDecodeError: If data is not exactly 4 bytes
    """
    if len(data) != 4:
        raise SSZDecodeError(f"Expected 4 bytes for uint32, got {len(data)}")
    return int.from_bytes(data, "little")


def deserialize_uint64(data: bytes) -> int:
    """
    Deserialize a uint64 from SSZ format.

    Raises:
        SSZDecodeError: If data is not exactly 8 bytes
    """
    if len(data) != 8:
        raise SSZDecodeError(f"Expected 8 bytes for uint64, got {len(data)}")
    return int.from_bytes(data, "little")


def split_bytes(data: bytes, size: int) -> tuple:
    """Split `data` into consecutive chunks of `size` bytes."""
    return tuple(data[i:i + size] for i in range(0, len(data), size))


def unwrap_response_chunk(data: bytes) -> bytes:
    """
    Strip the beacon API response chunk framing from the first update.

    The chunk starts with its length (read as uint32), followed by four more
    length bytes and the 4-byte fork digest; the payload starts at byte 12.

    Raises:
        SSZDecodeError: If the framing is truncated or the length overruns the buffer
    """
    if len(data) < RESPONSE_CHUNK_HEADER_SIZE:
        raise SSZDecodeError(
            f"Response chunk too short: expected at least {RESPONSE_CHUNK_HEADER_SIZE} bytes, got {len(data)}"
        )
    length = deserialize_uint32(data[0:4])
    end = RESPONSE_CHUNK_HEADER_SIZE + length
    if end > len(data):
        raise SSZDecodeError(
            f"Response chunk length {length} exceeds available data "
            f"({len(data) - RESPONSE_CHUNK_HEADER_SIZE} bytes after framing)"
        )
    return data[RESPONSE_CHUNK_HEADER_SIZE:end]


def decode_light_client_update(
    data: bytes,
    fork: ForkConfig = FORKS[DEFAULT_FORK],
    wrapped: bool = False,
) -> LightClientUpdate:
    """
    Decode a LightClientUpdate from SSZ bytes.

    Args:
        data: Serialized update
        fork: Fork whose branch depth determines the layout
        wrapped: Whether `data` still carries the response chunk framing

    Returns:
        Decoded LightClientUpdate

    Raises:
        SSZDecodeError: If any size or offset check fails
    """
    if wrapped:
        data = unwrap_response_chunk(data)

    if len(data) < MIN_UPDATE_SIZE:
        raise SSZDecodeError(
            f"Light client update too short: expected at least {MIN_UPDATE_SIZE} bytes, got {len(data)}"
        )

    header_offset = deserialize_uint32(data[0:OFFSET_SIZE])
    if header_offset > len(data):
        raise SSZDecodeError(
            f"Attested header offset {header_offset} points past the end of the update ({len(data)} bytes)"
        )

    committee_end = OFFSET_SIZE + SYNC_COMMITTEE_BYTES
    fixed_end = committee_end + fork.branch_bytes
    if len(data) < fixed_end:
        raise SSZDecodeError(
            f"Light client update too short for {fork.name}: fixed fields need {fixed_end} bytes, got {len(data)}"
        )
    if header_offset < fixed_end:
        raise SSZDecodeError(
            f"Attested header offset {header_offset} overlaps the fixed fields ending at {fixed_end}"
        )

    header = data[header_offset:]
    header_min = HEADER_STATE_ROOT_OFFSET + ROOT_SIZE
    if len(header) < header_min:
        raise SSZDecodeError(
            f"Attested header too short: expected at least {header_min} bytes, got {len(header)}"
        )

    keys_end = OFFSET_SIZE + SYNC_COMMITTEE_SIZE * BLS_PUBKEY_SIZE
    committee = SyncCommittee(
        pubkeys=split_bytes(data[OFFSET_SIZE:keys_end], BLS_PUBKEY_SIZE),
        aggregate_pubkey=data[keys_end:committee_end],
    )
    update = LightClientUpdate(
        attested_slot=deserialize_uint64(header[0:8]),
        state_root=header[HEADER_STATE_ROOT_OFFSET:header_min],
        next_sync_committee=committee,
        next_sync_committee_branch=split_bytes(data[committee_end:fixed_end], ROOT_SIZE),
    )
    logger.debug(f"Decoded light client update for slot {update.attested_slot} ({len(data)} bytes)")
    return update


def parse_light_client_update_json(data: Dict[str, Any]) -> LightClientUpdate:
    """
    Build a LightClientUpdate from the `data` object of the beacon API JSON response.

    Args:
        data: Dictionary with next_sync_committee, next_sync_committee_branch
              and attested_header.beacon fields, values as 0x hex strings

    Returns:
        Parsed LightClientUpdate

    Raises:
        SSZDecodeError: If a field is missing or has the wrong size
    """
    try:
        committee_data = data["next_sync_committee"]
        beacon = data["attested_header"]["beacon"]
        committee = SyncCommittee(
            pubkeys=tuple(hex_to_bytes(key, BLS_PUBKEY_SIZE) for key in committee_data["pubkeys"]),
            aggregate_pubkey=hex_to_bytes(committee_data["aggregate_pubkey"], BLS_PUBKEY_SIZE),
        )
        return LightClientUpdate(
            attested_slot=int(beacon.get("slot", 0)),
            state_root=hex_to_bytes(beacon["state_root"], ROOT_SIZE),
            next_sync_committee=committee,
            next_sync_committee_branch=tuple(
                hex_to_bytes(node, ROOT_SIZE) for node in data["next_sync_committee_branch"]
            ),
        )
    except KeyError as e:
        raise SSZDecodeError(f"Light client update JSON is missing field {e}")
    except (TypeError, AttributeError) as e:
        raise SSZDecodeError(f"Light client update JSON has an unexpected structure: {e}")
    except ValueError as e:
        raise SSZDecodeError(f"Invalid light client update JSON: {e}")
