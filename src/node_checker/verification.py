"""
Light-Client Update Verification

This module checks that the next sync committee served in a light client
update is committed to by the attested header's state root: the committee
root is recomputed from the keys, the branch is walked from the fork's
generalized index up to the root, and the result is compared byte for byte
with the claimed state root.

Two entry points are exposed:
- verify_from_binary: one SSZ encoded update
- verify_from_json: a run of consecutive periods fetched as JSON, walking
  back from the current period so that a node's persisted history is
  exercised and not only its latest cached update
"""

import logging
import threading
from typing import Optional

from . import config
from .api.http import NodeAPIError, NodeTimeoutError
from .api.transport import LightClientTransport
from .constants import ForkConfig
from .ssz import (
    BranchLengthError,
    LightClientUpdate,
    bytes_equal,
    decode_light_client_update,
    merkle_root_from_branch,
)
from .ssz.utils import bytes_to_hex

logger = logging.getLogger(__name__)


class VerificationError(Exception):
    """Base class for light client verification failures."""
    pass


class StateRootMismatchError(VerificationError):
    """Raised when the recomputed state root differs from the claimed one."""

    def __init__(self, expected: bytes, calculated: bytes):
        super().__init__(
            f"State root mismatch: expected {bytes_to_hex(expected)}, calculated {bytes_to_hex(calculated)}"
        )
        self.expected = expected
        self.calculated = calculated


class HistoricalPeriodError(VerificationError):
    """Raised when one period of a historical verification fails."""

    def __init__(self, offset: int, period: int, cause: Exception):
        super().__init__(f"{failure_headline(cause)} at period offset {offset} (period {period}): {cause}")
        self.offset = offset
        self.period = period
        self.cause = cause


class VerificationCancelled(VerificationError):
    """Raised when a historical verification is cancelled between periods."""
    pass


def failure_headline(cause: Exception) -> str:
    """Name the kind of failure: transport, malformed update or bad proof."""
    if isinstance(cause, NodeTimeoutError):
        return "Timed out fetching update"
    if isinstance(cause, NodeAPIError):
        return "Failed to fetch update"
    if isinstance(cause, (StateRootMismatchError, BranchLengthError)):
        return "Invalid Merkle Proof"
    return "Invalid update"


def verify_update(update: LightClientUpdate, fork: Optional[ForkConfig] = None) -> bytes:
    """
    Verify the next sync committee proof of a single update.

    Args:
        update: Decoded light client update
        fork: Fork configuration, defaults to the configured active fork

    Returns:
        The verified state root

    Raises:
        BranchLengthError: If the branch does not fit the fork's generalized index
        StateRootMismatchError: If the proof does not lead to the state root
    """
    fork = fork or config.ACTIVE_FORK
    committee_root = update.next_sync_committee.merkle_root()
    calculated = merkle_root_from_branch(
        fork.next_sync_committee_gindex,
        update.next_sync_committee_branch,
        committee_root,
    )
    if not bytes_equal(calculated, update.state_root):
        raise StateRootMismatchError(update.state_root, calculated)
    return calculated


def verify_from_binary(update_bytes: bytes, fork: Optional[ForkConfig] = None, wrapped: bool = True) -> str:
    """
    Decode and verify one SSZ encoded light client update.

    Args:
        update_bytes: Update as delivered by the beacon API
        fork: Fork configuration, defaults to the configured active fork
        wrapped: Whether the bytes still carry the response chunk framing

    Returns:
        "ok" on success

    Raises:
        SSZDecodeError: If the bytes do not match the update layout
        StateRootMismatchError: If the proof does not verify
    """
    fork = fork or config.ACTIVE_FORK
    update = decode_light_client_update(update_bytes, fork=fork, wrapped=wrapped)
    verify_update(update, fork)
    logger.info(f"Verified SSZ light client update for period {update.period}")
    return "ok"


def verify_from_json(
    transport: LightClientTransport,
    current_period: int,
    depth: Optional[int] = None,
    fork: Optional[ForkConfig] = None,
    cancel_event: Optional[threading.Event] = None,
) -> str:
    """
    Verify the updates of `depth` consecutive periods, newest first.

    Periods are fetched one at a time and the walk stops at the first
    failure. Periods before genesis are not requested.

    Args:
        transport: Source of the JSON updates
        current_period: Period to start from
        depth: Number of periods to check, defaults to NODE_CHECKER_HISTORY_DEPTH
        fork: Fork configuration, defaults to the configured active fork
        cancel_event: Checked between periods; when set the walk is abandoned

    Returns:
        Success description naming the number of periods checked

    Raises:
        HistoricalPeriodError: If fetching, decoding or verifying a period fails
        VerificationCancelled: If cancel_event is set
    """
    fork = fork or config.ACTIVE_FORK
    depth = config.HISTORY_DEPTH if depth is None else depth
    if depth < 1:
        raise ValueError(f"depth must be at least 1, got {depth}")

    periods = min(depth, current_period + 1)
    for offset in range(periods):
        if cancel_event is not None and cancel_event.is_set():
            raise VerificationCancelled(f"Verification cancelled before period offset {offset}")

        period = current_period - offset
        try:
            data = transport.fetch_json_update(period)
            update = LightClientUpdate.from_json(data, fork)
            verify_update(update, fork)
        except (NodeAPIError, ValueError, VerificationError) as e:
            logger.warning(f"Light client update for period {period} (offset {offset}) failed: {e}")
            raise HistoricalPeriodError(offset, period, e) from e
        logger.debug(f"Verified light client update for period {period}")

    if periods < depth:
        logger.info(f"Only {periods} periods exist before period {current_period}, checked all of them")
    return f"ok ({periods} periods)"
