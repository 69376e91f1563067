"""Prover node checks"""

import logging
import time
from typing import List, Optional, Tuple

from ..api.prover_client import ProverNodeClient
from ..ssz import deserialize_uint64
from .base import Check, CheckCallback, CheckFailed, CheckResult, run_checks

logger = logging.getLogger(__name__)

MIN_ZK_PROOF_BYTES = 25_000
PROOF_BYTES = 668
MAX_ALLOWED_DELAY_SECONDS = 30

# Positions of the proven block number and timestamp in a proof
BLOCK_NUMBER_OFFSET = 18
TIMESTAMP_OFFSET = 26


def read_uint64_le(data: bytes, offset: int) -> int:
    if len(data) < offset + 8:
        raise CheckFailed("Proof payload too short to read uint64 value")
    return deserialize_uint64(data[offset:offset + 8])


def validate_proof(
    proof: bytes,
    expect_exact_size: Optional[int] = None,
    min_size: Optional[int] = None,
    now: Optional[float] = None,
) -> Tuple[int, int]:
    """
    Check the size and freshness of an eth_blockNumber proof.

    Args:
        proof: Raw proof bytes
        expect_exact_size: Required size in bytes, if any
        min_size: Minimum size in bytes, if any
        now: Current unix time, defaults to time.time()

    Returns:
        Tuple of (block_number, age_in_seconds)

    Raises:
        CheckFailed: If the size is wrong or the proof is too old
    """
    if expect_exact_size and len(proof) != expect_exact_size:
        raise CheckFailed(f"Proof size mismatch, expected {expect_exact_size} bytes, got {len(proof)}")
    if min_size and len(proof) < min_size:
        raise CheckFailed(f"Proof size too small, expected at least {min_size} bytes, got {len(proof)}")

    block_number = read_uint64_le(proof, BLOCK_NUMBER_OFFSET)
    timestamp = read_uint64_le(proof, TIMESTAMP_OFFSET)
    delta = int(now if now is not None else time.time()) - timestamp
    if delta > MAX_ALLOWED_DELAY_SECONDS:
        raise CheckFailed(f"Proof timestamp too old (block {block_number}, Δ {delta}s)")
    return block_number, delta


def check_version(node: ProverNodeClient) -> str:
    """Check that the prover reports vendor and version"""
    info = node.get_version()
    if not info.get("vendor") or not info.get("version"):
        raise CheckFailed("Missing vendor or version information")
    return f"{info['vendor']} {info['version']}"


def check_proof_non_zk(node: ProverNodeClient) -> str:
    """Check a plain eth_blockNumber proof"""
    proof = node.proof(False)
    block_number, delta = validate_proof(proof, expect_exact_size=PROOF_BYTES)
    return f"ok (block {block_number}, Δ {delta}s)"


def check_proof_zk(node: ProverNodeClient) -> str:
    """Check a zk eth_blockNumber proof"""
    proof = node.proof(True)
    block_number, delta = validate_proof(proof, min_size=MIN_ZK_PROOF_BYTES)
    return f"ok (block {block_number}, Δ {delta}s, size {len(proof)} bytes)"


def check_prover_node(
    url: str,
    callback: Optional[CheckCallback] = None,
    timeout: Optional[float] = None,
) -> List[CheckResult]:
    """Run all prover checks against `url`."""
    node = ProverNodeClient(url, timeout=timeout)
    checks = [
        Check("version", check_version, required=True),
        Check("proof_eth_blockNumber (non-zk)", check_proof_non_zk, required=True),
        Check("proof_eth_blockNumber (zk)", check_proof_zk, required=True),
        Check("avg_response_time", lambda n: n.avg_time),
    ]
    return run_checks(node, checks, callback)
