"""Execution node checks"""

import logging
from typing import List, Optional

from .. import config
from ..api.execution_client import ExecutionNodeClient
from ..api.http import NodeAPIError
from .base import Check, CheckCallback, CheckFailed, CheckResult, run_checks

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def check_client_version(node: ExecutionNodeClient) -> str:
    """Check that the node reports its client version"""
    return node.get_client_version()


def check_debug_trace_call(node: ExecutionNodeClient) -> str:
    """Check that the debug namespace is enabled"""
    try:
        node.rpc("debug_traceCall", [{}, "latest"])
    except NodeAPIError as e:
        message = str(e).lower()
        # any other error means the method exists and rejected our empty call
        if "method not found" in message or "not available" in message:
            raise
    return "available"


def check_eth_get_proof(node: ExecutionNodeClient) -> str:
    """Check that account proofs are served, ideally for past blocks"""
    historical_block = hex(node.get_block_number() - 2)
    try:
        node.rpc("eth_getProof", [ZERO_ADDRESS, [], historical_block])
        return "ok (historical state supported)"
    except NodeAPIError as e:
        logger.debug(f"Historical eth_getProof failed: {e}")
    node.rpc("eth_getProof", [ZERO_ADDRESS, [], "latest"])
    return "ok (latest state only)"


def check_historical_transaction_count(node: ExecutionNodeClient, depth: int) -> str:
    """Check that state `depth` blocks behind head is still available"""
    latest_block = node.get_block_number()
    target_block = latest_block - depth
    if target_block < 0:
        raise CheckFailed(f"Cannot check depth {depth}, latest block is {latest_block}")
    node.rpc("eth_getTransactionCount", [ZERO_ADDRESS, hex(target_block)])
    return "ok"


def check_execution_node(
    url: str,
    callback: Optional[CheckCallback] = None,
    archive_depth: Optional[int] = None,
    timeout: Optional[float] = None,
) -> List[CheckResult]:
    """Run all execution checks against `url`."""
    archive_depth = config.ARCHIVE_DEPTH if archive_depth is None else archive_depth
    node = ExecutionNodeClient(url, timeout=timeout)
    checks = [
        Check("web3_clientVersion", check_client_version, required=True),
        Check("debug_traceCall", check_debug_trace_call),
        Check("eth_getProof", check_eth_get_proof, required=True),
        Check(
            f"archive_check (latest-{archive_depth:,})",
            lambda n: check_historical_transaction_count(n, archive_depth),
        ),
        Check("avg_response_time", lambda n: n.avg_time),
    ]
    return run_checks(node, checks, callback)
