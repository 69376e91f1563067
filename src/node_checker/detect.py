"""
Node Type Detection

Probes a URL as beacon node, execution node and colibri prover at the same
time. All probes are awaited so the error message can explain every
failure; the first successful probe in priority order wins.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Tuple

from .api.beacon_client import BeaconNodeClient
from .api.execution_client import ExecutionNodeClient
from .api.http import NodeAPIError, normalize_url
from .api.prover_client import ProverNodeClient

logger = logging.getLogger(__name__)

# Priority order used when several probes succeed
NODE_TYPES = ("beacon", "execution", "colibri")


class NodeDetectionError(Exception):
    """Raised when a URL answers none of the known node APIs."""
    pass


def probe_beacon(url: str, timeout: Optional[float] = None) -> str:
    return BeaconNodeClient(url, timeout=timeout).get_version()


def probe_execution(url: str, timeout: Optional[float] = None) -> str:
    version = ExecutionNodeClient(url, timeout=timeout).get_client_version()
    if not isinstance(version, str):
        raise NodeAPIError("Invalid response")
    return version


def probe_prover(url: str, timeout: Optional[float] = None) -> str:
    info = ProverNodeClient(url, timeout=timeout).get_version()
    vendor = info.get("vendor")
    if not isinstance(vendor, str) or "colibri" not in vendor.lower():
        raise NodeAPIError("Not a colibri prover")
    return vendor


PROBES = {
    "beacon": probe_beacon,
    "execution": probe_execution,
    "colibri": probe_prover,
}


def detect_node_type(url: str, timeout: Optional[float] = None) -> Tuple[str, str]:
    """
    Work out which kind of node serves `url`.

    Args:
        url: Node URL
        timeout: Per-request timeout, defaults to NODE_CHECKER_TIMEOUT

    Returns:
        Tuple of (node_type, normalized_url)

    Raises:
        NodeDetectionError: If no probe succeeds
        ValueError: If the URL is empty
    """
    url = normalize_url(url)
    with ThreadPoolExecutor(max_workers=len(PROBES)) as executor:
        futures = {name: executor.submit(PROBES[name], url, timeout) for name in NODE_TYPES}

    errors = {}
    for name in NODE_TYPES:
        try:
            futures[name].result()
        except Exception as e:
            errors[name] = str(e) or type(e).__name__
            continue
        logger.info(f"Detected {name} node at {url}")
        return name, url

    raise NodeDetectionError(
        f"Unable to detect node type (beacon: {errors['beacon']}, "
        f"execution: {errors['execution']}, colibri: {errors['colibri']})"
    )
