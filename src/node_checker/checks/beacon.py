"""Beacon node checks"""

import json
import logging
import os
import threading
import time
from typing import Any, Dict, List, Optional

import requests

from .. import config
from ..api.beacon_client import BeaconNodeClient
from ..api.transport import BeaconLightClientTransport, StaticTransport
from ..constants import compute_sync_committee_period
from ..ssz import SSZDecodeError, deserialize_uint32, deserialize_uint64
from ..verification import verify_from_binary, verify_from_json
from .base import Check, CheckCallback, CheckFailed, CheckResult, run_checks

logger = logging.getLogger(__name__)

HISTORICAL_PROOF_CLIENTS = ("Nimbus", "Lodestar")


def is_local_file(url: str) -> bool:
    return not url.startswith(("http://", "https://"))


def check_version(node: BeaconNodeClient) -> str:
    """Check that the node reports its client version"""
    return node.get_version()


def check_parent_headers(node: BeaconNodeClient) -> str:
    """Check that headers can be looked up by parent root"""
    head = node.get_head_header()
    parent_root = head["header"]["message"]["parent_root"]
    found = node.get_headers_by_parent(parent_root)
    if not found or len(found) != 1:
        raise CheckFailed(f"Parent header not found: {parent_root}")
    found_parent = found[0]["header"]["message"]["parent_root"]
    if found_parent != parent_root:
        raise CheckFailed(f"Parent header mismatch: {found_parent} !== {parent_root}")
    return "ok"


def check_cors(node: BeaconNodeClient) -> str:
    """Check that browsers on other origins may call the node"""
    response = node.request("GET", "/eth/v1/node/version", headers={"Origin": "https://example.com"})
    allowed = response.headers.get("access-control-allow-origin")
    if allowed == "*":
        return "ok (*)"
    if allowed:
        raise CheckFailed(f"CORS header is restrictive, only allows: {allowed}")
    raise CheckFailed("CORS header (access-control-allow-origin) not found")


def check_sse_events(node: BeaconNodeClient, timeout: Optional[float] = None) -> str:
    """Check that the event stream delivers a head event"""
    timeout = timeout if timeout is not None else config.SSE_TIMEOUT
    timeout_message = f"Timeout: No head event received within {timeout:g} seconds."
    deadline = time.monotonic() + timeout
    try:
        response = node.session.get(
            f"{node.url}/eth/v1/events",
            params={"topics": "head"},
            headers={"Accept": "text/event-stream"},
            stream=True,
            timeout=(node.timeout, timeout),
        )
    except requests.Timeout:
        raise CheckFailed(timeout_message)
    except requests.RequestException as e:
        raise CheckFailed(f"Error connecting to event stream: {e}")

    with response:
        if not response.ok:
            raise CheckFailed(f"Failed to connect to event stream: {response.reason}")
        try:
            for line in response.iter_lines(decode_unicode=True):
                if line and line.strip() == "event: head":
                    return "ok"
                if time.monotonic() > deadline:
                    raise CheckFailed(timeout_message)
        except requests.RequestException:
            raise CheckFailed(timeout_message)
    raise CheckFailed("Stream ended without a head event.")


def check_block_ssz(node: BeaconNodeClient) -> str:
    """Check that the head block is served as SSZ"""
    head = node.get_head_header()["header"]
    block = node.get_block_ssz("head")
    if len(block) < 8:
        raise CheckFailed(f"Block is too short: {len(block)}")
    offset = deserialize_uint32(block[0:4])
    if offset > len(block) - 8:
        raise CheckFailed("Invalid offset in ssz block")
    slot = deserialize_uint64(block[offset:offset + 8])
    if abs(slot - int(head["message"]["slot"])) > 1:
        raise CheckFailed("Invalid slot in block")
    return "ok"


def check_lcu_ssz(node: BeaconNodeClient) -> str:
    """Check the current light client update served as SSZ"""
    period = compute_sync_committee_period(node.get_head_slot())
    data = BeaconLightClientTransport(node).fetch_binary_update(period)
    return verify_from_binary(data)


def check_lcu_json(node: BeaconNodeClient, depth: Optional[int] = None,
                   cancel_event: Optional[threading.Event] = None) -> str:
    """Check light client updates served as JSON across past periods"""
    period = compute_sync_committee_period(node.get_head_slot())
    return verify_from_json(BeaconLightClientTransport(node), period, depth=depth, cancel_event=cancel_event)


def check_historical_proof(node: BeaconNodeClient) -> str:
    """Check that the client is known to serve historical proofs"""
    client = node.get_version()
    if not any(name in client for name in HISTORICAL_PROOF_CLIENTS):
        raise CheckFailed("not supported")
    return "ok"


def load_json_updates(payload: Any) -> Dict[int, Dict[str, Any]]:
    """
    Index light client updates from a saved beacon API response by period.

    Accepts the list returned by the updates endpoint, a single
    {"version", "data"} object, or a bare data object.
    """
    items = payload if isinstance(payload, list) else [payload]
    updates = {}
    try:
        for item in items:
            data = item.get("data", item)
            slot = int(data["attested_header"]["beacon"]["slot"])
            updates[compute_sync_committee_period(slot)] = data
    except KeyError as e:
        raise SSZDecodeError(f"Light client update JSON is missing field {e}")
    except (TypeError, AttributeError, ValueError) as e:
        raise SSZDecodeError(f"Light client update JSON has an unexpected structure: {e}")
    if not updates:
        raise SSZDecodeError("No light client updates found in file")
    return updates


def check_lcu_file(path: str, depth: Optional[int] = None) -> str:
    """
    Verify light client updates stored in a file.

    Binary files hold one SSZ response chunk. JSON files hold updates for
    one or more consecutive periods, which are verified newest first.
    """
    with open(path, "rb") as f:
        content = f.read()

    if content.lstrip()[:1] in (b"[", b"{"):
        updates = load_json_updates(json.loads(content))
        current = max(updates)
        available = current - min(updates) + 1
        depth = available if depth is None else min(depth, available)
        return verify_from_json(StaticTransport(json_updates=updates), current, depth=depth)

    return verify_from_binary(content)


def check_beacon_node(
    url: str,
    callback: Optional[CheckCallback] = None,
    history_depth: Optional[int] = None,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[CheckResult]:
    """
    Run all beacon checks against `url`.

    A local file path is treated as a saved light client update and only
    the update verification runs.
    """
    if is_local_file(url):
        if not os.path.isfile(url):
            raise FileNotFoundError(f"No such file: {url}")
        checks = [
            Check("light_client_update as ssz", lambda path: check_lcu_file(path, history_depth), required=True),
        ]
        return run_checks(url, checks, callback)

    node = BeaconNodeClient(url, timeout=timeout)
    checks = [
        Check("version", check_version, required=True),
        Check("headers_by_parent", check_parent_headers, required=True),
        Check("cors_headers", check_cors),
        Check("sse_events", check_sse_events),
        Check("block_as_ssz", check_block_ssz),
        Check("light_client_update as ssz", check_lcu_ssz),
        Check(
            "light_client_update as json",
            lambda n: check_lcu_json(n, depth=history_depth, cancel_event=cancel_event),
            required=True,
        ),
        Check("historical_proof", check_historical_proof),
        Check("avg_response_time", lambda n: n.avg_time),
    ]
    return run_checks(node, checks, callback)
