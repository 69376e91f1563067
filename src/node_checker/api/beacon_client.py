"""
Beacon Node Client

This module provides a client for the standard beacon node REST API,
able to fetch both JSON and SSZ encoded responses.
"""

import logging
from typing import Any, Dict, List, Optional

from .http import NodeAPIError, NodeHTTPClient, format_error_message

logger = logging.getLogger(__name__)

LIGHT_CLIENT_UPDATES_PATH = "/eth/v1/beacon/light_client/updates"


class BeaconNodeClient(NodeHTTPClient):
    """
    Client for a beacon node.

    Provides raw `json` and `ssz` accessors plus helpers for the endpoints
    used by the beacon checks.
    """

    def json(self, path: str, query: Optional[Dict[str, Any]] = None) -> Any:
        """
        Fetch a JSON response.

        Raises:
            NodeAPIError: If the request fails or the body is not JSON
        """
        response = self.request("GET", path, params=query, headers={"Accept": "application/json"})
        self.raise_for_status(response)
        try:
            return response.json()
        except ValueError:
            raise NodeAPIError(f"Invalid JSON response for {path}")

    def ssz(self, path: str, query: Optional[Dict[str, Any]] = None) -> bytes:
        """
        Fetch an SSZ encoded response.

        Raises:
            NodeAPIError: If the request fails or the node answers with anything but SSZ
        """
        response = self.request("GET", path, params=query, headers={"Accept": "application/octet-stream"})
        self.raise_for_status(response)

        content_type = response.headers.get("Content-Type", "")
        if "application/octet-stream" in content_type:
            return response.content

        if "application/json" in content_type:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            if isinstance(payload, list) or (isinstance(payload, dict) and payload.get("data")):
                raise NodeAPIError(f"SSZ requested, but json delivered for {path}")
            if isinstance(payload, dict) and payload.get("code") and payload.get("message"):
                raise NodeAPIError(format_error_message(f"{payload['message']} ssz requested, but json delivered"))

        raise NodeAPIError(f"SSZ not supported for {path} ( {content_type} )")

    def _data(self, payload: Any, path: str) -> Any:
        if not isinstance(payload, dict) or "data" not in payload:
            raise NodeAPIError(f"Invalid response format for {path}: missing 'data' field")
        return payload["data"]

    def get_version(self) -> str:
        """Return the client version string, e.g. 'Lodestar/v1.20.0'."""
        path = "/eth/v1/node/version"
        return self._data(self.json(path), path)["version"]

    def get_head_header(self) -> Dict[str, Any]:
        """Return the signed header of the head block."""
        path = "/eth/v1/beacon/headers/head"
        return self._data(self.json(path), path)

    def get_head_slot(self) -> int:
        return int(self.get_head_header()["header"]["message"]["slot"])

    def get_headers_by_parent(self, parent_root: str) -> List[Dict[str, Any]]:
        """Return all headers whose parent is `parent_root`."""
        path = "/eth/v1/beacon/headers"
        return self._data(self.json(path, {"parent_root": parent_root}), path)

    def get_block_ssz(self, block_id: str = "head") -> bytes:
        return self.ssz(f"/eth/v2/beacon/blocks/{block_id}")

    def get_light_client_updates(self, start_period: int, count: int = 1) -> List[Dict[str, Any]]:
        """
        Fetch light client updates as JSON.

        Returns:
            List of {"version": ..., "data": {...}} objects, one per period
        """
        logger.debug(f"Fetching light client update JSON for period {start_period}")
        updates = self.json(LIGHT_CLIENT_UPDATES_PATH, {"start_period": start_period, "count": count})
        if not isinstance(updates, list):
            raise NodeAPIError(f"Invalid response format for {LIGHT_CLIENT_UPDATES_PATH}: expected a list")
        return updates

    def get_light_client_updates_ssz(self, start_period: int, count: int = 1) -> bytes:
        """Fetch light client updates as SSZ response chunks."""
        logger.debug(f"Fetching light client update SSZ for period {start_period}")
        return self.ssz(LIGHT_CLIENT_UPDATES_PATH, {"start_period": start_period, "count": count})
