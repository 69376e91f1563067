"""
Execution Node Client

Minimal JSON-RPC 2.0 client for execution layer nodes.
"""

import logging
from typing import Any, List, Optional

from .http import NodeAPIError, NodeHTTPClient

logger = logging.getLogger(__name__)


class ExecutionNodeClient(NodeHTTPClient):
    """JSON-RPC client with incrementing request ids."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.id = 1

    def rpc(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Call a JSON-RPC method and return its result.

        Raises:
            NodeAPIError: On HTTP errors, malformed responses or RPC errors
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": self.id,
        }
        self.id += 1

        response = self.request("POST", json=payload, headers={"Content-Type": "application/json"})
        if response.status_code != 200:
            raise NodeAPIError(
                f"HTTP Error {response.status_code}: {response.text.strip()}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError:
            raise NodeAPIError(f"Invalid JSON-RPC response for {method}")
        if not isinstance(body, dict):
            raise NodeAPIError(f"Invalid JSON-RPC response for {method}")

        error = body.get("error")
        if error:
            if isinstance(error, dict):
                raise NodeAPIError(f"RPC Error: {error.get('message')} (code: {error.get('code')})")
            raise NodeAPIError(f"RPC Error: {error}")
        return body.get("result")

    def get_client_version(self) -> str:
        return self.rpc("web3_clientVersion")

    def get_block_number(self) -> int:
        return int(self.rpc("eth_blockNumber"), 16)
