"""
Prover Node Client

Client for colibri prover nodes, which serve proofs for execution RPC calls.
"""

import logging
from typing import Any, Dict

from .http import NodeAPIError, NodeHTTPClient, format_error_message

logger = logging.getLogger(__name__)


class ProverNodeClient(NodeHTTPClient):
    """Client for the prover's /version and /proof endpoints."""

    def _checked(self, method: str, path: str, **kwargs):
        response = self.request(method, path, **kwargs)
        self.raise_for_status(response, prefix=f"HTTP {response.status_code}: ")
        return response

    def json(self, path: str) -> Any:
        response = self._checked("GET", path)
        try:
            return response.json()
        except ValueError:
            raise NodeAPIError(f"Invalid JSON response for {path}")

    def get_version(self) -> Dict[str, Any]:
        """Return the {"vendor": ..., "version": ...} document."""
        info = self.json("/version")
        if not isinstance(info, dict):
            raise NodeAPIError("Invalid version response")
        return info

    def proof(self, zk_proof: bool) -> bytes:
        """
        Request a proof for eth_blockNumber.

        Args:
            zk_proof: Whether to request the zk-compressed proof

        Returns:
            Raw proof bytes

        Raises:
            NodeAPIError: If the prover fails or does not answer with binary data
        """
        response = self._checked(
            "POST",
            "/proof",
            json={"method": "eth_blockNumber", "params": [], "zk_proof": zk_proof},
            headers={"Content-Type": "application/json"},
        )

        content_type = response.headers.get("Content-Type", "")
        if "application/octet-stream" not in content_type:
            if "application/json" in content_type:
                raise NodeAPIError(format_error_message(response.text))
            raise NodeAPIError(f"Unexpected content-type: {content_type}")
        return response.content
