"""
Node API Integration Package

This package provides the HTTP clients used to probe nodes and the
transport the light-client verification engine reads updates from:

- BeaconNodeClient: beacon REST API (JSON and SSZ)
- ExecutionNodeClient: execution JSON-RPC API
- ProverNodeClient: colibri prover API
- BeaconLightClientTransport / StaticTransport: light client update sources

Usage:
    from node_checker.api import BeaconNodeClient

    client = BeaconNodeClient("https://lodestar-mainnet.chainsafe.io")
    version = client.get_version()
"""

from .http import NodeAPIError, NodeTimeoutError, NodeHTTPClient, format_error_message, normalize_url
from .beacon_client import BeaconNodeClient
from .execution_client import ExecutionNodeClient
from .prover_client import ProverNodeClient
from .transport import LightClientTransport, BeaconLightClientTransport, StaticTransport

__all__ = [
    'NodeAPIError',
    'NodeTimeoutError',
    'NodeHTTPClient',
    'format_error_message',
    'normalize_url',
    'BeaconNodeClient',
    'ExecutionNodeClient',
    'ProverNodeClient',
    'LightClientTransport',
    'BeaconLightClientTransport',
    'StaticTransport',
]
