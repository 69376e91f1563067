"""
Light-Client Transport

The verification engine only needs two operations from the outside world:
fetch the update of a period as SSZ bytes, or as the JSON `data` object.
BeaconLightClientTransport serves them from a live beacon node,
StaticTransport from data already in memory (files, fixtures).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from .beacon_client import BeaconNodeClient
from .http import NodeAPIError


class LightClientTransport(ABC):
    """Source of light client updates, addressed by sync committee period."""

    @abstractmethod
    def fetch_binary_update(self, period: int) -> bytes:
        """Return the SSZ response chunk for `period`."""

    @abstractmethod
    def fetch_json_update(self, period: int) -> Dict[str, Any]:
        """Return the JSON `data` object of the update for `period`."""


class BeaconLightClientTransport(LightClientTransport):
    """Fetches one update per call from a beacon node."""

    def __init__(self, client: BeaconNodeClient):
        self.client = client

    def fetch_binary_update(self, period: int) -> bytes:
        return self.client.get_light_client_updates_ssz(period, count=1)

    def fetch_json_update(self, period: int) -> Dict[str, Any]:
        updates = self.client.get_light_client_updates(period, count=1)
        if not updates:
            raise NodeAPIError(f"No light client update returned for period {period}")
        update = updates[0]
        if not isinstance(update, dict) or not isinstance(update.get("data"), dict):
            raise NodeAPIError(f"Invalid light client update response for period {period}: missing 'data' field")
        return update["data"]


class StaticTransport(LightClientTransport):
    """
    In-memory transport.

    Args:
        binary_updates: Mapping of period to SSZ response chunk
        json_updates: Mapping of period to JSON `data` object
    """

    def __init__(self, binary_updates: Optional[Mapping[int, bytes]] = None,
                 json_updates: Optional[Mapping[int, Dict[str, Any]]] = None):
        self.binary_updates = dict(binary_updates or {})
        self.json_updates = dict(json_updates or {})
        self.requested = []

    def fetch_binary_update(self, period: int) -> bytes:
        self.requested.append(period)
        if period not in self.binary_updates:
            raise NodeAPIError(f"No light client update available for period {period}")
        return self.binary_updates[period]

    def fetch_json_update(self, period: int) -> Dict[str, Any]:
        self.requested.append(period)
        if period not in self.json_updates:
            raise NodeAPIError(f"No light client update available for period {period}")
        return self.json_updates[period]
