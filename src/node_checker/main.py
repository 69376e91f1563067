"""
Node Checker

Entry point shared by the CLI and the REST API: detect what kind of node a
URL serves, then run the matching check suite.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .checks import CHECK_MAP, CheckResult, is_suitable
from .checks.base import CheckCallback
from .checks.beacon import is_local_file
from .detect import detect_node_type

logger = logging.getLogger(__name__)


@dataclass
class NodeReport:
    """
    Result of checking one node.

    Attributes:
        url: Normalized node URL (or file path)
        type: "beacon", "execution" or "colibri"
        results: Ordered check results, ending with the suitability verdict
    """
    url: str
    type: str
    results: List[CheckResult] = field(default_factory=list)

    @property
    def suitable(self) -> bool:
        return is_suitable(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "type": self.type,
            "suitable": self.suitable,
            "results": [r.to_dict() for r in self.results],
        }


def check_node(
    url: str,
    callback: Optional[CheckCallback] = None,
    history_depth: Optional[int] = None,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
) -> NodeReport:
    """
    Detect the node type of `url` and run its checks.

    Local paths skip detection and are verified as saved beacon light
    client updates.

    Raises:
        NodeDetectionError: If the URL is not a known node type
        FileNotFoundError: If a local path does not exist
    """
    url = url.strip()
    if is_local_file(url):
        node_type = "beacon"
    else:
        node_type, url = detect_node_type(url, timeout)

    logger.info(f"Checking {node_type} node {url}")
    if node_type == "beacon":
        results = CHECK_MAP[node_type](
            url, callback, history_depth=history_depth, timeout=timeout, cancel_event=cancel_event
        )
    else:
        results = CHECK_MAP[node_type](url, callback, timeout=timeout)
    return NodeReport(url=url, type=node_type, results=results)
