"""
Base HTTP Client

This module provides the shared plumbing for the beacon, execution and
prover clients: a requests session bound to one node URL, per-request
timeouts, response time bookkeeping and conversion of every transport
failure into a readable NodeAPIError.
"""

import json
import logging
import re
import time
from typing import Optional

import requests

from .. import config

logger = logging.getLogger(__name__)


class NodeAPIError(Exception):
    """Exception raised for node API related errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NodeTimeoutError(NodeAPIError):
    """Raised when a node does not answer within the request timeout."""
    pass


def format_error_message(message: str) -> str:
    """
    Turn an error body into a short human readable message.

    JSON bodies of the form {"message": ..., "code": ...} (optionally nested
    under "error") become "message (code: N)"; HTML pages are reduced to the
    text of their body.

    Args:
        message: Raw response body

    Returns:
        Cleaned up message
    """
    if not isinstance(message, str):
        return message

    trimmed = message.strip()
    if trimmed.startswith("{") and trimmed.endswith("}"):
        try:
            payload = json.loads(trimmed)
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            error = payload.get("error") or payload
            if isinstance(error, dict) and error.get("message"):
                formatted = str(error["message"])
                if error.get("code"):
                    formatted += f" (code: {error['code']})"
                return formatted

    if "<" in message:
        text = message
        lowered = message.lower()
        body_start = lowered.find("<body")
        if body_start != -1:
            content_start = message.find(">", body_start) + 1
            body_end = lowered.rfind("</body>")
            if content_start > 0:
                text = message[content_start:body_end if body_end != -1 else None]
        text = re.sub(r"<[^>]+>", " ", text)
        return re.sub(r"\s\s+", " ", text).strip()

    return message


def normalize_url(url: str) -> str:
    """Strip whitespace and a trailing slash from a node URL."""
    if not url or not isinstance(url, str):
        raise ValueError("Invalid URL provided")
    trimmed = url.strip()
    if not trimmed:
        raise ValueError("Empty URL provided")
    return trimmed[:-1] if trimmed.endswith("/") else trimmed


class NodeHTTPClient:
    """
    HTTP client bound to a single node.

    Keeps track of how many requests were made and how long they took, so
    checks can report an average response time.
    """

    def __init__(self, url: str, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            url: Base URL of the node
            timeout: Request timeout in seconds. If None, uses NODE_CHECKER_TIMEOUT.
            session: Optional pre-configured requests session
        """
        self.url = normalize_url(url)
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self.session = session or requests.Session()
        self.req_count = 0
        self.req_time = 0.0

    def request(self, method: str, path: str = "", **kwargs) -> requests.Response:
        """
        Send a request to the node.

        Raises:
            NodeTimeoutError: If the node does not answer in time
            NodeAPIError: If the request could not be sent
        """
        url = self.url + path
        start = time.monotonic()
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout:
            raise NodeTimeoutError(f"Request timed out after {self.timeout:g} seconds")
        except requests.ConnectionError as e:
            raise NodeAPIError(f"Failed to connect to {self.url}: {e}")
        except requests.RequestException as e:
            raise NodeAPIError(f"Request to {url} failed: {e}")

        elapsed = (time.monotonic() - start) * 1000
        self.req_count += 1
        self.req_time += elapsed
        logger.debug(f"{method} {url} -> {response.status_code} ({elapsed:.0f} ms)")
        return response

    def raise_for_status(self, response: requests.Response, prefix: str = "") -> None:
        """Raise a NodeAPIError with a cleaned up body unless the response is 200."""
        if response.status_code == 200:
            return
        body = response.text.strip() or f"HTTP {response.status_code}"
        raise NodeAPIError(f"{prefix}{format_error_message(body)}", status_code=response.status_code)

    @property
    def avg_time(self) -> str:
        average = self.req_time / self.req_count if self.req_count else 0.0
        return f"{average:.2f} ms"
