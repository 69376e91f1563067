"""
Runtime configuration.

Values are read from the environment (a local `.env` file is loaded first)
and fall back to the defaults used against public mainnet endpoints.
"""

import os

from dotenv import load_dotenv

from .constants import DEFAULT_FORK, DEFAULT_HISTORY_DEPTH, get_fork

# Load environment variables
load_dotenv()

# Timeout for a single HTTP request, in seconds
REQUEST_TIMEOUT = float(os.getenv("NODE_CHECKER_TIMEOUT", "7"))

# How long to wait for a head event on the beacon event stream
SSE_TIMEOUT = float(os.getenv("NODE_CHECKER_SSE_TIMEOUT", "15"))

# Number of sync committee periods verified by the JSON light-client check
HISTORY_DEPTH = int(os.getenv("NODE_CHECKER_HISTORY_DEPTH", str(DEFAULT_HISTORY_DEPTH)))
if HISTORY_DEPTH < 1:
    raise ValueError(f"NODE_CHECKER_HISTORY_DEPTH must be at least 1, got {HISTORY_DEPTH}")

# Fork whose generalized index is used for light-client proofs
ACTIVE_FORK = get_fork(os.getenv("NODE_CHECKER_FORK", DEFAULT_FORK))

# Blocks behind head that an archive node must still serve state for
ARCHIVE_DEPTH = int(os.getenv("NODE_CHECKER_ARCHIVE_DEPTH", "100000"))

# Port for the REST API
PORT = int(os.getenv("PORT", "8080"))
