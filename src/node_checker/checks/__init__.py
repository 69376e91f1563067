"""
Node Check Suites

One suite per node type; each returns the ordered list of CheckResults
ending with the suitability verdict.
"""

from .base import (
    SUITABILITY_CHECK_NAME,
    Check,
    CheckFailed,
    CheckResult,
    is_suitable,
    run_checks,
)
from .beacon import check_beacon_node
from .execution import check_execution_node
from .prover import check_prover_node

CHECK_MAP = {
    "beacon": check_beacon_node,
    "execution": check_execution_node,
    "colibri": check_prover_node,
}

__all__ = [
    'SUITABILITY_CHECK_NAME',
    'Check',
    'CheckFailed',
    'CheckResult',
    'is_suitable',
    'run_checks',
    'check_beacon_node',
    'check_execution_node',
    'check_prover_node',
    'CHECK_MAP',
]
