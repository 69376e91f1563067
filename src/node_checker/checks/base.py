"""
Check Runner

Runs a list of named checks against a node in order, records a result for
each one and finishes with a suitability verdict derived from the failed
required checks.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

SUITABILITY_CHECK_NAME = "colibri suitable"


class CheckFailed(Exception):
    """Raised by a check whose node answered, but not in the expected way."""
    pass


@dataclass
class Check:
    """A named operation run against a node handle."""
    name: str
    fn: Callable[[Any], Any]
    required: bool = False


@dataclass
class CheckResult:
    """Outcome of one check: the success description or the error text."""
    name: str
    result: str
    passed: bool
    required: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


CheckCallback = Callable[[CheckResult, List[Check]], None]


def run_checks(node: Any, checks: List[Check], callback: Optional[CheckCallback] = None) -> List[CheckResult]:
    """
    Run checks in order and append the suitability verdict.

    A failing check never stops the run; its error message becomes the
    result text.

    Args:
        node: Handle passed to every check function
        checks: Checks to run
        callback: Called with each result as soon as it is available

    Returns:
        One CheckResult per check, followed by the suitability result
    """
    failed_required: List[str] = []

    def suitability(_node: Any) -> str:
        if failed_required:
            raise CheckFailed(f"required checks failed: {', '.join(failed_required)}")
        return "ok"

    all_checks = list(checks) + [Check(SUITABILITY_CHECK_NAME, suitability)]
    results: List[CheckResult] = []
    for check in all_checks:
        try:
            value = check.fn(node)
            result = CheckResult(check.name, str(value), True, check.required)
        except Exception as e:
            if check.required:
                failed_required.append(check.name)
            logger.info(f"Check '{check.name}' failed: {e}")
            result = CheckResult(check.name, str(e) or type(e).__name__, False, check.required)
        results.append(result)
        if callback:
            callback(result, all_checks)
    return results


def is_suitable(results: List[CheckResult]) -> bool:
    """Whether the suitability verdict in `results` passed."""
    return any(r.name == SUITABILITY_CHECK_NAME and r.passed for r in results)
