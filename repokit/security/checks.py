"""
Boolean security checks and the tally they accumulate into.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable

import structlog

logger = structlog.get_logger(__name__)


class CheckOutcome(Enum):
    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"


@dataclass(frozen=True)
class SecurityCheck:
    """
    One named yes/no question about the repository.

    A check whose predicate is False counts as a failure, or as a warning when
    `is_warning` is set. Predicates that raise are treated as False.
    """

    category: str
    description: str
    predicate: Callable[[], bool]
    is_warning: bool = False

    def evaluate(self) -> CheckOutcome:
        try:
            ok = bool(self.predicate())
        except Exception as e:
            logger.debug("Check raised", check=self.description, error=str(e))
            ok = False
        if ok:
            return CheckOutcome.PASSED
        return CheckOutcome.WARNING if self.is_warning else CheckOutcome.FAILED


def score_label(score: int) -> str:
    if score >= 90:
        return "Excellent"
    if score >= 75:
        return "Good"
    if score >= 60:
        return "Moderate"
    return "Needs improvement"


@dataclass
class ValidationTally:
    passed: int = 0
    failed: int = 0
    warnings: int = 0

    def record(self, outcome: CheckOutcome) -> None:
        if outcome is CheckOutcome.PASSED:
            self.passed += 1
        elif outcome is CheckOutcome.FAILED:
            self.failed += 1
        else:
            self.warnings += 1

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.warnings

    @property
    def score(self) -> int:
        """Integer percentage of passed checks; 0 when nothing ran."""
        if not self.total:
            return 0
        return self.passed * 100 // self.total

    @property
    def label(self) -> str:
        return score_label(self.score)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0
