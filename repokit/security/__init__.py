from .checks import CheckOutcome, SecurityCheck, ValidationTally, score_label
from .report import write_report
from .validator import SecurityValidator, ValidationRun

__all__ = [
    "CheckOutcome",
    "SecurityCheck",
    "SecurityValidator",
    "ValidationRun",
    "ValidationTally",
    "score_label",
    "write_report",
]
