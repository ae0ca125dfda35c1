"""Violation severity classification.

Severity is derived purely from the overage percentage:

 - LOW:      < 25%
 - MEDIUM:   >= 25% and < 50%
 - HIGH:     >= 50% and < 100%
 - CRITICAL: >= 100%

Bucket lower bounds are inclusive (exactly 25% is MEDIUM).
"""

from __future__ import annotations

from enum import Enum

__all__ = ["ViolationSeverity", "severity_for_percentage", "classify_violation", "SEVERITY_PENALTIES"]


class ViolationSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other):  # type: ignore[override]
        if not isinstance(other, ViolationSeverity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):  # type: ignore[override]
        if not isinstance(other, ViolationSeverity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):  # type: ignore[override]
        if not isinstance(other, ViolationSeverity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):  # type: ignore[override]
        if not isinstance(other, ViolationSeverity):
            return NotImplemented
        return self.rank >= other.rank


_RANKS = {
    ViolationSeverity.LOW: 0,
    ViolationSeverity.MEDIUM: 1,
    ViolationSeverity.HIGH: 2,
    ViolationSeverity.CRITICAL: 3,
}

# Score penalty per violation
SEVERITY_PENALTIES = {
    ViolationSeverity.CRITICAL: 25,
    ViolationSeverity.HIGH: 15,
    ViolationSeverity.MEDIUM: 10,
    ViolationSeverity.LOW: 5,
}


def severity_for_percentage(percentage: float) -> ViolationSeverity:
    if percentage >= 100:
        return ViolationSeverity.CRITICAL
    if percentage >= 50:
        return ViolationSeverity.HIGH
    if percentage >= 25:
        return ViolationSeverity.MEDIUM
    return ViolationSeverity.LOW


def classify_violation(actual: float, budget: float) -> ViolationSeverity:
    """Classify how far ``actual`` exceeds ``budget``.

    ``budget`` must be positive; catalog budgets guarantee this.
    """
    if budget <= 0:
        raise ValueError("budget must be > 0")
    percentage = (actual - budget) / budget * 100
    return severity_for_percentage(percentage)
