"""Plain text rendering of budget check results for CI logs and dashboards."""

from __future__ import annotations

from typing import List

from .evaluator import BudgetCheckResult
from .severity import ViolationSeverity

__all__ = ["build_report"]

_MARKERS = {
    ViolationSeverity.CRITICAL: "!!",
    ViolationSeverity.HIGH: "! ",
    ViolationSeverity.MEDIUM: "- ",
    ViolationSeverity.LOW: ". ",
}


def build_report(result: BudgetCheckResult, max_violations: int = 50) -> str:
    """Return a multi-line summary; violations are listed most severe first."""
    status = "PASSED" if result.passed else "FAILED"
    s = result.summary
    lines: List[str] = [
        f"Performance budget ({result.budget_name or 'custom'}): {status}",
        f"Score: {result.score}/100",
        (
            f"Violations: {s.total} (critical={s.critical}, high={s.high}, "
            f"medium={s.medium}, low={s.low})"
        ),
    ]
    if result.violations:
        lines.append("")
        ordered = sorted(result.violations, key=lambda v: v.severity.rank, reverse=True)
        for v in ordered[:max_violations]:
            lines.append(f"  {_MARKERS[v.severity]} [{v.severity.value}] {v.category}.{v.metric}: {v.message}")
        hidden = len(ordered) - max_violations
        if hidden > 0:
            lines.append(f"  ... {hidden} more")
    if result.recommendations:
        lines.append("")
        lines.append("Recommendations:")
        for rec in result.recommendations:
            lines.append(f"  * {rec}")
    return "\n".join(lines)
