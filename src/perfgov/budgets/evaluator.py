"""Performance budget evaluator.

Walks a :class:`PerformanceData` snapshot against a :class:`PerformanceBudget`
and produces a :class:`BudgetCheckResult` with violations, a 0-100 score,
severity summary and remediation recommendations.

Enumeration order is fixed (bundles, core web vitals, resources, runtime
performance, network; metrics in declaration order inside each) and the
violation list preserves it.

Rules:
 - maximum-bound metrics violate when ``actual > budget``;
 - ``fps`` is a minimum bound and violates when ``actual < budget``. Its
   percentage is the deficit relative to the budget and its severity is
   classified with the roles swapped (``classify_violation(budget, actual)``).

Score starts at 100 and loses a fixed penalty per violation
(CRITICAL 25, HIGH 15, MEDIUM 10, LOW 5), clamped at 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .formatting import ValueKind, format_value
from .measurements import PerformanceData
from .performance_budgets import PerformanceBudget, select_budget
from .severity import SEVERITY_PENALTIES, ViolationSeverity, classify_violation

__all__ = [
    "BudgetViolation",
    "BudgetSummary",
    "BudgetCheckResult",
    "BudgetEvaluator",
    "RECOMMENDATIONS",
    "evaluate",
]

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _MetricSpec:
    category: str
    metric: str  # attribute on the measured section
    budget_field: str  # attribute on the budget section
    label: str
    kind: ValueKind
    minimum: bool = False


_METRICS: Tuple[_MetricSpec, ...] = (
    _MetricSpec("bundles", "main", "main", "Main bundle size", ValueKind.BYTES),
    _MetricSpec("bundles", "vendor", "vendor", "Vendor bundle size", ValueKind.BYTES),
    _MetricSpec("bundles", "total", "total", "Total bundle size", ValueKind.BYTES),
    _MetricSpec("bundles", "gzipped", "gzipped", "Gzipped bundle size", ValueKind.BYTES),
    _MetricSpec("core_web_vitals", "lcp", "lcp", "Largest Contentful Paint", ValueKind.MILLISECONDS),
    _MetricSpec("core_web_vitals", "fid", "fid", "First Input Delay", ValueKind.MILLISECONDS),
    _MetricSpec("core_web_vitals", "cls", "cls", "Cumulative Layout Shift", ValueKind.RATIO),
    _MetricSpec("core_web_vitals", "fcp", "fcp", "First Contentful Paint", ValueKind.MILLISECONDS),
    _MetricSpec("core_web_vitals", "ttfb", "ttfb", "Time to First Byte", ValueKind.MILLISECONDS),
    _MetricSpec("core_web_vitals", "inp", "inp", "Interaction to Next Paint", ValueKind.MILLISECONDS),
    _MetricSpec("resources", "requests", "max_requests", "Number of requests", ValueKind.COUNT),
    _MetricSpec("resources", "image_size", "max_image_size", "Image size", ValueKind.BYTES),
    _MetricSpec("resources", "font_size", "max_font_size", "Font size", ValueKind.BYTES),
    _MetricSpec("resources", "css_size", "max_css_size", "CSS size", ValueKind.BYTES),
    _MetricSpec("resources", "js_size", "max_js_size", "JavaScript size", ValueKind.BYTES),
    _MetricSpec("performance", "render_time", "max_render_time", "Render time", ValueKind.MILLISECONDS),
    _MetricSpec("performance", "memory_usage", "max_memory_usage", "Memory usage", ValueKind.PERCENT),
    _MetricSpec("performance", "dom_nodes", "max_dom_nodes", "DOM nodes", ValueKind.COUNT),
    _MetricSpec("performance", "event_listeners", "max_event_listeners", "Event listeners", ValueKind.COUNT),
    _MetricSpec("performance", "fps", "min_fps", "FPS", ValueKind.COUNT, minimum=True),
    _MetricSpec("network", "latency", "max_latency", "Network latency", ValueKind.MILLISECONDS),
    _MetricSpec("network", "bandwidth", "max_bandwidth", "Bandwidth usage", ValueKind.RATE),
    _MetricSpec("network", "concurrent_requests", "max_concurrent_requests", "Concurrent requests", ValueKind.COUNT),
)

RECOMMENDATIONS: Dict[str, Tuple[str, ...]] = {
    "bundles": (
        "Consider code splitting and lazy loading to reduce bundle sizes",
        "Use dynamic imports for non-critical components",
        "Optimize vendor bundle by removing unused dependencies",
    ),
    "core_web_vitals": (
        "Optimize images and serve responsive sizes for better LCP",
        "Reduce JavaScript execution time to improve FID and INP",
        "Use CSS containment and reserve space for media to avoid layout shifts (CLS)",
    ),
    "resources": (
        "Optimize and compress images",
        "Use font-display: swap for better font loading",
        "Minimize and compress CSS and JavaScript",
    ),
    "performance": (
        "Optimize component render performance",
        "Memoize expensive computations between renders",
        "Reduce DOM complexity and event listener count",
    ),
    "network": (
        "Use a CDN for static assets",
        "Implement request batching and caching",
        "Optimize API response times",
    ),
}


@dataclass(frozen=True)
class BudgetViolation:
    metric: str
    actual: float
    budget: float
    percentage: float
    severity: ViolationSeverity
    category: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric": self.metric,
            "actual": self.actual,
            "budget": self.budget,
            "percentage": self.percentage,
            "severity": self.severity.value,
            "category": self.category,
            "message": self.message,
        }


@dataclass(frozen=True)
class BudgetSummary:
    total: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @classmethod
    def from_violations(cls, violations: Iterable[BudgetViolation]) -> "BudgetSummary":
        counts = {sev: 0 for sev in ViolationSeverity}
        total = 0
        for v in violations:
            counts[v.severity] += 1
            total += 1
        return cls(
            total=total,
            critical=counts[ViolationSeverity.CRITICAL],
            high=counts[ViolationSeverity.HIGH],
            medium=counts[ViolationSeverity.MEDIUM],
            low=counts[ViolationSeverity.LOW],
        )


@dataclass(frozen=True)
class BudgetCheckResult:
    """Outcome of one evaluation. ``passed`` is True iff there are no violations."""

    passed: bool
    score: int
    violations: Tuple[BudgetViolation, ...]
    summary: BudgetSummary
    recommendations: Tuple[str, ...]
    timestamp: str = field(compare=False)
    budget_name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "score": self.score,
            "violations": [v.to_dict() for v in self.violations],
            "summary": {
                "total": self.summary.total,
                "critical": self.summary.critical,
                "high": self.summary.high,
                "medium": self.summary.medium,
                "low": self.summary.low,
            },
            "recommendations": list(self.recommendations),
            "timestamp": self.timestamp,
            "budget": self.budget_name,
        }


def _check_metric(spec: _MetricSpec, actual: float, budget: float) -> Optional[BudgetViolation]:
    if spec.minimum:
        if actual >= budget:
            return None
        percentage = (budget - actual) / budget * 100
        # a zero frame rate is an unbounded deficit
        severity = classify_violation(budget, actual) if actual > 0 else ViolationSeverity.CRITICAL
        message = (
            f"{spec.label} ({format_value(spec.kind, actual)}) is below minimum threshold "
            f"({format_value(spec.kind, budget)}) by {percentage:.1f}%"
        )
    else:
        if actual <= budget:
            return None
        percentage = (actual - budget) / budget * 100
        severity = classify_violation(actual, budget)
        message = (
            f"{spec.label} ({format_value(spec.kind, actual)}) exceeds budget "
            f"({format_value(spec.kind, budget)}) by {percentage:.1f}%"
        )
    return BudgetViolation(
        metric=spec.metric,
        actual=actual,
        budget=budget,
        percentage=percentage,
        severity=severity,
        category=spec.category,
        message=message,
    )


def _score(violations: Iterable[BudgetViolation]) -> int:
    penalty = sum(SEVERITY_PENALTIES[v.severity] for v in violations)
    return max(0, 100 - penalty)


def _recommendations(violations: Iterable[BudgetViolation]) -> Tuple[str, ...]:
    violated = {v.category for v in violations}
    out: List[str] = []
    for category, items in RECOMMENDATIONS.items():
        if category in violated:
            out.extend(items)
    return tuple(out)


class BudgetEvaluator:
    """Evaluates measurement snapshots against one budget.

    The budget is bound at construction so several environments can be
    evaluated side by side.
    """

    def __init__(self, budget: PerformanceBudget) -> None:
        self.budget = budget

    @classmethod
    def for_environment(cls, env_name: Optional[str]) -> "BudgetEvaluator":
        return cls(select_budget(env_name))

    def evaluate(self, data: PerformanceData) -> BudgetCheckResult:
        violations: List[BudgetViolation] = []
        for spec in _METRICS:
            section = getattr(data, spec.category)
            if section is None:
                continue
            actual = getattr(section, spec.metric)
            if actual is None:
                continue
            budget_value = getattr(getattr(self.budget, spec.category), spec.budget_field)
            violation = _check_metric(spec, actual, budget_value)
            if violation is not None:
                _logger.debug("Budget violation: %s", violation.message)
                violations.append(violation)

        result = BudgetCheckResult(
            passed=not violations,
            score=_score(violations),
            violations=tuple(violations),
            summary=BudgetSummary.from_violations(violations),
            recommendations=_recommendations(violations),
            timestamp=datetime.now(timezone.utc).isoformat(),
            budget_name=self.budget.name,
        )
        _logger.info(
            "Budget check against %s: %d violation(s), score %d",
            self.budget.name,
            len(violations),
            result.score,
        )
        return result


def evaluate(data: PerformanceData, budget: PerformanceBudget) -> BudgetCheckResult:
    return BudgetEvaluator(budget).evaluate(data)
