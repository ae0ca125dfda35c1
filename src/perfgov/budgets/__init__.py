"""Performance budget catalog, severity classification and evaluation."""

from .performance_budgets import (  # noqa: F401
    PerformanceBudget,
    BundleBudget,
    CoreWebVitalsBudget,
    ResourceBudget,
    RuntimeBudget,
    NetworkBudget,
    PRODUCTION_BUDGET,
    DEVELOPMENT_BUDGET,
    TEST_BUDGET,
    list_performance_budgets,
    get_performance_budget,
    select_budget,
    budget_from_dict,
)
from .severity import ViolationSeverity, classify_violation, severity_for_percentage  # noqa: F401
from .formatting import format_bytes, format_milliseconds  # noqa: F401
from .measurements import (  # noqa: F401
    PerformanceData,
    BundleSizes,
    CoreWebVitals,
    ResourceUsage,
    RuntimeMetrics,
    NetworkMetrics,
)
from .evaluator import (  # noqa: F401
    BudgetEvaluator,
    BudgetCheckResult,
    BudgetViolation,
    BudgetSummary,
    RECOMMENDATIONS,
    evaluate,
)
from .report import build_report  # noqa: F401
