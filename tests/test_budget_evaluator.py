from dataclasses import replace

import pytest

from factories import KB, MB, within_production_budget
from perfgov.budgets import (
    DEVELOPMENT_BUDGET,
    PRODUCTION_BUDGET,
    RECOMMENDATIONS,
    BudgetEvaluator,
    BundleSizes,
    CoreWebVitals,
    NetworkMetrics,
    PerformanceData,
    RuntimeMetrics,
    ViolationSeverity,
    evaluate,
)


def _with_bundles(**kw):
    data = within_production_budget()
    return replace(data, bundles=replace(data.bundles, **kw))


def test_within_budget_snapshot_passes():
    result = evaluate(within_production_budget(), PRODUCTION_BUDGET)
    assert result.passed
    assert result.score == 100
    assert result.violations == ()
    assert result.summary.total == 0
    assert result.recommendations == ()
    assert result.budget_name == "production"


@pytest.mark.parametrize(
    "main_kb,pct,severity,score",
    [
        (600, 20.0, ViolationSeverity.LOW, 95),
        (750, 50.0, ViolationSeverity.HIGH, 85),
        (1000, 100.0, ViolationSeverity.CRITICAL, 75),
    ],
)
def test_main_bundle_overage(main_kb, pct, severity, score):
    result = evaluate(_with_bundles(main=main_kb * KB), PRODUCTION_BUDGET)
    assert not result.passed
    assert len(result.violations) == 1
    v = result.violations[0]
    assert v.metric == "main"
    assert v.category == "bundles"
    assert v.percentage == pytest.approx(pct)
    assert v.severity is severity
    assert result.score == score
    assert v.message == (
        f"Main bundle size ({main_kb} KB) exceeds budget (500 KB) by {pct:.1f}%"
    )


def test_main_bundle_at_exact_budget_passes():
    assert evaluate(_with_bundles(main=500 * KB), PRODUCTION_BUDGET).passed


def test_fps_is_a_minimum_bound():
    data = within_production_budget()
    data = replace(data, performance=replace(data.performance, fps=30))
    result = evaluate(data, PRODUCTION_BUDGET)
    assert [v.metric for v in result.violations] == ["fps"]
    v = result.violations[0]
    assert v.actual == 30
    assert v.budget == 55
    assert v.percentage == pytest.approx(25 / 55 * 100)
    # roles swapped: (55 - 30) / 30 -> 83% -> HIGH
    assert v.severity is ViolationSeverity.HIGH
    assert "is below minimum threshold" in v.message
    assert v.message.startswith("FPS (30) is below minimum threshold (55) by 45.5%")


def test_fps_above_minimum_passes():
    data = within_production_budget()
    data = replace(data, performance=replace(data.performance, fps=120))
    assert evaluate(data, PRODUCTION_BUDGET).passed


def test_score_penalties_accumulate():
    # main +50% HIGH, vendor +25% MEDIUM, gzipped +5% LOW
    data = _with_bundles(main=750 * KB, vendor=1000 * KB, gzipped=420 * KB)
    result = evaluate(data, PRODUCTION_BUDGET)
    assert [v.severity for v in result.violations] == [
        ViolationSeverity.HIGH,
        ViolationSeverity.MEDIUM,
        ViolationSeverity.LOW,
    ]
    assert result.score == 70
    assert result.summary.total == 3
    assert (result.summary.high, result.summary.medium, result.summary.low) == (1, 1, 1)
    assert result.summary.critical == 0


def test_score_is_clamped_at_zero():
    data = PerformanceData(
        bundles=BundleSizes(main=5 * MB, vendor=5 * MB, total=50 * MB, gzipped=5 * MB),
        core_web_vitals=CoreWebVitals(lcp=60000, fid=5000),
    )
    result = evaluate(data, PRODUCTION_BUDGET)
    assert result.summary.critical == 6
    assert result.score == 0


def test_recommendations_once_per_violated_category_in_order():
    data = PerformanceData(
        network=NetworkMetrics(latency=900, concurrent_requests=30),
        bundles=BundleSizes(main=2 * MB, vendor=2 * MB),
    )
    result = evaluate(data, PRODUCTION_BUDGET)
    assert result.recommendations == RECOMMENDATIONS["bundles"] + RECOMMENDATIONS["network"]


def test_violation_order_follows_category_and_metric_order():
    data = PerformanceData(
        network=NetworkMetrics(latency=900),
        performance=RuntimeMetrics(fps=10, render_time=50),
        core_web_vitals=CoreWebVitals(inp=900, lcp=9000),
        bundles=BundleSizes(gzipped=2 * MB, main=2 * MB),
    )
    result = evaluate(data, PRODUCTION_BUDGET)
    assert [(v.category, v.metric) for v in result.violations] == [
        ("bundles", "main"),
        ("bundles", "gzipped"),
        ("core_web_vitals", "lcp"),
        ("core_web_vitals", "inp"),
        ("performance", "render_time"),
        ("performance", "fps"),
        ("network", "latency"),
    ]


def test_evaluation_is_idempotent():
    data = _with_bundles(main=750 * KB)
    first = evaluate(data, PRODUCTION_BUDGET)
    second = evaluate(data, PRODUCTION_BUDGET)
    # timestamps are excluded from equality
    assert first == second


def test_absent_categories_and_metrics_are_skipped():
    data = PerformanceData(core_web_vitals=CoreWebVitals(lcp=2000))
    result = evaluate(data, PRODUCTION_BUDGET)
    assert result.passed
    assert evaluate(PerformanceData(), PRODUCTION_BUDGET).score == 100


def test_zero_measurement_is_evaluated():
    data = PerformanceData(performance=RuntimeMetrics(fps=0))
    result = evaluate(data, PRODUCTION_BUDGET)
    assert [v.metric for v in result.violations] == ["fps"]
    assert result.violations[0].severity is ViolationSeverity.CRITICAL


def test_unit_formatting_in_messages():
    data = PerformanceData(
        core_web_vitals=CoreWebVitals(lcp=5000, cls=0.3),
        network=NetworkMetrics(bandwidth=1500),
        performance=RuntimeMetrics(memory_usage=80),
    )
    messages = [v.message for v in evaluate(data, PRODUCTION_BUDGET).violations]
    assert messages[0].startswith("Largest Contentful Paint (5.00s) exceeds budget (2.50s)")
    assert messages[1].startswith("Cumulative Layout Shift (0.300) exceeds budget (0.100)")
    assert messages[2].startswith("Memory usage (80.0%) exceeds budget (70.0%)")
    assert messages[3].startswith("Bandwidth usage (1500 KB/s) exceeds budget (1000 KB/s)")


def test_for_environment_selects_budget():
    assert BudgetEvaluator.for_environment("production").budget is PRODUCTION_BUDGET
    assert BudgetEvaluator.for_environment("staging").budget is DEVELOPMENT_BUDGET
    # same snapshot is a violation in production only
    data = _with_bundles(main=600 * KB)
    assert BudgetEvaluator.for_environment("development").evaluate(data).passed
    assert not BudgetEvaluator.for_environment("production").evaluate(data).passed


def test_to_dict_is_json_ready():
    result = evaluate(_with_bundles(main=1000 * KB), PRODUCTION_BUDGET)
    payload = result.to_dict()
    assert payload["passed"] is False
    assert payload["budget"] == "production"
    assert payload["summary"]["critical"] == 1
    assert payload["violations"][0]["severity"] == "critical"
    assert payload["timestamp"]
