"""Environment performance budget catalog.

Defines the threshold tables used to gate client performance measurements.
Three immutable budgets exist:

 - production: strict thresholds aligned with "good" Core Web Vitals ranges.
 - development: relaxed thresholds for unoptimized local builds.
 - test: very relaxed thresholds so CI machines under load do not flap.

Units
-----
 - bundles / resource sizes: bytes
 - core web vitals: milliseconds (``cls`` is unitless)
 - max_memory_usage: percent of the heap limit
 - max_bandwidth: KB/s

Every threshold is validated at construction time (finite and > 0) so the
evaluator never divides by a zero budget. ``min_fps`` is the only minimum
bound; everything else is a maximum.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Mapping, Optional

from ..errors import BudgetValidationError

__all__ = [
    "BundleBudget",
    "CoreWebVitalsBudget",
    "ResourceBudget",
    "RuntimeBudget",
    "NetworkBudget",
    "PerformanceBudget",
    "PRODUCTION_BUDGET",
    "DEVELOPMENT_BUDGET",
    "TEST_BUDGET",
    "CATEGORIES",
    "list_performance_budgets",
    "get_performance_budget",
    "select_budget",
    "budget_from_dict",
]

KB = 1024
MB = 1024 * 1024


def _validate_thresholds(section: Any) -> None:
    for f in fields(section):
        value = getattr(section, f.name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise BudgetValidationError(
                f"{type(section).__name__}.{f.name} must be a number",
                context={"field": f.name, "value": value},
            )
        if not math.isfinite(value) or value <= 0:
            raise BudgetValidationError(
                f"{type(section).__name__}.{f.name} must be a positive number, got {value!r}",
                context={"field": f.name, "value": value},
            )


@dataclass(frozen=True)
class BundleBudget:
    main: float
    vendor: float
    total: float
    gzipped: float

    def __post_init__(self):  # type: ignore[override]
        _validate_thresholds(self)


@dataclass(frozen=True)
class CoreWebVitalsBudget:
    lcp: float
    fid: float
    cls: float
    fcp: float
    ttfb: float
    inp: float

    def __post_init__(self):  # type: ignore[override]
        _validate_thresholds(self)


@dataclass(frozen=True)
class ResourceBudget:
    max_requests: float
    max_image_size: float
    max_font_size: float
    max_css_size: float
    max_js_size: float

    def __post_init__(self):  # type: ignore[override]
        _validate_thresholds(self)


@dataclass(frozen=True)
class RuntimeBudget:
    max_render_time: float
    max_memory_usage: float
    min_fps: float
    max_dom_nodes: float
    max_event_listeners: float

    def __post_init__(self):  # type: ignore[override]
        _validate_thresholds(self)


@dataclass(frozen=True)
class NetworkBudget:
    max_latency: float
    max_bandwidth: float
    max_concurrent_requests: float

    def __post_init__(self):  # type: ignore[override]
        _validate_thresholds(self)


# Category attribute name -> section type (enumeration order matters)
CATEGORIES: Dict[str, type] = {
    "bundles": BundleBudget,
    "core_web_vitals": CoreWebVitalsBudget,
    "resources": ResourceBudget,
    "performance": RuntimeBudget,
    "network": NetworkBudget,
}


@dataclass(frozen=True)
class PerformanceBudget:
    """Complete threshold table for one environment.

    Attributes
    ----------
    name: str
        Environment identifier (production|development|test or a custom label).
    bundles, core_web_vitals, resources, performance, network:
        Category threshold tables.
    """

    name: str
    bundles: BundleBudget
    core_web_vitals: CoreWebVitalsBudget
    resources: ResourceBudget
    performance: RuntimeBudget
    network: NetworkBudget

    def __post_init__(self):  # type: ignore[override]
        if not self.name.strip():
            raise BudgetValidationError("budget name must be non-empty")

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name}
        for category in CATEGORIES:
            section = getattr(self, category)
            out[category] = {f.name: getattr(section, f.name) for f in fields(section)}
        return out


PRODUCTION_BUDGET = PerformanceBudget(
    name="production",
    bundles=BundleBudget(main=500 * KB, vendor=800 * KB, total=1.5 * MB, gzipped=400 * KB),
    core_web_vitals=CoreWebVitalsBudget(lcp=2500, fid=100, cls=0.1, fcp=1800, ttfb=600, inp=200),
    resources=ResourceBudget(
        max_requests=50,
        max_image_size=500 * KB,
        max_font_size=100 * KB,
        max_css_size=200 * KB,
        max_js_size=1 * MB,
    ),
    performance=RuntimeBudget(
        max_render_time=16,
        max_memory_usage=70,
        min_fps=55,
        max_dom_nodes=1500,
        max_event_listeners=100,
    ),
    network=NetworkBudget(max_latency=200, max_bandwidth=1000, max_concurrent_requests=6),
)

DEVELOPMENT_BUDGET = PerformanceBudget(
    name="development",
    bundles=BundleBudget(main=1 * MB, vendor=1.5 * MB, total=3 * MB, gzipped=800 * KB),
    core_web_vitals=CoreWebVitalsBudget(lcp=4000, fid=300, cls=0.25, fcp=3000, ttfb=1000, inp=500),
    resources=ResourceBudget(
        max_requests=100,
        max_image_size=1 * MB,
        max_font_size=200 * KB,
        max_css_size=500 * KB,
        max_js_size=2 * MB,
    ),
    performance=RuntimeBudget(
        max_render_time=33,
        max_memory_usage=85,
        min_fps=30,
        max_dom_nodes=3000,
        max_event_listeners=200,
    ),
    network=NetworkBudget(max_latency=500, max_bandwidth=2000, max_concurrent_requests=10),
)

TEST_BUDGET = PerformanceBudget(
    name="test",
    bundles=BundleBudget(main=2 * MB, vendor=2 * MB, total=5 * MB, gzipped=1.5 * MB),
    core_web_vitals=CoreWebVitalsBudget(
        lcp=10000, fid=1000, cls=0.5, fcp=5000, ttfb=2000, inp=1000
    ),
    resources=ResourceBudget(
        max_requests=200,
        max_image_size=2 * MB,
        max_font_size=500 * KB,
        max_css_size=1 * MB,
        max_js_size=5 * MB,
    ),
    performance=RuntimeBudget(
        max_render_time=100,
        max_memory_usage=95,
        min_fps=15,
        max_dom_nodes=10000,
        max_event_listeners=500,
    ),
    network=NetworkBudget(max_latency=2000, max_bandwidth=5000, max_concurrent_requests=20),
)


_REGISTRY: Dict[str, PerformanceBudget] = {}


def _register(b: PerformanceBudget) -> None:
    if b.name in _REGISTRY:
        raise ValueError(f"Duplicate performance budget name: {b.name}")
    _REGISTRY[b.name] = b


_register(PRODUCTION_BUDGET)
_register(DEVELOPMENT_BUDGET)
_register(TEST_BUDGET)


def list_performance_budgets() -> List[PerformanceBudget]:
    return sorted(_REGISTRY.values(), key=lambda b: b.name)


def get_performance_budget(name: str) -> PerformanceBudget:
    budget = _REGISTRY.get(name)
    if budget is None:
        raise KeyError(f"Unknown performance budget: {name}")
    return budget


def select_budget(env_name: Optional[str]) -> PerformanceBudget:
    """Return the budget for an environment name.

    ``production`` and ``test`` select their tables; any other value
    (including ``None``) falls back to development.
    """
    key = (env_name or "").strip().lower()
    if key == "production":
        return PRODUCTION_BUDGET
    if key == "test":
        return TEST_BUDGET
    return DEVELOPMENT_BUDGET


def budget_from_dict(
    data: Mapping[str, Any], base: Optional[PerformanceBudget] = None
) -> PerformanceBudget:
    """Build a custom budget by overriding thresholds of ``base``.

    ``data`` mirrors :meth:`PerformanceBudget.to_dict`; categories and keys not
    present keep the base value. Unknown categories or keys raise
    :class:`BudgetValidationError`, as do non-positive thresholds.
    """
    base = base or DEVELOPMENT_BUDGET
    if not isinstance(data, Mapping):
        raise BudgetValidationError("custom budget must be a mapping")
    changes: Dict[str, Any] = {}
    for key, value in data.items():
        if key == "name":
            changes["name"] = str(value)
            continue
        if key not in CATEGORIES:
            raise BudgetValidationError(f"Unknown budget category: {key}", context={"key": key})
        if not isinstance(value, Mapping):
            raise BudgetValidationError(f"Budget category {key} must be a mapping")
        section = getattr(base, key)
        known = {f.name for f in fields(section)}
        unknown = set(value) - known
        if unknown:
            raise BudgetValidationError(
                f"Unknown thresholds for {key}: {', '.join(sorted(unknown))}",
                context={"category": key, "keys": sorted(unknown)},
            )
        changes[key] = replace(section, **dict(value))
    changes.setdefault("name", f"{base.name}-custom")
    return replace(base, **changes)
