"""Measured performance snapshot contract.

A :class:`PerformanceData` mirrors the category shape of a budget but holds
measured values. Any category may be absent and any metric inside a category
may be ``None``; both mean "not measured" and are skipped by the evaluator.

Preconditions
-------------
Values are trusted as-is: NaN, infinite or negative numbers are not rejected
here. The collector producing the snapshot is responsible for sanitizing
measurements before evaluation. Parsing only rejects values that are not
numbers at all.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from ..errors import PerformanceDataError

__all__ = [
    "BundleSizes",
    "CoreWebVitals",
    "ResourceUsage",
    "RuntimeMetrics",
    "NetworkMetrics",
    "PerformanceData",
]

_logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


@dataclass(frozen=True)
class BundleSizes:
    main: Optional[float] = None
    vendor: Optional[float] = None
    total: Optional[float] = None
    gzipped: Optional[float] = None


@dataclass(frozen=True)
class CoreWebVitals:
    lcp: Optional[float] = None
    fid: Optional[float] = None
    cls: Optional[float] = None
    fcp: Optional[float] = None
    ttfb: Optional[float] = None
    inp: Optional[float] = None


@dataclass(frozen=True)
class ResourceUsage:
    requests: Optional[float] = None
    image_size: Optional[float] = None
    font_size: Optional[float] = None
    css_size: Optional[float] = None
    js_size: Optional[float] = None


@dataclass(frozen=True)
class RuntimeMetrics:
    render_time: Optional[float] = None
    memory_usage: Optional[float] = None
    fps: Optional[float] = None
    dom_nodes: Optional[float] = None
    event_listeners: Optional[float] = None


@dataclass(frozen=True)
class NetworkMetrics:
    latency: Optional[float] = None
    bandwidth: Optional[float] = None
    concurrent_requests: Optional[float] = None


_SECTION_TYPES: Dict[str, type] = {
    "bundles": BundleSizes,
    "core_web_vitals": CoreWebVitals,
    "resources": ResourceUsage,
    "performance": RuntimeMetrics,
    "network": NetworkMetrics,
}


def _parse_section(category: str, raw: Any) -> Any:
    section_type = _SECTION_TYPES[category]
    if not isinstance(raw, Mapping):
        raise PerformanceDataError(
            f"{category} must be a mapping", context={"category": category}
        )
    known = {f.name for f in fields(section_type)}
    values: Dict[str, Optional[float]] = {}
    for key, value in raw.items():
        name = _snake(str(key))
        if name not in known:
            _logger.debug("Ignoring unknown metric %s.%s", category, key)
            continue
        if value is None:
            values[name] = None
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PerformanceDataError(
                f"{category}.{name} must be a number, got {type(value).__name__}",
                context={"category": category, "metric": name, "value": value},
            )
        try:
            values[name] = float(value)
        except OverflowError:
            raise PerformanceDataError(
                f"{category}.{name} is too large to represent",
                context={"category": category, "metric": name},
            ) from None
    return section_type(**values)


@dataclass(frozen=True)
class PerformanceData:
    bundles: Optional[BundleSizes] = None
    core_web_vitals: Optional[CoreWebVitals] = None
    resources: Optional[ResourceUsage] = None
    performance: Optional[RuntimeMetrics] = None
    network: Optional[NetworkMetrics] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PerformanceData":
        """Parse a snapshot mapping (snake_case or client camelCase keys)."""
        if not isinstance(data, Mapping):
            raise PerformanceDataError("performance snapshot must be a mapping")
        sections: Dict[str, Any] = {}
        for key, raw in data.items():
            category = _snake(str(key))
            if category not in _SECTION_TYPES:
                _logger.debug("Ignoring unknown snapshot category %s", key)
                continue
            if raw is None:
                continue
            sections[category] = _parse_section(category, raw)
        return cls(**sections)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for category in _SECTION_TYPES:
            section = getattr(self, category)
            if section is None:
                continue
            out[category] = {
                f.name: getattr(section, f.name)
                for f in fields(section)
                if getattr(section, f.name) is not None
            }
        return out
