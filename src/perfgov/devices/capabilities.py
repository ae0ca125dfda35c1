"""Device capability value types.

All records are frozen; a :class:`DeviceCapabilities` is computed once per
lifecycle and treated as immutable afterwards.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional

__all__ = [
    "PerformanceTier",
    "min_tier",
    "downgrade",
    "CpuInfo",
    "GpuInfo",
    "MemoryInfo",
    "DisplayInfo",
    "FeatureSupport",
    "UserPreferences",
    "NetworkInfo",
    "OverallPerformance",
    "DeviceCapabilities",
]


class PerformanceTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)


_TIER_ORDER = (PerformanceTier.LOW, PerformanceTier.MEDIUM, PerformanceTier.HIGH)


def min_tier(*tiers: PerformanceTier) -> PerformanceTier:
    """Most conservative of the given tiers."""
    return min(tiers, key=lambda t: t.rank)


def downgrade(tier: PerformanceTier) -> PerformanceTier:
    return _TIER_ORDER[max(tier.rank - 1, 0)]


@dataclass(frozen=True)
class CpuInfo:
    cores: int
    performance_tier: PerformanceTier
    architecture: str = "unknown"
    benchmark_ms: Optional[float] = None


@dataclass(frozen=True)
class GpuInfo:
    webgl_supported: bool
    webgl2_supported: bool
    performance_tier: PerformanceTier
    max_texture_size: int = 0
    vendor: str = "unknown"
    renderer: str = "unknown"


@dataclass(frozen=True)
class MemoryInfo:
    device_memory_gb: Optional[float]
    performance_tier: PerformanceTier


@dataclass(frozen=True)
class DisplayInfo:
    width: int = 1920
    height: int = 1080
    pixel_ratio: float = 1.0
    color_depth: int = 24


@dataclass(frozen=True)
class FeatureSupport:
    webgl: bool = False
    webgl2: bool = False
    webassembly: bool = False
    css_custom_properties: bool = False
    css_grid: bool = False
    css_flexbox: bool = False


@dataclass(frozen=True)
class UserPreferences:
    reduced_motion: bool = False
    reduced_data: bool = False
    high_contrast: bool = False
    dark_mode: bool = False


@dataclass(frozen=True)
class NetworkInfo:
    effective_type: str = "unknown"  # slow-2g | 2g | 3g | 4g | unknown
    save_data: bool = False
    downlink_mbps: Optional[float] = None
    rtt_ms: Optional[float] = None


@dataclass(frozen=True)
class OverallPerformance:
    performance_tier: PerformanceTier


@dataclass(frozen=True)
class DeviceCapabilities:
    cpu: CpuInfo
    gpu: GpuInfo
    memory: MemoryInfo
    display: DisplayInfo
    features: FeatureSupport
    preferences: UserPreferences
    overall: OverallPerformance
    network: Optional[NetworkInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        def _plain(value: Any) -> Any:
            if isinstance(value, Enum):
                return value.value
            if isinstance(value, dict):
                return {k: _plain(v) for k, v in value.items()}
            return value

        return _plain(asdict(self))
