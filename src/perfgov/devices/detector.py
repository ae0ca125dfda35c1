"""Device capability detection and tiering.

Turns the raw signals of a :class:`CapabilityProvider` into a
:class:`DeviceCapabilities` record:

- CPU: ``< 4`` logical cores low, ``4-7`` medium, ``>= 8`` high (unknown
  core count counts as 4). A micro-benchmark slower than the configured
  threshold downgrades the tier by one step.
- GPU: no 3D context is always low; 3D + next-generation context with a max
  texture size at or above the threshold is high; anything else medium.
- Memory: ``< 4`` GB low, ``4-7`` medium, ``>= 8`` high; unknown is medium.
- Overall: the most conservative of the three, forced to low when the user
  prefers reduced motion.

Providers without a client yield a fixed conservative default instead of
failing. Probe errors are logged and treated as missing signals.

The benchmark thresholds are tuning knobs only: slower devices end up in a
lower tier, the exact cutoffs carry no product meaning.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, Optional, TypeVar

from .. import settings
from .capabilities import (
    CpuInfo,
    DeviceCapabilities,
    DisplayInfo,
    FeatureSupport,
    GpuInfo,
    MemoryInfo,
    OverallPerformance,
    PerformanceTier,
    UserPreferences,
    downgrade,
    min_tier,
)
from .providers import CapabilityProvider, GpuProbe

__all__ = [
    "run_cpu_benchmark",
    "cpu_tier",
    "gpu_tier",
    "memory_tier",
    "conservative_defaults",
    "CapabilityDetector",
]

_logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CORES = 4


def run_cpu_benchmark(
    iterations: int = settings.CPU_BENCHMARK_ITERATIONS,
    clock: Callable[[], float] = time.perf_counter,
) -> float:
    """Time a bounded square-root loop; returns elapsed milliseconds."""
    start = clock()
    acc = 0.0
    for i in range(max(iterations, 0)):
        acc += math.sqrt(i)
    elapsed = (clock() - start) * 1000.0
    if acc < 0:  # keeps the loop observable
        _logger.debug("benchmark accumulator %s", acc)
    return elapsed


def cpu_tier(
    cores: int,
    benchmark_ms: Optional[float] = None,
    slow_ms: float = settings.CPU_BENCHMARK_SLOW_MS,
) -> PerformanceTier:
    if cores < 4:
        tier = PerformanceTier.LOW
    elif cores < 8:
        tier = PerformanceTier.MEDIUM
    else:
        tier = PerformanceTier.HIGH
    if benchmark_ms is not None and benchmark_ms > slow_ms:
        _logger.debug("CPU benchmark %.2fms above %.2fms; downgrading %s", benchmark_ms, slow_ms, tier.value)
        tier = downgrade(tier)
    return tier


def gpu_tier(probe: GpuProbe, high_texture_size: int = settings.GPU_HIGH_TEXTURE_SIZE) -> PerformanceTier:
    if not probe.webgl:
        return PerformanceTier.LOW
    if probe.webgl2 and probe.max_texture_size >= high_texture_size:
        return PerformanceTier.HIGH
    return PerformanceTier.MEDIUM


def memory_tier(device_memory_gb: Optional[float]) -> PerformanceTier:
    if device_memory_gb is None:
        return PerformanceTier.MEDIUM
    if device_memory_gb < 4:
        return PerformanceTier.LOW
    if device_memory_gb < 8:
        return PerformanceTier.MEDIUM
    return PerformanceTier.HIGH


def conservative_defaults() -> DeviceCapabilities:
    """Capabilities reported when no client is available."""
    return DeviceCapabilities(
        cpu=CpuInfo(cores=DEFAULT_CORES, performance_tier=PerformanceTier.MEDIUM),
        gpu=GpuInfo(
            webgl_supported=False,
            webgl2_supported=False,
            performance_tier=PerformanceTier.MEDIUM,
        ),
        memory=MemoryInfo(device_memory_gb=None, performance_tier=PerformanceTier.MEDIUM),
        display=DisplayInfo(),
        features=FeatureSupport(),
        preferences=UserPreferences(),
        overall=OverallPerformance(performance_tier=PerformanceTier.MEDIUM),
        network=None,
    )


class CapabilityDetector:
    """Builds :class:`DeviceCapabilities` from a provider.

    The detector itself keeps no state; memoization lives in
    :class:`perfgov.devices.lifecycle.CapabilityLifecycle`.
    """

    def __init__(
        self,
        provider: CapabilityProvider,
        *,
        benchmark_slow_ms: float = settings.CPU_BENCHMARK_SLOW_MS,
        gpu_high_texture_size: int = settings.GPU_HIGH_TEXTURE_SIZE,
    ) -> None:
        self.provider = provider
        self.benchmark_slow_ms = benchmark_slow_ms
        self.gpu_high_texture_size = gpu_high_texture_size

    def _probe(self, name: str, fn: Callable[[], T], default: T) -> T:
        try:
            return fn()
        except Exception as exc:
            _logger.warning("Capability probe %s failed (%s); treating as unknown", name, exc)
            return default

    def detect(self) -> DeviceCapabilities:
        p = self.provider
        if not p.is_client:
            _logger.debug("No client available; using conservative capability defaults")
            return conservative_defaults()

        cores = self._probe("cpu.cores", p.cpu_cores, None) or DEFAULT_CORES
        benchmark_ms = self._probe("cpu.benchmark", p.cpu_benchmark_ms, None)
        cpu = CpuInfo(
            cores=cores,
            performance_tier=cpu_tier(cores, benchmark_ms, self.benchmark_slow_ms),
            architecture=self._probe("cpu.architecture", p.cpu_architecture, "unknown"),
            benchmark_ms=benchmark_ms,
        )

        probe = self._probe("gpu", p.gpu, GpuProbe())
        gpu = GpuInfo(
            webgl_supported=probe.webgl,
            webgl2_supported=probe.webgl and probe.webgl2,
            performance_tier=gpu_tier(probe, self.gpu_high_texture_size),
            max_texture_size=probe.max_texture_size,
            vendor=probe.vendor,
            renderer=probe.renderer,
        )

        memory_gb = self._probe("memory", p.device_memory_gb, None)
        memory = MemoryInfo(device_memory_gb=memory_gb, performance_tier=memory_tier(memory_gb))

        preferences = self._probe("preferences", p.preferences, UserPreferences())
        overall = min_tier(cpu.performance_tier, gpu.performance_tier, memory.performance_tier)
        if preferences.reduced_motion:
            overall = PerformanceTier.LOW

        caps = DeviceCapabilities(
            cpu=cpu,
            gpu=gpu,
            memory=memory,
            display=self._probe("display", p.display, DisplayInfo()),
            features=self._probe("features", p.features, FeatureSupport()),
            preferences=preferences,
            overall=OverallPerformance(performance_tier=overall),
            network=self._probe("network", p.network, None),
        )
        _logger.info(
            "Detected device tiers cpu=%s gpu=%s memory=%s overall=%s",
            cpu.performance_tier.value,
            gpu.performance_tier.value,
            memory.performance_tier.value,
            overall.value,
        )
        return caps
