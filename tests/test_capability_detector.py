import pytest

from factories import FakeProvider
from perfgov.devices import (
    CapabilityDetector,
    GpuProbe,
    HeadlessCapabilityProvider,
    PerformanceTier,
    UserPreferences,
    conservative_defaults,
    run_cpu_benchmark,
)
from perfgov.devices.detector import cpu_tier, gpu_tier, memory_tier

LOW, MEDIUM, HIGH = PerformanceTier.LOW, PerformanceTier.MEDIUM, PerformanceTier.HIGH


@pytest.mark.parametrize("cores,tier", [(1, LOW), (3, LOW), (4, MEDIUM), (7, MEDIUM), (8, HIGH), (64, HIGH)])
def test_cpu_tier_by_cores(cores, tier):
    assert cpu_tier(cores) is tier


def test_slow_benchmark_downgrades_one_step():
    assert cpu_tier(8, benchmark_ms=10, slow_ms=50) is HIGH
    assert cpu_tier(8, benchmark_ms=80, slow_ms=50) is MEDIUM
    assert cpu_tier(4, benchmark_ms=80, slow_ms=50) is LOW
    assert cpu_tier(2, benchmark_ms=80, slow_ms=50) is LOW


def test_gpu_tier():
    assert gpu_tier(GpuProbe()) is LOW
    assert gpu_tier(GpuProbe(webgl=True)) is MEDIUM
    assert gpu_tier(GpuProbe(webgl=True, webgl2=True, max_texture_size=4096)) is MEDIUM
    assert gpu_tier(GpuProbe(webgl=True, webgl2=True, max_texture_size=8192)) is HIGH


@pytest.mark.parametrize("gb,tier", [(None, MEDIUM), (0.5, LOW), (2, LOW), (4, MEDIUM), (6, MEDIUM), (8, HIGH)])
def test_memory_tier(gb, tier):
    assert memory_tier(gb) is tier


def test_run_cpu_benchmark_uses_clock():
    ticks = iter([1.0, 1.25])
    assert run_cpu_benchmark(10, clock=lambda: next(ticks)) == pytest.approx(250.0)


def test_strong_device_is_high_tier():
    caps = CapabilityDetector(FakeProvider()).detect()
    assert caps.cpu.performance_tier is HIGH
    assert caps.gpu.performance_tier is HIGH
    assert caps.memory.performance_tier is HIGH
    assert caps.overall.performance_tier is HIGH
    assert caps.cpu.cores == 8
    assert caps.display.pixel_ratio == 2.0


def test_overall_is_weakest_dimension():
    caps = CapabilityDetector(FakeProvider(memory_gb=2)).detect()
    assert caps.overall.performance_tier is LOW
    caps = CapabilityDetector(FakeProvider(gpu=GpuProbe(webgl=True))).detect()
    assert caps.overall.performance_tier is MEDIUM


def test_reduced_motion_forces_low_overall():
    provider = FakeProvider(preferences=UserPreferences(reduced_motion=True))
    caps = CapabilityDetector(provider).detect()
    assert caps.cpu.performance_tier is HIGH
    assert caps.overall.performance_tier is LOW


def test_unknown_cores_count_as_four():
    caps = CapabilityDetector(FakeProvider(cores=None)).detect()
    assert caps.cpu.cores == 4
    assert caps.cpu.performance_tier is MEDIUM


def test_detector_threshold_is_configurable():
    provider = FakeProvider(benchmark_ms=30)
    assert CapabilityDetector(provider).detect().cpu.performance_tier is HIGH
    strict = CapabilityDetector(provider, benchmark_slow_ms=20)
    assert strict.detect().cpu.performance_tier is MEDIUM


def test_headless_provider_yields_conservative_defaults():
    caps = CapabilityDetector(HeadlessCapabilityProvider()).detect()
    assert caps == conservative_defaults()
    assert caps.cpu.cores == 4
    assert caps.gpu.webgl_supported is False
    assert caps.overall.performance_tier is MEDIUM
    assert caps.network is None


class _BrokenGpu(FakeProvider):
    def gpu(self):
        raise RuntimeError("context lost")


def test_probe_failure_is_treated_as_unknown(caplog):
    caps = CapabilityDetector(_BrokenGpu()).detect()
    assert caps.gpu.webgl_supported is False
    assert caps.gpu.performance_tier is LOW
    assert "gpu" in caplog.text


def test_to_dict_uses_plain_values():
    payload = CapabilityDetector(FakeProvider()).detect().to_dict()
    assert payload["overall"]["performance_tier"] == "high"
    assert payload["cpu"]["cores"] == 8
    assert payload["network"] is None
