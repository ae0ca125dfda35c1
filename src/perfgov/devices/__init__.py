"""Device capability detection and adaptive optimization profiles.

The PyQt6 desktop provider lives in :mod:`perfgov.devices.qt_provider` and is
imported explicitly by desktop hosts.
"""

from .capabilities import (  # noqa: F401
    PerformanceTier,
    DeviceCapabilities,
    CpuInfo,
    GpuInfo,
    MemoryInfo,
    DisplayInfo,
    FeatureSupport,
    UserPreferences,
    NetworkInfo,
    OverallPerformance,
)
from .providers import (  # noqa: F401
    CapabilityProvider,
    ClientSignalsProvider,
    HeadlessCapabilityProvider,
    GpuProbe,
)
from .detector import CapabilityDetector, conservative_defaults, run_cpu_benchmark  # noqa: F401
from .progressive_enhancement import (  # noqa: F401
    OptimizationProfile,
    AnimationSettings,
    RenderingSettings,
    LoadingSettings,
    NetworkSettings,
    build_profile,
    is_constrained_network,
)
from .lifecycle import CapabilityLifecycle  # noqa: F401
