"""Progressive enhancement profile derivation.

Derives the declarative :class:`OptimizationProfile` the rendering layer uses
to decide how much visual complexity, particle work, texture/image quality and
network prefetching to enable for the current client.

Rules, in precedence order:

1. Reduced motion preference: animations disabled, complexity ``minimal`` and
   every effect flag off. Nothing below re-enables motion.
2. Overall tier:
   - high: ``full`` complexity, all effects, WebGL (when supported), 100
     particles, high textures;
   - medium: ``enhanced`` complexity, parallax + magnetic, particle effects off, WebGL
     when supported, 50 particles, medium textures;
   - low: ``basic`` complexity, no effects, no WebGL, 20 particles, low textures.
3. Constrained network (2g / slow-2g, save-data, low downlink estimate or the
   reduced-data preference): image quality low, no preloading, no prefetch,
   independent of the animation settings.

``build_profile`` is a pure, total function of its input.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from .. import settings
from .capabilities import DeviceCapabilities, PerformanceTier

__all__ = [
    "AnimationSettings",
    "RenderingSettings",
    "LoadingSettings",
    "NetworkSettings",
    "OptimizationProfile",
    "is_constrained_network",
    "build_profile",
]


@dataclass(frozen=True)
class AnimationSettings:
    enabled: bool
    complexity: str  # minimal | basic | enhanced | full
    parallax: bool
    magnetic: bool
    particles: bool
    duration_s: float
    easing: str


@dataclass(frozen=True)
class RenderingSettings:
    webgl: bool
    particle_count: int
    texture_quality: str  # low | medium | high
    shadow_quality: str  # none | low | medium | high
    antialiasing: bool


@dataclass(frozen=True)
class LoadingSettings:
    image_quality: str  # low | medium | high
    preloading: bool
    lazy_loading: bool = True
    bundle_splitting: bool = True


@dataclass(frozen=True)
class NetworkSettings:
    prefetch: bool
    compression: bool = True
    caching: bool = True


@dataclass(frozen=True)
class OptimizationProfile:
    animations: AnimationSettings
    rendering: RenderingSettings
    loading: LoadingSettings
    network: NetworkSettings

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_REDUCED_MOTION = AnimationSettings(
    enabled=False,
    complexity="minimal",
    parallax=False,
    magnetic=False,
    particles=False,
    duration_s=0.1,
    easing="linear",
)

_ANIMATIONS = {
    PerformanceTier.HIGH: AnimationSettings(
        enabled=True,
        complexity="full",
        parallax=True,
        magnetic=True,
        particles=True,
        duration_s=0.6,
        easing="cubic-bezier(0.25, 0.46, 0.45, 0.94)",
    ),
    PerformanceTier.MEDIUM: AnimationSettings(
        enabled=True,
        complexity="enhanced",
        parallax=True,
        magnetic=True,
        particles=False,
        duration_s=0.4,
        easing="ease-in-out",
    ),
    PerformanceTier.LOW: AnimationSettings(
        enabled=True,
        complexity="basic",
        parallax=False,
        magnetic=False,
        particles=False,
        duration_s=0.3,
        easing="ease-out",
    ),
}

_PARTICLES = {PerformanceTier.HIGH: 100, PerformanceTier.MEDIUM: 50, PerformanceTier.LOW: 20}
_SHADOWS = {PerformanceTier.HIGH: "high", PerformanceTier.MEDIUM: "medium", PerformanceTier.LOW: "none"}


def is_constrained_network(caps: DeviceCapabilities) -> bool:
    if caps.preferences.reduced_data:
        return True
    net = caps.network
    if net is None:
        return False
    if net.save_data or net.effective_type in settings.SLOW_EFFECTIVE_TYPES:
        return True
    return net.downlink_mbps is not None and net.downlink_mbps < settings.SLOW_DOWNLINK_MBPS


def build_profile(caps: DeviceCapabilities) -> OptimizationProfile:
    tier = caps.overall.performance_tier
    animations = _REDUCED_MOTION if caps.preferences.reduced_motion else _ANIMATIONS[tier]

    rendering = RenderingSettings(
        webgl=tier is not PerformanceTier.LOW and caps.gpu.webgl_supported,
        particle_count=_PARTICLES[tier],
        texture_quality=tier.value,
        shadow_quality=_SHADOWS[tier],
        antialiasing=tier is PerformanceTier.HIGH,
    )

    bundle_splitting = caps.memory.performance_tier is not PerformanceTier.LOW
    if is_constrained_network(caps):
        loading = LoadingSettings(
            image_quality="low", preloading=False, bundle_splitting=bundle_splitting
        )
        network = NetworkSettings(prefetch=False)
    else:
        low = tier is PerformanceTier.LOW
        image_quality = "high" if caps.memory.performance_tier is PerformanceTier.HIGH else "medium"
        loading = LoadingSettings(
            image_quality="low" if low else image_quality,
            preloading=not low,
            bundle_splitting=bundle_splitting,
        )
        network = NetworkSettings(prefetch=not low)

    return OptimizationProfile(
        animations=animations,
        rendering=rendering,
        loading=loading,
        network=network,
    )
