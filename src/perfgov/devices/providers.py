"""Capability providers.

A provider supplies the raw signals the detector tiers. One implementation
exists per host kind and is chosen by the caller:

- :class:`ClientSignalsProvider` wraps signals reported by a browser-like
  client (``navigator.hardwareConcurrency``, ``deviceMemory``, WebGL probes,
  media queries, ``navigator.connection``) as a mapping.
- :class:`HeadlessCapabilityProvider` represents a server / build context
  with no client at all; the detector answers with conservative defaults.
- ``perfgov.devices.qt_provider.QtCapabilityProvider`` probes a desktop
  client through PyQt6 and psutil.

Missing signals are returned as ``None`` (or ``False`` for booleans) and are
never an error.
"""

from __future__ import annotations

import logging
import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .capabilities import DisplayInfo, FeatureSupport, NetworkInfo, UserPreferences

__all__ = [
    "GpuProbe",
    "CapabilityProvider",
    "HeadlessCapabilityProvider",
    "ClientSignalsProvider",
]

_logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class GpuProbe:
    """Result of probing for 3D rendering contexts."""

    webgl: bool = False
    webgl2: bool = False
    max_texture_size: int = 0
    vendor: str = "unknown"
    renderer: str = "unknown"


class CapabilityProvider(ABC):
    """Source of raw device signals."""

    #: False for hosts without a client (server-side rendering, CI tooling)
    is_client: bool = True

    @abstractmethod
    def cpu_cores(self) -> Optional[int]: ...

    def cpu_architecture(self) -> str:
        return "unknown"

    @abstractmethod
    def cpu_benchmark_ms(self) -> Optional[float]:
        """Duration of the CPU micro-benchmark, or None when not measured."""

    @abstractmethod
    def gpu(self) -> GpuProbe: ...

    @abstractmethod
    def device_memory_gb(self) -> Optional[float]: ...

    @abstractmethod
    def display(self) -> DisplayInfo: ...

    @abstractmethod
    def features(self) -> FeatureSupport: ...

    @abstractmethod
    def preferences(self) -> UserPreferences: ...

    def network(self) -> Optional[NetworkInfo]:
        """Connection information when the host exposes it."""
        return None


class HeadlessCapabilityProvider(CapabilityProvider):
    is_client = False

    def cpu_cores(self) -> Optional[int]:
        return None

    def cpu_benchmark_ms(self) -> Optional[float]:
        return None

    def gpu(self) -> GpuProbe:
        return GpuProbe()

    def device_memory_gb(self) -> Optional[float]:
        return None

    def display(self) -> DisplayInfo:
        return DisplayInfo()

    def features(self) -> FeatureSupport:
        return FeatureSupport()

    def preferences(self) -> UserPreferences:
        return UserPreferences()


# --- client signal coercion -------------------------------------------------


def _normalize(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        return {}
    return {_CAMEL_BOUNDARY.sub("_", str(k)).lower(): v for k, v in data.items()}


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        _logger.debug("Ignoring non-numeric client signal %r", value)
        return None
    if not math.isfinite(number):
        _logger.debug("Ignoring non-finite client signal %r", value)
        return None
    return number


def _coerce_int(value: Any) -> Optional[int]:
    number = _coerce_float(value)
    return None if number is None else int(number)


def _is_truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y"}
    return False


class ClientSignalsProvider(CapabilityProvider):
    """Provider backed by signals reported by a browser-like client.

    Expected shape (camelCase or snake_case keys)::

        {
          "hardwareConcurrency": 8, "architecture": "x64", "benchmarkMs": 12.5,
          "deviceMemory": 8,
          "gpu": {"webgl": true, "webgl2": true, "maxTextureSize": 16384,
                  "vendor": "...", "renderer": "..."},
          "display": {"width": 1440, "height": 900, "pixelRatio": 2, "colorDepth": 30},
          "features": {"webassembly": true, "cssCustomProperties": true,
                       "cssGrid": true, "cssFlexbox": true},
          "preferences": {"reducedMotion": false, "reducedData": false,
                          "highContrast": false, "darkMode": true},
          "connection": {"effectiveType": "4g", "saveData": false,
                         "downlink": 10, "rtt": 50}
        }
    """

    def __init__(self, signals: Mapping[str, Any]) -> None:
        self._signals = _normalize(signals)

    def _section(self, key: str) -> Mapping[str, Any]:
        return _normalize(self._signals.get(key))

    def cpu_cores(self) -> Optional[int]:
        return _coerce_int(self._signals.get("hardware_concurrency"))

    def cpu_architecture(self) -> str:
        arch = self._signals.get("architecture")
        return str(arch) if arch else "unknown"

    def cpu_benchmark_ms(self) -> Optional[float]:
        return _coerce_float(self._signals.get("benchmark_ms"))

    def gpu(self) -> GpuProbe:
        raw = self._section("gpu")
        webgl = _is_truthy(raw.get("webgl"))
        return GpuProbe(
            webgl=webgl,
            webgl2=webgl and _is_truthy(raw.get("webgl2")),
            max_texture_size=_coerce_int(raw.get("max_texture_size")) or 0,
            vendor=str(raw.get("vendor") or "unknown"),
            renderer=str(raw.get("renderer") or "unknown"),
        )

    def device_memory_gb(self) -> Optional[float]:
        return _coerce_float(self._signals.get("device_memory"))

    def display(self) -> DisplayInfo:
        raw = self._section("display")
        default = DisplayInfo()
        return DisplayInfo(
            width=_coerce_int(raw.get("width")) or default.width,
            height=_coerce_int(raw.get("height")) or default.height,
            pixel_ratio=_coerce_float(raw.get("pixel_ratio")) or default.pixel_ratio,
            color_depth=_coerce_int(raw.get("color_depth")) or default.color_depth,
        )

    def features(self) -> FeatureSupport:
        raw = self._section("features")
        probe = self.gpu()
        return FeatureSupport(
            webgl=_is_truthy(raw.get("webgl", probe.webgl)),
            webgl2=_is_truthy(raw.get("webgl2", probe.webgl2)),
            webassembly=_is_truthy(raw.get("webassembly")),
            css_custom_properties=_is_truthy(raw.get("css_custom_properties")),
            css_grid=_is_truthy(raw.get("css_grid")),
            css_flexbox=_is_truthy(raw.get("css_flexbox")),
        )

    def preferences(self) -> UserPreferences:
        raw = self._section("preferences")
        return UserPreferences(
            reduced_motion=_is_truthy(raw.get("reduced_motion")),
            reduced_data=_is_truthy(raw.get("reduced_data")),
            high_contrast=_is_truthy(raw.get("high_contrast")),
            dark_mode=_is_truthy(raw.get("dark_mode")),
        )

    def network(self) -> Optional[NetworkInfo]:
        if "connection" not in self._signals:
            return None
        raw = self._section("connection")
        effective = raw.get("effective_type")
        return NetworkInfo(
            effective_type=str(effective).lower() if effective else "unknown",
            save_data=_is_truthy(raw.get("save_data")),
            downlink_mbps=_coerce_float(raw.get("downlink", raw.get("downlink_mbps"))),
            rtt_ms=_coerce_float(raw.get("rtt", raw.get("rtt_ms"))),
        )
