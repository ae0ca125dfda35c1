"""Desktop client capability provider (PyQt6 + psutil).

Probes the running Qt application for the signals a browser would expose:

- cores and physical memory via psutil;
- CPU architecture via ``QSysInfo``;
- 3D contexts via an offscreen ``QOpenGLContext`` (an OpenGL 3.0+ / GLES 3.0+
  context counts as next generation, 4.3+ / GLES 3.1+ as compute capable);
- primary screen geometry, device pixel ratio and depth via ``QScreen``;
- color scheme via ``QStyleHints`` (Qt 6.5+), the remaining preferences via
  :mod:`perfgov.devices.preferences`;
- metered / transport information via ``QNetworkInformation`` when a backend
  is available.

A QGuiApplication must exist before probing; :func:`select_provider` falls
back to the headless provider otherwise.
"""

from __future__ import annotations

import logging
from typing import Optional

import psutil
from PyQt6.QtCore import QSysInfo, Qt
from PyQt6.QtGui import QGuiApplication, QOffscreenSurface, QOpenGLContext
from PyQt6.QtNetwork import QNetworkInformation
from PyQt6.QtOpenGL import QOpenGLVersionFunctionsFactory, QOpenGLVersionProfile

from .. import settings
from . import preferences as prefs
from .capabilities import DisplayInfo, FeatureSupport, NetworkInfo, UserPreferences
from .detector import run_cpu_benchmark
from .providers import CapabilityProvider, GpuProbe, HeadlessCapabilityProvider

__all__ = ["QtCapabilityProvider", "select_provider"]

_logger = logging.getLogger(__name__)

GL_VENDOR = 0x1F00
GL_RENDERER = 0x1F01
GL_MAX_TEXTURE_SIZE = 0x0D33


def _texture_and_strings(ctx: QOpenGLContext) -> tuple[int, str, str]:
    profile = QOpenGLVersionProfile()
    profile.setVersion(2, 0)
    funcs = QOpenGLVersionFunctionsFactory.get(profile, ctx)
    if funcs is None:
        return 0, "unknown", "unknown"
    funcs.initializeOpenGLFunctions()
    raw = funcs.glGetIntegerv(GL_MAX_TEXTURE_SIZE)
    size = int(raw[0] if isinstance(raw, (tuple, list)) else raw)
    vendor = funcs.glGetString(GL_VENDOR) or "unknown"
    renderer = funcs.glGetString(GL_RENDERER) or "unknown"
    return size, str(vendor), str(renderer)


class QtCapabilityProvider(CapabilityProvider):
    def __init__(
        self,
        app: Optional[QGuiApplication] = None,
        *,
        benchmark_iterations: int = settings.CPU_BENCHMARK_ITERATIONS,
    ) -> None:
        if app is None:
            running = QGuiApplication.instance()
            app = running if isinstance(running, QGuiApplication) else None
        self._app = app
        self._benchmark_iterations = benchmark_iterations
        self._gpu: Optional[GpuProbe] = None
        self._compute = False

    @property
    def is_client(self) -> bool:  # type: ignore[override]
        return self._app is not None

    def cpu_cores(self) -> Optional[int]:
        return psutil.cpu_count(logical=True)

    def cpu_architecture(self) -> str:
        return QSysInfo.currentCpuArchitecture() or "unknown"

    def cpu_benchmark_ms(self) -> Optional[float]:
        return run_cpu_benchmark(self._benchmark_iterations)

    def gpu(self) -> GpuProbe:
        if self._gpu is None:
            self._gpu = self._probe_gpu()
        return self._gpu

    def _probe_gpu(self) -> GpuProbe:
        surface = QOffscreenSurface()
        surface.create()
        ctx = QOpenGLContext()
        try:
            if not ctx.create():
                return GpuProbe()
            fmt = ctx.format()
            version = (fmt.majorVersion(), fmt.minorVersion())
            gles = ctx.isOpenGLES()
            next_gen = version >= (3, 0)
            self._compute = version >= ((3, 1) if gles else (4, 3))
            size, vendor, renderer = 0, "unknown", "unknown"
            if ctx.makeCurrent(surface):
                try:
                    size, vendor, renderer = _texture_and_strings(ctx)
                except Exception as exc:
                    _logger.debug("OpenGL parameter query failed: %s", exc)
                finally:
                    ctx.doneCurrent()
            return GpuProbe(
                webgl=True,
                webgl2=next_gen,
                max_texture_size=size,
                vendor=vendor,
                renderer=renderer,
            )
        finally:
            surface.destroy()

    def device_memory_gb(self) -> Optional[float]:
        total = psutil.virtual_memory().total
        return round(total / (1024 ** 3), 1)

    def display(self) -> DisplayInfo:
        screen = self._app.primaryScreen() if self._app else None
        if screen is None:
            return DisplayInfo()
        geo = screen.geometry()
        return DisplayInfo(
            width=geo.width(),
            height=geo.height(),
            pixel_ratio=float(screen.devicePixelRatio()),
            color_depth=screen.depth(),
        )

    def features(self) -> FeatureSupport:
        probe = self.gpu()
        # QSS dynamic properties, QGridLayout and QBoxLayout are always present
        return FeatureSupport(
            webgl=probe.webgl,
            webgl2=probe.webgl2,
            webassembly=self._compute,
            css_custom_properties=True,
            css_grid=True,
            css_flexbox=True,
        )

    def preferences(self) -> UserPreferences:
        dark: Optional[bool] = None
        if self._app is not None:
            scheme = QGuiApplication.styleHints().colorScheme()
            if scheme != Qt.ColorScheme.Unknown:
                dark = scheme == Qt.ColorScheme.Dark
        return prefs.current_preferences(dark_mode=dark)

    def network(self) -> Optional[NetworkInfo]:
        if not QNetworkInformation.loadDefaultBackend():
            return None
        info = QNetworkInformation.instance()
        if info is None:
            return None
        medium = info.transportMedium()
        if medium == QNetworkInformation.TransportMedium.Cellular:
            effective = "3g"
        elif medium in (
            QNetworkInformation.TransportMedium.Ethernet,
            QNetworkInformation.TransportMedium.WiFi,
        ):
            effective = "4g"
        else:
            effective = "unknown"
        return NetworkInfo(effective_type=effective, save_data=bool(info.isMetered()))


def select_provider() -> CapabilityProvider:
    """Qt provider when a QGuiApplication is running, headless otherwise."""
    if not isinstance(QGuiApplication.instance(), QGuiApplication):
        return HeadlessCapabilityProvider()
    return QtCapabilityProvider()
