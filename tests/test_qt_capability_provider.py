"""Smoke tests for the PyQt6 desktop provider (offscreen platform)."""

import pytest

pytest.importorskip("PyQt6")

from PyQt6.QtGui import QGuiApplication  # noqa: E402

from perfgov.devices import CapabilityDetector, GpuProbe, PerformanceTier  # noqa: E402
from perfgov.devices import preferences as prefs  # noqa: E402
from perfgov.devices import qt_provider  # noqa: E402
from perfgov.devices.qt_provider import QtCapabilityProvider, select_provider  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication([])
    return app


def _provider(qapp):
    provider = QtCapabilityProvider(qapp, benchmark_iterations=1000)
    # avoid driver and network backend dependent probes
    provider._gpu = GpuProbe(webgl=True, webgl2=True, max_texture_size=16384)
    provider.network = lambda: None
    return provider


def test_select_provider_uses_running_app(qapp):
    provider = select_provider()
    assert isinstance(provider, QtCapabilityProvider)
    assert provider.is_client


def test_host_signals_have_sane_types(qapp):
    provider = _provider(qapp)
    cores = provider.cpu_cores()
    assert cores is None or cores >= 1
    memory = provider.device_memory_gb()
    assert memory > 0
    assert isinstance(provider.cpu_architecture(), str)
    assert provider.cpu_benchmark_ms() >= 0
    display = provider.display()
    assert display.width > 0 and display.height > 0
    assert provider.features().css_grid is True


def test_preferences_come_from_preference_state(qapp):
    provider = _provider(qapp)
    with prefs.temporarily_preferences(reduced_motion=True, high_contrast=True):
        p = provider.preferences()
    assert p.reduced_motion is True
    assert p.high_contrast is True


def test_detector_runs_against_qt_provider(qapp):
    caps = CapabilityDetector(_provider(qapp)).detect()
    assert caps.gpu.performance_tier is PerformanceTier.HIGH
    assert caps.overall.performance_tier in set(PerformanceTier)
    assert caps.network is None


def test_gpu_probe_runs_offscreen(qapp):
    provider = QtCapabilityProvider(qapp, benchmark_iterations=1000)
    probe = provider._probe_gpu()
    if probe == GpuProbe():
        return  # no OpenGL on this platform
    assert probe.webgl is True
    assert probe.max_texture_size >= 0
    assert isinstance(probe.vendor, str) and isinstance(probe.renderer, str)
    if probe.webgl2:
        assert probe.webgl


class _FakeInfo:
    def __init__(self, medium, metered):
        self._medium = medium
        self._metered = metered

    def transportMedium(self):
        return self._medium

    def isMetered(self):
        return self._metered


def _fake_network_information(info, loaded=True):
    class _FakeNetworkInformation:
        TransportMedium = qt_provider.QNetworkInformation.TransportMedium

        @staticmethod
        def loadDefaultBackend():
            return loaded

        @staticmethod
        def instance():
            return info

    return _FakeNetworkInformation


@pytest.mark.parametrize(
    "medium,metered,effective",
    [
        ("Cellular", True, "3g"),
        ("WiFi", False, "4g"),
        ("Ethernet", True, "4g"),
        ("Unknown", False, "unknown"),
    ],
)
def test_network_transport_mapping(qapp, monkeypatch, medium, metered, effective):
    transport = getattr(qt_provider.QNetworkInformation.TransportMedium, medium)
    monkeypatch.setattr(
        qt_provider, "QNetworkInformation", _fake_network_information(_FakeInfo(transport, metered))
    )
    net = QtCapabilityProvider(qapp).network()
    assert net.effective_type == effective
    assert net.save_data is metered
    assert net.downlink_mbps is None


def test_network_without_backend_is_unknown(qapp, monkeypatch):
    monkeypatch.setattr(qt_provider, "QNetworkInformation", _fake_network_information(None, loaded=False))
    assert QtCapabilityProvider(qapp).network() is None
    monkeypatch.setattr(qt_provider, "QNetworkInformation", _fake_network_information(None))
    assert QtCapabilityProvider(qapp).network() is None


class _FakeGlFunctions:
    def initializeOpenGLFunctions(self):
        return True

    def glGetIntegerv(self, pname):
        assert pname == qt_provider.GL_MAX_TEXTURE_SIZE
        return (16384,)

    def glGetString(self, name):
        return {qt_provider.GL_VENDOR: "ACME", qt_provider.GL_RENDERER: "Rocket 9000"}[name]


def test_texture_and_strings_reads_gl_parameters(qapp, monkeypatch):
    class _Factory:
        funcs = _FakeGlFunctions()

        @classmethod
        def get(cls, profile, ctx):
            return cls.funcs

    monkeypatch.setattr(qt_provider, "QOpenGLVersionFunctionsFactory", _Factory)
    assert qt_provider._texture_and_strings(None) == (16384, "ACME", "Rocket 9000")
    _Factory.funcs = None
    assert qt_provider._texture_and_strings(None) == (0, "unknown", "unknown")
