"""Device capability / optimization profile inspector.

Detects capabilities from one of three sources and prints them together with
the derived optimization profile:

 - ``--signals FILE``: client signals reported by a browser (JSON);
 - ``--desktop``: the local machine through a headless Qt application;
 - neither: the server-side defaults.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from perfgov.devices import (
    CapabilityLifecycle,
    CapabilityProvider,
    ClientSignalsProvider,
    HeadlessCapabilityProvider,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Detect device capabilities and derive a rendering profile")
    source = p.add_mutually_exclusive_group()
    source.add_argument("--signals", help="JSON file with client-reported capability signals")
    source.add_argument("--desktop", action="store_true", help="Probe this machine through Qt")
    p.add_argument("--json", action="store_true", help="Emit JSON instead of human-readable text")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


_qt_app = None  # keeps the probing QGuiApplication alive


def _desktop_provider() -> CapabilityProvider:
    global _qt_app
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PyQt6.QtGui import QGuiApplication

    from perfgov.devices.qt_provider import select_provider

    if QGuiApplication.instance() is None:
        _qt_app = QGuiApplication(sys.argv[:1])
    return select_provider()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    provider: CapabilityProvider
    if args.signals:
        try:
            signals = json.loads(Path(args.signals).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            print(f"Unable to read signals: {exc}", file=sys.stderr)
            return 2
        provider = ClientSignalsProvider(signals)
    elif args.desktop:
        provider = _desktop_provider()
    else:
        provider = HeadlessCapabilityProvider()

    lifecycle = CapabilityLifecycle(provider)
    caps = lifecycle.capabilities()
    profile = lifecycle.profile()

    if args.json:
        payload = {"capabilities": caps.to_dict(), "profile": profile.to_dict()}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print("Device capabilities:")
    print(f"  CPU: {caps.cpu.cores} cores ({caps.cpu.performance_tier.value})")
    print(
        f"  GPU: webgl={caps.gpu.webgl_supported} webgl2={caps.gpu.webgl2_supported} "
        f"({caps.gpu.performance_tier.value})"
    )
    memory = "unknown" if caps.memory.device_memory_gb is None else f"{caps.memory.device_memory_gb:g} GB"
    print(f"  Memory: {memory} ({caps.memory.performance_tier.value})")
    d = caps.display
    print(f"  Display: {d.width}x{d.height} @{d.pixel_ratio:g}x, {d.color_depth}-bit")
    if caps.network is not None:
        print(f"  Network: {caps.network.effective_type} save_data={caps.network.save_data}")
    print(f"  Overall: {caps.overall.performance_tier.value}")
    a = profile.animations
    print("Optimization profile:")
    print(f"  Animations: enabled={a.enabled} complexity={a.complexity}")
    print(
        f"  Rendering: webgl={profile.rendering.webgl} particles={profile.rendering.particle_count} "
        f"textures={profile.rendering.texture_quality}"
    )
    print(
        f"  Loading: images={profile.loading.image_quality} preloading={profile.loading.preloading} "
        f"prefetch={profile.network.prefetch}"
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
