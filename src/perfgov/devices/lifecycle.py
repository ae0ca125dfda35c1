"""Write-once cache for detected capabilities and the derived profile.

A :class:`CapabilityLifecycle` owns both cached values. The first call to
:meth:`capabilities` / :meth:`profile` computes them; later calls return the
identical objects until :meth:`reset` clears both. The composition root
creates one lifecycle and hands it to consumers; tests create their own (or
call ``reset``) for isolation.

Initialization is guarded by a lock so concurrent first calls from worker
threads do not run detection twice.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Optional

from .capabilities import DeviceCapabilities
from .detector import CapabilityDetector
from .progressive_enhancement import OptimizationProfile, build_profile
from .providers import CapabilityProvider

__all__ = ["CapabilityLifecycle"]

_logger = logging.getLogger(__name__)


class CapabilityLifecycle:
    def __init__(self, provider: CapabilityProvider, *, detector: Optional[CapabilityDetector] = None) -> None:
        self._detector = detector or CapabilityDetector(provider)
        self._lock = Lock()
        self._capabilities: Optional[DeviceCapabilities] = None
        self._profile: Optional[OptimizationProfile] = None

    @property
    def provider(self) -> CapabilityProvider:
        return self._detector.provider

    def capabilities(self) -> DeviceCapabilities:
        caps = self._capabilities
        if caps is not None:
            return caps
        with self._lock:
            if self._capabilities is None:
                self._capabilities = self._detector.detect()
            return self._capabilities

    def profile(self) -> OptimizationProfile:
        prof = self._profile
        if prof is not None:
            return prof
        with self._lock:
            if self._capabilities is None:
                self._capabilities = self._detector.detect()
            if self._profile is None:
                self._profile = build_profile(self._capabilities)
            return self._profile

    def is_cached(self) -> bool:
        return self._capabilities is not None

    def reset(self) -> None:
        """Drop both cached values; the next access re-detects."""
        with self._lock:
            self._capabilities = None
            self._profile = None
        _logger.debug("Capability cache reset")
