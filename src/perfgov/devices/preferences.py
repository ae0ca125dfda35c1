"""User presentation preferences for desktop clients.

Single source of truth for the accessibility / data-saving preferences a
desktop host cannot read from a media query: reduced motion, reduced data,
high contrast and dark mode.

Patterns:
- Module level state guarded by simple setters (operations are idempotent
  and extremely fast).
- Environment variable bootstrap at import time: ``APP_PREFER_REDUCED_MOTION``,
  ``APP_PREFER_REDUCED_DATA``, ``APP_PREFER_HIGH_CONTRAST`` and
  ``APP_PREFER_DARK_MODE`` accept ``1/true/yes/on`` (case-insensitive).
- ``temporarily_preferences`` overrides values within a context and restores
  the prior state on normal exit and on exception.

Dark mode is only a fallback here; the Qt provider prefers the platform
color scheme when one is reported.
"""

from __future__ import annotations

import contextlib
import os
from typing import Dict, Iterator, Mapping, Optional

from .capabilities import UserPreferences

__all__ = [
    "ENV_VARS",
    "set_preference",
    "get_preference",
    "set_reduced_motion",
    "is_reduced_motion",
    "current_preferences",
    "reload_from_environment",
    "temporarily_preferences",
]

ENV_VARS: Mapping[str, str] = {
    "reduced_motion": "APP_PREFER_REDUCED_MOTION",
    "reduced_data": "APP_PREFER_REDUCED_DATA",
    "high_contrast": "APP_PREFER_HIGH_CONTRAST",
    "dark_mode": "APP_PREFER_DARK_MODE",
}

_TRUTHY = {"1", "true", "yes", "on"}

_state: Dict[str, bool] = {name: False for name in ENV_VARS}


def reload_from_environment() -> None:
    """Re-read every preference from its environment variable."""
    for name, var in ENV_VARS.items():
        _state[name] = os.getenv(var, "").strip().lower() in _TRUTHY


reload_from_environment()


def set_preference(name: str, enabled: bool) -> None:
    if name not in _state:
        raise KeyError(f"Unknown preference: {name}")
    _state[name] = bool(enabled)


def get_preference(name: str) -> bool:
    if name not in _state:
        raise KeyError(f"Unknown preference: {name}")
    return _state[name]


def set_reduced_motion(enabled: bool) -> None:
    set_preference("reduced_motion", enabled)


def is_reduced_motion() -> bool:
    return _state["reduced_motion"]


def current_preferences(dark_mode: Optional[bool] = None) -> UserPreferences:
    """Snapshot the preference state.

    ``dark_mode`` overrides the stored value when the host reports its own
    color scheme.
    """
    return UserPreferences(
        reduced_motion=_state["reduced_motion"],
        reduced_data=_state["reduced_data"],
        high_contrast=_state["high_contrast"],
        dark_mode=_state["dark_mode"] if dark_mode is None else bool(dark_mode),
    )


@contextlib.contextmanager
def temporarily_preferences(**overrides: bool) -> Iterator[None]:
    """Override preferences within the context, e.g. ``reduced_motion=True``."""
    for name in overrides:
        if name not in _state:
            raise KeyError(f"Unknown preference: {name}")
    prev = dict(_state)
    try:
        for name, value in overrides.items():
            _state[name] = bool(value)
        yield
    finally:
        _state.clear()
        _state.update(prev)
