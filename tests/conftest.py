# Shared test setup: headless Qt platform and isolated preference state.

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(autouse=True)
def _isolated_preferences(monkeypatch):
    from perfgov.devices import preferences

    for var in preferences.ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("PERFGOV_ENV", raising=False)
    preferences.reload_from_environment()
    yield
    preferences.reload_from_environment()
