from __future__ import annotations

import pytest

from pyreactive.config import reset_settings
from pyreactive.core.console import console
from pyreactive.core.debug import clear_traces, disable_tracing
from pyreactive.core.state import store
from pyreactive.engine import Engine

_ENV_VARS = (
    "PYREACTIVE_BACKTRACE",
    "PYREACTIVE_RERAISE",
    "PYREACTIVE_COMPONENT_PATH",
    "PYREACTIVE_HOST",
    "PYREACTIVE_PORT",
    "PYREACTIVE_TRACE",
)


@pytest.fixture(autouse=True)
def _clean_runtime(monkeypatch):
    """Every test starts with an empty store, an empty console and default settings."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    store.reset()
    console.clear()
    clear_traces()
    disable_tracing()
    yield
    store.reset()
    console.clear()
    disable_tracing()
    reset_settings()


@pytest.fixture
def engine():
    eng = Engine()
    yield eng
    eng.unmount()
