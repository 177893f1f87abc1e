import os

import pytest

from bx.settings import ENV_PREFIX


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Every test starts from the default settings, regardless of the environment it runs in."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)
    monkeypatch.setattr('bx.settings._settings_singleton', None)
