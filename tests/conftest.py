from __future__ import annotations

import pytest

from helpers import fake_fetchers
from socials.monitor import Monitor
from socials.settings_store import SettingsManager
from socials.sinks import BufferSink


@pytest.fixture
def manager(tmp_path):
    return SettingsManager(default_file="settings.json", settings_dir=str(tmp_path))


@pytest.fixture
def sink():
    return BufferSink()


@pytest.fixture
def make_monitor(manager, sink):
    def _make(fetchers=None):
        return Monitor(manager, output=sink, status=sink, fetchers=fetchers or fake_fetchers())

    return _make
