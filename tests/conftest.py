# tests/conftest.py
import pytest

from primedlistening.managers.pause_controller import PauseController
from primedlistening.utils.settings import PrimedSettings, SettingsStore
from tests.fakes import FakePlayerHost


@pytest.fixture
def capture_log():
    lines = []

    def cb(msg: str):
        lines.append(msg)
    return lines, cb


@pytest.fixture
def settings():
    return PrimedSettings(pause_per_char=0.06, min_pause=0.50, min_chars=2)


@pytest.fixture
def host():
    return FakePlayerHost()


@pytest.fixture
def store(tmp_path, capture_log):
    _, cb = capture_log
    return SettingsStore(tmp_path / "primed_listening.conf", log_callback=cb)


@pytest.fixture
def controller(host, settings, store, capture_log):
    _, cb = capture_log
    return PauseController(host, settings, store=store, log_callback=cb)
