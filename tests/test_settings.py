# tests/test_settings.py
import pytest

from primedlistening.utils.error_handling import RetryConfig
from primedlistening.utils.settings import CONF_ENV, PrimedSettings, SettingsStore
from primedlistening.utils.style_filter import Blacklist


def test_defaults():
    s = PrimedSettings()
    assert s.pause_per_char == 0.06
    assert s.min_pause == 0.50
    assert s.min_chars == 2
    assert s.min_ppc == 0.01
    assert s.subtitle_delay_adjustment == -0.15
    assert s.style_blacklist == Blacklist.from_string("sign,fx,song,title,op*,ed*")


def test_decrease_is_clamped_at_floor(capture_log):
    lines, cb = capture_log
    s = PrimedSettings(pause_per_char=0.015, min_ppc=0.01)
    assert s.adjust_pause_per_char(-0.01, cb) == 0.01
    assert any("clamped" in line for line in lines)
    assert s.adjust_pause_per_char(0.01) == pytest.approx(0.02)


def test_load_missing_file_writes_defaults(store):
    settings = store.load()
    assert settings == PrimedSettings()
    text = store.path.read_text(encoding="utf-8")
    assert text.startswith("# primed_listening.conf")
    body = [line for line in text.splitlines() if line and not line.startswith("#")]
    assert body == [
        "min_chars=2.0000",
        "min_pause=0.5000",
        "min_ppc=0.0100",
        "pause_per_char=0.0600",
        "style_blacklist=sign,fx,song,title,op*,ed*",
        "subtitle_delay_adjustment=-0.1500",
    ]


def test_load_backfills_and_ignores_unknown(store, capture_log):
    lines, _ = capture_log
    store.path.write_text(
        "# comment\n"
        "pause_per_char = 0.0800\n"
        "min_chars=3.0000\n"
        "style_blacklist=sign, karaoke\n"
        "colour=blue\n",
        encoding="utf-8",
    )
    settings = store.load()
    assert settings.pause_per_char == pytest.approx(0.08)
    assert settings.min_chars == 3
    assert isinstance(settings.min_chars, int)
    assert settings.style_blacklist.patterns == ["sign", "karaoke"]
    assert settings.min_pause == 0.50
    assert any("colour" in line for line in lines)

    text = store.path.read_text(encoding="utf-8")
    assert "min_pause=0.5000" in text
    assert "colour" not in text


def test_bad_number_falls_back_to_default(store, capture_log):
    lines, _ = capture_log
    store.path.write_text("min_pause=lots\n", encoding="utf-8")
    assert store.load().min_pause == 0.50
    assert any("Invalid value" in line for line in lines)


def test_pause_per_char_below_floor_is_raised(store):
    store.path.write_text("pause_per_char=0.0010\nmin_ppc=0.0200\n", encoding="utf-8")
    assert store.load().pause_per_char == pytest.approx(0.02)


def test_empty_blacklist_survives_reload(store):
    assert store.save(PrimedSettings(style_blacklist=""))
    assert "style_blacklist=\n" in store.path.read_text(encoding="utf-8")

    loaded = store.load()

    assert loaded.style_blacklist == Blacklist()
    assert len(loaded.style_blacklist) == 0


def test_empty_number_falls_back_to_default(store):
    store.path.write_text("min_pause=\npause_per_char=0.0800\n", encoding="utf-8")
    loaded = store.load()
    assert loaded.min_pause == 0.50
    assert loaded.pause_per_char == pytest.approx(0.08)


def test_write_failure_is_logged_not_raised(tmp_path, capture_log):
    lines, cb = capture_log
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")
    store = SettingsStore(blocker / "primed_listening.conf", log_callback=cb,
                          retry_config=RetryConfig(max_attempts=2, initial_delay=0.0))

    settings = store.load()

    assert settings == PrimedSettings()
    assert any("[Settings][WARN]" in line for line in lines)
    assert any("[Retry]" in line for line in lines)


def test_default_path_env_override(monkeypatch, tmp_path):
    monkeypatch.setenv(CONF_ENV, str(tmp_path / "custom.conf"))
    assert SettingsStore.default_path() == tmp_path / "custom.conf"
    monkeypatch.delenv(CONF_ENV)
    assert SettingsStore.default_path().name == "primed_listening.conf"
