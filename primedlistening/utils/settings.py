# primedlistening/utils/settings.py
import os
import re
from pathlib import Path

from primedlistening.utils.error_handling import ErrorRecovery, RetryConfig, with_retry
from primedlistening.utils.style_filter import Blacklist

PPC_STEP = 0.01
CONF_NAME = "primed_listening.conf"
CONF_ENV = "PRIMED_LISTENING_CONF"

DEFAULTS = {
    "pause_per_char": 0.06,              # seconds paused per character
    "min_pause": 0.50,                   # never pause for less than this
    "min_chars": 2,                      # ignore subs shorter than this
    "min_ppc": 0.01,                     # floor for pause_per_char
    "subtitle_delay_adjustment": -0.15,  # shift subs earlier so the pause lands before the audio
    "style_blacklist": "sign,fx,song,title,op*,ed*",
}

_LINE = re.compile(r"^\s*([A-Za-z0-9_]+)\s*=\s*(.*?)\s*$")


class PrimedSettings:
    def __init__(
        self,
        pause_per_char=DEFAULTS["pause_per_char"],
        min_pause=DEFAULTS["min_pause"],
        min_chars=DEFAULTS["min_chars"],
        min_ppc=DEFAULTS["min_ppc"],
        subtitle_delay_adjustment=DEFAULTS["subtitle_delay_adjustment"],
        style_blacklist=DEFAULTS["style_blacklist"],
    ):
        self.pause_per_char = pause_per_char
        self.min_pause = min_pause
        self.min_chars = min_chars
        self.min_ppc = min_ppc
        self.subtitle_delay_adjustment = subtitle_delay_adjustment
        if not isinstance(style_blacklist, Blacklist):
            style_blacklist = Blacklist.from_string(style_blacklist)
        self.style_blacklist = style_blacklist

    def adjust_pause_per_char(self, delta, log_callback=None):
        """Shift pause_per_char by delta, never below min_ppc. Returns the new value."""
        value = round(self.pause_per_char + delta, 4)
        self.pause_per_char = ErrorRecovery.clamp(value, self.min_ppc, log_callback, "pause_per_char")
        return self.pause_per_char

    def to_dict(self):
        values = {key: getattr(self, key) for key in DEFAULTS}
        values["style_blacklist"] = self.style_blacklist.to_string()
        return values

    @classmethod
    def from_dict(cls, values, log_callback=None):
        kwargs = {}
        for key, default in DEFAULTS.items():
            if key not in values:
                continue
            raw = values[key]
            kwargs[key] = ErrorRecovery.recover_setting_value(key, str(raw), default, log_callback)
        settings = cls(**kwargs)
        if settings.pause_per_char < settings.min_ppc:
            settings.pause_per_char = settings.min_ppc
        return settings

    def __eq__(self, other):
        if not isinstance(other, PrimedSettings):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"PrimedSettings({self.to_dict()!r})"


class SettingsStore:
    """
    Reads and writes PrimedSettings as a key=value file.

    Every load rewrites the file so keys added in later versions show up with
    their defaults. Write failures are logged and never raised.
    """

    def __init__(self, path=None, log_callback=print, retry_config=None):
        self.path = Path(path) if path else self.default_path()
        self.log_callback = log_callback
        self.retry_config = retry_config or RetryConfig()

    @staticmethod
    def default_path() -> Path:
        override = os.getenv(CONF_ENV)
        if override:
            return Path(override).expanduser()
        return Path.home() / ".config" / "primed_listening" / CONF_NAME

    def read_values(self):
        values = {}
        with open(self.path, "r", encoding="utf-8") as f:
            for line in f:
                if line.lstrip().startswith("#"):
                    continue
                m = _LINE.match(line)
                if m:
                    values[m.group(1)] = m.group(2)
        return values

    def load(self) -> PrimedSettings:
        values = {}
        if self.path.exists():
            try:
                values = self.read_values()
            except (OSError, UnicodeDecodeError) as e:
                self.log_callback(f"[Settings][WARN] Cannot read {self.path}: {e}. Using defaults")

        unknown = sorted(set(values) - set(DEFAULTS))
        if unknown:
            self.log_callback(f"[Settings] Ignoring unknown keys: {', '.join(unknown)}")

        settings = PrimedSettings.from_dict(values, self.log_callback)
        self.log_callback(f"[Settings] Loaded {self.path}")
        self.save(settings)
        return settings

    def render(self, settings: PrimedSettings) -> str:
        lines = [
            "# primed_listening.conf - Auto-generated settings file",
            "# Edit values as needed. New settings will be added automatically.",
            "",
        ]
        values = settings.to_dict()
        for key in sorted(values):
            value = values[key]
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                lines.append(f"{key}={value:.4f}")
            else:
                lines.append(f"{key}={value}")
        return "\n".join(lines) + "\n"

    def save(self, settings: PrimedSettings) -> bool:
        @with_retry(self.retry_config, exceptions=(OSError,), log_callback=self.log_callback)
        def write(text):
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(text)

        try:
            write(self.render(settings))
        except OSError as e:
            self.log_callback(f"[Settings][WARN] Cannot write options file {self.path}: {e}")
            return False
        return True
