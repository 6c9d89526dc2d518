# primedlistening/managers/player_host.py
from typing import Callable, Optional

from primedlistening.utils.style_filter import SubtitleEvent

SUB_TEXT = "sub-text"
PAUSE = "pause"


class TimerHandle:
    """A pending single-shot callback. kill() must be safe to call more than once."""

    def kill(self):
        raise NotImplementedError


class PlayerHost:
    """
    Everything the pause controller needs from the media player.

    Property observers are called as handler(name, value), synchronously and
    once per change, in the order the changes happen.
    """

    platform = "linux"

    # --------------------
    # Playback state
    # --------------------
    def get_pause(self) -> bool:
        raise NotImplementedError

    def set_pause(self, paused: bool):
        raise NotImplementedError

    def get_sub_delay(self) -> float:
        raise NotImplementedError

    def set_sub_delay(self, seconds: float):
        raise NotImplementedError

    def set_sub_visibility(self, visible: bool):
        raise NotImplementedError

    # --------------------
    # Subtitles
    # --------------------
    def get_sub_text(self) -> str:
        raise NotImplementedError

    def get_sub_ass_full(self) -> Optional[str]:
        """Structured records for the current subtitle, or None if the track has no style info."""
        return None

    def current_subtitle_event(self) -> SubtitleEvent:
        return SubtitleEvent(text=self.get_sub_text() or "", ass_full=self.get_sub_ass_full())

    # --------------------
    # Notifications
    # --------------------
    def observe_property(self, name: str, handler: Callable):
        raise NotImplementedError

    def unobserve_property(self, handler: Callable):
        raise NotImplementedError

    # --------------------
    # Timers / OSD / input
    # --------------------
    def add_timeout(self, seconds: float, callback: Callable) -> TimerHandle:
        raise NotImplementedError

    def osd_message(self, text: str, duration: Optional[float] = None):
        raise NotImplementedError

    def add_key_binding(self, key: str, name: str, callback: Callable):
        raise NotImplementedError

    def add_forced_key_binding(self, key: str, name: str, callback: Callable):
        raise NotImplementedError

    def remove_key_binding(self, name: str):
        raise NotImplementedError
