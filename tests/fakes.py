# tests/fakes.py
from typing import Callable, List, Optional

from primedlistening.managers.player_host import PAUSE, SUB_TEXT, PlayerHost, TimerHandle


class FakeTimer(TimerHandle):
    def __init__(self, seconds: float, callback: Callable):
        self.seconds = seconds
        self.callback = callback
        self.killed = False
        self.fired = False

    def kill(self):
        self.killed = True

    def fire(self):
        """Run the callback the way a real timer would, even if it was killed."""
        self.fired = True
        self.callback()


class FakePlayerHost(PlayerHost):
    """
    Stand-in for the media player used by tests.
    - Property changes notify observers synchronously
    - Timers only fire when a test calls fire()
    - Every side effect is recorded for assertions
    """

    def __init__(self, paused=False, sub_delay=0.0, platform="linux"):
        self.platform = platform
        self.paused = paused
        self.sub_delay = sub_delay
        self.sub_visible = True
        self.sub_text = ""
        self.ass_full: Optional[str] = None

        self.observers = {}
        self.timers: List[FakeTimer] = []
        self.osd: List[tuple] = []
        self.pause_calls: List[bool] = []
        self.visibility_calls: List[bool] = []
        self.bindings = {}

    # playback
    def get_pause(self):
        return self.paused

    def set_pause(self, paused):
        self.pause_calls.append(paused)
        self.user_sets_pause(paused)

    def user_sets_pause(self, paused):
        if paused != self.paused:
            self.paused = paused
            self._notify(PAUSE, paused)

    def get_sub_delay(self):
        return self.sub_delay

    def set_sub_delay(self, seconds):
        self.sub_delay = seconds

    def set_sub_visibility(self, visible):
        self.visibility_calls.append(visible)
        self.sub_visible = visible

    # subtitles
    def get_sub_text(self):
        return self.sub_text

    def get_sub_ass_full(self):
        return self.ass_full

    def show_subtitle(self, text, ass_full=None):
        self.sub_text = text
        self.ass_full = ass_full
        self._notify(SUB_TEXT, text)

    # notifications
    def observe_property(self, name, handler):
        self.observers.setdefault(name, []).append(handler)

    def unobserve_property(self, handler):
        for handlers in self.observers.values():
            while handler in handlers:
                handlers.remove(handler)

    def observer_count(self):
        return sum(len(h) for h in self.observers.values())

    def _notify(self, name, value):
        for handler in list(self.observers.get(name, [])):
            handler(name, value)

    # timers / osd / input
    def add_timeout(self, seconds, callback):
        timer = FakeTimer(seconds, callback)
        self.timers.append(timer)
        return timer

    def osd_message(self, text, duration=None):
        self.osd.append((text, duration))

    def add_key_binding(self, key, name, callback):
        self.bindings[name] = (key, callback, False)

    def add_forced_key_binding(self, key, name, callback):
        self.bindings[name] = (key, callback, True)

    def remove_key_binding(self, name):
        self.bindings.pop(name, None)

    def press(self, key):
        for forced in (True, False):
            for bound_key, callback, is_forced in list(self.bindings.values()):
                if is_forced == forced and bound_key == key:
                    callback()
                    return True
        return False
