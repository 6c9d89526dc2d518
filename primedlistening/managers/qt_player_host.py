# primedlistening/managers/qt_player_host.py
import sys
from typing import Callable, Optional

from PyQt5.QtCore import QObject, QTimer, pyqtSignal
from PyQt5.QtMultimedia import QMediaPlayer

from primedlistening.managers.cue_track import CueTrack
from primedlistening.managers.player_host import PAUSE, SUB_TEXT, PlayerHost, TimerHandle


class QtTimerHandle(TimerHandle):
    def __init__(self, timer: QTimer):
        self._timer = timer

    def kill(self):
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None


class QtPlayerHost(QObject, PlayerHost):
    """
    PlayerHost on top of a QMediaPlayer and a CueTrack.

    QMediaPlayer knows nothing about subtitles, so the current cue is found
    by polling the playback position and applying the subtitle delay here.
    """

    caption_changed = pyqtSignal(str)
    caption_visibility_changed = pyqtSignal(bool)
    osd = pyqtSignal(str, int)  # text, duration ms

    POLL_MS = 50
    OSD_DEFAULT_S = 2.0

    def __init__(self, player: QMediaPlayer, cue_track: CueTrack, log_callback=print, parent=None):
        super().__init__(parent)
        self.player = player
        self.cue_track = cue_track
        self.log = log_callback
        self.platform = sys.platform

        self._paused = player.state() != QMediaPlayer.PlayingState
        self._sub_delay = 0.0
        self._sub_visible = True
        self._sub_text = ""
        self._sub_events = []
        self._observers = {}
        self._bindings = {}  # name -> (key, callback, forced)

        self.player.stateChanged.connect(self._on_state_changed)

        self._poll_timer = QTimer(self)
        self._poll_timer.setInterval(self.POLL_MS)
        self._poll_timer.timeout.connect(self.poll)
        self._poll_timer.start()

    # --------------------
    # Playback state
    # --------------------
    def get_pause(self) -> bool:
        return self._paused

    def set_pause(self, paused: bool):
        if paused:
            self.player.pause()
        else:
            self.player.play()

    def _on_state_changed(self, state):
        paused = state != QMediaPlayer.PlayingState
        if paused != self._paused:
            self._paused = paused
            self._notify(PAUSE, paused)

    def get_sub_delay(self) -> float:
        return self._sub_delay

    def set_sub_delay(self, seconds: float):
        self._sub_delay = seconds
        self.log(f"[QtPlayerHost] sub-delay = {seconds:+.3f}s")
        self.poll()

    def set_sub_visibility(self, visible: bool):
        if visible != self._sub_visible:
            self._sub_visible = visible
            self.caption_visibility_changed.emit(visible)

    @property
    def sub_visible(self) -> bool:
        return self._sub_visible

    # --------------------
    # Subtitles
    # --------------------
    def poll(self):
        if not self.cue_track.cues:
            events = []
        else:
            lookup_ms = self.player.position() - int(round(self._sub_delay * 1000))
            events = self.cue_track.active_at(lookup_ms)
        text = self.cue_track.plain_text(events)
        if text != self._sub_text:
            self._sub_text = text
            self._sub_events = events
            self.caption_changed.emit(text)
            self._notify(SUB_TEXT, text)

    def get_sub_text(self) -> str:
        return self._sub_text

    def get_sub_ass_full(self) -> Optional[str]:
        if not self._sub_events:
            return None
        return self.cue_track.ass_full(self._sub_events)

    # --------------------
    # Notifications
    # --------------------
    def observe_property(self, name: str, handler: Callable):
        self._observers.setdefault(name, []).append(handler)

    def unobserve_property(self, handler: Callable):
        for handlers in self._observers.values():
            while handler in handlers:
                handlers.remove(handler)

    def _notify(self, name, value):
        for handler in list(self._observers.get(name, [])):
            handler(name, value)

    # --------------------
    # Timers / OSD / input
    # --------------------
    def add_timeout(self, seconds: float, callback: Callable) -> TimerHandle:
        timer = QTimer(self)
        timer.setSingleShot(True)
        handle = QtTimerHandle(timer)
        timer.timeout.connect(callback)
        timer.timeout.connect(handle.kill)
        timer.start(max(0, int(seconds * 1000)))
        return handle

    def osd_message(self, text: str, duration: Optional[float] = None):
        seconds = self.OSD_DEFAULT_S if duration is None else duration
        self.log(f"[OSD] {text}")
        self.osd.emit(text, int(seconds * 1000))

    def add_key_binding(self, key: str, name: str, callback: Callable):
        self._bindings[name] = (key, callback, False)

    def add_forced_key_binding(self, key: str, name: str, callback: Callable):
        self._bindings[name] = (key, callback, True)

    def remove_key_binding(self, name: str):
        self._bindings.pop(name, None)

    def dispatch_key(self, key: str) -> bool:
        """Run the binding for key, forced bindings first. Returns False if nothing is bound."""
        for forced in (True, False):
            for bound_key, callback, is_forced in list(self._bindings.values()):
                if is_forced == forced and bound_key.lower() == key.lower():
                    callback()
                    return True
        return False
