# primedlistening/managers/pause_controller.py
from enum import Enum
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal

from primedlistening.managers.player_host import PAUSE, SUB_TEXT, PlayerHost, TimerHandle
from primedlistening.utils.duration_policy import hold_duration
from primedlistening.utils.settings import PPC_STEP, PrimedSettings
from primedlistening.utils.style_filter import SubtitleEvent, extract_dialogue_line

PAUSE_KEYS = ("SPACE", "p", "MBTN_LEFT")


class PauseState(str, Enum):
    DISABLED = "disabled"
    IDLE = "idle"
    AUTO_PAUSED = "auto_paused"
    LOCKED = "locked"


class PauseController(QObject):
    """
    Pauses playback before each subtitle line and resumes after a hold.

    While auto-paused the pause keys lock the pause (first press); while
    locked they resume playback (second press). A pause the user makes
    themselves is treated as locked, so both kinds end the same way.
    """

    state_changed = pyqtSignal(str)

    def __init__(self, host: PlayerHost, settings: PrimedSettings, store=None,
                 log_callback=print, pause_keys=PAUSE_KEYS):
        super().__init__()
        self.host = host
        self.settings = settings
        self.store = store
        self.log = log_callback
        self.pause_keys = tuple(pause_keys)

        self.enabled = False
        self.timer: Optional[TimerHandle] = None
        self.awaiting_manual_resume = False
        self.last_line: Optional[str] = None
        self.saved_subtitle_delay: Optional[float] = None

        self._last_state = PauseState.DISABLED

    @property
    def state(self) -> PauseState:
        if not self.enabled:
            return PauseState.DISABLED
        if self.awaiting_manual_resume:
            return PauseState.LOCKED
        if self.timer is not None:
            return PauseState.AUTO_PAUSED
        return PauseState.IDLE

    def _emit_state(self):
        state = self.state
        if state != self._last_state:
            self.log(f"[PauseController] {self._last_state.value} -> {state.value}")
            self._last_state = state
            self.state_changed.emit(state.value)

    # --------------------
    # Key bindings
    # --------------------
    def modifier_key(self):
        return "CMD" if self.host.platform == "darwin" else "Ctrl"

    def install_bindings(self):
        mod = self.modifier_key()
        self.host.add_key_binding("n", "toggle-primed-listening", self.toggle)
        self.host.add_key_binding(f"{mod}+n", "increase-ppc", self.increase_pause_per_char)
        self.host.add_key_binding(f"{mod}+b", "decrease-ppc", self.decrease_pause_per_char)

    def _remove_pause_bindings(self):
        for key in self.pause_keys:
            self.host.remove_key_binding(f"pl-first-{key}")
            self.host.remove_key_binding(f"pl-second-{key}")

    def _bind_first_press(self):
        self._remove_pause_bindings()
        for key in self.pause_keys:
            self.host.add_forced_key_binding(key, f"pl-first-{key}", self.acknowledge)

    def _bind_second_press(self):
        self.awaiting_manual_resume = True
        self._remove_pause_bindings()
        for key in self.pause_keys:
            self.host.add_forced_key_binding(key, f"pl-second-{key}", self.resume)

    def _cancel_timer(self):
        if self.timer is not None:
            self.timer.kill()
            self.timer = None

    def _release(self):
        self._cancel_timer()
        self.awaiting_manual_resume = False
        self._remove_pause_bindings()

    # --------------------
    # Enable / disable
    # --------------------
    def toggle(self):
        self.set_enabled(not self.enabled)

    def set_enabled(self, state):
        if state:
            self.enable()
        else:
            self.disable()

    def enable(self):
        if self.enabled:
            return
        self.enabled = True
        self._release()
        self.last_line = None

        if self.host.get_pause():
            self._bind_second_press()
            self.host.set_sub_visibility(True)

        self.saved_subtitle_delay = self.host.get_sub_delay() or 0.0
        self.host.set_sub_delay(self.saved_subtitle_delay + self.settings.subtitle_delay_adjustment)

        self.host.observe_property(SUB_TEXT, self._on_sub_text_change)
        self.host.observe_property(PAUSE, self._on_pause_change)
        self.host.osd_message("Primed Listening ENABLED")
        self.log(f"[PauseController] Enabled (sub-delay {self.saved_subtitle_delay:+.2f}s "
                 f"-> {self.saved_subtitle_delay + self.settings.subtitle_delay_adjustment:+.2f}s)")
        self._emit_state()

    def disable(self):
        if not self.enabled:
            return
        self.enabled = False
        self._release()

        if self.saved_subtitle_delay is not None:
            self.host.set_sub_delay(self.saved_subtitle_delay)
            self.saved_subtitle_delay = None

        self.host.unobserve_property(self._on_sub_text_change)
        self.host.unobserve_property(self._on_pause_change)
        self.host.set_sub_visibility(True)
        self.host.osd_message("Primed Listening DISABLED")
        self.log("[PauseController] Disabled")
        self._emit_state()

    # --------------------
    # Player events
    # --------------------
    def _on_sub_text_change(self, _name, value):
        if value:
            self.on_subtitle_changed(self.host.current_subtitle_event())

    def _on_pause_change(self, _name, paused):
        self.on_pause_changed(bool(paused))

    def on_subtitle_changed(self, event: SubtitleEvent):
        if self.state != PauseState.IDLE:
            return

        line = extract_dialogue_line(event, self.settings.style_blacklist)
        if line is None or not line.text:
            return

        # animated styling often re-emits the same text several times
        if line.text == self.last_line:
            return

        duration = hold_duration(line.visible_chars, self.settings)
        if duration is None:
            return
        self.last_line = line.text

        # armed before pausing so the pause notification sees a script pause
        self._arm_timer(duration)
        self._bind_first_press()
        self.host.set_sub_visibility(True)
        self.host.set_pause(True)
        self.log(f"[PauseController] Holding {duration:.2f}s for {line.visible_chars} chars: {line.text!r}")
        self._emit_state()

    def _arm_timer(self, duration):
        self._cancel_timer()
        handle = None

        def on_timeout():
            # ignore a timer that is no longer the current one
            if not self.enabled or self.timer is not handle:
                return
            self.log("[PauseController] Hold elapsed, resuming")
            self.resume()

        handle = self.host.add_timeout(duration, on_timeout)
        self.timer = handle

    def on_pause_changed(self, paused: bool):
        if not self.enabled:
            return
        self.host.set_sub_visibility(paused)

        if paused:
            if self.timer is None and not self.awaiting_manual_resume:
                self._bind_second_press()
        else:
            self._release()
        self._emit_state()

    # --------------------
    # User actions
    # --------------------
    def acknowledge(self):
        if self.state != PauseState.AUTO_PAUSED:
            return
        self._cancel_timer()
        self.host.osd_message("Pause locked — press again to resume")
        self._bind_second_press()
        self.log("[PauseController] Pause locked")
        self._emit_state()

    def resume(self):
        if self.state not in (PauseState.AUTO_PAUSED, PauseState.LOCKED):
            return
        self._release()
        self.host.set_pause(False)
        self._emit_state()

    def increase_pause_per_char(self):
        self.settings.adjust_pause_per_char(PPC_STEP, self.log)
        self._show_ppc()

    def decrease_pause_per_char(self):
        self.settings.adjust_pause_per_char(-PPC_STEP, self.log)
        self._show_ppc()

    def _show_ppc(self):
        self.host.osd_message(f"pause_per_char = {self.settings.pause_per_char:.2f} s/char", 1.2)
        if self.store is not None:
            self.store.save(self.settings)
