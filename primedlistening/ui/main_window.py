from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QSlider, QLabel,
    QFileDialog, QDockWidget
)
from PyQt5.QtCore import Qt, QTimer, QUrl, QEvent
from PyQt5.QtMultimedia import QMediaPlayer, QMediaContent
from PyQt5.QtMultimediaWidgets import QVideoWidget
from pathlib import Path
import sys

from primedlistening.managers.cue_track import CueTrack
from primedlistening.managers.pause_controller import PauseController, PauseState
from primedlistening.managers.qt_player_host import QtPlayerHost
from primedlistening.utils.settings import PrimedSettings, SettingsStore
from primedlistening.ui.settings_panel import SettingsPanel
from primedlistening.ui.log_panel import LogPanel
from primedlistening.utils.log_stream import EmittingStream

STATE_LABELS = {
    PauseState.DISABLED.value: "Primed Listening: OFF",
    PauseState.IDLE.value: "Primed Listening: ON",
    PauseState.AUTO_PAUSED.value: "Primed Listening: holding",
    PauseState.LOCKED.value: "Primed Listening: locked",
}


class MainWindow(QMainWindow):
    def __init__(self, settings: PrimedSettings, store: SettingsStore, video_path=None, subs_path=None):
        super().__init__()
        self.setWindowTitle("Primed Listening")
        self.setGeometry(100, 100, 900, 800)

        self.settings = settings
        self.store = store
        self.loaded_video_path = None

        # --------------------
        # Central Widget
        # --------------------
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout()
        main_layout.setSpacing(15)
        main_layout.setContentsMargins(15, 15, 15, 15)
        central.setLayout(main_layout)

        # --------------------
        # Load Media
        # --------------------
        load_layout = QHBoxLayout()
        self.load_btn = QPushButton("Load Video")
        self.load_subs_btn = QPushButton("Load Subtitles")
        for btn in [self.load_btn, self.load_subs_btn]:
            self.apply_button_style(btn)
            load_layout.addWidget(btn)
        main_layout.addLayout(load_layout)

        # --------------------
        # Video Player + Captions
        # --------------------
        self.video_widget = QVideoWidget()
        self.video_widget.setStyleSheet("border: 1px solid #555; border-radius: 5px;")
        self.video_widget.installEventFilter(self)
        main_layout.addWidget(self.video_widget, stretch=1)
        self.player = QMediaPlayer()
        self.player.setVideoOutput(self.video_widget)

        self.caption_text = ""
        self.captions_visible = True
        self.caption_label = QLabel("")
        self.caption_label.setAlignment(Qt.AlignCenter)
        self.caption_label.setWordWrap(True)
        self.caption_label.setMinimumHeight(60)
        self.caption_label.setStyleSheet("background-color: #000; color: #fff; font-size: 22px; padding: 6px;")
        main_layout.addWidget(self.caption_label)

        # --------------------
        # Playback Controls
        # --------------------
        playback_layout = QHBoxLayout()
        playback_layout.setSpacing(10)

        self.play_btn = QPushButton("Play")
        self.pause_btn = QPushButton("Pause")
        self.slider = QSlider(Qt.Horizontal)
        self.slider.setRange(0, 1000)
        self.time_label = QLabel("00:00 / 00:00")

        for btn in [self.play_btn, self.pause_btn]:
            self.apply_button_style(btn)

        self.slider.setStyleSheet("""
            QSlider::groove:horizontal { height: 6px; background: #ccc; border-radius: 3px; }
            QSlider::handle:horizontal { background: #555; width: 14px; margin: -4px 0; border-radius: 7px; }
        """)
        playback_layout.addWidget(self.play_btn)
        playback_layout.addWidget(self.pause_btn)
        playback_layout.addWidget(self.slider)
        playback_layout.addWidget(self.time_label)
        main_layout.addLayout(playback_layout)

        # --------------------
        # Primed Listening Controls
        # --------------------
        primed_layout = QHBoxLayout()
        primed_layout.setSpacing(10)

        self.toggle_btn = QPushButton(STATE_LABELS[PauseState.DISABLED.value])
        self.lock_btn = QPushButton("Lock")
        self.resume_btn = QPushButton("Resume")
        self.slower_btn = QPushButton("+ s/char")
        self.faster_btn = QPushButton("- s/char")

        for btn in [self.toggle_btn, self.lock_btn, self.resume_btn, self.slower_btn, self.faster_btn]:
            btn.setMinimumWidth(100)
            self.apply_button_style(btn)
            primed_layout.addWidget(btn)

        main_layout.addLayout(primed_layout)

        # keyboard goes to keyPressEvent, not the focused button
        for btn in central.findChildren(QPushButton):
            btn.setFocusPolicy(Qt.NoFocus)
        self.slider.setFocusPolicy(Qt.NoFocus)

        # --------------------
        # Log Panel Dock
        # --------------------
        self.log_dock = QDockWidget("Processing Log", self)
        self.log_dock.setAllowedAreas(Qt.BottomDockWidgetArea | Qt.TopDockWidgetArea)
        self.log_panel = LogPanel()
        self.log_dock.setWidget(self.log_panel)
        self.addDockWidget(Qt.BottomDockWidgetArea, self.log_dock)

        # redirect stdout/stderr to log panel
        sys.stdout = EmittingStream(self.log_panel.append)
        sys.stderr = EmittingStream(self.log_panel.append, prefix="[stderr] ")
        self.store.log_callback = self.log_panel.append

        # --------------------
        # Host + Controller
        # --------------------
        self.cue_track = CueTrack(log_callback=self.log_panel.append)
        self.host = QtPlayerHost(self.player, self.cue_track, log_callback=self.log_panel.append, parent=self)
        self.controller = PauseController(self.host, self.settings, store=self.store,
                                          log_callback=self.log_panel.append)
        self.controller.install_bindings()

        # --------------------
        # Settings Dock
        # --------------------
        self.settings_dock = QDockWidget("Primed Listening Settings", self)
        self.settings_dock.setAllowedAreas(Qt.RightDockWidgetArea | Qt.LeftDockWidgetArea)
        self.settings_panel = SettingsPanel(self.settings)
        self.settings_panel.settings_changed.connect(self.apply_settings)
        self.settings_dock.setWidget(self.settings_panel)
        self.addDockWidget(Qt.RightDockWidgetArea, self.settings_dock)

        # --------------------
        # Signals
        # --------------------
        self.load_btn.clicked.connect(self.load_video)
        self.load_subs_btn.clicked.connect(self.load_subtitles)
        self.play_btn.clicked.connect(self.player.play)
        self.pause_btn.clicked.connect(self.player.pause)
        self.slider.sliderMoved.connect(self.scrub)
        self.toggle_btn.clicked.connect(self.controller.toggle)
        self.lock_btn.clicked.connect(self.controller.acknowledge)
        self.resume_btn.clicked.connect(self.controller.resume)
        self.slower_btn.clicked.connect(self.increase_ppc)
        self.faster_btn.clicked.connect(self.decrease_ppc)

        self.host.caption_changed.connect(self.set_caption)
        self.host.caption_visibility_changed.connect(self.show_captions)
        self.host.osd.connect(self.show_osd)
        self.controller.state_changed.connect(self.on_state_changed)
        self.on_state_changed(self.controller.state.value)

        # --------------------
        # Timer to update UI
        # --------------------
        self.timer = QTimer()
        self.timer.setInterval(100)
        self.timer.timeout.connect(self.update_ui)
        self.timer.start()

        if video_path:
            self.open_video(video_path)
        if subs_path:
            self.open_subtitles(subs_path)

    # --------------------
    # Media Methods
    # --------------------
    def load_video(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open Video", str(Path.home()), "Videos (*.mp4 *.mov *.mkv *.webm)"
        )
        if file_path:
            self.open_video(file_path)

    def open_video(self, file_path):
        self.loaded_video_path = Path(file_path)
        self.player.setMedia(QMediaContent(QUrl.fromLocalFile(str(file_path))))
        self.log_panel.append(f"Loaded video {self.loaded_video_path}")

        # pick up a same-named subtitle file next to the video
        for suffix in (".ass", ".ssa", ".srt", ".vtt"):
            candidate = self.loaded_video_path.with_suffix(suffix)
            if candidate.exists() and not self.cue_track.cues:
                self.open_subtitles(candidate)
                break

    def load_subtitles(self):
        start_dir = str(self.loaded_video_path.parent) if self.loaded_video_path else str(Path.home())
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open Subtitles", start_dir, "Subtitles (*.ass *.ssa *.srt *.vtt)"
        )
        if file_path:
            self.open_subtitles(file_path)

    def open_subtitles(self, file_path):
        try:
            self.cue_track.load(file_path)
        except Exception as e:
            self.log_panel.append(f"❌ Could not load subtitles {file_path}: {e}")
            return
        if not self.cue_track.structured:
            self.log_panel.append("No style info in this format; every line counts as dialogue")

    def scrub(self, value):
        if self.player.duration() > 0:
            new_pos = int(value / 1000 * self.player.duration())
            self.player.setPosition(new_pos)

    def update_ui(self):
        if self.player.duration() > 0:
            pos = self.player.position()
            dur = self.player.duration()
            self.slider.blockSignals(True)
            self.slider.setValue(int(pos / dur * 1000))
            self.slider.blockSignals(False)
            self.time_label.setText(f"{self.format_ms(pos)} / {self.format_ms(dur)}")

    # --------------------
    # Primed Listening
    # --------------------
    def increase_ppc(self):
        self.controller.increase_pause_per_char()
        self.settings_panel.set_settings(self.settings)

    def decrease_ppc(self):
        self.controller.decrease_pause_per_char()
        self.settings_panel.set_settings(self.settings)

    def on_state_changed(self, state):
        self.toggle_btn.setText(STATE_LABELS.get(state, state))
        self.lock_btn.setEnabled(state == PauseState.AUTO_PAUSED.value)
        self.resume_btn.setEnabled(state in (PauseState.AUTO_PAUSED.value, PauseState.LOCKED.value))

    def set_caption(self, text):
        self.caption_text = text
        self.caption_label.setText(text if self.captions_visible else "")

    def show_captions(self, visible):
        self.captions_visible = visible
        self.set_caption(self.caption_text)

    def show_osd(self, text, duration_ms):
        self.statusBar().showMessage(text, duration_ms)

    def apply_settings(self, settings: PrimedSettings):
        self.settings = settings
        self.controller.settings = settings
        self.store.save(settings)
        self.log_panel.append(f"✅ Settings updated: {settings.to_dict()}")

    # --------------------
    # Input
    # --------------------
    def key_name(self, event):
        key = event.key()
        if key == Qt.Key_Space:
            name = "SPACE"
        else:
            name = event.text().lower()
            if not name and Qt.Key_A <= key <= Qt.Key_Z:
                name = chr(key).lower()
            # with Ctrl held, text() is a control character
            if event.modifiers() & Qt.ControlModifier and Qt.Key_A <= key <= Qt.Key_Z:
                name = f"{self.controller.modifier_key()}+{chr(key).lower()}"
        return name

    def keyPressEvent(self, event):
        name = self.key_name(event)
        if name and self.host.dispatch_key(name):
            return
        if name in ("SPACE", "p"):
            self.host.set_pause(not self.host.get_pause())
            return
        super().keyPressEvent(event)

    def eventFilter(self, obj, event):
        if obj is self.video_widget and event.type() == QEvent.MouseButtonPress:
            if event.button() == Qt.LeftButton and self.host.dispatch_key("MBTN_LEFT"):
                return True
        return super().eventFilter(obj, event)

    def closeEvent(self, event):
        self.controller.disable()
        sys.stdout = sys.__stdout__
        sys.stderr = sys.__stderr__
        super().closeEvent(event)

    # --------------------
    # Helpers
    # --------------------
    @staticmethod
    def format_ms(ms):
        s = ms // 1000
        m, s = divmod(s, 60)
        return f"{m:02}:{s:02}"

    # --------------------
    # Button Styling
    # --------------------
    @staticmethod
    def apply_button_style(btn: QPushButton):
        btn.setStyleSheet("""
            QPushButton {
                background-color: #444;
                color: #fff;
                border-radius: 6px;
                padding: 6px 12px;
            }
            QPushButton:hover {
                background-color: #666;
            }
            QPushButton:pressed {
                background-color: #222;
            }
        """)
