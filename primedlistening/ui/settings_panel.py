# primedlistening/ui/settings_panel.py
from PyQt5.QtWidgets import (
    QWidget, QFormLayout, QLineEdit, QSpinBox, QDoubleSpinBox, QPushButton
)
from PyQt5.QtCore import pyqtSignal
from primedlistening.utils.settings import PrimedSettings, PPC_STEP
from primedlistening.utils.style_filter import Blacklist


class SettingsPanel(QWidget):
    settings_changed = pyqtSignal(PrimedSettings)

    def __init__(self, settings: PrimedSettings, parent=None):
        super().__init__(parent)
        self.settings = settings

        # --------------------
        # Layout
        # --------------------
        layout = QFormLayout()
        layout.setSpacing(10)
        layout.setContentsMargins(10, 10, 10, 10)
        self.setLayout(layout)

        # --------------------
        # Timing
        # --------------------
        self.pause_per_char = self._seconds_box(0.0, 1.0, PPC_STEP)
        layout.addRow("Hold per char (s):", self.pause_per_char)

        self.min_pause = self._seconds_box(0.0, 10.0, 0.05)
        layout.addRow("Minimum hold (s):", self.min_pause)

        self.min_chars = QSpinBox()
        self.min_chars.setRange(0, 500)
        layout.addRow("Ignore lines shorter than:", self.min_chars)

        self.min_ppc = self._seconds_box(0.0, 1.0, PPC_STEP)
        layout.addRow("Hold per char floor (s):", self.min_ppc)

        self.subtitle_delay_adjustment = self._seconds_box(-5.0, 5.0, 0.05)
        layout.addRow("Subtitle delay shift (s):", self.subtitle_delay_adjustment)

        # --------------------
        # Style Filter
        # --------------------
        self.style_blacklist = QLineEdit()
        self.style_blacklist.setPlaceholderText("sign,fx,song,op*,ed*")
        layout.addRow("Skip styles:", self.style_blacklist)

        # --------------------
        # Save Button
        # --------------------
        self.save_btn = QPushButton("Save Settings")
        self.apply_button_style(self.save_btn)
        layout.addRow(self.save_btn)
        self.save_btn.clicked.connect(self.save)

        self.style_labels(layout)
        self.setStyleSheet("background-color: #222; color: #eee;")

        self.set_settings(settings)

    @staticmethod
    def _seconds_box(minimum, maximum, step):
        box = QDoubleSpinBox()
        box.setDecimals(4)
        box.setRange(minimum, maximum)
        box.setSingleStep(step)
        return box

    def set_settings(self, settings: PrimedSettings):
        """Show values changed elsewhere (e.g. hold-per-char keys)."""
        self.settings = settings
        self.pause_per_char.setValue(settings.pause_per_char)
        self.min_pause.setValue(settings.min_pause)
        self.min_chars.setValue(settings.min_chars)
        self.min_ppc.setValue(settings.min_ppc)
        self.subtitle_delay_adjustment.setValue(settings.subtitle_delay_adjustment)
        self.style_blacklist.setText(settings.style_blacklist.to_string())

    # --------------------
    # Save Settings
    # --------------------
    def save(self):
        self.settings.min_ppc = self.min_ppc.value()
        self.settings.pause_per_char = max(self.settings.min_ppc, self.pause_per_char.value())
        self.settings.min_pause = self.min_pause.value()
        self.settings.min_chars = self.min_chars.value()
        self.settings.subtitle_delay_adjustment = self.subtitle_delay_adjustment.value()
        self.settings.style_blacklist = Blacklist.from_string(self.style_blacklist.text())

        self.set_settings(self.settings)
        self.settings_changed.emit(self.settings)

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

    # --------------------
    # Label Styling
    # --------------------
    @staticmethod
    def style_labels(layout: QFormLayout):
        for i in range(layout.rowCount()):
            label_item = layout.itemAt(i, QFormLayout.LabelRole)
            if label_item:
                widget = label_item.widget()
                if widget:
                    widget.setStyleSheet("background: transparent; color: #eee;")
