# log_panel.py
from datetime import datetime
from collections import deque

from PyQt5.QtWidgets import QWidget, QVBoxLayout, QPlainTextEdit, QPushButton
from PyQt5.QtCore import QTimer


class LogPanel(QWidget):
    MAX_LINES = 2000

    def __init__(self, parent=None):
        super().__init__(parent)
        self.layout = QVBoxLayout()
        self.setLayout(self.layout)

        self.text_edit = QPlainTextEdit()
        self.text_edit.setReadOnly(True)
        self.text_edit.setMaximumBlockCount(self.MAX_LINES)
        self.text_edit.setStyleSheet("""
            background-color: #111;
            color: #eee;
            font-family: Consolas, monospace;
            font-size: 12px;
        """)
        self.layout.addWidget(self.text_edit)

        self.clear_btn = QPushButton("Clear Log")
        self.clear_btn.clicked.connect(self.text_edit.clear)
        self.layout.addWidget(self.clear_btn)

        # state changes arrive in bursts around every pause; batch them
        self.queue = deque()
        self.timer = QTimer()
        self.timer.setInterval(100)
        self.timer.timeout.connect(self.flush)
        self.timer.start()

    def append(self, message: str):
        stamp = datetime.now().strftime("%H:%M:%S")
        self.queue.append(f"{stamp} {message}")

    def flush(self):
        if not self.queue:
            return
        while self.queue:
            self.text_edit.appendPlainText(self.queue.popleft())
        bar = self.text_edit.verticalScrollBar()
        bar.setValue(bar.maximum())
