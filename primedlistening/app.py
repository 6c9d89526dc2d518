import argparse
import sys

from PyQt5.QtWidgets import QApplication

from primedlistening.ui.main_window import MainWindow
from primedlistening.utils.settings import SettingsStore


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="primed-listening",
        description="Pause before each subtitle line and show it for a moment, then resume.",
    )
    parser.add_argument("--video", help="video file to open")
    parser.add_argument("--subs", help="subtitle file (.ass/.ssa/.srt/.vtt)")
    parser.add_argument("--config", help="settings file (default: ~/.config/primed_listening/primed_listening.conf)")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    app = QApplication(sys.argv[:1])

    store = SettingsStore(args.config)
    settings = store.load()

    window = MainWindow(settings, store, video_path=args.video, subs_path=args.subs)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
