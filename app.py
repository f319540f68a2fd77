import argparse
import os
import sys

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication

from BackEnd.core.log import setup_logger
from BackEnd.repos.store import open_store
from BackEnd.services.notifier import AlarmPlayer
from BackEnd.services.timer_service import TimerService
from FrontEnd.ui_main import MainWindow

logger = setup_logger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Pomodoro focus timer with tasks and reports")
    parser.add_argument("--user", default=os.environ.get("POMODORO_USER"),
                        help="profile to load (default: $POMODORO_USER); without one nothing is saved")
    parser.add_argument("--db", default=None, help="path to the SQLite database file")
    args, _qt_args = parser.parse_known_args(argv)
    return args


def main(argv=None):
    args = parse_args(argv)
    app = QApplication(sys.argv)
    store = open_store(args.user, args.db)
    service = TimerService.load(store, notifier=AlarmPlayer())
    logger.info("Starting for user %s (persistent=%s)", getattr(store, "user_id", "-"), store.persistent)

    win = MainWindow(service)

    def _on_app_state(state):
        # browsers and OSes throttle timers while hidden
        if state == Qt.ApplicationState.ApplicationActive:
            service.on_visibility_regained()

    app.applicationStateChanged.connect(_on_app_state)
    app.aboutToQuit.connect(service.shutdown)
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
