import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest

# keep logs and databases out of the real profile; must run before BackEnd imports
os.environ.setdefault("POMODORO_DATA_DIR", tempfile.mkdtemp(prefix="pomodoro-tests-"))

from PySide6.QtCore import QCoreApplication  # noqa: E402

from BackEnd.core.errors import PersistenceError  # noqa: E402
from BackEnd.repos.store import MemoryStore  # noqa: E402
from BackEnd.services.timer_service import TimerService  # noqa: E402

# Monday
START = datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start=START):
        self.current = start

    def now(self):
        return self.current

    def advance(self, seconds):
        self.current += timedelta(seconds=seconds)


class FailingStore(MemoryStore):
    """Reads work, every write fails."""

    def _fail(self, *args, **kwargs):
        raise PersistenceError("disk is read-only")

    create_task = update_task = delete_task = _fail
    create_session = save_settings = save_timer_state = _fail


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def service(store, clock):
    return TimerService(store, clock=clock)


@pytest.fixture
def failing_service(clock):
    svc = TimerService(FailingStore(), clock=clock)
    notices = []
    svc.notice.connect(notices.append)
    return svc, notices
