import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from BackEnd.core.errors import NotFoundError, PersistenceError
from BackEnd.core.models import NO_PROJECT, Phase, Session, Task
from BackEnd.repos import session_repo, settings_repo, task_repo
from BackEnd.repos.db import connect
from BackEnd.repos.store import MemoryStore, SqliteStore, open_store

NOW = datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def dbfile(tmp_path):
    return tmp_path / "pomodoro.db"


def make_session(minutes=25, phase=Phase.WORK, offset=0, **kwargs):
    start = NOW + timedelta(hours=offset)
    return Session(phase=phase, start_time=start, end_time=start + timedelta(minutes=minutes),
        duration_minutes=minutes, **kwargs)


def test_open_store():
    assert isinstance(open_store(None), MemoryStore)
    assert not open_store("").persistent
    store = open_store("alice", "x.db")
    assert isinstance(store, SqliteStore)
    assert store.persistent


def test_sessions_round_trip_newest_first(dbfile):
    store = SqliteStore("alice", dbfile)
    first = store.create_session(make_session(task_id="t1", project_name="Thesis", task_name="Draft"))
    second = store.create_session(make_session(5, Phase.SHORT_BREAK, offset=1))
    assert store.load_sessions() == [second, first]


def test_tasks_round_trip(dbfile):
    store = SqliteStore("alice", dbfile)
    task = Task(title="Draft", project_name="Thesis", estimated_intervals=2, created_at=NOW)
    store.create_task(task)
    store.update_task(task.id, {"completed_intervals": 1, "is_done": True, "id": "ignored"})
    [loaded] = store.load_tasks()
    assert loaded.id == task.id
    assert loaded.completed_intervals == 1
    assert loaded.is_done is True

    store.delete_task(task.id)
    assert store.load_tasks() == []


def test_update_missing_task(dbfile):
    with pytest.raises(NotFoundError):
        task_repo.update_task("alice", "nope", {"title": "x"}, dbfile)
    # the store reports a lost row as a failed write
    with pytest.raises(PersistenceError):
        SqliteStore("alice", dbfile).update_task("nope", {"title": "x"})


def test_data_is_scoped_by_user(dbfile):
    alice, bob = SqliteStore("alice", dbfile), SqliteStore("bob", dbfile)
    task = Task(title="Alice only", created_at=NOW)
    alice.create_task(task)
    alice.create_session(make_session())
    alice.save_settings({"work_minutes": 50})

    assert bob.load_tasks() == []
    assert bob.load_sessions() == []
    assert bob.load_settings() is None
    with pytest.raises(PersistenceError):
        bob.update_task(task.id, {"title": "stolen"})


def test_settings_and_timer_state_upsert(dbfile):
    store = SqliteStore("alice", dbfile)
    store.save_settings({"work_minutes": 50})
    store.save_settings({"work_minutes": 45})
    store.save_timer_state({"status": "paused", "remaining_seconds": 120})
    assert store.load_settings() == {"work_minutes": 45}
    assert store.load_timer_state()["remaining_seconds"] == 120


def test_helpers_used_by_reset_script(dbfile):
    session_repo.create_session("alice", make_session(), dbfile)
    session_repo.create_session("alice", make_session(5, Phase.SHORT_BREAK, offset=1), dbfile)
    settings_repo.save_settings("alice", {"theme": "dark"}, dbfile)
    assert session_repo.count_work_sessions("alice", dbfile) == 1
    assert session_repo.delete_user_sessions("alice", dbfile) == 2
    assert settings_repo.delete_user_settings("alice", dbfile) == 1
    assert session_repo.load_sessions("alice", dbfile) == []


def test_migrates_old_sessions_table(dbfile):
    conn = sqlite3.connect(dbfile)
    conn.execute(
        "CREATE TABLE sessions (id TEXT PRIMARY KEY, user_id TEXT NOT NULL, task_id TEXT, phase TEXT NOT NULL,"
        " start_utc TEXT NOT NULL, end_utc TEXT NOT NULL, duration_minutes INTEGER NOT NULL)"
    )
    conn.execute(
        "INSERT INTO sessions VALUES ('old', 'alice', NULL, 'pomodoro', ?, ?, 25)",
        (NOW.isoformat(), (NOW + timedelta(minutes=25)).isoformat())
    )
    conn.commit()
    conn.close()

    [session] = session_repo.load_sessions("alice", dbfile)
    assert session.id == "old"
    assert session.project_name == NO_PROJECT
    assert session.task_name is None

    with connect(dbfile) as conn:
        cols = {r["name"] for r in conn.execute("PRAGMA table_info(sessions)")}
    assert {"project_name", "task_name"} <= cols


def test_sqlite_errors_become_persistence_errors(tmp_path):
    with pytest.raises(PersistenceError):
        task_repo.load_tasks("alice", tmp_path / "missing-dir" / "pomodoro.db")


def test_memory_store_copies_tasks():
    store = MemoryStore()
    task = Task(title="Draft", created_at=NOW)
    store.create_task(task)
    task.title = "changed locally"
    assert store.load_tasks()[0].title == "Draft"
    with pytest.raises(PersistenceError):
        store.update_task("nope", {"title": "x"})
