from datetime import datetime, timedelta, timezone

from BackEnd.core.models import Phase, Session, Task
from BackEnd.repos.store import SqliteStore
from reset_stats import reset_user_stats

NOW = datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)


def answers(*replies):
    it = iter(replies)
    return lambda prompt: next(it)


def seeded(dbfile):
    store = SqliteStore("alice", dbfile)
    store.create_session(Session(phase=Phase.WORK, start_time=NOW, end_time=NOW + timedelta(minutes=25),
        duration_minutes=25))
    store.create_task(Task(title="Keep me", created_at=NOW))
    store.save_settings({"work_minutes": 50})
    return store


def test_reset_keeps_tasks_unless_asked(tmp_path, capsys):
    dbfile = tmp_path / "pomodoro.db"
    store = seeded(dbfile)
    other = SqliteStore("bob", dbfile)
    other.save_settings({"theme": "dark"})

    assert reset_user_stats("alice", dbfile, ask=answers("yes", "no"))
    assert store.load_sessions() == []
    assert store.load_settings() is None
    assert [t.title for t in store.load_tasks()] == ["Keep me"]
    assert other.load_settings() == {"theme": "dark"}
    assert "1 completed pomodoros" in capsys.readouterr().out


def test_reset_can_delete_tasks(tmp_path):
    dbfile = tmp_path / "pomodoro.db"
    store = seeded(dbfile)
    assert reset_user_stats("alice", dbfile, ask=answers("y", "y"))
    assert store.load_tasks() == []


def test_reset_cancelled(tmp_path):
    dbfile = tmp_path / "pomodoro.db"
    store = seeded(dbfile)
    assert not reset_user_stats("alice", dbfile, ask=answers("no"))
    assert len(store.load_sessions()) == 1


def test_reset_without_database(tmp_path, capsys):
    assert not reset_user_stats("alice", tmp_path / "none.db", ask=answers())
    assert "No database found" in capsys.readouterr().out
