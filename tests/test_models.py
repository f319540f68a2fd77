from datetime import datetime, timedelta, timezone

from BackEnd.core.models import NO_PROJECT, Phase, Session, Task, TimerState, TimerStatus
from BackEnd.core.settings import Configuration

NOW = datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)


def test_session_round_trip():
    session = Session(
        phase=Phase.WORK,
        start_time=NOW,
        end_time=NOW + timedelta(minutes=25),
        duration_minutes=25,
        task_id="abc",
        project_name="Thesis",
        task_name="Write report",
    )
    assert Session.from_dict(session.to_dict()) == session


def test_session_defaults_to_no_project():
    data = {
        "id": "s1", "phase": "short_break", "duration_minutes": 5,
        "start_time": "2024-03-04T09:00:00", "end_time": "2024-03-04T09:05:00",
    }
    session = Session.from_dict(data)
    assert session.project_name == NO_PROJECT
    assert session.task_id is None
    # naive timestamps are read as UTC
    assert session.start_time == NOW
    assert not session.is_work


def test_task_round_trip():
    task = Task(title="Draft", project_name="Thesis", notes="ch. 2", estimated_intervals=3,
        completed_intervals=1, is_done=True, created_at=NOW)
    assert Task.from_dict(task.to_dict()) == task


def test_task_ids_are_unique():
    assert Task(title="a").id != Task(title="b").id


def test_timer_state_round_trip():
    state = TimerState(
        current_phase=Phase.LONG_BREAK,
        status=TimerStatus.RUNNING,
        remaining_seconds=420,
        deadline=NOW + timedelta(seconds=420),
        completed_work_count=4,
        active_task_id="t1",
        started_at=NOW,
    )
    assert TimerState.from_dict(state.to_dict()) == state


def test_timer_state_copy_is_independent():
    state = TimerState(remaining_seconds=10)
    snapshot = state.copy()
    state.remaining_seconds = 5
    assert snapshot.remaining_seconds == 10


def test_configuration_round_trip():
    config = Configuration(work_minutes=50, auto_start_breaks=True, theme="dark", alarm_volume=80)
    assert Configuration.from_dict(config.to_dict()) == config


def test_phase_labels():
    assert Phase.WORK.label == "Focus Time"
    assert Phase.LONG_BREAK.is_break
    assert not Phase.WORK.is_break
