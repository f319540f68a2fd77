from datetime import timedelta

import pytest

from BackEnd.core.errors import NotFoundError, ValidationError
from BackEnd.core.models import NO_PROJECT
from BackEnd.services.task_ledger import TaskLedger


@pytest.fixture
def ledger(store, clock):
    return TaskLedger(store, clock=clock)


def test_create_defaults(ledger, store):
    task = ledger.create("", "  Outline chapter  ")
    assert task.title == "Outline chapter"
    assert task.project_name == NO_PROJECT
    assert task.estimated_intervals == 1
    assert task.completed_intervals == 0
    assert not task.is_done
    assert [t.id for t in store.load_tasks()] == [task.id]


@pytest.mark.parametrize("title, estimate", [("", 1), ("   ", 1), ("ok", 0), ("ok", True)])
def test_create_rejects_bad_fields(ledger, title, estimate):
    with pytest.raises(ValidationError):
        ledger.create("Thesis", title, estimated_intervals=estimate)
    assert ledger.tasks() == []


def test_update(ledger):
    task = ledger.create("Thesis", "Draft")
    ledger.update(task.id, title="Draft intro", estimated_intervals=3, project_name=" ")
    assert task.title == "Draft intro"
    assert task.estimated_intervals == 3
    assert task.project_name == NO_PROJECT


def test_update_cannot_change_id(ledger):
    task = ledger.create("Thesis", "Draft")
    with pytest.raises(ValidationError):
        ledger.update(task.id, id="other")
    assert task.id in ledger


def test_update_rejects_unknown_fields(ledger):
    task = ledger.create("Thesis", "Draft")
    with pytest.raises(ValidationError):
        ledger.update(task.id, priority=1)


def test_update_rejects_negative_completed(ledger):
    task = ledger.create("Thesis", "Draft")
    with pytest.raises(ValidationError):
        ledger.update(task.id, completed_intervals=-1)
    assert task.completed_intervals == 0


def test_missing_task(ledger):
    with pytest.raises(NotFoundError):
        ledger.get("nope")
    with pytest.raises(NotFoundError):
        ledger.update("nope", title="x")
    with pytest.raises(NotFoundError):
        ledger.delete("nope")
    with pytest.raises(NotFoundError):
        ledger.increment_completed("nope")


def test_toggle_done(ledger, store):
    task = ledger.create("Thesis", "Draft")
    ledger.toggle_done(task.id)
    assert task.is_done
    assert store.load_tasks()[0].is_done
    ledger.toggle_done(task.id)
    assert not task.is_done


def test_tasks_newest_first(ledger, clock):
    first = ledger.create("A", "first")
    clock.advance(5)
    second = ledger.create("B", "second")
    assert [t.id for t in ledger.tasks()] == [second.id, first.id]


def test_projects_excludes_placeholder(ledger):
    ledger.create("Thesis", "a")
    ledger.create("Gym", "b")
    ledger.create("Thesis", "c")
    ledger.create(NO_PROJECT, "d")
    assert ledger.projects() == ["Gym", "Thesis"]


def test_estimate_skips_done_tasks(ledger, clock):
    a = ledger.create("Thesis", "a", estimated_intervals=3)
    ledger.create("Thesis", "b", estimated_intervals=2)
    done = ledger.create("Thesis", "c", estimated_intervals=5)
    ledger.increment_completed(a.id)
    ledger.toggle_done(done.id)

    estimate = ledger.estimate(25)
    assert estimate.estimated == 5
    assert estimate.completed == 1
    assert estimate.remaining == 4
    assert estimate.finish_at == clock.now() + timedelta(minutes=100)


def test_two_interval_task_keeps_history_after_delete(service):
    task = service.add_task("Write report", "Thesis", estimated_intervals=2)
    service.set_active_task(task.id)
    for _ in range(2):
        service.start()
        service.skip()
        # the break
        service.start()
        service.skip()

    assert task.completed_intervals == 2
    service.delete_task(task.id)
    assert task.id not in service.ledger

    work = [s for s in service.get_sessions() if s.is_work]
    assert len(work) == 2
    assert {(s.project_name, s.task_name) for s in work} == {("Thesis", "Write report")}
