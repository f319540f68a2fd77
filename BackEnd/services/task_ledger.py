from dataclasses import dataclass
from datetime import datetime, timedelta

from BackEnd.core.clock import SystemClock
from BackEnd.core.errors import NotFoundError, ValidationError, best_effort
from BackEnd.core.log import setup_logger
from BackEnd.core.models import Task, NO_PROJECT

logger = setup_logger(__name__)

EDITABLE = {"project_name", "title", "notes", "estimated_intervals", "completed_intervals", "is_done"}


@dataclass(frozen=True)
class TaskEstimate:
	"""Progress over the unfinished tasks."""
	estimated: int
	completed: int
	finish_at: datetime

	@property
	def remaining(self) -> int:
		return max(0, self.estimated - self.completed)


def _check_task_fields(values):
	if "title" in values and not str(values["title"]).strip():
		raise ValidationError("Task title cannot be empty")
	if "estimated_intervals" in values:
		est = values["estimated_intervals"]
		if not isinstance(est, int) or isinstance(est, bool) or est < 1:
			raise ValidationError(f"estimated_intervals must be at least 1, got {est!r}")
	if "completed_intervals" in values:
		done = values["completed_intervals"]
		if not isinstance(done, int) or isinstance(done, bool) or done < 0:
			raise ValidationError(f"completed_intervals cannot be negative, got {done!r}")
	if "is_done" in values and not isinstance(values["is_done"], bool):
		raise ValidationError("is_done must be true or false")


class TaskLedger:
	"""The user's tasks, kept in memory and mirrored to the store best-effort."""

	def __init__(self, store, tasks=None, clock=None, on_error=None):
		self._store = store
		self._clock = clock or SystemClock()
		self._on_error = on_error
		self._tasks = {t.id: t for t in (tasks or [])}

	def _persist(self, description, fn, *args):
		best_effort(logger, description, fn, *args, on_error=self._on_error)

	def tasks(self):
		"""Tasks newest first."""
		return sorted(self._tasks.values(), key=lambda t: t.created_at, reverse=True)

	def get(self, task_id):
		try:
			return self._tasks[task_id]
		except KeyError:
			raise NotFoundError(f"task {task_id} not found") from None

	def __contains__(self, task_id):
		return task_id in self._tasks

	def create(self, project_name, title, notes="", estimated_intervals=1):
		_check_task_fields({"title": title, "estimated_intervals": estimated_intervals})
		task = Task(
			title=title.strip(),
			project_name=(project_name or "").strip() or NO_PROJECT,
			notes=notes or "",
			estimated_intervals=estimated_intervals,
			created_at=self._clock.now(),
		)
		self._tasks[task.id] = task
		logger.info("Created task %s (%r)", task.id, task.title)
		self._persist("save the new task", self._store.create_task, task)
		return task

	def update(self, task_id, **changes):
		task = self.get(task_id)
		if "id" in changes and changes["id"] != task_id:
			raise ValidationError("A task's id cannot be changed")
		changes.pop("id", None)
		unknown = set(changes) - EDITABLE
		if unknown:
			raise ValidationError(f"Unknown task fields: {', '.join(sorted(unknown))}")
		_check_task_fields(changes)
		if "project_name" in changes:
			changes["project_name"] = (changes["project_name"] or "").strip() or NO_PROJECT
		for name, value in changes.items():
			setattr(task, name, value)
		self._persist("save the task changes", self._store.update_task, task_id, changes)
		return task

	def delete(self, task_id):
		task = self.get(task_id)
		del self._tasks[task_id]
		logger.info("Deleted task %s", task_id)
		self._persist("delete the task", self._store.delete_task, task_id)
		return task

	def toggle_done(self, task_id):
		task = self.get(task_id)
		task.is_done = not task.is_done
		self._persist("save the task changes", self._store.update_task, task_id, {"is_done": task.is_done})
		return task

	def increment_completed(self, task_id):
		"""Credit one finished Work interval to the task."""
		task = self.get(task_id)
		task.completed_intervals += 1
		self._persist("save the task progress", self._store.update_task, task_id,
			{"completed_intervals": task.completed_intervals})
		return task

	def projects(self):
		"""Distinct project names in use, without the placeholder project."""
		return sorted({t.project_name for t in self._tasks.values() if t.project_name and t.project_name != NO_PROJECT})

	def estimate(self, work_minutes, now=None):
		open_tasks = [t for t in self._tasks.values() if not t.is_done]
		estimated = sum(t.estimated_intervals for t in open_tasks)
		completed = sum(t.completed_intervals for t in open_tasks)
		now = now or self._clock.now()
		finish_at = now + timedelta(minutes=max(0, estimated - completed) * work_minutes)
		return TaskEstimate(estimated=estimated, completed=completed, finish_at=finish_at)
