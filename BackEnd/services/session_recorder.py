from BackEnd.core.errors import best_effort
from BackEnd.core.log import setup_logger
from BackEnd.core.models import Session, NO_PROJECT

logger = setup_logger(__name__)


class SessionRecorder:
	"""Append-only log of finished phases, mirrored to the store."""

	def __init__(self, store, sessions=None, on_error=None):
		self._store = store
		self._log = list(sessions or [])
		self._on_error = on_error

	def record_completion(self, phase, start_time, end_time, duration_minutes, active_task=None):
		"""Build the Session for a finished phase, append it and persist it.

		Project and task names are copied from `active_task` now, so later
		edits or deletes of the task leave the entry as it was.
		"""
		session = Session(
			phase=phase,
			start_time=start_time,
			end_time=end_time,
			duration_minutes=int(duration_minutes),
			task_id=active_task.id if active_task is not None else None,
			project_name=active_task.project_name if active_task is not None else NO_PROJECT,
			task_name=active_task.title if active_task is not None else None,
		)
		self._log.append(session)
		logger.info("Recorded %s session (%s min)%s", phase.value, session.duration_minutes,
			f" for task {session.task_name!r}" if session.task_name else "")
		best_effort(logger, "save the finished session", self._store.create_session, session,
			on_error=self._on_error)
		return session

	def sessions(self):
		"""All sessions, newest first."""
		return sorted(self._log, key=lambda s: s.start_time, reverse=True)
