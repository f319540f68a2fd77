"""Per-user persistence service used by the timer, ledger and recorder.

`SqliteStore` keeps everything in the local database, scoped by user key.
`MemoryStore` is the fallback when nobody is signed in: same interface,
nothing survives the process.
"""
import copy

from BackEnd.core.errors import NotFoundError, PersistenceError
from BackEnd.core.log import setup_logger
from BackEnd.repos import session_repo, settings_repo, task_repo

logger = setup_logger(__name__)


class SqliteStore:
	persistent = True

	def __init__(self, user_id, dbfile=None):
		self.user_id = user_id
		self.dbfile = dbfile

	def load_tasks(self):
		return task_repo.load_tasks(self.user_id, self.dbfile)

	def create_task(self, task):
		return task_repo.create_task(self.user_id, task, self.dbfile)

	def update_task(self, task_id, fields):
		# a row missing here means an earlier best-effort write was lost
		try:
			task_repo.update_task(self.user_id, task_id, fields, self.dbfile)
		except NotFoundError as e:
			raise PersistenceError(str(e)) from e

	def delete_task(self, task_id):
		task_repo.delete_task(self.user_id, task_id, self.dbfile)

	def load_sessions(self):
		return session_repo.load_sessions(self.user_id, self.dbfile)

	def create_session(self, session):
		return session_repo.create_session(self.user_id, session, self.dbfile)

	def load_settings(self):
		return settings_repo.load_settings(self.user_id, self.dbfile)

	def save_settings(self, settings):
		settings_repo.save_settings(self.user_id, settings, self.dbfile)

	def load_timer_state(self):
		return settings_repo.load_timer_state(self.user_id, self.dbfile)

	def save_timer_state(self, state):
		settings_repo.save_timer_state(self.user_id, state, self.dbfile)


class MemoryStore:
	persistent = False

	def __init__(self):
		self.user_id = None
		self._tasks = {}
		self._sessions = []
		self._docs = {}

	def load_tasks(self):
		tasks = sorted(self._tasks.values(), key=lambda t: t.created_at, reverse=True)
		return [copy.copy(t) for t in tasks]

	def create_task(self, task):
		self._tasks[task.id] = copy.copy(task)
		return task

	def update_task(self, task_id, fields):
		task = self._tasks.get(task_id)
		if task is None:
			raise PersistenceError(f"task {task_id} is not in the store")
		for name, value in fields.items():
			if name in task_repo.UPDATABLE:
				setattr(task, name, value)

	def delete_task(self, task_id):
		self._tasks.pop(task_id, None)

	def load_sessions(self):
		return sorted(self._sessions, key=lambda s: s.start_time, reverse=True)

	def create_session(self, session):
		self._sessions.append(session)
		return session

	def load_settings(self):
		return copy.deepcopy(self._docs.get(settings_repo.SETTINGS_KEY))

	def save_settings(self, settings):
		self._docs[settings_repo.SETTINGS_KEY] = copy.deepcopy(settings)

	def load_timer_state(self):
		return copy.deepcopy(self._docs.get(settings_repo.TIMER_STATE_KEY))

	def save_timer_state(self, state):
		self._docs[settings_repo.TIMER_STATE_KEY] = copy.deepcopy(state)


def open_store(user_id=None, dbfile=None):
	"""Sqlite-backed store for a signed-in user, ephemeral memory store otherwise."""
	if user_id:
		logger.info("Using local database for user %s", user_id)
		return SqliteStore(user_id, dbfile)
	logger.info("No user signed in; data will not be saved")
	return MemoryStore()
