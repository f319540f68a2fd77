import math
import threading
from datetime import timedelta

from PySide6.QtCore import QCoreApplication, QObject, QTimer, Signal

from BackEnd.core.clock import SystemClock, local_date, seconds_until
from BackEnd.core.errors import ValidationError, best_effort
from BackEnd.core.log import setup_logger
from BackEnd.core.models import NO_PROJECT, Phase, TimerState, TimerStatus
from BackEnd.core.settings import Configuration
from BackEnd.repos.store import MemoryStore
from BackEnd.services import report_service
from BackEnd.services.phase_policy import next_phase, phase_minutes, phase_seconds, works_until_long_break
from BackEnd.services.session_recorder import SessionRecorder
from BackEnd.services.task_ledger import TaskLedger

logger = setup_logger(__name__)


class TimerService(QObject):
	"""Pomodoro state machine and the API the UI drives.

	Only the absolute deadline is stored while running; the remaining time is
	re-derived from it whenever somebody looks (poll timer, get_state(),
	visibility regained), so a suspended event loop never loses time.
	"""
	tick = Signal(int)  # emits remaining seconds
	state_changed = Signal(str)  # emits 'idle', 'running', 'paused'
	phase_changed = Signal(str)  # emits the new phase value
	session_recorded = Signal(object)
	tasks_changed = Signal()
	settings_changed = Signal(object)
	notice = Signal(str)  # non-blocking user-facing message

	def __init__(self, store=None, config=None, clock=None, tasks=None, sessions=None,
			notifier=None, poll_interval_ms=250):
		super().__init__()
		self._store = store if store is not None else MemoryStore()
		self._clock = clock or SystemClock()
		self._config = config or Configuration()
		self._notifier = notifier
		self._lock = threading.RLock()
		self.ledger = TaskLedger(self._store, tasks, clock=self._clock, on_error=self._report_error)
		self.recorder = SessionRecorder(self._store, sessions, on_error=self._report_error)
		self.startup_notices = []
		self._state = TimerState(remaining_seconds=phase_seconds(Phase.WORK, self._config))
		self._last_tick = None
		self._poll = QTimer(self)
		self._poll.setInterval(poll_interval_ms)
		self._poll.timeout.connect(self.refresh)

	@classmethod
	def load(cls, store, clock=None, notifier=None, poll_interval_ms=250):
		"""Build a service from everything the store has for the user.

		Load failures fall back to defaults; the messages are kept in
		`startup_notices` for the UI to show once it is up.
		"""
		notices = []
		config = Configuration()
		raw = best_effort(logger, "load your settings", store.load_settings, on_error=notices.append)
		if raw:
			try:
				config = Configuration.from_dict(raw)
			except (ValidationError, TypeError) as e:
				logger.warning("Stored settings are invalid, using defaults: %s", e)
				notices.append("Saved settings were invalid and have been reset to defaults.")
		tasks = best_effort(logger, "load your tasks", store.load_tasks, on_error=notices.append) or []
		sessions = best_effort(logger, "load your history", store.load_sessions, on_error=notices.append) or []
		service = cls(store, config=config, clock=clock, tasks=tasks, sessions=sessions,
			notifier=notifier, poll_interval_ms=poll_interval_ms)
		saved = best_effort(logger, "load the saved timer", store.load_timer_state, on_error=notices.append)
		if saved:
			service.restore(saved)
		service.startup_notices = notices
		logger.info("Loaded %d tasks and %d sessions", len(tasks), len(sessions))
		return service

	# ---- Internal helpers ----

	def _report_error(self, message):
		self.notice.emit(message)

	def _set_status(self, status):
		if self._state.status is not status:
			self._state.status = status
			self.state_changed.emit(status.value)

	def _emit_tick(self):
		remaining = self._state.remaining_seconds
		if remaining != self._last_tick:
			self._last_tick = remaining
			self.tick.emit(remaining)

	def _start_polling(self):
		# without a Qt application there is no event loop; callers drive refresh() themselves
		if QCoreApplication.instance() is not None:
			self._poll.start()

	def _stop_polling(self):
		self._poll.stop()

	def _active_task(self):
		task_id = self._state.active_task_id
		if task_id is None or task_id not in self.ledger:
			return None
		return self.ledger.get(task_id)

	def _play_alarm(self):
		if self._notifier is None:
			return
		try:
			self._notifier.play(self._config.alarm_sound, self._config.alarm_volume)
		except Exception:
			logger.exception("Alarm notification failed")

	def _observe(self, now):
		"""Recompute remaining time at `now`; run completion if the deadline has passed."""
		if self._state.status is not TimerStatus.RUNNING:
			return False
		left = seconds_until(self._state.deadline, now)
		if left <= 0:
			self._state.remaining_seconds = 0
			self._complete(now)
			return True
		self._state.remaining_seconds = math.ceil(left)
		self._emit_tick()
		return False

	def _complete(self, now):
		"""Shared by natural expiry and skip(). Credits the planned duration."""
		state = self._state
		finished = state.current_phase
		task = self._active_task()
		if finished is Phase.WORK and task is not None:
			self.ledger.increment_completed(task.id)
			self.tasks_changed.emit()

		session = self.recorder.record_completion(
			finished, state.started_at or now, now, phase_minutes(finished, self._config), task)

		following, minutes = next_phase(finished, state.completed_work_count, self._config)
		if finished is Phase.WORK:
			state.completed_work_count += 1
		state.current_phase = following
		state.remaining_seconds = minutes * 60
		state.deadline = None
		state.started_at = None
		self._stop_polling()
		self._set_status(TimerStatus.IDLE)
		logger.info("%s finished; next up %s (%d min)", finished.label, following.label, minutes)

		self.session_recorded.emit(session)
		self.phase_changed.emit(following.value)
		self._play_alarm()

		if following.is_break:
			auto = self._config.auto_start_breaks
		else:
			auto = self._config.auto_start_pomodoros
		if auto:
			self.start()
		else:
			self._emit_tick()
		self.save_state()

	# ---- Timer controls ----

	def start(self):
		with self._lock:
			if self._state.status is TimerStatus.RUNNING:
				return
			now = self._clock.now()
			self._state.deadline = now + timedelta(seconds=self._state.remaining_seconds)
			if self._state.started_at is None:
				self._state.started_at = now
			self._set_status(TimerStatus.RUNNING)
			self._start_polling()
			self._emit_tick()
			logger.debug("Started %s, %ds left", self._state.current_phase.value, self._state.remaining_seconds)

	def pause(self):
		with self._lock:
			now = self._clock.now()
			self._observe(now)
			if self._state.status is not TimerStatus.RUNNING:
				logger.debug("pause() ignored while %s", self._state.status.value)
				return
			self._state.remaining_seconds = max(0, math.ceil(seconds_until(self._state.deadline, now)))
			self._state.deadline = None
			self._stop_polling()
			self._set_status(TimerStatus.PAUSED)
			self._emit_tick()
			self.save_state()

	def toggle(self):
		"""Start when idle or paused, pause when running."""
		with self._lock:
			if self._state.status is TimerStatus.RUNNING:
				self.pause()
			else:
				self.start()

	def reset(self):
		"""Back to the full duration of the current phase. The partial interval is discarded."""
		with self._lock:
			self._observe(self._clock.now())
			self._state.deadline = None
			self._state.started_at = None
			self._state.remaining_seconds = phase_seconds(self._state.current_phase, self._config)
			self._stop_polling()
			self._set_status(TimerStatus.IDLE)
			self._emit_tick()
			self.save_state()

	def skip(self):
		"""Finish the current phase now, exactly as if it had run out."""
		with self._lock:
			if self._state.status is TimerStatus.IDLE:
				logger.debug("skip() ignored while idle")
				return
			self._state.remaining_seconds = 0
			self._complete(self._clock.now())

	def switch_mode(self, phase):
		phase = Phase(phase)
		with self._lock:
			# an interval already past its deadline completes first
			self._observe(self._clock.now())
			self._state.current_phase = phase
			self._state.deadline = None
			self._state.started_at = None
			self._state.remaining_seconds = phase_seconds(phase, self._config)
			self._stop_polling()
			self._set_status(TimerStatus.IDLE)
			self.phase_changed.emit(phase.value)
			self._emit_tick()
			self.save_state()

	def refresh(self):
		"""Observation point: re-derive remaining time from the deadline. Returns it."""
		with self._lock:
			self._observe(self._clock.now())
			return self._state.remaining_seconds

	def on_visibility_regained(self):
		logger.debug("Window visible again; re-deriving remaining time")
		return self.refresh()

	# ---- Configuration ----

	@property
	def config(self):
		return self._config

	def set_configuration(self, config=None, **changes):
		"""Replace the settings. Invalid settings raise ValidationError and change nothing.

		A running interval keeps its deadline; an idle or paused timer picks
		up a changed duration for its phase immediately.
		"""
		with self._lock:
			if config is None:
				new = self._config.with_changes(**changes)
			elif isinstance(config, Configuration):
				new = config
			else:
				new = Configuration.from_dict(config)
			new.validate()
			self._observe(self._clock.now())
			old, self._config = self._config, new
			phase = self._state.current_phase
			if phase_minutes(phase, old) != phase_minutes(phase, new) and self._state.status is not TimerStatus.RUNNING:
				self._state.remaining_seconds = phase_seconds(phase, new)
				self._state.started_at = None
				self._set_status(TimerStatus.IDLE)
				self._emit_tick()
			best_effort(logger, "save your settings", self._store.save_settings, new.to_dict(),
				on_error=self._report_error)
			self.settings_changed.emit(new)
			return new

	# ---- Tasks ----

	def add_task(self, title, project_name=NO_PROJECT, notes="", estimated_intervals=1):
		with self._lock:
			task = self.ledger.create(project_name, title, notes, estimated_intervals)
			self.tasks_changed.emit()
			return task

	def update_task(self, task_id, **fields):
		with self._lock:
			task = self.ledger.update(task_id, **fields)
			self.tasks_changed.emit()
			return task

	def delete_task(self, task_id):
		"""Remove a task. If it was active the timer keeps going without attribution."""
		with self._lock:
			task = self.ledger.delete(task_id)
			if self._state.active_task_id == task_id:
				self._state.active_task_id = None
				self.save_state()
			self.tasks_changed.emit()
			return task

	def toggle_task_done(self, task_id):
		with self._lock:
			task = self.ledger.toggle_done(task_id)
			self.tasks_changed.emit()
			return task

	def set_active_task(self, task_id):
		with self._lock:
			if task_id is not None:
				self.ledger.get(task_id)
			self._state.active_task_id = task_id
			self.tasks_changed.emit()
			self.save_state()

	def active_task(self):
		with self._lock:
			return self._active_task()

	def tasks(self):
		return self.ledger.tasks()

	def projects(self):
		return self.ledger.projects()

	def estimate(self):
		return self.ledger.estimate(self._config.work_minutes, self._clock.now())

	# ---- Reads ----

	def get_state(self):
		"""Snapshot of the timer, with the remaining time freshly derived."""
		with self._lock:
			self._observe(self._clock.now())
			return self._state.copy()

	def progress(self):
		"""Fraction of the current phase already elapsed (0.0 - 1.0)."""
		state = self.get_state()
		total = phase_seconds(state.current_phase, self._config)
		return max(0.0, min(1.0, (total - state.remaining_seconds) / total))

	def works_until_long_break(self):
		with self._lock:
			return works_until_long_break(self._state.completed_work_count, self._config)

	def get_sessions(self):
		return self.recorder.sessions()

	def _today(self, tz=None):
		return local_date(self._clock.now(), tz)

	def get_report(self, period, offset=0, tz=None):
		return report_service.build_report(self.get_sessions(), period, self._today(tz), offset, tz)

	def get_rollup(self, period, offset=0, tz=None):
		return report_service.project_rollup(self.get_sessions(), period, self._today(tz), offset, tz)

	def get_history_page(self, page=1, page_size=20):
		return report_service.history_page(self.get_sessions(), page, page_size)

	def export_csv(self, fp, tz=None):
		return report_service.export_csv(self.get_sessions(), fp, tz)

	# ---- Snapshot ----

	def save_state(self):
		with self._lock:
			snapshot = self._state.to_dict()
		best_effort(logger, "save the timer", self._store.save_timer_state, snapshot,
			on_error=self._report_error)

	def restore(self, data):
		"""Bring back a saved snapshot. A running or paused timer comes back paused."""
		with self._lock:
			try:
				saved = TimerState.from_dict(data)
			except (KeyError, ValueError, TypeError) as e:
				logger.warning("Ignoring unreadable timer snapshot: %s", e)
				return
			full = phase_seconds(saved.current_phase, self._config)
			remaining = saved.remaining_seconds
			if saved.status is TimerStatus.RUNNING and saved.deadline is not None:
				remaining = max(0, math.ceil(seconds_until(saved.deadline, self._clock.now())))
			state = TimerState(
				current_phase=saved.current_phase,
				completed_work_count=max(0, saved.completed_work_count),
				active_task_id=saved.active_task_id if saved.active_task_id in self.ledger else None,
			)
			if saved.status is not TimerStatus.IDLE and remaining > 0:
				state.status = TimerStatus.PAUSED
				state.remaining_seconds = min(remaining, full)
				state.started_at = saved.started_at
			else:
				state.remaining_seconds = full
			self._state = state
			self._last_tick = None
			self.state_changed.emit(state.status.value)
			self.phase_changed.emit(state.current_phase.value)
			self._emit_tick()

	def shutdown(self):
		self._stop_polling()
		self.save_state()
