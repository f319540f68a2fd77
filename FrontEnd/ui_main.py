from pathlib import Path

from PySide6.QtWidgets import (
	QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QListWidget,
	QStackedWidget, QListWidgetItem, QTableWidget, QTableWidgetItem, QSizePolicy, QComboBox,
	QButtonGroup, QMessageBox, QFileDialog, QGridLayout, QProgressBar
)
from PySide6.QtCore import Qt, QEvent
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure

from BackEnd.core.clock import fmt_mmss
from BackEnd.core.errors import PomodoroError
from BackEnd.core.log import setup_logger
from BackEnd.core.models import Phase, TimerStatus
from FrontEnd.charts import draw_rollup
from FrontEnd.components.footer_today import FooterToday
from FrontEnd.components.settings_dialog import SettingsDialog
from FrontEnd.components.task_dialog import TaskDialog
from FrontEnd.styles.design_tokens import COLORS, phase_color

logger = setup_logger(__name__)

STYLESHEET = Path(__file__).parent / "styles" / "pomodoro.qss"
PERIODS = [("Today", "day"), ("Week", "week"), ("Month", "month"), ("Year", "year")]
HISTORY_PAGE_SIZE = 20


class MainWindow(QMainWindow):
	def __init__(self, service):
		super().__init__()
		self.service = service
		self.setWindowTitle("Pomodoro Timer")
		self.resize(1000, 680)

		with open(STYLESHEET, 'r', encoding='utf-8') as f:
			self.setStyleSheet(f.read())

		# --- Sidebar ---
		self.sidebar = QListWidget()
		self.sidebar.setObjectName("Sidebar")
		self.sidebar.setFixedWidth(200)
		self.sidebar.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
		for name in ("Timer", "Tasks", "Reports"):
			self.sidebar.addItem(QListWidgetItem(name))
		self.sidebar.setCurrentRow(0)

		self.stack = QStackedWidget()
		self.stack.addWidget(self._build_timer_tab())
		self.stack.addWidget(self._build_tasks_tab())
		self.stack.addWidget(self._build_reports_tab())
		self.sidebar.currentRowChanged.connect(self.stack.setCurrentIndex)

		self.footer_today = FooterToday()
		content = QVBoxLayout()
		content.setContentsMargins(0, 0, 0, 0)
		content.addWidget(self.stack)
		content.addWidget(self.footer_today)
		content_widget = QWidget()
		content_widget.setLayout(content)

		main_layout = QHBoxLayout()
		main_layout.setContentsMargins(0, 0, 0, 0)
		main_layout.setSpacing(0)
		main_layout.addWidget(self.sidebar)
		main_layout.addWidget(content_widget)
		container = QWidget()
		container.setLayout(main_layout)
		self.setCentralWidget(container)

		service.tick.connect(self._on_tick)
		service.state_changed.connect(self._on_state)
		service.phase_changed.connect(self._on_phase)
		service.session_recorded.connect(self._on_session)
		service.tasks_changed.connect(self._refresh_tasks)
		service.settings_changed.connect(lambda _config: self._on_phase(self.service.get_state().current_phase.value))
		service.notice.connect(self._show_notice)

		state = service.get_state()
		self._on_phase(state.current_phase.value)
		self._on_state(state.status.value)
		self._on_tick(state.remaining_seconds)
		self._refresh_tasks()
		self._refresh_reports()
		for message in service.startup_notices:
			self._show_notice(message)

	# ---- Window events ----

	def changeEvent(self, event):
		# Timers may have been throttled while minimised or hidden
		if event.type() in (QEvent.Type.ActivationChange, QEvent.Type.WindowStateChange) and self.isActiveWindow():
			self.service.on_visibility_regained()
		super().changeEvent(event)

	def closeEvent(self, event):
		self.service.shutdown()
		super().closeEvent(event)

	def _show_notice(self, message):
		self.statusBar().showMessage(message, 8000)

	def _run(self, action, *args, **kwargs):
		"""Call a service action, turning its errors into a message box."""
		try:
			return action(*args, **kwargs)
		except PomodoroError as e:
			QMessageBox.warning(self, "Pomodoro", str(e))
			return None

	# ---- Timer tab ----

	def _build_timer_tab(self):
		w = QWidget()
		outer = QVBoxLayout()
		outer.setContentsMargins(32, 32, 32, 16)

		mode_row = QHBoxLayout()
		mode_row.addStretch()
		self.mode_group = QButtonGroup(self)
		self.mode_buttons = {}
		for phase in Phase:
			btn = QPushButton(phase.label if phase is not Phase.WORK else "Pomodoro")
			btn.setObjectName("ModeBtn")
			btn.setCheckable(True)
			btn.clicked.connect(lambda _checked=False, p=phase: self.service.switch_mode(p))
			self.mode_group.addButton(btn)
			self.mode_buttons[phase.value] = btn
			mode_row.addWidget(btn)
		mode_row.addStretch()
		outer.addLayout(mode_row)

		# Timer card
		self.timer_card = QWidget()
		self.timer_card.setObjectName("TimerCard")
		card_layout = QVBoxLayout()
		card_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
		self.phase_label = QLabel("")
		self.phase_label.setObjectName("PhaseLabel")
		self.phase_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		self.timer_label = QLabel("25:00")
		self.timer_label.setObjectName("TimerLabel")
		self.timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		self.progress_bar = QProgressBar()
		self.progress_bar.setObjectName("PhaseProgress")
		self.progress_bar.setRange(0, 1000)
		self.progress_bar.setTextVisible(False)
		self.task_label = QLabel("")
		self.task_label.setObjectName("PhaseLabel")
		self.task_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		card_layout.addWidget(self.phase_label)
		card_layout.addWidget(self.timer_label)
		card_layout.addWidget(self.progress_bar)
		card_layout.addWidget(self.task_label)
		self.timer_card.setLayout(card_layout)
		outer.addWidget(self.timer_card, 1)

		controls = QHBoxLayout()
		controls.addStretch()
		self.start_pause_btn = QPushButton("Start")
		self.start_pause_btn.setObjectName("StartBtn")
		self.start_pause_btn.clicked.connect(self.service.toggle)
		self.reset_btn = QPushButton("Reset")
		self.reset_btn.clicked.connect(self.service.reset)
		self.skip_btn = QPushButton("Skip")
		self.skip_btn.clicked.connect(self.service.skip)
		settings_btn = QPushButton("Settings")
		settings_btn.clicked.connect(self._open_settings)
		for btn in (self.start_pause_btn, self.reset_btn, self.skip_btn, settings_btn):
			controls.addWidget(btn)
		controls.addStretch()
		outer.addLayout(controls)

		self.cycle_label = QLabel("")
		self.cycle_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		outer.addWidget(self.cycle_label)
		w.setLayout(outer)
		return w

	def _on_tick(self, remaining):
		self.timer_label.setText(fmt_mmss(remaining))
		self.setWindowTitle(f"{fmt_mmss(remaining)} - {self._phase.label}")
		self.progress_bar.setValue(int(self.service.progress() * 1000))

	def _on_state(self, state):
		if state == TimerStatus.RUNNING.value:
			self.start_pause_btn.setText("Pause")
		elif state == TimerStatus.PAUSED.value:
			self.start_pause_btn.setText("Resume")
		else:
			self.start_pause_btn.setText("Start")
		self.skip_btn.setEnabled(state != TimerStatus.IDLE.value)

	def _on_phase(self, phase):
		config = self.service.config
		self._phase = Phase(phase)
		self.mode_buttons[phase].setChecked(True)
		self.phase_label.setText(Phase(phase).label)
		self.timer_card.setStyleSheet(f"QWidget#TimerCard {{ background: {phase_color(config, phase)}; }}")
		self._update_cycle_label()
		self._apply_theme()

	def _update_cycle_label(self):
		state = self.service.get_state()
		self.cycle_label.setText(
			f"Pomodoros completed: {state.completed_work_count} | "
			f"Next long break in: {self.service.works_until_long_break()}"
		)
		task = self.service.active_task()
		self.task_label.setText(f"Working on: {task.title}" if task else "")

	def _apply_theme(self):
		if self.service.config.theme == "dark":
			self.centralWidget().setStyleSheet(
				f"QWidget {{ background: {COLORS['dark_background']}; color: {COLORS['dark_text']}; }}")
		else:
			self.centralWidget().setStyleSheet("")

	def _on_session(self, session):
		self._update_cycle_label()
		self._refresh_reports()

	def _open_settings(self):
		dialog = SettingsDialog(self.service.config, self)
		if dialog.exec():
			self._run(self.service.set_configuration, **dialog.values())

	# ---- Tasks tab ----

	def _build_tasks_tab(self):
		w = QWidget()
		layout = QVBoxLayout()
		layout.setContentsMargins(32, 32, 32, 16)

		header = QHBoxLayout()
		title = QLabel("Tasks")
		title.setObjectName("StatValue")
		header.addWidget(title)
		header.addStretch()
		add_btn = QPushButton("Add Task")
		add_btn.clicked.connect(self._add_task)
		header.addWidget(add_btn)
		layout.addLayout(header)

		self.task_list = QListWidget()
		self.task_list.setObjectName("TaskList")
		self.task_list.itemDoubleClicked.connect(lambda item: self._edit_task(item.data(Qt.UserRole)))
		layout.addWidget(self.task_list, 1)

		actions = QHBoxLayout()
		for text, handler in (
			("Set Active", self._activate_selected),
			("Done / Undo", lambda: self._with_selected(self.service.toggle_task_done)),
			("Edit", lambda: self._with_selected(self._edit_task)),
			("Delete", lambda: self._with_selected(self._delete_task)),
		):
			btn = QPushButton(text)
			btn.clicked.connect(handler)
			actions.addWidget(btn)
		actions.addStretch()
		layout.addLayout(actions)

		self.task_totals = QLabel("")
		layout.addWidget(self.task_totals)
		w.setLayout(layout)
		return w

	def _refresh_tasks(self):
		active = self.service.active_task()
		self.task_list.clear()
		for task in self.service.tasks():
			marker = "▶ " if active is not None and task.id == active.id else ""
			check = "✓ " if task.is_done else ""
			text = f"{marker}{check}{task.title}  [{task.project_name}]  Act: {task.completed_intervals} / Est: {task.estimated_intervals}"
			if task.notes:
				text += f"\n    {task.notes}"
			item = QListWidgetItem(text)
			item.setData(Qt.UserRole, task.id)
			self.task_list.addItem(item)

		estimate = self.service.estimate()
		if estimate.estimated:
			finish = estimate.finish_at.astimezone().strftime("%H:%M")
			self.task_totals.setText(
				f"Total: {estimate.completed} / {estimate.estimated} pomodoros  ·  Estimated finish: {finish}")
		else:
			self.task_totals.setText("No tasks yet. Add one to get started!")
		self._update_cycle_label()

	def _with_selected(self, action):
		item = self.task_list.currentItem()
		if item is None:
			return
		self._run(action, item.data(Qt.UserRole))

	def _activate_selected(self):
		self._with_selected(self.service.set_active_task)

	def _add_task(self):
		dialog = TaskDialog(self.service.projects(), parent=self)
		if dialog.exec():
			values = dialog.values()
			self._run(self.service.add_task, values["title"], values["project_name"],
				values["notes"], values["estimated_intervals"])

	def _edit_task(self, task_id):
		task = self.service.ledger.get(task_id)
		dialog = TaskDialog(self.service.projects(), task=task, parent=self)
		if dialog.exec():
			self._run(self.service.update_task, task_id, **dialog.values())

	def _delete_task(self, task_id):
		confirm = QMessageBox.question(self, "Delete Task", "Delete this task? Its history is kept.")
		if confirm == QMessageBox.Yes:
			self.service.delete_task(task_id)

	# ---- Reports tab ----

	def _build_reports_tab(self):
		w = QWidget()
		layout = QVBoxLayout()
		layout.setAlignment(Qt.AlignmentFlag.AlignTop)
		layout.setContentsMargins(32, 32, 32, 16)

		timeframe_layout = QHBoxLayout()
		self.hist_prev_btn = QPushButton("◀")
		self.hist_prev_btn.setFixedSize(28, 28)
		self.hist_period_label = QLabel("")
		self.hist_period_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		self.hist_next_btn = QPushButton("▶")
		self.hist_next_btn.setFixedSize(28, 28)
		timeframe_layout.addWidget(self.hist_prev_btn)
		timeframe_layout.addWidget(self.hist_period_label)
		timeframe_layout.addWidget(self.hist_next_btn)
		timeframe_layout.addStretch()
		timeframe_layout.addWidget(QLabel("Show focus time for:"))
		self.timeframe_combo = QComboBox()
		self.timeframe_combo.addItems([label for label, _period in PERIODS])
		self.timeframe_combo.setCurrentIndex(1)
		self.timeframe_combo.setMinimumWidth(140)
		timeframe_layout.addWidget(self.timeframe_combo)
		export_btn = QPushButton("Export CSV")
		export_btn.clicked.connect(self._export_csv)
		timeframe_layout.addWidget(export_btn)
		layout.addLayout(timeframe_layout)

		stats = QGridLayout()
		self.stat_labels = {}
		for col, (key, caption) in enumerate((
			("hours", "Total Focus Time"), ("sessions", "Focus Sessions"),
			("days", "Days Accessed"), ("streak", "Day Streak"),
		)):
			value = QLabel("0")
			value.setObjectName("StatValue")
			stats.addWidget(QLabel(caption), 0, col)
			stats.addWidget(value, 1, col)
			self.stat_labels[key] = value
		layout.addLayout(stats)

		# Stacked bar chart (matplotlib)
		self.figure = Figure(figsize=(5, 2.5))
		self.canvas = FigureCanvas(self.figure)
		layout.addWidget(self.canvas)

		self.history_table = QTableWidget()
		self.history_table.setColumnCount(6)
		self.history_table.setHorizontalHeaderLabels([
			"Date", "Start", "End", "Minutes", "Type", "Project / Task"
		])
		self.history_table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
		self.history_table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
		self.history_table.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
		layout.addWidget(self.history_table)

		pager = QHBoxLayout()
		pager.addStretch()
		self.page_prev_btn = QPushButton("Newer")
		self.page_label = QLabel("")
		self.page_next_btn = QPushButton("Older")
		pager.addWidget(self.page_prev_btn)
		pager.addWidget(self.page_label)
		pager.addWidget(self.page_next_btn)
		pager.addStretch()
		layout.addLayout(pager)
		w.setLayout(layout)

		# history navigation state: 0 == current period, 1 == previous, etc.
		self.history_offset = 0
		self.history_page = 1

		def _on_timeframe_changed(i):
			# reset offset when switching timeframe
			self.history_offset = 0
			self._refresh_reports()

		self.timeframe_combo.currentIndexChanged.connect(_on_timeframe_changed)
		self.hist_prev_btn.clicked.connect(lambda: (setattr(self, 'history_offset', self.history_offset + 1), self._refresh_reports()))
		self.hist_next_btn.clicked.connect(lambda: (setattr(self, 'history_offset', max(0, self.history_offset - 1)), self._refresh_reports()))
		self.page_prev_btn.clicked.connect(lambda: (setattr(self, 'history_page', max(1, self.history_page - 1)), self._refresh_history()))
		self.page_next_btn.clicked.connect(lambda: (setattr(self, 'history_page', self.history_page + 1), self._refresh_history()))
		return w

	def _current_period(self):
		return PERIODS[self.timeframe_combo.currentIndex()][1]

	def _period_text(self, report):
		names = {"day": "Today", "week": "This Week", "month": "This Month", "year": "This Year"}
		previous = {"day": "Yesterday", "week": "Last Week", "month": "Last Month", "year": "Last Year"}
		if self.history_offset == 0:
			return names[report.period]
		if self.history_offset == 1:
			return previous[report.period]
		if report.period == "year":
			return str(report.start.year)
		return report.start.strftime("%b-%d-%Y")

	def _refresh_reports(self):
		period = self._current_period()
		report = self.service.get_report(period, self.history_offset)
		self.stat_labels["hours"].setText(f"{report.total_hours}h")
		self.stat_labels["sessions"].setText(str(report.focus_sessions))
		self.stat_labels["days"].setText(str(report.days_accessed))
		self.stat_labels["streak"].setText(str(report.current_streak))
		self.hist_period_label.setText(self._period_text(report))
		self.hist_next_btn.setEnabled(self.history_offset > 0)

		draw_rollup(self.figure, self.service.get_rollup(period, self.history_offset))
		self.canvas.draw()

		today = self.service.get_report("day")
		self.footer_today.set_today(today.total_minutes, today.current_streak)
		self._refresh_history()

	def _refresh_history(self):
		page = self.service.get_history_page(self.history_page, HISTORY_PAGE_SIZE)
		self.history_page = min(page.page, page.pages)
		if page.page != self.history_page:
			page = self.service.get_history_page(self.history_page, HISTORY_PAGE_SIZE)
		self.history_table.setRowCount(len(page.items))
		for row, sess in enumerate(page.items):
			start = sess.start_time.astimezone()
			end = sess.end_time.astimezone()
			who = sess.project_name + (f" / {sess.task_name}" if sess.task_name else "")
			self.history_table.setItem(row, 0, QTableWidgetItem(start.date().isoformat()))
			self.history_table.setItem(row, 1, QTableWidgetItem(start.strftime("%H:%M")))
			self.history_table.setItem(row, 2, QTableWidgetItem(end.strftime("%H:%M")))
			self.history_table.setItem(row, 3, QTableWidgetItem(str(sess.duration_minutes)))
			self.history_table.setItem(row, 4, QTableWidgetItem(sess.phase.label))
			self.history_table.setItem(row, 5, QTableWidgetItem(who))
		self.page_label.setText(f"Page {page.page} of {page.pages}")
		self.page_prev_btn.setEnabled(page.has_prev)
		self.page_next_btn.setEnabled(page.has_next)

	def _export_csv(self):
		path, _ = QFileDialog.getSaveFileName(self, "Export sessions", "pomodoro-sessions.csv", "CSV files (*.csv)")
		if not path:
			return
		try:
			with open(path, 'w', newline='', encoding='utf-8') as f:
				count = self.service.export_csv(f)
		except OSError as e:
			logger.warning("CSV export to %s failed: %s", path, e)
			QMessageBox.warning(self, "Export", f"Could not write {path}: {e}")
			return
		self._show_notice(f"Exported {count} sessions to {path}")
