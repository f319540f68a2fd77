from PySide6.QtWidgets import QDialog, QFormLayout, QLineEdit, QPlainTextEdit, QSpinBox, QComboBox, QDialogButtonBox

from BackEnd.core.models import NO_PROJECT


class TaskDialog(QDialog):
	"""Add or edit a task. Pass `task` to edit; `values()` gives the fields."""

	def __init__(self, projects, task=None, parent=None):
		super().__init__(parent)
		self.setWindowTitle("Edit Task" if task else "Add Task")
		form = QFormLayout(self)

		self.title = QLineEdit(task.title if task else "")
		self.title.setPlaceholderText("Task title")
		self.project = QComboBox()
		self.project.setEditable(True)
		self.project.addItems([NO_PROJECT] + list(projects))
		self.project.setCurrentText(task.project_name if task else NO_PROJECT)
		self.notes = QPlainTextEdit(task.notes if task else "")
		self.notes.setPlaceholderText("Notes (optional)")
		self.notes.setFixedHeight(70)
		self.estimate = QSpinBox()
		self.estimate.setRange(1, 99)
		self.estimate.setValue(task.estimated_intervals if task else 1)

		form.addRow("Title", self.title)
		form.addRow("Project", self.project)
		form.addRow("Notes", self.notes)
		form.addRow("Estimated pomodoros", self.estimate)
		if task is not None:
			self.completed = QSpinBox()
			self.completed.setRange(0, 999)
			self.completed.setValue(task.completed_intervals)
			form.addRow("Completed pomodoros", self.completed)
		else:
			self.completed = None

		buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
		buttons.accepted.connect(self.accept)
		buttons.rejected.connect(self.reject)
		form.addRow(buttons)

	def values(self):
		values = {
			"title": self.title.text().strip(),
			"project_name": self.project.currentText().strip() or NO_PROJECT,
			"notes": self.notes.toPlainText(),
			"estimated_intervals": self.estimate.value(),
		}
		if self.completed is not None:
			values["completed_intervals"] = self.completed.value()
		return values
