from PySide6.QtWidgets import (
	QDialog, QFormLayout, QSpinBox, QCheckBox, QComboBox, QSlider, QDialogButtonBox, QLineEdit
)
from PySide6.QtCore import Qt

from BackEnd.core.settings import ALARM_SOUNDS, BACKGROUND_SOUNDS, THEMES


class SettingsDialog(QDialog):
	"""Edit the timer settings. `values()` returns a dict for Configuration.with_changes."""

	def __init__(self, config, parent=None):
		super().__init__(parent)
		self.setWindowTitle("Settings")
		form = QFormLayout(self)

		self.work = self._minutes(config.work_minutes, 1, 120)
		self.short_break = self._minutes(config.short_break_minutes, 1, 60)
		self.long_break = self._minutes(config.long_break_minutes, 1, 90)
		self.interval = QSpinBox()
		self.interval.setRange(2, 12)
		self.interval.setValue(config.long_break_interval)
		self.auto_breaks = QCheckBox()
		self.auto_breaks.setChecked(config.auto_start_breaks)
		self.auto_work = QCheckBox()
		self.auto_work.setChecked(config.auto_start_pomodoros)
		self.theme = self._choice(THEMES, config.theme)
		self.work_color = QLineEdit(config.work_color)
		self.short_color = QLineEdit(config.short_break_color)
		self.long_color = QLineEdit(config.long_break_color)
		self.alarm = self._choice(ALARM_SOUNDS, config.alarm_sound)
		self.alarm_volume = self._volume(config.alarm_volume)
		self.background = self._choice(BACKGROUND_SOUNDS, config.background_sound)
		self.background_volume = self._volume(config.background_volume)

		form.addRow("Pomodoro (minutes)", self.work)
		form.addRow("Short break (minutes)", self.short_break)
		form.addRow("Long break (minutes)", self.long_break)
		form.addRow("Long break interval", self.interval)
		form.addRow("Auto-start breaks", self.auto_breaks)
		form.addRow("Auto-start pomodoros", self.auto_work)
		form.addRow("Theme", self.theme)
		form.addRow("Pomodoro colour", self.work_color)
		form.addRow("Short break colour", self.short_color)
		form.addRow("Long break colour", self.long_color)
		form.addRow("Alarm sound", self.alarm)
		form.addRow("Alarm volume", self.alarm_volume)
		form.addRow("Background sound", self.background)
		form.addRow("Background volume", self.background_volume)

		buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
		buttons.accepted.connect(self.accept)
		buttons.rejected.connect(self.reject)
		form.addRow(buttons)

	def _minutes(self, value, low, high):
		box = QSpinBox()
		box.setRange(low, high)
		box.setValue(value)
		return box

	def _choice(self, options, current):
		combo = QComboBox()
		combo.addItems(list(options))
		combo.setCurrentText(current)
		return combo

	def _volume(self, value):
		slider = QSlider(Qt.Horizontal)
		slider.setRange(0, 100)
		slider.setValue(value)
		return slider

	def values(self):
		return {
			"work_minutes": self.work.value(),
			"short_break_minutes": self.short_break.value(),
			"long_break_minutes": self.long_break.value(),
			"long_break_interval": self.interval.value(),
			"auto_start_breaks": self.auto_breaks.isChecked(),
			"auto_start_pomodoros": self.auto_work.isChecked(),
			"theme": self.theme.currentText(),
			"work_color": self.work_color.text().strip(),
			"short_break_color": self.short_color.text().strip(),
			"long_break_color": self.long_color.text().strip(),
			"alarm_sound": self.alarm.currentText(),
			"alarm_volume": self.alarm_volume.value(),
			"background_sound": self.background.currentText(),
			"background_volume": self.background_volume.value(),
		}
