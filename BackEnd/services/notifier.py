from BackEnd.core.log import setup_logger
from BackEnd.core.paths import sounds_dir

logger = setup_logger(__name__)


class AlarmPlayer:
	"""Plays the phase-complete alarm. Fire-and-forget: failures are only logged."""

	def __init__(self, directory=None):
		self._directory = directory or sounds_dir()
		self._effect = None

	def sound_path(self, sound):
		return self._directory / f"{sound}.wav"

	def play(self, sound, volume):
		path = self.sound_path(sound)
		if not path.exists():
			logger.warning("Alarm sound %s not found at %s", sound, path)
			return
		try:
			from PySide6.QtCore import QUrl
			from PySide6.QtMultimedia import QSoundEffect
			if self._effect is None:
				self._effect = QSoundEffect()
			self._effect.setSource(QUrl.fromLocalFile(str(path)))
			self._effect.setVolume(max(0, min(100, volume)) / 100)
			self._effect.play()
		except Exception:
			logger.exception("Alarm playback failed")
