import os
from pathlib import Path

APP_NAME = "PomodoroTracker"

def user_data_dir(app_name=APP_NAME):
	"""Return per-user data dir (Windows/macOS/Linux).

	POMODORO_DATA_DIR overrides the platform default.
	"""
	override = os.environ.get("POMODORO_DATA_DIR")
	if override:
		path = Path(override)
	else:
		if os.name == "nt":
			base = os.environ.get("LOCALAPPDATA", os.path.expanduser("~\\AppData\\Local"))
		elif os.name == "posix":
			base = os.environ.get("XDG_DATA_HOME", os.path.expanduser("~/.local/share"))
		else:
			base = os.path.expanduser("~")
		path = Path(base) / app_name
	path.mkdir(parents=True, exist_ok=True)
	return path

def db_path():
	"""Return Path to pomodoro.db inside user data dir (POMODORO_DB overrides)."""
	override = os.environ.get("POMODORO_DB")
	if override:
		return Path(override)
	return user_data_dir() / "pomodoro.db"

def log_dir():
	path = user_data_dir() / "logs"
	path.mkdir(parents=True, exist_ok=True)
	return path

def sounds_dir():
	"""Alarm sound files shipped with the front end."""
	return Path(__file__).parent.parent.parent / "FrontEnd" / "sounds"
