import logging
import os
from typing import Optional

from BackEnd.core.paths import log_dir

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _default_level() -> int:
	name = os.environ.get("POMODORO_LOG_LEVEL", "INFO").upper()
	level = logging.getLevelName(name)
	return level if isinstance(level, int) else logging.INFO


def setup_logger(
	name: str,
	log_file: str = "app.log",
	level: Optional[int] = None,
	console: bool = True,
) -> logging.Logger:
	"""Configure and return a module-level logger."""
	logger = logging.getLogger(name)
	logger.setLevel(level if level is not None else _default_level())

	if not logger.handlers:
		formatter = logging.Formatter(FORMAT)
		file_handler = logging.FileHandler(log_dir() / log_file, encoding="utf-8")
		file_handler.setFormatter(formatter)
		logger.addHandler(file_handler)

		if console:
			console_handler = logging.StreamHandler()
			console_handler.setFormatter(formatter)
			logger.addHandler(console_handler)

	return logger
