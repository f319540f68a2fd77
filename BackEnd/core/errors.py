class PomodoroError(Exception):
	"""Base class for errors raised by the tracker back end."""


class ValidationError(PomodoroError):
	"""Malformed configuration or record fields. Prior valid state is kept."""


class PersistenceError(PomodoroError):
	"""A store read or write failed. In-memory state stays authoritative."""


class NotFoundError(PomodoroError):
	"""An operation referenced a task or session id that does not exist."""


def best_effort(logger, description, fn, *args, on_error=None, **kwargs):
	"""Run a persistence call; log and report a PersistenceError instead of raising.

	Returns the call's result, or None when it failed.
	"""
	try:
		return fn(*args, **kwargs)
	except PersistenceError as e:
		logger.warning("Could not %s: %s", description, e)
		if on_error is not None:
			on_error(f"Could not {description}. Changes are kept for this session only.")
		return None
