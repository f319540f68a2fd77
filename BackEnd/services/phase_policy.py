"""Phase sequencing. Natural expiry and skip both go through `next_phase`."""
from BackEnd.core.models import Phase


def phase_minutes(phase, config):
	if phase is Phase.WORK:
		return config.work_minutes
	if phase is Phase.SHORT_BREAK:
		return config.short_break_minutes
	return config.long_break_minutes

def phase_seconds(phase, config):
	return phase_minutes(phase, config) * 60

def next_phase(current, completed_work_count, config):
	"""Return (phase, minutes) that follows `current`.

	`completed_work_count` is the count *before* the finishing interval; a
	finishing Work interval brings it to count + 1, and every
	`long_break_interval`-th one is followed by a long break.
	"""
	if current is Phase.WORK:
		if (completed_work_count + 1) % config.long_break_interval == 0:
			return Phase.LONG_BREAK, config.long_break_minutes
		return Phase.SHORT_BREAK, config.short_break_minutes
	return Phase.WORK, config.work_minutes

def works_until_long_break(completed_work_count, config):
	"""Work intervals still to finish before the next long break (1..interval)."""
	return config.long_break_interval - (completed_work_count % config.long_break_interval)
