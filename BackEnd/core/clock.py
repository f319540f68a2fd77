from datetime import datetime, timezone, timedelta


class SystemClock:
	"""Wall-clock time source. Always returns timezone-aware UTC datetimes."""

	def now(self) -> datetime:
		return datetime.now(timezone.utc)


def utc_now_iso():
	"""Return current UTC time as ISO8601 string (no microseconds)."""
	return datetime.now(timezone.utc).replace(microsecond=0).isoformat()

def local_date(moment: datetime, tz=None):
	"""Calendar date of `moment` in `tz` (local time zone when None)."""
	if moment.tzinfo is None:
		moment = moment.replace(tzinfo=timezone.utc)
	return moment.astimezone(tz).date()

def parse_iso(value):
	"""Parse an ISO8601 string into an aware datetime; naive values are taken as UTC."""
	if value is None or isinstance(value, datetime):
		return value
	dt = datetime.fromisoformat(value)
	if dt.tzinfo is None:
		dt = dt.replace(tzinfo=timezone.utc)
	return dt

def seconds_until(deadline: datetime, now: datetime) -> float:
	return (deadline - now) / timedelta(seconds=1)

def fmt_mmss(seconds: int) -> str:
	"""Format seconds as MM:SS (minutes are not wrapped at 60)."""
	return f"{seconds // 60:02}:{seconds % 60:02}"
