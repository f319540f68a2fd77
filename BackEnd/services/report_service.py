"""Read-side statistics over the session log.

Everything here is a pure function of the sessions passed in; nothing is
cached, so a report can be rebuilt at any time from the log alone. Dates are
calendar dates in the local time zone unless `tz` is given.
"""
import calendar
import csv
import datetime
from collections import defaultdict
from dataclasses import dataclass, field

from BackEnd.core.clock import local_date
from BackEnd.core.models import Phase

PERIODS = ("day", "week", "month", "year")


@dataclass(frozen=True)
class Report:
	period: str
	start: datetime.date
	end: datetime.date
	total_minutes: int
	focus_sessions: int
	days_accessed: int
	current_streak: int
	project_minutes: dict = field(default_factory=dict)

	@property
	def total_hours(self) -> float:
		return round(self.total_minutes / 60, 1)


@dataclass(frozen=True)
class Rollup:
	"""Per-project focus minutes per bucket, ready for a stacked bar chart."""
	period: str
	labels: list
	series: dict
	xlabel: str = ""

	def totals(self):
		return [sum(values[i] for values in self.series.values()) for i in range(len(self.labels))]


@dataclass(frozen=True)
class HistoryPage:
	items: list
	page: int
	page_size: int
	total: int

	@property
	def pages(self) -> int:
		return max(1, -(-self.total // self.page_size))

	@property
	def has_next(self) -> bool:
		return self.page < self.pages

	@property
	def has_prev(self) -> bool:
		return self.page > 1


def _check_period(period):
	if period not in PERIODS:
		raise ValueError(f"Unknown period {period!r}; expected one of {', '.join(PERIODS)}")

def period_bounds(period, today, offset=0):
	"""Inclusive (start, end) dates of the period containing `today`, `offset` periods back."""
	_check_period(period)
	if period == "day":
		day = today - datetime.timedelta(days=offset)
		return day, day
	if period == "week":
		start = today - datetime.timedelta(days=today.weekday()) - datetime.timedelta(weeks=offset)
		return start, start + datetime.timedelta(days=6)
	if period == "month":
		year = today.year
		month = today.month - offset
		# normalize month/year when month <= 0
		while month <= 0:
			month += 12
			year -= 1
		num_days = calendar.monthrange(year, month)[1]
		return datetime.date(year, month, 1), datetime.date(year, month, num_days)
	year = today.year - offset
	return datetime.date(year, 1, 1), datetime.date(year, 12, 31)

def work_sessions(sessions):
	return [s for s in sessions if s.phase is Phase.WORK]

def sessions_between(sessions, start, end, tz=None):
	return [s for s in sessions if start <= local_date(s.start_time, tz) <= end]

def total_focus_minutes(sessions):
	return sum(s.duration_minutes for s in work_sessions(sessions))

def focus_session_count(sessions):
	return len(work_sessions(sessions))

def days_accessed(sessions, tz=None):
	return len({local_date(s.start_time, tz) for s in work_sessions(sessions)})

def current_streak(sessions, today, tz=None):
	"""Consecutive days with focus sessions, ending today or yesterday.

	Any gap longer than one day breaks the streak; if the latest focus day is
	before yesterday the streak is 0.
	"""
	dates = sorted({local_date(s.start_time, tz) for s in work_sessions(sessions)}, reverse=True)
	# clock skew can leave sessions dated after today
	dates = [d for d in dates if d <= today]
	if not dates or (today - dates[0]).days > 1:
		return 0
	streak = 1
	for newer, older in zip(dates, dates[1:]):
		if (newer - older).days != 1:
			break
		streak += 1
	return streak

def pomodoros_completed(sessions):
	return focus_session_count(sessions)

def build_report(sessions, period, today, offset=0, tz=None):
	start, end = period_bounds(period, today, offset)
	in_period = sessions_between(work_sessions(sessions), start, end, tz)
	project_minutes = defaultdict(int)
	for s in in_period:
		project_minutes[s.project_name] += s.duration_minutes
	return Report(
		period=period,
		start=start,
		end=end,
		total_minutes=total_focus_minutes(in_period),
		focus_sessions=len(in_period),
		days_accessed=days_accessed(in_period, tz),
		current_streak=current_streak(sessions, today, tz),
		project_minutes=dict(sorted(project_minutes.items())),
	)

def _buckets(period, start, end):
	"""(labels, key function, x axis label) for the period's chart buckets."""
	if period == "day":
		labels = [f"{h:02d}" for h in range(24)]
		return labels, lambda moment, day: moment.hour, "Hour of Day"
	if period == "week":
		days = [start + datetime.timedelta(days=i) for i in range(7)]
		return [d.strftime("%a") for d in days], lambda moment, day: (day - start).days, "Day of Week"
	if period == "month":
		num_days = (end - start).days + 1
		return [str(i + 1) for i in range(num_days)], lambda moment, day: day.day - 1, "Day of Month"
	return list(calendar.month_abbr)[1:], lambda moment, day: day.month - 1, "Month"

def project_rollup(sessions, period, today, offset=0, tz=None):
	"""Focus minutes per project per bucket (hours, weekdays, month days or months)."""
	start, end = period_bounds(period, today, offset)
	labels, bucket_of, xlabel = _buckets(period, start, end)
	series = defaultdict(lambda: [0] * len(labels))
	for s in sessions_between(work_sessions(sessions), start, end, tz):
		moment = s.start_time.astimezone(tz)
		series[s.project_name][bucket_of(moment, moment.date())] += s.duration_minutes
	return Rollup(period=period, labels=labels, series=dict(sorted(series.items())), xlabel=xlabel)

def history_page(sessions, page=1, page_size=20):
	"""Sessions newest first, sliced into 1-based pages."""
	if page_size < 1:
		raise ValueError("page_size must be positive")
	ordered = sorted(sessions, key=lambda s: s.start_time, reverse=True)
	page = max(1, page)
	begin = (page - 1) * page_size
	return HistoryPage(items=ordered[begin:begin + page_size], page=page, page_size=page_size, total=len(ordered))

CSV_HEADER = ["Date", "Start Time", "End Time", "Duration (min)", "Type", "Project", "Task"]

def export_csv(sessions, fp, tz=None):
	"""Write sessions, oldest first, as CSV to an open text file."""
	writer = csv.writer(fp)
	writer.writerow(CSV_HEADER)
	for s in sorted(sessions, key=lambda s: s.start_time):
		start = s.start_time.astimezone(tz)
		end = s.end_time.astimezone(tz)
		writer.writerow([
			start.date().isoformat(),
			start.strftime("%H:%M:%S"),
			end.strftime("%H:%M:%S"),
			s.duration_minutes,
			s.phase.value,
			s.project_name,
			s.task_name or "",
		])
	return len(sessions)
