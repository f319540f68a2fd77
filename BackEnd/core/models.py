from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from BackEnd.core.clock import parse_iso

NO_PROJECT = "No Project"


class Phase(str, Enum):
	WORK = "pomodoro"
	SHORT_BREAK = "short_break"
	LONG_BREAK = "long_break"

	@property
	def is_break(self) -> bool:
		return self is not Phase.WORK

	@property
	def label(self) -> str:
		return {
			Phase.WORK: "Focus Time",
			Phase.SHORT_BREAK: "Short Break",
			Phase.LONG_BREAK: "Long Break",
		}[self]


class TimerStatus(str, Enum):
	IDLE = "idle"
	RUNNING = "running"
	PAUSED = "paused"


def new_id() -> str:
	return uuid.uuid4().hex


def _iso(value):
	return value.isoformat() if value is not None else None


@dataclass
class TimerState:
	current_phase: Phase = Phase.WORK
	status: TimerStatus = TimerStatus.IDLE
	remaining_seconds: int = 0
	deadline: datetime | None = None
	completed_work_count: int = 0
	active_task_id: str | None = None
	# when the in-flight interval first entered RUNNING
	started_at: datetime | None = None

	def copy(self) -> TimerState:
		return replace(self)

	def to_dict(self) -> dict:
		return {
			"current_phase": self.current_phase.value,
			"status": self.status.value,
			"remaining_seconds": self.remaining_seconds,
			"deadline": _iso(self.deadline),
			"completed_work_count": self.completed_work_count,
			"active_task_id": self.active_task_id,
			"started_at": _iso(self.started_at),
		}

	@classmethod
	def from_dict(cls, data: dict) -> TimerState:
		return cls(
			current_phase=Phase(data.get("current_phase", Phase.WORK.value)),
			status=TimerStatus(data.get("status", TimerStatus.IDLE.value)),
			remaining_seconds=int(data.get("remaining_seconds", 0)),
			deadline=parse_iso(data.get("deadline")),
			completed_work_count=int(data.get("completed_work_count", 0)),
			active_task_id=data.get("active_task_id"),
			started_at=parse_iso(data.get("started_at")),
		)


@dataclass
class Task:
	title: str
	id: str = field(default_factory=new_id)
	project_name: str = NO_PROJECT
	notes: str = ""
	estimated_intervals: int = 1
	completed_intervals: int = 0
	is_done: bool = False
	created_at: datetime | None = None

	def to_dict(self) -> dict:
		return {
			"id": self.id,
			"project_name": self.project_name,
			"title": self.title,
			"notes": self.notes,
			"estimated_intervals": self.estimated_intervals,
			"completed_intervals": self.completed_intervals,
			"is_done": self.is_done,
			"created_at": _iso(self.created_at),
		}

	@classmethod
	def from_dict(cls, data: dict) -> Task:
		return cls(
			id=data["id"],
			project_name=data.get("project_name") or NO_PROJECT,
			title=data.get("title", ""),
			notes=data.get("notes") or "",
			estimated_intervals=int(data.get("estimated_intervals", 1)),
			completed_intervals=int(data.get("completed_intervals", 0)),
			is_done=bool(data.get("is_done", False)),
			created_at=parse_iso(data.get("created_at")),
		)


@dataclass(frozen=True)
class Session:
	"""One completed (or skipped) phase. Project and task names are snapshots."""
	phase: Phase
	start_time: datetime
	end_time: datetime
	duration_minutes: int
	id: str = field(default_factory=new_id)
	task_id: str | None = None
	project_name: str = NO_PROJECT
	task_name: str | None = None

	@property
	def is_work(self) -> bool:
		return self.phase is Phase.WORK

	def to_dict(self) -> dict:
		return {
			"id": self.id,
			"task_id": self.task_id,
			"project_name": self.project_name,
			"task_name": self.task_name,
			"phase": self.phase.value,
			"start_time": _iso(self.start_time),
			"end_time": _iso(self.end_time),
			"duration_minutes": self.duration_minutes,
		}

	@classmethod
	def from_dict(cls, data: dict) -> Session:
		return cls(
			id=data["id"],
			task_id=data.get("task_id"),
			project_name=data.get("project_name") or NO_PROJECT,
			task_name=data.get("task_name"),
			phase=Phase(data["phase"]),
			start_time=parse_iso(data["start_time"]),
			end_time=parse_iso(data["end_time"]),
			duration_minutes=int(data["duration_minutes"]),
		)
