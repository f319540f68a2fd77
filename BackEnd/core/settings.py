from __future__ import annotations

from dataclasses import dataclass, fields, asdict, replace

from BackEnd.core.errors import ValidationError

ALARM_SOUNDS = ("bell", "chime", "digital", "gentle")
BACKGROUND_SOUNDS = ("none", "rain", "cafe", "fireplace", "forest")
THEMES = ("light", "dark")

DURATION_FIELDS = ("work_minutes", "short_break_minutes", "long_break_minutes")
VOLUME_FIELDS = ("alarm_volume", "background_volume")


@dataclass(frozen=True)
class Configuration:
	"""Per-user timer settings.

	Only the first six fields drive the timer; the rest are cosmetic and are
	stored so the UI can restore them.
	"""
	work_minutes: int = 25
	short_break_minutes: int = 5
	long_break_minutes: int = 15
	long_break_interval: int = 4
	auto_start_breaks: bool = False
	auto_start_pomodoros: bool = False
	theme: str = "light"
	work_color: str = "#f97316"
	short_break_color: str = "#06b6d4"
	long_break_color: str = "#8b5cf6"
	alarm_sound: str = "bell"
	background_sound: str = "none"
	alarm_volume: int = 50
	background_volume: int = 30

	def __post_init__(self):
		self.validate()

	def validate(self):
		for name in DURATION_FIELDS:
			value = getattr(self, name)
			if not _is_int(value) or value <= 0:
				raise ValidationError(f"{name} must be a positive whole number of minutes, got {value!r}")
		if not _is_int(self.long_break_interval) or self.long_break_interval < 2:
			raise ValidationError(f"long_break_interval must be at least 2, got {self.long_break_interval!r}")
		for name in ("auto_start_breaks", "auto_start_pomodoros"):
			if not isinstance(getattr(self, name), bool):
				raise ValidationError(f"{name} must be true or false")
		for name in VOLUME_FIELDS:
			value = getattr(self, name)
			if not _is_int(value) or not 0 <= value <= 100:
				raise ValidationError(f"{name} must be between 0 and 100, got {value!r}")
		if self.theme not in THEMES:
			raise ValidationError(f"Unknown theme {self.theme!r}")
		if self.alarm_sound not in ALARM_SOUNDS:
			raise ValidationError(f"Unknown alarm sound {self.alarm_sound!r}")
		if self.background_sound not in BACKGROUND_SOUNDS:
			raise ValidationError(f"Unknown background sound {self.background_sound!r}")

	def with_changes(self, **changes) -> Configuration:
		unknown = set(changes) - {f.name for f in fields(self)}
		if unknown:
			raise ValidationError(f"Unknown settings: {', '.join(sorted(unknown))}")
		return replace(self, **changes)

	def to_dict(self) -> dict:
		return asdict(self)

	@classmethod
	def from_dict(cls, data: dict) -> Configuration:
		known = {f.name for f in fields(cls)}
		return cls(**{k: v for k, v in (data or {}).items() if k in known})


def _is_int(value) -> bool:
	return isinstance(value, int) and not isinstance(value, bool)
