import pytest

from BackEnd.core.errors import ValidationError
from BackEnd.core.settings import Configuration


def test_defaults():
    config = Configuration()
    assert (config.work_minutes, config.short_break_minutes, config.long_break_minutes) == (25, 5, 15)
    assert config.long_break_interval == 4
    assert not config.auto_start_breaks
    assert not config.auto_start_pomodoros
    assert config.theme == "light"
    assert config.work_color == "#f97316"


@pytest.mark.parametrize("changes", [
    {"work_minutes": 0},
    {"short_break_minutes": -1},
    {"long_break_minutes": 2.5},
    {"work_minutes": True},
    {"long_break_interval": 1},
    {"auto_start_breaks": "yes"},
    {"alarm_volume": 101},
    {"background_volume": -1},
    {"theme": "solarized"},
    {"alarm_sound": "klaxon"},
    {"background_sound": "waves"},
])
def test_invalid_values(changes):
    with pytest.raises(ValidationError):
        Configuration(**changes)


def test_with_changes_keeps_original():
    config = Configuration()
    changed = config.with_changes(work_minutes=40)
    assert changed.work_minutes == 40
    assert config.work_minutes == 25


def test_with_changes_rejects_unknown_keys():
    with pytest.raises(ValidationError):
        Configuration().with_changes(snooze=True)


def test_from_dict_ignores_unknown_keys():
    config = Configuration.from_dict({"work_minutes": 30, "legacy": 1})
    assert config.work_minutes == 30


def test_from_dict_validates():
    with pytest.raises(ValidationError):
        Configuration.from_dict({"long_break_interval": 0})
