from BackEnd.services.notifier import AlarmPlayer
from BackEnd.services.timer_service import TimerService


class RecordingNotifier:
    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def play(self, sound, volume):
        self.calls.append((sound, volume))
        if self.fail:
            raise RuntimeError("no audio device")


def test_sound_path(tmp_path):
    assert AlarmPlayer(tmp_path).sound_path("bell") == tmp_path / "bell.wav"


def test_missing_sound_is_ignored(tmp_path, caplog):
    AlarmPlayer(tmp_path).play("bell", 50)
    assert "not found" in caplog.text


def test_alarm_plays_on_completion(clock):
    notifier = RecordingNotifier()
    service = TimerService(clock=clock, notifier=notifier)
    service.set_configuration(alarm_sound="chime", alarm_volume=80)
    service.start()
    service.skip()
    assert notifier.calls == [("chime", 80)]


def test_alarm_failure_does_not_break_completion(clock):
    service = TimerService(clock=clock, notifier=RecordingNotifier(fail=True))
    service.start()
    service.skip()
    assert len(service.get_sessions()) == 1
