import pytest

from focusblocks.core.models import Phase, Settings
from focusblocks.core.timer import PhaseTimer


def test_start_records_session_start_and_runs() -> None:
    timer = PhaseTimer(Settings())
    timer.start(now=1_000)

    assert timer.is_running is True
    assert timer.session_start == 1_000
    assert timer.remaining_seconds == 1500


def test_start_refills_exhausted_countdown() -> None:
    timer = PhaseTimer(Settings(break_minutes=3))
    timer.switch_phase(Phase.BREAK)
    timer.remaining_seconds = 0
    timer.start(now=0)

    assert timer.remaining_seconds == 180


def test_tick_counts_down_only_while_running() -> None:
    timer = PhaseTimer(Settings())
    timer.tick(now=0)
    assert timer.remaining_seconds == 1500

    timer.start(now=0)
    for second in range(1, 6):
        timer.tick(now=second * 1000)
    assert timer.remaining_seconds == 1495

    timer.pause()
    timer.tick(now=9_000)
    assert timer.remaining_seconds == 1495
    assert timer.session_start is None


def test_expiry_stops_and_calls_handler() -> None:
    calls = []
    timer = PhaseTimer(Settings(focus_minutes=1), on_expire=calls.append)
    timer.start(now=0)
    for second in range(1, 61):
        timer.tick(now=second * 1000)

    assert calls == [60_000]
    assert timer.remaining_seconds == 0
    assert timer.is_running is False


def test_switch_phase_only_when_stopped() -> None:
    timer = PhaseTimer(Settings(break_minutes=5))
    timer.switch_phase(Phase.BREAK)
    assert timer.phase is Phase.BREAK
    assert timer.remaining_seconds == 300

    timer.start(now=0)
    with pytest.raises(RuntimeError):
        timer.switch_phase(Phase.FOCUS)
    assert timer.phase is Phase.BREAK


def test_reconcile_follows_live_settings_when_stopped() -> None:
    settings = Settings()
    timer = PhaseTimer(settings)
    settings.focus_minutes = 50

    assert timer.reconcile() is True
    assert timer.remaining_seconds == 3000


def test_reconcile_keeps_remaining_while_running() -> None:
    settings = Settings()
    timer = PhaseTimer(settings)
    timer.start(now=0)
    timer.tick(now=1000)
    settings.focus_minutes = 10

    assert timer.reconcile() is False
    assert timer.remaining_seconds == 1499
    assert timer.total_seconds == 600


def test_percent_complete_uses_live_total() -> None:
    settings = Settings()
    timer = PhaseTimer(settings)
    timer.remaining_seconds = 750
    assert timer.percent_complete() == 50

    settings.focus_minutes = 50
    assert timer.percent_complete() == 75


def test_restore_clamps_remaining_into_phase_total() -> None:
    timer = PhaseTimer(Settings(break_minutes=5))
    timer.restore(Phase.BREAK, 9_999)
    assert (timer.phase, timer.remaining_seconds, timer.is_running) == (Phase.BREAK, 300, False)

    timer.restore(Phase.FOCUS, -5)
    assert timer.remaining_seconds == 0
