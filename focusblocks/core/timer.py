from __future__ import annotations

import time
from typing import Callable

from focusblocks.core.models import Phase, Settings, TimerSnapshot


def now_ms() -> int:
    return int(time.time() * 1000)


class PhaseTimer:
    """Second-resolution focus/break countdown detached from UI framework.

    Totals are read from the live ``Settings`` on every use, so editing the
    phase length mid-run shifts the total and the percentage immediately.
    """

    def __init__(self, settings: Settings, on_expire: Callable[[int], None] | None = None) -> None:
        self._settings = settings
        self.on_expire = on_expire
        self.phase = Phase.FOCUS
        self.is_running = False
        self.remaining_seconds = settings.total_seconds_for(Phase.FOCUS)
        self.session_start: int | None = None

    def total_for(self, phase: Phase | None = None) -> int:
        return self._settings.total_seconds_for(phase or self.phase)

    @property
    def total_seconds(self) -> int:
        return self.total_for(self.phase)

    def percent_complete(self) -> int:
        total = self.total_seconds
        if not total:
            return 0
        return round(100 * (total - self.remaining_seconds) / total)

    def restore(self, phase: Phase, remaining_seconds: int) -> None:
        self.phase = phase
        self.is_running = False
        self.session_start = None
        self.remaining_seconds = max(0, min(self.total_for(phase), remaining_seconds))

    def start(self, now: int | None = None) -> None:
        if now is None:
            now = now_ms()
        if self.remaining_seconds <= 0:
            self.remaining_seconds = self.total_seconds
        self.session_start = now
        self.is_running = True

    def pause(self) -> None:
        self.is_running = False
        self.session_start = None

    def tick(self, now: int | None = None) -> TimerSnapshot:
        if not self.is_running:
            return self.snapshot()
        if now is None:
            now = now_ms()
        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        if self.remaining_seconds == 0:
            self.is_running = False
            if self.on_expire is not None:
                self.on_expire(now)
        return self.snapshot()

    def switch_phase(self, target: Phase) -> None:
        if self.is_running:
            raise RuntimeError("Cannot switch phase while the timer is running")
        self.phase = target
        self.remaining_seconds = self.total_for(target)

    def reconcile(self) -> bool:
        """Re-read the phase length after a settings edit; returns True if remaining changed."""
        if self.is_running:
            return False
        total = self.total_seconds
        changed = self.remaining_seconds != total
        self.remaining_seconds = total
        return changed

    def advance(self, target: Phase, now: int) -> None:
        self.phase = target
        self.remaining_seconds = self.total_seconds
        self.session_start = now
        self.is_running = True

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            phase=self.phase,
            is_running=self.is_running,
            remaining_seconds=self.remaining_seconds,
            total_seconds=self.total_seconds,
            percent_complete=self.percent_complete(),
            session_start=self.session_start,
        )
