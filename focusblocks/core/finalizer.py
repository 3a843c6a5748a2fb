from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from focusblocks.core.audio import AudioNotifier
from focusblocks.core.models import (
    BREAK_TASK_LABEL,
    NO_TASK_LABEL,
    FinalizeReason,
    LogEntry,
    Phase,
    Settings,
)
from focusblocks.core.session_log import SessionLog
from focusblocks.core.timer import PhaseTimer, now_ms
from focusblocks.core.todos import TodoList
from focusblocks.core.transitions import Effect, transition_for


logger = logging.getLogger(__name__)


class FinalizeToken:
    """Marks a finalize pass in progress; only the holder may close the phase."""

    __slots__ = ("reason",)

    def __init__(self, reason: FinalizeReason) -> None:
        self.reason = reason


class SessionFinalizer:
    """Closes the current phase, records it in the session log and optionally advances the timer.

    A finalize started while another one is still running (for example a skip
    issued from inside the completion alert) is dropped: the first caller wins.
    """

    def __init__(
        self,
        timer: PhaseTimer,
        settings: Settings,
        todos: TodoList,
        log: SessionLog,
        audio: AudioNotifier,
        current_task: Callable[[], str],
    ) -> None:
        self._timer = timer
        self._settings = settings
        self._todos = todos
        self._log = log
        self._audio = audio
        self._current_task = current_task
        self._token: FinalizeToken | None = None

    @property
    def in_progress(self) -> bool:
        return self._token is not None

    @contextmanager
    def _acquire(self, reason: FinalizeReason) -> Iterator[FinalizeToken | None]:
        if self._token is not None:
            logger.debug("Dropping nested finalize(%s) during finalize(%s)", reason.value, self._token.reason.value)
            yield None
            return
        token = FinalizeToken(reason)
        self._token = token
        try:
            yield token
        finally:
            self._token = None

    def finalize(
        self,
        reason: FinalizeReason,
        auto_switch: bool = True,
        now: int | None = None,
    ) -> LogEntry | None:
        with self._acquire(reason) as token:
            if token is None:
                return None
            if now is None:
                now = now_ms()
            return self._close_phase(reason, auto_switch, now)

    def _close_phase(self, reason: FinalizeReason, auto_switch: bool, end: int) -> LogEntry:
        timer = self._timer
        phase = timer.phase
        total = timer.total_for(phase)
        elapsed = max(0, min(total, total - timer.remaining_seconds))
        duration = total if reason is FinalizeReason.COMPLETED else elapsed
        start = timer.session_start if timer.session_start is not None else end - duration * 1000

        entry = self._log.prepend(
            LogEntry(
                id=str(end),
                phase=phase,
                task=self._task_label(phase),
                start=start,
                end=end,
                duration_seconds=duration,
                reason=reason,
                todos=self._todos.snapshot(),
            )
        )
        logger.info("Finalized %s phase: %s after %ss", phase.value, reason.value, duration)

        transition = transition_for(phase, reason)
        if transition.has(Effect.CLEAR_TODOS):
            self._todos.clear()
        timer.session_start = None

        if auto_switch and transition.has(Effect.ADVANCE):
            if transition.has(Effect.ALERT):
                self._alert()
            timer.advance(transition.next_phase, end)
        return entry

    def _task_label(self, phase: Phase) -> str:
        if phase is Phase.BREAK:
            return BREAK_TASK_LABEL
        return self._current_task() or NO_TASK_LABEL

    def _alert(self) -> None:
        try:
            self._audio.play(self._settings.sound_kind, self._settings.volume)
        except Exception as exc:
            logger.debug("Alert sound failed: %s", exc)
