from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from focusblocks.core.audio import AudioNotifier, NullAudioNotifier
from focusblocks.core.finalizer import SessionFinalizer
from focusblocks.core.models import (
    MIN_MINUTES,
    FinalizeReason,
    LogEntry,
    Phase,
    Settings,
    SoundKind,
    TimerSnapshot,
    TodoItem,
)
from focusblocks.core.session_log import SessionLog
from focusblocks.core.timer import PhaseTimer
from focusblocks.core.todos import TodoList
from focusblocks.data.state_store import BREAK_MINUTES, FOCUS_MINUTES, SOUND_KIND, VOLUME, StateStore
from focusblocks.data.storage import MemoryBackend


logger = logging.getLogger(__name__)


class AppState(QObject):
    state_changed = pyqtSignal()
    timer_changed = pyqtSignal()
    running_changed = pyqtSignal(bool)
    todos_changed = pyqtSignal()
    log_changed = pyqtSignal()
    settings_changed = pyqtSignal(str, object)
    task_changed = pyqtSignal(str)

    def __init__(self, audio: AudioNotifier | None = None) -> None:
        super().__init__()
        self.audio: AudioNotifier = audio or NullAudioNotifier()
        self._store = StateStore(MemoryBackend())
        self.settings = Settings()
        self.current_task = ""
        self.todos = TodoList(self._store)
        self.log = SessionLog(self._store)
        self.timer = PhaseTimer(self.settings, on_expire=self._on_expire)
        self.finalizer = self._build_finalizer()
        self._was_running = False

    def load_from_storage(self, store: StateStore) -> None:
        self._store = store
        loaded = store.load_settings()
        # Timer and finalizer hold a reference to the live settings object.
        self.settings.focus_minutes = loaded.focus_minutes
        self.settings.break_minutes = loaded.break_minutes
        self.settings.volume = loaded.volume
        self.settings.sound_kind = loaded.sound_kind
        self.current_task = store.load_current_task()
        self.todos = TodoList(store, store.load_todos())
        self.log = SessionLog(store, store.load_log())
        phase, remaining = store.load_timer(self.settings)
        self.timer.restore(phase, remaining)
        self.finalizer = self._build_finalizer()
        logger.info(
            "Loaded state: %s phase, %ss remaining, %d todos, %d log entries",
            phase.value,
            self.timer.remaining_seconds,
            len(self.todos),
            len(self.log),
        )
        self._emit_all()

    def _build_finalizer(self) -> SessionFinalizer:
        return SessionFinalizer(
            timer=self.timer,
            settings=self.settings,
            todos=self.todos,
            log=self.log,
            audio=self.audio,
            current_task=lambda: self.current_task,
        )

    # Timer commands

    @property
    def is_running(self) -> bool:
        return self.timer.is_running

    def snapshot(self) -> TimerSnapshot:
        return self.timer.snapshot()

    def percent_complete(self) -> int:
        return self.timer.percent_complete()

    def start(self, now: int | None = None) -> None:
        if self.timer.is_running:
            return
        self.timer.start(now)
        self._after_timer_change()

    def pause(self) -> None:
        if not self.timer.is_running:
            return
        self.timer.pause()
        self._after_timer_change()

    def tick(self, now: int | None = None) -> TimerSnapshot:
        if not self.timer.is_running:
            return self.timer.snapshot()
        snapshot = self.timer.tick(now)
        self._after_timer_change()
        return snapshot

    def reset(self, now: int | None = None) -> LogEntry | None:
        total = self.timer.total_seconds
        entry = None
        self.timer.is_running = False
        if self.timer.remaining_seconds < total:
            entry = self.finalizer.finalize(FinalizeReason.RESET, auto_switch=False, now=now)
        self.timer.session_start = None
        self.timer.remaining_seconds = total
        self._after_timer_change(finalized=entry is not None)
        return entry

    def skip(self, now: int | None = None) -> LogEntry | None:
        self.timer.is_running = False
        entry = self.finalizer.finalize(FinalizeReason.SKIPPED, auto_switch=True, now=now)
        self._after_timer_change(finalized=entry is not None, restarted=entry is not None)
        return entry

    def switch_phase(self, target: Phase) -> bool:
        try:
            self.timer.switch_phase(Phase(target))
        except RuntimeError:
            return False
        self._after_timer_change()
        return True

    def _on_expire(self, now: int) -> None:
        self.finalizer.finalize(FinalizeReason.COMPLETED, auto_switch=True, now=now)
        self.todos_changed.emit()
        self.log_changed.emit()

    def _after_timer_change(self, finalized: bool = False, restarted: bool = False) -> None:
        self._store.save_timer(self.timer.phase, self.timer.remaining_seconds)
        if finalized:
            self.todos_changed.emit()
            self.log_changed.emit()
        self.timer_changed.emit()
        # a skipped-into phase restarts the tick driver from a full second
        if self.timer.is_running != self._was_running or (restarted and self.timer.is_running):
            self._was_running = self.timer.is_running
            self.running_changed.emit(self._was_running)
        self.state_changed.emit()

    # Todos

    def add_todo(self, text: str) -> TodoItem | None:
        item = self.todos.add(text)
        if item is not None:
            self._todos_updated()
        return item

    def toggle_todo(self, todo_id: str) -> None:
        if self.todos.toggle(todo_id):
            self._todos_updated()

    def remove_todo(self, todo_id: str) -> None:
        if self.todos.remove(todo_id):
            self._todos_updated()

    def clear_completed(self) -> None:
        if self.todos.clear_completed():
            self._todos_updated()

    def _todos_updated(self) -> None:
        self.todos_changed.emit()
        self.state_changed.emit()

    # Log

    def clear_log(self) -> None:
        self.log.clear()
        self.log_changed.emit()
        self.state_changed.emit()

    def find_entry(self, entry_id: str) -> LogEntry | None:
        return self.log.find(entry_id)

    # Settings and task

    def set_focus_minutes(self, minutes: int) -> None:
        self._set_minutes(FOCUS_MINUTES, minutes)

    def set_break_minutes(self, minutes: int) -> None:
        self._set_minutes(BREAK_MINUTES, minutes)

    def _set_minutes(self, key: str, minutes: int) -> None:
        value = max(MIN_MINUTES, int(minutes))
        setattr(self.settings, key, value)
        self._store.set(key, value)
        self.settings_changed.emit(key, value)
        if self.timer.reconcile():
            self._store.save_timer(self.timer.phase, self.timer.remaining_seconds)
        self.timer_changed.emit()
        self.state_changed.emit()

    def set_volume(self, volume: float) -> None:
        self.settings.volume = float(volume)
        self._store.set(VOLUME, self.settings.volume)
        self.settings_changed.emit(VOLUME, self.settings.volume)
        self.state_changed.emit()

    def set_sound_kind(self, sound_kind: SoundKind | str) -> None:
        self.settings.sound_kind = SoundKind(sound_kind)
        self._store.set(SOUND_KIND, self.settings.sound_kind.value)
        self.settings_changed.emit(SOUND_KIND, self.settings.sound_kind)
        self.state_changed.emit()

    def set_current_task(self, text: str) -> None:
        self.current_task = text
        self._store.save_current_task(text)
        self.task_changed.emit(text)
        self.state_changed.emit()

    def preview_sound(self) -> None:
        try:
            self.audio.play(self.settings.sound_kind, self.settings.volume)
        except Exception as exc:
            logger.debug("Sound preview failed: %s", exc)

    def _emit_all(self) -> None:
        self._was_running = self.timer.is_running
        self.timer_changed.emit()
        self.todos_changed.emit()
        self.log_changed.emit()
        self.task_changed.emit(self.current_task)
        self.state_changed.emit()
