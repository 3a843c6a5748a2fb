"""Типизированные слоты состояния поверх байтового хранилища.

Каждый слот читается и пишется независимо. Ошибки чтения возвращают значение
по умолчанию, ошибки записи логируются и игнорируются.
"""

from __future__ import annotations

import json
import math
import logging
from typing import Any, Callable, TypeVar

from focusblocks.core.models import (
    DEFAULT_BREAK_MINUTES,
    DEFAULT_FOCUS_MINUTES,
    DEFAULT_VOLUME,
    MIN_MINUTES,
    LogEntry,
    Phase,
    Settings,
    SoundKind,
    TodoItem,
)
from focusblocks.data.storage import StorageBackend


logger = logging.getLogger(__name__)

T = TypeVar("T")

FOCUS_MINUTES = "focus_minutes"
BREAK_MINUTES = "break_minutes"
VOLUME = "volume"
SOUND_KIND = "sound_kind"
CURRENT_TASK = "current_task"
CURRENT_TODOS = "current_todos"
PHASE = "phase"
REMAINING_SECONDS = "remaining_seconds"
SESSION_LOG = "session_log"

_MISSING = object()


class StateStore:
    def __init__(self, backend: StorageBackend) -> None:
        self.backend = backend

    def get(self, key: str, default: Any = None) -> Any:
        try:
            raw = self.backend.get(key)
        except Exception as exc:  # reads never raise
            logger.warning("Reading %r failed: %s", key, exc)
            return default
        if raw is None:
            return default
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Slot %r is corrupt, using default: %s", key, exc)
            return default

    def set(self, key: str, value: Any) -> bool:
        try:
            payload = json.dumps(value, ensure_ascii=False).encode("utf-8")
            ok = self.backend.set(key, payload)
        except Exception as exc:
            logger.warning("Writing %r failed: %s", key, exc)
            return False
        if not ok:
            logger.debug("Backend rejected write to %r", key)
        return ok

    def _get_typed(self, key: str, default: T, convert: Callable[[Any], T]) -> T:
        raw = self.get(key, _MISSING)
        if raw is _MISSING:
            return default
        try:
            return convert(raw)
        except (OverflowError, TypeError, ValueError) as exc:
            logger.warning("Slot %r has invalid value %r: %s", key, raw, exc)
            return default

    def _get_list(self, key: str, convert: Callable[[Any], T]) -> list[T]:
        raw = self.get(key, [])
        if not isinstance(raw, list):
            logger.warning("Slot %r is not a list, ignoring", key)
            return []
        items: list[T] = []
        for element in raw:
            try:
                items.append(convert(element))
            except (KeyError, OverflowError, TypeError, ValueError) as exc:
                logger.warning("Dropping malformed element of %r: %s", key, exc)
        return items

    def load_settings(self) -> Settings:
        return Settings(
            focus_minutes=max(MIN_MINUTES, self._get_typed(FOCUS_MINUTES, DEFAULT_FOCUS_MINUTES, _whole_number)),
            break_minutes=max(MIN_MINUTES, self._get_typed(BREAK_MINUTES, DEFAULT_BREAK_MINUTES, _whole_number)),
            volume=self._get_typed(VOLUME, DEFAULT_VOLUME, _finite_number),
            sound_kind=self._get_typed(SOUND_KIND, SoundKind.CHIME, SoundKind),
        )

    def save_settings(self, settings: Settings) -> None:
        self.set(FOCUS_MINUTES, settings.focus_minutes)
        self.set(BREAK_MINUTES, settings.break_minutes)
        self.set(VOLUME, settings.volume)
        self.set(SOUND_KIND, settings.sound_kind.value)

    def load_current_task(self) -> str:
        return self._get_typed(CURRENT_TASK, "", _text)

    def save_current_task(self, text: str) -> None:
        self.set(CURRENT_TASK, text)

    def load_todos(self) -> list[TodoItem]:
        return self._get_list(CURRENT_TODOS, TodoItem.from_dict)

    def save_todos(self, todos: tuple[TodoItem, ...] | list[TodoItem]) -> None:
        self.set(CURRENT_TODOS, [todo.to_dict() for todo in todos])

    def load_log(self) -> list[LogEntry]:
        return self._get_list(SESSION_LOG, LogEntry.from_dict)

    def save_log(self, entries: tuple[LogEntry, ...] | list[LogEntry]) -> None:
        self.set(SESSION_LOG, [entry.to_dict() for entry in entries])

    def load_timer(self, settings: Settings) -> tuple[Phase, int]:
        phase = self._get_typed(PHASE, Phase.FOCUS, Phase)
        remaining = self._get_typed(REMAINING_SECONDS, settings.focus_minutes * 60, _whole_number)
        return phase, remaining

    def save_timer(self, phase: Phase, remaining_seconds: int) -> None:
        self.set(PHASE, phase.value)
        self.set(REMAINING_SECONDS, remaining_seconds)


def _finite_number(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise TypeError(f"expected a number, got {type(raw).__name__}")
    if not math.isfinite(raw):
        raise ValueError(f"expected a finite number, got {raw!r}")
    return float(raw)


def _whole_number(raw: Any) -> int:
    return int(_finite_number(raw))


def _text(raw: Any) -> str:
    if not isinstance(raw, str):
        raise TypeError(f"expected a string, got {type(raw).__name__}")
    return raw
