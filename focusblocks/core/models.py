from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


DEFAULT_FOCUS_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5
DEFAULT_VOLUME = 0.6
MIN_MINUTES = 1
MAX_FOCUS_MINUTES = 180
MAX_BREAK_MINUTES = 60

NO_TASK_LABEL = "(No task)"
BREAK_TASK_LABEL = "—"


class Phase(str, Enum):
    FOCUS = "focus"
    BREAK = "break"

    @property
    def label(self) -> str:
        return "Focus" if self is Phase.FOCUS else "Break"


class SoundKind(str, Enum):
    CHIME = "chime"
    BEEP = "beep"
    TICK = "tick"


class FinalizeReason(str, Enum):
    COMPLETED = "completed"
    RESET = "reset"
    SKIPPED = "skipped"


@dataclass
class Settings:
    focus_minutes: int = DEFAULT_FOCUS_MINUTES
    break_minutes: int = DEFAULT_BREAK_MINUTES
    volume: float = DEFAULT_VOLUME
    sound_kind: SoundKind = SoundKind.CHIME

    def minutes_for(self, phase: Phase) -> int:
        return self.focus_minutes if phase is Phase.FOCUS else self.break_minutes

    def total_seconds_for(self, phase: Phase) -> int:
        return self.minutes_for(phase) * 60


@dataclass(frozen=True)
class TodoItem:
    id: str
    text: str
    done: bool = False

    def toggled(self) -> TodoItem:
        return replace(self, done=not self.done)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "done": self.done}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> TodoItem:
        text = str(raw["text"]).strip()
        if not text:
            raise ValueError("Todo text cannot be empty")
        return cls(id=str(raw["id"]), text=text, done=bool(raw.get("done", False)))


@dataclass(frozen=True)
class LogEntry:
    id: str
    phase: Phase
    task: str
    start: int
    end: int
    duration_seconds: int
    reason: FinalizeReason
    todos: tuple[TodoItem, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "phase": self.phase.value,
            "task": self.task,
            "start": self.start,
            "end": self.end,
            "duration": self.duration_seconds,
            "reason": self.reason.value,
            "todos": [todo.to_dict() for todo in self.todos],
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> LogEntry:
        # Entries written before reasons were recorded only ever completed.
        return cls(
            id=str(raw["id"]),
            phase=Phase(raw["phase"]),
            task=str(raw.get("task", "")),
            start=int(raw["start"]),
            end=int(raw["end"]),
            duration_seconds=int(raw["duration"]),
            reason=FinalizeReason(raw.get("reason", FinalizeReason.COMPLETED.value)),
            todos=tuple(TodoItem.from_dict(todo) for todo in raw.get("todos") or []),
        )


@dataclass(frozen=True)
class TimerSnapshot:
    phase: Phase
    is_running: bool
    remaining_seconds: int
    total_seconds: int
    percent_complete: int
    session_start: int | None
