from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from focusblocks.core.models import LogEntry
from focusblocks.data.state_store import StateStore


MAX_LOG_ENTRIES = 200


class SessionLog:
    """Newest-first history of finalized phases, capped at MAX_LOG_ENTRIES."""

    def __init__(self, store: StateStore, entries: Iterable[LogEntry] = ()) -> None:
        self._store = store
        self._entries: tuple[LogEntry, ...] = tuple(entries)[:MAX_LOG_ENTRIES]

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def prepend(self, entry: LogEntry) -> LogEntry:
        entry = replace(entry, id=self._unique_id(entry.id))
        self._entries = (entry, *self._entries)[:MAX_LOG_ENTRIES]
        self._store.save_log(self._entries)
        return entry

    def clear(self) -> None:
        self._entries = ()
        self._store.save_log(self._entries)

    def find(self, entry_id: str) -> LogEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def _unique_id(self, base: str) -> str:
        taken = {entry.id for entry in self._entries}
        candidate = base
        suffix = 0
        while candidate in taken:
            suffix += 1
            candidate = f"{base}-{suffix}"
        return candidate
