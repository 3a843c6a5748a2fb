from __future__ import annotations

import uuid
from typing import Iterable

from focusblocks.core.models import TodoItem
from focusblocks.data.state_store import StateStore


class TodoList:
    """Checklist of the current focus window; every change is persisted right away."""

    def __init__(self, store: StateStore, items: Iterable[TodoItem] = ()) -> None:
        self._store = store
        self._items: tuple[TodoItem, ...] = tuple(items)

    @property
    def items(self) -> tuple[TodoItem, ...]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def snapshot(self) -> tuple[TodoItem, ...]:
        return self._items

    def add(self, text: str) -> TodoItem | None:
        clean_text = text.strip()
        if not clean_text:
            return None
        item = TodoItem(id=uuid.uuid4().hex, text=clean_text)
        self._replace((item, *self._items))
        return item

    def toggle(self, todo_id: str) -> bool:
        if not any(item.id == todo_id for item in self._items):
            return False
        self._replace(tuple(item.toggled() if item.id == todo_id else item for item in self._items))
        return True

    def remove(self, todo_id: str) -> bool:
        kept = tuple(item for item in self._items if item.id != todo_id)
        if len(kept) == len(self._items):
            return False
        self._replace(kept)
        return True

    def clear_completed(self) -> int:
        kept = tuple(item for item in self._items if not item.done)
        removed = len(self._items) - len(kept)
        if removed:
            self._replace(kept)
        return removed

    def clear(self) -> None:
        if self._items:
            self._replace(())

    def _replace(self, items: tuple[TodoItem, ...]) -> None:
        self._items = items
        self._store.save_todos(items)
