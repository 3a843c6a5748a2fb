from __future__ import annotations

from typing import Protocol

from focusblocks.core.models import SoundKind


class AudioNotifier(Protocol):
    def play(self, sound_kind: SoundKind, volume: float) -> None:
        """Play a short alert tone; fire-and-forget."""


class NullAudioNotifier:
    """Silent notifier used headless and in tests; remembers what it was asked to play."""

    def __init__(self) -> None:
        self.played: list[tuple[SoundKind, float]] = []

    def play(self, sound_kind: SoundKind, volume: float) -> None:
        self.played.append((sound_kind, volume))
