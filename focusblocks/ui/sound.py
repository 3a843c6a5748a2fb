"""Звуковое оповещение о смене фазы через QSoundEffect."""

from __future__ import annotations

import logging
import math
import struct
import tempfile
import wave
from pathlib import Path

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from focusblocks import config
from focusblocks.core.models import SoundKind


logger = logging.getLogger(__name__)


def render_tone(path: Path, tones: list[tuple[float, float, float]], sample_rate: int = config.TONE_SAMPLE_RATE) -> Path:
    """Пишет моно WAV с синусоидами; тоны задаются как (частота, длительность, задержка)."""
    length = max(delay + duration for _freq, duration, delay in tones)
    samples = [0.0] * int(length * sample_rate)
    for freq, duration, delay in tones:
        offset = int(delay * sample_rate)
        count = int(duration * sample_rate)
        for i in range(count):
            # short linear fade keeps the tone from clicking
            fade = min(1.0, i / 200, (count - i) / 200)
            samples[offset + i] += math.sin(2 * math.pi * freq * i / sample_rate) * fade
    peak = max(1.0, max(abs(s) for s in samples))
    frames = b"".join(struct.pack("<h", int(32767 * 0.8 * s / peak)) for s in samples)
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(frames)
    return path


class QtAudioNotifier(QObject):
    """Проигрывает короткий сигнал; ошибки только логируются."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._tmp = tempfile.TemporaryDirectory(prefix="focusblocks-")
        self._dir = Path(self._tmp.name)
        self._effects: dict[SoundKind, QSoundEffect] = {}

    def _effect(self, sound_kind: SoundKind) -> QSoundEffect:
        effect = self._effects.get(sound_kind)
        if effect is None:
            path = render_tone(self._dir / f"{sound_kind.value}.wav", config.TONES[sound_kind.value])
            effect = QSoundEffect(self)
            effect.setSource(QUrl.fromLocalFile(str(path)))
            self._effects[sound_kind] = effect
        return effect

    def play(self, sound_kind: SoundKind, volume: float) -> None:
        try:
            effect = self._effect(SoundKind(sound_kind))
        except (OSError, ValueError) as exc:
            logger.debug("Cannot prepare %s tone: %s", sound_kind, exc)
            return
        effect.setVolume(max(0.0, min(float(volume), 1.0)))
        effect.play()

    def close(self) -> None:
        """Останавливает эффекты и удаляет временные WAV-файлы."""
        for effect in self._effects.values():
            effect.stop()
            effect.deleteLater()
        self._effects.clear()
        self._tmp.cleanup()
