import wave
from pathlib import Path

import pytest

pytest.importorskip("PyQt6.QtMultimedia")

from focusblocks import config
from focusblocks.ui.sound import QtAudioNotifier, render_tone


def test_render_tone_writes_mono_wav(tmp_path) -> None:
    path = render_tone(tmp_path / "beep.wav", config.TONES["beep"], sample_rate=8000)

    with wave.open(str(path), "rb") as wav:
        assert wav.getnchannels() == 1
        assert wav.getsampwidth() == 2
        assert wav.getframerate() == 8000
        assert wav.getnframes() == 2000


def test_close_removes_tone_directory() -> None:
    notifier = QtAudioNotifier()
    tone_dir = Path(notifier._tmp.name)
    render_tone(tone_dir / "beep.wav", config.TONES["beep"], sample_rate=8000)
    assert tone_dir.is_dir()

    notifier.close()

    assert not tone_dir.exists()
