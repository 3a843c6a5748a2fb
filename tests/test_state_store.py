from focusblocks.core.models import FinalizeReason, LogEntry, Phase, Settings, SoundKind, TodoItem
from focusblocks.data.state_store import StateStore
from focusblocks.data.storage import MemoryBackend, SqliteBackend, StorageBackend


class BrokenBackend(StorageBackend):
    def get(self, key: str) -> bytes | None:
        raise OSError("storage unavailable")

    def set(self, key: str, value: bytes) -> bool:
        raise OSError("quota exceeded")


def test_defaults_when_empty() -> None:
    store = StateStore(MemoryBackend())
    settings = store.load_settings()
    assert settings == Settings(focus_minutes=25, break_minutes=5, volume=0.6, sound_kind=SoundKind.CHIME)
    assert store.load_current_task() == ""
    assert store.load_todos() == []
    assert store.load_log() == []
    assert store.load_timer(settings) == (Phase.FOCUS, 1500)


def test_remaining_default_follows_focus_minutes() -> None:
    store = StateStore(MemoryBackend({"focus_minutes": b"40"}))
    settings = store.load_settings()
    assert store.load_timer(settings) == (Phase.FOCUS, 2400)


def test_corrupt_values_fall_back_to_defaults() -> None:
    store = StateStore(
        MemoryBackend(
            {
                "focus_minutes": b"{not json",
                "break_minutes": b'"ten"',
                "volume": b"[1, 2]",
                "sound_kind": b'"foghorn"',
                "phase": b'"lunch"',
                "current_task": b"42",
                "session_log": b'{"id": 1}',
            }
        )
    )
    settings = store.load_settings()
    assert settings.focus_minutes == 25
    assert settings.break_minutes == 5
    assert settings.volume == 0.6
    assert settings.sound_kind is SoundKind.CHIME
    assert store.load_timer(settings)[0] is Phase.FOCUS
    assert store.load_current_task() == ""
    assert store.load_log() == []


def test_minutes_below_minimum_are_clamped_on_load() -> None:
    store = StateStore(MemoryBackend({"focus_minutes": b"0", "break_minutes": b"-3"}))
    settings = store.load_settings()
    assert settings.focus_minutes == 1
    assert settings.break_minutes == 1


def test_out_of_range_upper_values_are_kept() -> None:
    store = StateStore(MemoryBackend({"focus_minutes": b"500"}))
    assert store.load_settings().focus_minutes == 500


def test_malformed_todos_are_dropped_individually() -> None:
    raw = b'[{"id": "a", "text": "Write intro", "done": true}, {"id": "b", "text": "   "}, {"text": "no id"}, 7]'
    store = StateStore(MemoryBackend({"current_todos": raw}))
    assert store.load_todos() == [TodoItem(id="a", text="Write intro", done=True)]


def test_broken_backend_never_raises() -> None:
    store = StateStore(BrokenBackend())
    assert store.get("focus_minutes", 25) == 25
    assert store.set("focus_minutes", 30) is False
    store.save_settings(Settings())
    assert store.load_settings() == Settings()


def test_slots_survive_reopen(tmp_path) -> None:
    backend = SqliteBackend(tmp_path / "state.db")
    backend.init_db()
    store = StateStore(backend)
    entry = LogEntry(
        id="1700000000000",
        phase=Phase.FOCUS,
        task="Draft chapter",
        start=1699999700000,
        end=1700000000000,
        duration_seconds=300,
        reason=FinalizeReason.RESET,
        todos=(TodoItem(id="t1", text="Outline", done=True),),
    )
    store.save_settings(Settings(focus_minutes=50, break_minutes=10, volume=0.25, sound_kind=SoundKind.TICK))
    store.save_log([entry])
    store.save_current_task("Draft chapter")
    store.save_timer(Phase.BREAK, 120)

    again = StateStore(SqliteBackend(tmp_path / "state.db"))
    settings = again.load_settings()
    assert settings == Settings(focus_minutes=50, break_minutes=10, volume=0.25, sound_kind=SoundKind.TICK)
    assert again.load_log() == [entry]
    assert again.load_current_task() == "Draft chapter"
    assert again.load_timer(settings) == (Phase.BREAK, 120)


def test_legacy_log_entries_without_reason_load_as_completed() -> None:
    raw = b'[{"id": "5", "phase": "break", "task": "-", "start": 0, "end": 300000, "duration": 300}]'
    store = StateStore(MemoryBackend({"session_log": raw}))
    [entry] = store.load_log()
    assert entry.reason is FinalizeReason.COMPLETED
    assert entry.todos == ()


def test_non_finite_numbers_fall_back_to_defaults() -> None:
    store = StateStore(
        MemoryBackend(
            {
                "focus_minutes": b"1e400",
                "break_minutes": b"-Infinity",
                "volume": b"NaN",
                "remaining_seconds": b"Infinity",
            }
        )
    )
    settings = store.load_settings()
    assert settings.focus_minutes == 25
    assert settings.break_minutes == 5
    assert settings.volume == 0.6
    assert store.load_timer(settings) == (Phase.FOCUS, 1500)


def test_infinite_volume_falls_back_to_default() -> None:
    store = StateStore(MemoryBackend({"volume": b"Infinity"}))
    assert store.load_settings().volume == 0.6


def test_log_element_with_infinite_timestamp_is_dropped() -> None:
    raw = (
        b'[{"id": "2", "phase": "focus", "task": "ok", "start": 0, "end": 60000, "duration": 60},'
        b' {"id": "1", "phase": "focus", "task": "bad", "start": Infinity, "end": 1, "duration": 1}]'
    )
    store = StateStore(MemoryBackend({"session_log": raw}))
    assert [entry.id for entry in store.load_log()] == ["2"]
