from focusblocks.core.models import FinalizeReason, Phase
from focusblocks.core.transitions import TRANSITIONS, Effect, missing_transitions, transition_for


def test_table_covers_every_phase_and_reason() -> None:
    assert missing_transitions() == []
    assert len(TRANSITIONS) == len(Phase) * len(FinalizeReason)


def test_completed_and_skipped_flip_phase() -> None:
    for reason in (FinalizeReason.COMPLETED, FinalizeReason.SKIPPED):
        for phase in Phase:
            transition = transition_for(phase, reason)
            assert transition.next_phase is not phase
            assert transition.has(Effect.ADVANCE)


def test_only_completion_sounds_the_alert() -> None:
    alerting = {key for key, transition in TRANSITIONS.items() if transition.has(Effect.ALERT)}
    assert alerting == {(Phase.FOCUS, FinalizeReason.COMPLETED), (Phase.BREAK, FinalizeReason.COMPLETED)}


def test_every_focus_row_clears_todos_and_no_break_row_does() -> None:
    for (phase, _reason), transition in TRANSITIONS.items():
        assert transition.has(Effect.CLEAR_TODOS) is (phase is Phase.FOCUS)


def test_reset_stays_in_phase() -> None:
    for phase in Phase:
        transition = transition_for(phase, FinalizeReason.RESET)
        assert transition.next_phase is phase
        assert not transition.has(Effect.ADVANCE)
