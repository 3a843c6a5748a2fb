from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from focusblocks.core.models import FinalizeReason, Phase


class Effect(str, Enum):
    CLEAR_TODOS = "clear_todos"
    ALERT = "alert"
    ADVANCE = "advance"


@dataclass(frozen=True)
class Transition:
    next_phase: Phase
    effects: frozenset[Effect]

    def has(self, effect: Effect) -> bool:
        return effect in self.effects


_ADVANCE = frozenset({Effect.ADVANCE})

TRANSITIONS: dict[tuple[Phase, FinalizeReason], Transition] = {
    (Phase.FOCUS, FinalizeReason.COMPLETED): Transition(
        Phase.BREAK, _ADVANCE | {Effect.CLEAR_TODOS, Effect.ALERT}
    ),
    (Phase.BREAK, FinalizeReason.COMPLETED): Transition(Phase.FOCUS, _ADVANCE | {Effect.ALERT}),
    (Phase.FOCUS, FinalizeReason.SKIPPED): Transition(Phase.BREAK, _ADVANCE | {Effect.CLEAR_TODOS}),
    (Phase.BREAK, FinalizeReason.SKIPPED): Transition(Phase.FOCUS, _ADVANCE),
    (Phase.FOCUS, FinalizeReason.RESET): Transition(Phase.FOCUS, frozenset({Effect.CLEAR_TODOS})),
    (Phase.BREAK, FinalizeReason.RESET): Transition(Phase.BREAK, frozenset()),
}


def transition_for(phase: Phase, reason: FinalizeReason) -> Transition:
    """Look up the transition; every (phase, reason) pair has exactly one row."""
    return TRANSITIONS[(phase, reason)]


def missing_transitions() -> list[tuple[Phase, FinalizeReason]]:
    return [(phase, reason) for phase in Phase for reason in FinalizeReason if (phase, reason) not in TRANSITIONS]