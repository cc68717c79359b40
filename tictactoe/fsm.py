from __future__ import annotations

from statemachine import State, StateMachine

from tictactoe.api.models import GameState, SessionPhase


class SessionFSM(StateMachine):
    """Session lifecycle wrapper around GameState.

    - phases: empty -> waiting -> active -> finished
    - seats are assigned/vacated by the registry; the FSM only guards transitions
      and mirrors the resulting phase onto the model.
    - finished is only left by creating a new game, so seat/vacate keep it there.
    """

    empty = State(SessionPhase.empty.value, value=SessionPhase.empty.value, initial=True)
    waiting = State(SessionPhase.waiting.value, value=SessionPhase.waiting.value)
    active = State(SessionPhase.active.value, value=SessionPhase.active.value)
    finished = State(SessionPhase.finished.value, value=SessionPhase.finished.value)

    seat = empty.to(waiting) | waiting.to(active) | finished.to.itself()
    vacate = active.to(waiting) | waiting.to(empty) | finished.to.itself()
    finish = waiting.to(finished) | active.to(finished)

    def __init__(self, game: GameState):
        self.game = game
        super().__init__(start_value=game.phase.value)

    def sync_phase_to_model(self) -> None:
        self.game.phase = SessionPhase(str(self.current_state.value))


def advance(game: GameState, event: str) -> SessionPhase:
    """Fire `event` on a fresh FSM for `game` and write the new phase back."""

    fsm = SessionFSM(game)
    fsm.send(event)
    fsm.sync_phase_to_model()
    return game.phase
