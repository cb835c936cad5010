"""Phase state machine for the KRED game engine.

Manages phase transitions:
- DRAFTING (once at game start) -> CAMPAIGN
- CAMPAIGN -> BUREAUCRACY once every kept tile has been played
- BUREAUCRACY -> GAME_OVER if anyone has won, else back to CAMPAIGN

The phase machine enforces valid transitions and provides the logic for
when transitions should occur.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from core.constants import Phase

from .campaign import is_campaign_complete
from .drafting import is_draft_complete
from .win_conditions import check_bureaucracy_win_condition

if TYPE_CHECKING:
    from core.game_state import GameState


# Valid phase transitions
PHASE_TRANSITIONS: dict[Phase, list[Phase]] = {
    Phase.DRAFTING: [Phase.CAMPAIGN],
    Phase.CAMPAIGN: [Phase.BUREAUCRACY],
    Phase.BUREAUCRACY: [Phase.CAMPAIGN, Phase.GAME_OVER],
    # Terminal
    Phase.GAME_OVER: [],
}


@dataclass
class PhaseTransitionResult:
    """Result of a phase transition attempt.

    Attributes:
        success: Whether the transition was successful.
        new_phase: The new phase if successful, None otherwise.
        reason: Description of why the transition failed (if it did).
        winners: Winning player ids when the game ends.
    """

    success: bool
    new_phase: Optional[Phase]
    reason: Optional[str] = None
    winners: Optional[list[int]] = None


class PhaseMachine:
    """Tracks the KRED phase and which phase may follow it.

    The machine never touches the GameState; GameEngine asks it what
    comes next and applies the change itself.

    Phases:
        - DRAFTING: Players pick tiles and pass hands
        - CAMPAIGN: Players play tiles to each other and move pieces
        - BUREAUCRACY: Players spend banked tiles on the menu
        - GAME_OVER: Terminal state
    """

    def __init__(self, initial_phase: Phase = Phase.DRAFTING):
        """Initialize the phase machine.

        Args:
            initial_phase: The starting phase (default: DRAFTING).
        """
        self._phase = initial_phase

    @property
    def phase(self) -> Phase:
        """Get the current phase."""
        return self._phase

    def get_valid_transitions(self) -> list[Phase]:
        return PHASE_TRANSITIONS.get(self._phase, [])

    def can_transition_to(self, target_phase: Phase) -> bool:
        return target_phase in self.get_valid_transitions()

    def transition_to(self, target_phase: Phase) -> PhaseTransitionResult:
        """Attempt to transition to a new phase.

        Args:
            target_phase: The phase to transition to.

        Returns:
            PhaseTransitionResult indicating success or failure.
        """
        if not self.can_transition_to(target_phase):
            valid = self.get_valid_transitions()
            return PhaseTransitionResult(
                success=False,
                new_phase=None,
                reason=f"Cannot transition from {self._phase.value} to {target_phase.value}. "
                f"Valid transitions: {[p.value for p in valid]}",
            )

        self._phase = target_phase
        return PhaseTransitionResult(success=True, new_phase=target_phase)

    def is_game_over(self) -> bool:
        return self._phase == Phase.GAME_OVER

    # -------------------------------------------------------------------------
    # Phase transition logic helpers
    # -------------------------------------------------------------------------

    def should_end_drafting_phase(self, state: GameState) -> bool:
        """The draft ends when every hand is empty."""
        if self._phase != Phase.DRAFTING:
            return False
        return is_draft_complete(state.players)

    def should_end_campaign_phase(self, state: GameState) -> bool:
        """The campaign ends when every kept tile has been played and banked."""
        if self._phase != Phase.CAMPAIGN:
            return False
        return not state.board_tiles and is_campaign_complete(state.players)

    def compute_next_phase(
        self, state: GameState, bureaucracy_complete: bool = False
    ) -> PhaseTransitionResult:
        """Compute what the next phase should be based on game state.

        Args:
            state: The current game state.
            bureaucracy_complete: Whether every player has finished their
                bureaucracy turn.

        Returns:
            PhaseTransitionResult with the recommended next phase.
        """
        current = self._phase

        if current == Phase.DRAFTING:
            if self.should_end_drafting_phase(state):
                return PhaseTransitionResult(success=True, new_phase=Phase.CAMPAIGN)
            return PhaseTransitionResult(
                success=False, new_phase=None, reason="Players still hold tiles to draft"
            )

        if current == Phase.CAMPAIGN:
            if self.should_end_campaign_phase(state):
                return PhaseTransitionResult(success=True, new_phase=Phase.BUREAUCRACY)
            return PhaseTransitionResult(
                success=False, new_phase=None, reason="Players still hold tiles to play"
            )

        if current == Phase.BUREAUCRACY:
            if not bureaucracy_complete:
                return PhaseTransitionResult(
                    success=False,
                    new_phase=None,
                    reason="Not all players have finished their bureaucracy turn",
                )
            winners = check_bureaucracy_win_condition(state.players, state.pieces)
            if len(winners) == 1:
                return PhaseTransitionResult(
                    success=True,
                    new_phase=Phase.GAME_OVER,
                    reason=f"Player {winners[0]} has won the game!",
                    winners=winners,
                )
            if winners:
                return PhaseTransitionResult(
                    success=True,
                    new_phase=Phase.GAME_OVER,
                    reason=f"The game is a draw! Winners: {', '.join(map(str, winners))}",
                    winners=winners,
                )
            return PhaseTransitionResult(success=True, new_phase=Phase.CAMPAIGN)

        if current == Phase.GAME_OVER:
            return PhaseTransitionResult(
                success=False,
                new_phase=None,
                reason="Game has ended - no further transitions",
            )

        return PhaseTransitionResult(
            success=False,
            new_phase=None,
            reason=f"Unknown phase: {current}",
        )

    def __str__(self) -> str:
        return f"PhaseMachine(phase={self._phase.value})"

    def __repr__(self) -> str:
        return f"PhaseMachine(phase={self._phase!r})"
