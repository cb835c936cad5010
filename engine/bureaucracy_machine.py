"""Bureaucracy phase state machine for the KRED game engine.

Players take bureaucracy turns richest first. During a turn the player
repeatedly picks a menu item they can afford, carries it out on the
board, and either completes the purchase (validated, paid for) or resets
it (board rolled back):

    MENU_SHOWN -> ITEM_SELECTED -> complete_purchase() -> MENU_SHOWN
                                -> reset_action()      -> MENU_SHOWN

A turn ends when the player stops or runs out of Kredcoin. The phase is
complete once every player's turn is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from core.bureaucracy import (
    BureaucracyMenuItem,
    BureaucracyPlayerState,
    BureaucracyPurchase,
)
from core.constants import MAX_CREDIBILITY, BureaucracyItemType, BureaucracyStep

from .bureaucracy import (
    calculate_player_kredcoin,
    find_promoted_pieces,
    get_available_purchases,
    get_bureaucracy_menu,
    get_bureaucracy_turn_order,
    pay_for_purchase,
    perform_promotion,
    validate_promotion,
    validate_purchased_move,
)
from .credibility import restore_credibility
from .snapshots import create_game_state_snapshot
from .win_conditions import check_bureaucracy_win_condition

if TYPE_CHECKING:
    from core.game_state import GameState, GameStateSnapshot

logger = logging.getLogger(__name__)

INSUFFICIENT_KREDCOIN_REASON = "Insufficient Kredcoin for this purchase"
NO_PROMOTION_REASON = "No promotion was performed. Please click a piece to promote it."
MULTIPLE_PROMOTIONS_REASON = "Only one promotion can be performed per purchase."


@dataclass
class BureaucracyActionResult:
    """Result of a bureaucracy action.

    Attributes:
        success: Whether the action was carried out.
        step: The step after the action.
        reason: Why the action failed, if it did.
    """

    success: bool
    step: BureaucracyStep
    reason: Optional[str] = None


class BureaucracyMachine:
    """Runs one bureaucracy phase on a GameState.

    Usage:
        machine = BureaucracyMachine(state)
        machine.start()
        machine.select_item("move_advance")
        ...  # the player moves pieces in state.pieces
        machine.complete_purchase()
        machine.end_turn()
    """

    def __init__(self, state: GameState, max_credibility: int = MAX_CREDIBILITY):
        """Initialize the machine.

        Args:
            state: The game state the bureaucracy happens in.
            max_credibility: Cap for credibility purchases.
        """
        self.state = state
        self.max_credibility = max_credibility
        self.menu: tuple[BureaucracyMenuItem, ...] = get_bureaucracy_menu(state.player_count)

        self._turn_order: Optional[list[int]] = None
        self._player_states: dict[int, BureaucracyPlayerState] = {}
        self._current_index = 0
        self._step = BureaucracyStep.MENU_SHOWN
        self._purchase: Optional[BureaucracyPurchase] = None
        self._snapshot: Optional[GameStateSnapshot] = None
        self._credibility_before: Optional[int] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    def _require_started(self) -> None:
        if self._turn_order is None:
            raise RuntimeError("Bureaucracy not started. Call start() first.")

    @property
    def turn_order(self) -> list[int]:
        """Player ids in bureaucracy order.

        Raises:
            RuntimeError: If the phase has not been started.
        """
        self._require_started()
        return self._turn_order

    @property
    def step(self) -> BureaucracyStep:
        return self._step

    @property
    def current_purchase(self) -> Optional[BureaucracyPurchase]:
        return self._purchase

    @property
    def current_player_id(self) -> Optional[int]:
        """The player taking their turn, None once the phase is complete."""
        order = self.turn_order
        if self._current_index >= len(order):
            return None
        return order[self._current_index]

    def get_player_state(self, player_id: int) -> BureaucracyPlayerState:
        self._require_started()
        return self._player_states[player_id]

    def get_available_items(self) -> list[BureaucracyMenuItem]:
        """Menu items the current player can afford."""
        player_id = self.current_player_id
        if player_id is None:
            return []
        remaining = self._player_states[player_id].remaining_kredcoin
        return get_available_purchases(self.menu, remaining)

    def is_phase_complete(self) -> bool:
        return all(s.turn_complete for s in self._player_states.values()) and bool(
            self._player_states
        )

    def get_winners(self) -> list[int]:
        """Players meeting the win condition on the current board."""
        return check_bureaucracy_win_condition(self.state.players, self.state.pieces)

    # -------------------------------------------------------------------------
    # Phase flow
    # -------------------------------------------------------------------------

    def start(self) -> list[int]:
        """Compute Kredcoin and turn order and open the first player's menu.

        Returns:
            The turn order.
        """
        players = self.state.players
        self._turn_order = get_bureaucracy_turn_order(players)
        self._player_states = {}
        for player in players:
            kredcoin = calculate_player_kredcoin(player)
            self._player_states[player.player_id] = BureaucracyPlayerState(
                player_id=player.player_id,
                initial_kredcoin=kredcoin,
                remaining_kredcoin=kredcoin,
            )
        self._current_index = 0
        self._step = BureaucracyStep.MENU_SHOWN
        self._clear_purchase()
        self.state.set_current_player(self._turn_order[0])

        logger.info("Bureaucracy turn order: %s", self._turn_order)
        return self._turn_order

    def _refuse(self, reason: str) -> BureaucracyActionResult:
        logger.warning("Bureaucracy action refused: %s", reason)
        return BureaucracyActionResult(success=False, step=self._step, reason=reason)

    def _clear_purchase(self) -> None:
        self._purchase = None
        self._snapshot = None
        self._credibility_before = None

    def select_item(self, item_id: str) -> BureaucracyActionResult:
        """Select a menu item for the current player.

        The board is snapshotted so the purchase can be reset. A credibility
        purchase takes effect immediately.

        Args:
            item_id: Id of the menu item.

        Returns:
            BureaucracyActionResult.
        """
        player_id = self.current_player_id
        if player_id is None:
            return self._refuse("The bureaucracy phase is complete")
        if self._step != BureaucracyStep.MENU_SHOWN:
            return self._refuse("Finish or reset the current purchase first")

        item = next((i for i in self.menu if i.id == item_id), None)
        if item is None:
            return self._refuse(f"Unknown menu item: {item_id}")
        if item.price > self._player_states[player_id].remaining_kredcoin:
            return self._refuse(INSUFFICIENT_KREDCOIN_REASON)

        self._snapshot = create_game_state_snapshot(self.state.pieces, self.state.board_tiles)
        self._purchase = BureaucracyPurchase(
            player_id=player_id,
            item=item,
            timestamp=float(len(self._player_states[player_id].purchases)),
        )

        if item.type == BureaucracyItemType.CREDIBILITY:
            player = self.state.get_player(player_id)
            self._credibility_before = player.credibility
            restore_credibility(player, maximum=self.max_credibility)

        self._step = BureaucracyStep.ITEM_SELECTED
        return BureaucracyActionResult(success=True, step=self._step)

    def promote(self, piece_id: str) -> BureaucracyActionResult:
        """Carry out the selected promotion on a piece."""
        if self._step != BureaucracyStep.ITEM_SELECTED or self._purchase is None:
            return self._refuse("No purchase selected")
        if self._purchase.item.type != BureaucracyItemType.PROMOTION:
            return self._refuse("The selected item is not a promotion")

        result = perform_promotion(self.state.pieces, piece_id)
        if not result.success:
            return self._refuse(result.reason)
        self.state.pieces = result.pieces
        return BureaucracyActionResult(success=True, step=self._step)

    def _validate_purchase(self) -> Optional[str]:
        purchase = self._purchase
        item = purchase.item
        before = list(self._snapshot.pieces)
        after = self.state.pieces

        if item.type == BureaucracyItemType.CREDIBILITY:
            return None

        if item.type == BureaucracyItemType.PROMOTION:
            promoted = find_promoted_pieces(before, after)
            if not promoted:
                return NO_PROMOTION_REASON
            if len(promoted) > 1:
                return MULTIPLE_PROMOTIONS_REASON
            result = validate_promotion(
                after, promoted[0], item.promotion_location, purchase.player_id, before
            )
            return None if result.is_valid else result.reason

        result = validate_purchased_move(
            before, after, purchase.player_id, self.state.player_count, item.move_type
        )
        return None if result.is_valid else result.reason

    def complete_purchase(self) -> BureaucracyActionResult:
        """Validate the selected purchase and pay for it.

        On failure the board is rolled back to the snapshot taken at
        selection and the menu is shown again.
        """
        if self._step != BureaucracyStep.ITEM_SELECTED or self._purchase is None:
            return self._refuse("No purchase selected")

        reason = self._validate_purchase()
        if reason is not None:
            self._rollback()
            return self._refuse(reason)

        purchase = self._purchase
        player_state = self._player_states[purchase.player_id]
        player_state.remaining_kredcoin -= purchase.item.price
        purchase.completed = True
        player_state.purchases.append(purchase)
        pay_for_purchase(self.state.get_player(purchase.player_id), purchase.item.price)

        logger.info(
            "Player %s bought %s for %d Kredcoin (%d left)",
            purchase.player_id,
            purchase.item.id,
            purchase.item.price,
            player_state.remaining_kredcoin,
        )

        self._clear_purchase()
        self._step = BureaucracyStep.MENU_SHOWN
        if player_state.remaining_kredcoin <= 0:
            return self.end_turn()
        return BureaucracyActionResult(success=True, step=self._step)

    def _rollback(self) -> None:
        if self._snapshot is not None:
            self.state.restore(self._snapshot)
        if self._credibility_before is not None and self._purchase is not None:
            self.state.get_player(self._purchase.player_id).credibility = self._credibility_before
        self._clear_purchase()
        self._step = BureaucracyStep.MENU_SHOWN

    def reset_action(self) -> BureaucracyActionResult:
        """Abandon the selected purchase and roll the board back."""
        if self._step != BureaucracyStep.ITEM_SELECTED:
            return self._refuse("No purchase selected")
        self._rollback()
        return BureaucracyActionResult(success=True, step=self._step)

    def end_turn(self) -> BureaucracyActionResult:
        """Finish the current player's turn and move to the next player."""
        player_id = self.current_player_id
        if player_id is None:
            return self._refuse("The bureaucracy phase is complete")
        if self._step == BureaucracyStep.ITEM_SELECTED:
            return self._refuse("Finish or reset the current purchase first")

        self._player_states[player_id].turn_complete = True
        self._current_index += 1

        next_player = self.current_player_id
        if next_player is None:
            self._step = BureaucracyStep.TURN_COMPLETE
            logger.info("Bureaucracy phase complete")
        else:
            self._step = BureaucracyStep.MENU_SHOWN
            self.state.set_current_player(next_player)
        return BureaucracyActionResult(success=True, step=self._step)
