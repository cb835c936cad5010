"""Interactive CLI driver for playing KRED.

This module provides a text-based interface for playing KRED around one
table. It also shows how a GUI would drive the game engine: every
command is turned into an Action and passed to GameEngine.step().

The driver is split in two:
- TextRenderer handles all display logic
- GameDriver parses commands and runs the game loop

Usage:
    python -m engine.driver --players 4 --seed 7

Or from code:
    from engine.driver import GameDriver
    driver = GameDriver(num_players=4)
    driver.run()
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from typing import Callable, Optional

from core.constants import CampaignStep, Phase
from core.game_state import GameState
from core.locations import is_community

from engine.game_engine import Action, ActionType, GameEngine, StepResult


# =============================================================================
# Display
# =============================================================================

class TextRenderer:
    """CLI text-based renderer for the game state."""

    H_LINE = "─"
    V_LINE = "│"
    TL_CORNER = "┌"
    TR_CORNER = "┐"
    BL_CORNER = "└"
    BR_CORNER = "┘"

    # Player colors (ANSI codes)
    PLAYER_COLORS = [
        "\033[91m",  # Red
        "\033[94m",  # Blue
        "\033[96m",  # Cyan
        "\033[93m",  # Yellow
        "\033[95m",  # Magenta
    ]
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    def __init__(self, use_colors: bool = True, out: Callable[[str], None] = print):
        """Initialize the renderer.

        Args:
            use_colors: Whether to use ANSI color codes.
            out: Where rendered lines are written.
        """
        self.use_colors = use_colors
        self.out = out

    def _color(self, text: str, color: str) -> str:
        if self.use_colors:
            return f"{color}{text}{self.RESET}"
        return text

    def _player_color(self, player_id: int) -> str:
        return self.PLAYER_COLORS[player_id % len(self.PLAYER_COLORS)]

    @staticmethod
    def _strip_ansi(text: str) -> str:
        return re.sub(r"\033\[[0-9;]*m", "", text)

    def _box(self, title: str, content: list[str], width: int = 60) -> str:
        """Create a box around content."""
        title_space = max(width - len(title) - 4, 0)
        lines = [f"{self.TL_CORNER}{self.H_LINE * 2} {title} {self.H_LINE * title_space}{self.TR_CORNER}"]
        for line in content:
            padding = max(width - len(self._strip_ansi(line)) - 2, 0)
            lines.append(f"{self.V_LINE} {line}{' ' * padding}{self.V_LINE}")
        lines.append(f"{self.BL_CORNER}{self.H_LINE * width}{self.BR_CORNER}")
        return "\n".join(lines)

    def render_state(self, engine: GameEngine) -> None:
        """Render the full game state."""
        state = engine.state
        self.out("\n" + "=" * 70)
        self.render_phase_header(state)
        self.render_player_status(state)
        self.render_board(state)
        if state.phase == Phase.BUREAUCRACY and engine.bureaucracy is not None:
            self.render_menu(engine)

    def render_phase_header(self, state: GameState) -> None:
        step = f" / {state.campaign_step.value}" if state.phase == Phase.CAMPAIGN else ""
        header = f"Round {state.round_number} - {state.phase.value.upper()}{step}"
        current = state.get_current_player().player_id
        self.out(self._color(header.center(70), self.BOLD))
        self.out("Current Turn: " + self._color(f"Player {current}", self._player_color(current)))

    def render_player_status(self, state: GameState) -> None:
        content = []
        current = state.get_current_player().player_id
        for player in state.players:
            line = self._color(f"P{player.player_id}", self._player_color(player.player_id))
            line += (
                f": hand={sorted(t.id for t in player.hand)} "
                f"kept={sorted(t.id for t in player.kept_tiles)} "
                f"banked={len(player.bureaucracy_tiles)} "
                f"cred={player.credibility}"
            )
            if player.player_id == current:
                line += " <--"
            content.append(line)
        self.out(self._box("Players", content))

    def render_board(self, state: GameState) -> None:
        content = []
        for player in state.players:
            prefix = f"p{player.player_id}_"
            held = sorted(
                f"{p.location_id[len(prefix):]}={p.name.value}"
                for p in state.pieces
                if p.location_id and p.location_id.startswith(prefix)
            )
            content.append(f"P{player.player_id}: " + (", ".join(held) or "-"))
        community = sum(1 for p in state.pieces if is_community(p.location_id))
        content.append(f"Community: {community} pieces")
        for board_tile in state.board_tiles:
            content.append(
                f"Tile {board_tile.tile.id}: P{board_tile.placer_id} -> P{board_tile.owner_id}"
            )
        self.out(self._box("Board", content))

    def render_menu(self, engine: GameEngine) -> None:
        machine = engine.bureaucracy
        player_id = machine.current_player_id
        if player_id is None:
            return
        remaining = machine.get_player_state(player_id).remaining_kredcoin
        content = [f"Kredcoin: {remaining}"]
        for item in machine.get_available_items():
            content.append(f"{item.id:<24} {item.price:>3}  {item.description}")
        self.out(self._box("Bureaucracy Menu", content))

    def render_message(self, message: str) -> None:
        self.out(message)

    def render_error(self, error: str) -> None:
        self.out(self._color(f"Error: {error}", self.PLAYER_COLORS[0]))

    def render_game_over(self, engine: GameEngine) -> None:
        winners = ", ".join(f"Player {w}" for w in engine.winners)
        self.out(self._color("GAME OVER".center(70), self.BOLD))
        self.out(f"Winner(s): {winners or '-'}")


# =============================================================================
# Command parsing
# =============================================================================

COMMAND_HELP = {
    ActionType.SELECT_TILE: "pick <tile_id>",
    ActionType.PLAY_TILE: "play <tile_id> <receiver_id>",
    ActionType.MOVE_PIECE: "move <piece_id> <location_id>",
    ActionType.END_MOVES: "done",
    ActionType.ACCEPT: "accept",
    ActionType.REJECT: "reject",
    ActionType.CHALLENGE: "challenge",
    ActionType.PASS_CHALLENGE: "pass",
    ActionType.COMPLETE_CORRECTION: "done",
    ActionType.SELECT_PURCHASE: "buy <item_id>",
    ActionType.PROMOTE: "promote <piece_id>",
    ActionType.COMPLETE_PURCHASE: "done",
    ActionType.RESET_PURCHASE: "reset",
    ActionType.END_BUREAUCRACY_TURN: "end",
}


def parse_command(
    text: str, player_id: int, valid: list[ActionType]
) -> Optional[Action]:
    """Turn a typed command into an Action.

    Args:
        text: The command line.
        player_id: The player issuing it.
        valid: Action types allowed right now; "done" maps to whichever
               of them finishes the current step.

    Returns:
        The Action, or None if the command is not understood.
    """
    words = text.split()
    if not words:
        return None
    verb, args = words[0].lower(), words[1:]

    def make(action_type: ActionType, **params) -> Action:
        return Action(action_type=action_type, player_id=player_id, params=params)

    if verb == "pick" and len(args) == 1:
        return make(ActionType.SELECT_TILE, tile_id=int(args[0]))
    if verb == "play" and len(args) == 2:
        return make(ActionType.PLAY_TILE, tile_id=int(args[0]), receiver_id=int(args[1]))
    if verb == "move" and len(args) == 2:
        return make(ActionType.MOVE_PIECE, piece_id=args[0], to_location_id=args[1])
    if verb == "buy" and len(args) == 1:
        return make(ActionType.SELECT_PURCHASE, item_id=args[0])
    if verb == "promote" and len(args) == 1:
        return make(ActionType.PROMOTE, piece_id=args[0])

    simple = {
        "accept": ActionType.ACCEPT,
        "reject": ActionType.REJECT,
        "challenge": ActionType.CHALLENGE,
        "pass": ActionType.PASS_CHALLENGE,
        "reset": ActionType.RESET_PURCHASE,
        "end": ActionType.END_BUREAUCRACY_TURN,
    }
    if verb in simple and not args:
        return make(simple[verb])

    if verb == "done" and not args:
        for action_type in (
            ActionType.END_MOVES,
            ActionType.COMPLETE_CORRECTION,
            ActionType.COMPLETE_PURCHASE,
        ):
            if action_type in valid:
                return make(action_type)
    return None


# =============================================================================
# Game loop
# =============================================================================

class GameDriver:
    """Runs a KRED game from typed commands."""

    def __init__(
        self,
        num_players: int = 3,
        seed: Optional[int] = None,
        renderer: Optional[TextRenderer] = None,
        read: Callable[[str], str] = input,
    ):
        self.engine = GameEngine()
        self.engine.reset(num_players=num_players, seed=seed)
        self.renderer = renderer or TextRenderer()
        self.read = read

    def step_command(self, text: str) -> Optional[StepResult]:
        """Parse and execute one command for the current player."""
        state = self.engine.state
        valid = self.engine.get_valid_action_types()
        try:
            action = parse_command(text, state.get_current_player().player_id, valid)
        except ValueError:
            action = None
        if action is None:
            options = sorted({COMMAND_HELP[a] for a in valid})
            self.renderer.render_error(f"Unknown command. Try: {', '.join(options)}")
            return None

        result = self.engine.step(action)
        if not result.success:
            self.renderer.render_error(result.info.get("error", "Action failed"))
        return result

    def run(self) -> list[int]:
        """Play until the game ends.

        Returns:
            The winning player ids.
        """
        while not self.engine.is_game_over():
            self.renderer.render_state(self.engine)
            state = self.engine.state
            if state.phase == Phase.CAMPAIGN and state.campaign_step == CampaignStep.TILE_PLAYED:
                self.renderer.render_message("Move pieces for the tile, then type 'done'.")
            text = self.read(f"P{state.get_current_player().player_id}> ")
            self.step_command(text)

        self.renderer.render_game_over(self.engine)
        return self.engine.winners


# =============================================================================
# Entry Point
# =============================================================================

def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the CLI driver."""
    parser = argparse.ArgumentParser(
        description="Play KRED in the terminal",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--players", type=int, default=3, choices=(3, 4, 5),
                        help="Number of players")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the tile shuffle")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine decisions")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    driver = GameDriver(
        num_players=args.players,
        seed=args.seed,
        renderer=TextRenderer(use_colors=not args.no_color),
    )
    try:
        driver.run()
    except (KeyboardInterrupt, EOFError):
        print("\n\nGame interrupted. Goodbye!")
        sys.exit(0)


if __name__ == "__main__":
    main()
