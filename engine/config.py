"""Runtime configuration for the KRED game engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.constants import (
    DEFAULT_CREDIBILITY,
    MAX_CREDIBILITY,
    MAX_PLAYERS,
    MIN_PLAYERS,
    PLAYER_OPTIONS,
)


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for a game run by GameEngine.

    Attributes:
        player_count: Number of players (3-5).
        seed: Seed for tile shuffles. None gives a different deal each game.
        starting_credibility: Credibility every player starts with.
        max_credibility: Cap for credibility restored by purchases.
    """

    player_count: int = 3
    seed: Optional[int] = None
    starting_credibility: int = DEFAULT_CREDIBILITY
    max_credibility: int = MAX_CREDIBILITY

    def validate(self) -> list[str]:
        """Check the settings.

        Returns:
            List of error messages (empty if valid).
        """
        errors: list[str] = []
        if self.player_count not in PLAYER_OPTIONS:
            errors.append(
                f"Invalid player count: {self.player_count} "
                f"(must be {MIN_PLAYERS}-{MAX_PLAYERS})"
            )
        if self.max_credibility < 0:
            errors.append(f"max_credibility must be >= 0, got {self.max_credibility}")
        if not 0 <= self.starting_credibility <= self.max_credibility:
            errors.append(
                f"starting_credibility must be between 0 and {self.max_credibility}, "
                f"got {self.starting_credibility}"
            )
        return errors
