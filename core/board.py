"""Domain topology tables for the KRED board.

Every player domain has six seats, two rostrums and an office:
- Seats 1-3 support rostrum 1, seats 4-6 support rostrum 2
- Rostrums link across domains in a ring (one player's rostrum 2 sits
  next to a neighbour's rostrum 1)

Coordinates for every location live in the JSON layouts under data/;
this module only holds the structural rules, which are fixed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constants import MAX_PLAYERS, SEATS_PER_ROSTRUM
from .locations import LocationId, office_id, rostrum_id, seat_id


@dataclass(frozen=True)
class RostrumSupportRule:
    """A rostrum and the three seats that must be filled to advance into it."""

    rostrum: LocationId
    supporting_seats: tuple[LocationId, ...]


@dataclass(frozen=True)
class PlayerRostrumRules:
    """Rostrum support rules and office for one player domain."""

    rostrums: tuple[RostrumSupportRule, ...]
    office: LocationId


def _player_rules(player_id: int) -> PlayerRostrumRules:
    rostrums = []
    for rostrum in (1, 2):
        first_seat = (rostrum - 1) * SEATS_PER_ROSTRUM + 1
        seats = tuple(
            seat_id(player_id, s)
            for s in range(first_seat, first_seat + SEATS_PER_ROSTRUM)
        )
        rostrums.append(RostrumSupportRule(rostrum_id(player_id, rostrum), seats))
    return PlayerRostrumRules(rostrums=tuple(rostrums), office=office_id(player_id))


# Keyed by player id; the rules are identical for every player count
ROSTRUM_SUPPORT_RULES: dict[int, PlayerRostrumRules] = {
    player_id: _player_rules(player_id) for player_id in range(1, MAX_PLAYERS + 1)
}

# Rostrum pairs that sit next to each other across domains
ROSTRUM_ADJACENCY_BY_PLAYER_COUNT: dict[int, tuple[tuple[LocationId, LocationId], ...]] = {
    3: (
        ("p1_rostrum2", "p3_rostrum1"),
        ("p3_rostrum2", "p2_rostrum1"),
        ("p2_rostrum2", "p1_rostrum1"),
    ),
    4: (
        ("p1_rostrum2", "p4_rostrum1"),
        ("p4_rostrum2", "p3_rostrum1"),
        ("p3_rostrum2", "p2_rostrum1"),
        ("p2_rostrum2", "p1_rostrum1"),
    ),
    5: (
        ("p1_rostrum2", "p5_rostrum1"),
        ("p5_rostrum2", "p4_rostrum1"),
        ("p4_rostrum2", "p3_rostrum1"),
        ("p3_rostrum2", "p2_rostrum1"),
        ("p2_rostrum2", "p1_rostrum1"),
    ),
}


def get_rostrum_support_rules(player_count: int) -> dict[int, PlayerRostrumRules]:
    """Get the support rules for the players in a game of this size.

    Returns:
        Rules keyed by player id, empty for unsupported player counts.
    """
    if player_count not in ROSTRUM_ADJACENCY_BY_PLAYER_COUNT:
        return {}
    return {pid: ROSTRUM_SUPPORT_RULES[pid] for pid in range(1, player_count + 1)}


def get_supporting_seats(rostrum: LocationId) -> tuple[LocationId, ...]:
    """Get the seats supporting a rostrum, empty if the id is not a rostrum."""
    for rules in ROSTRUM_SUPPORT_RULES.values():
        for rule in rules.rostrums:
            if rule.rostrum == rostrum:
                return rule.supporting_seats
    return ()


def get_supported_rostrum(seat: LocationId) -> Optional[LocationId]:
    """Get the rostrum a seat supports, None if the id is not a seat."""
    for rules in ROSTRUM_SUPPORT_RULES.values():
        for rule in rules.rostrums:
            if seat in rule.supporting_seats:
                return rule.rostrum
    return None
