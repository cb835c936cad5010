"""Location identifiers for the KRED board.

Locations are addressed by string ids at the API boundary:

- ``p{player}_seat{n}`` - one of six seats in a player's domain
- ``p{player}_rostrum{n}`` - one of two rostrums in a player's domain
- ``p{player}_office`` - the player's office
- ``community{n}`` - a slot in the shared community pool

Ids are parsed once into a structured Location and cached, so validators
can query kind, owner and index without repeating regex work.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional


# Type alias for clarity
LocationId = str

_DOMAIN_PATTERN = re.compile(r"^p(\d+)_(seat|rostrum|office)(\d*)$")
_COMMUNITY_PATTERN = re.compile(r"^community(\d+)$")


class LocationKind(Enum):
    """The four kinds of drop location."""

    SEAT = "seat"
    ROSTRUM = "rostrum"
    OFFICE = "office"
    COMMUNITY = "community"


@dataclass(frozen=True)
class Location:
    """A parsed location id.

    Attributes:
        kind: Seat, rostrum, office or community.
        player_id: Owner of the domain, None for community slots.
        index: Seat/rostrum/community number, None for offices.
    """

    kind: LocationKind
    player_id: Optional[int] = None
    index: Optional[int] = None

    @property
    def is_community(self) -> bool:
        return self.kind == LocationKind.COMMUNITY

    @property
    def is_seat(self) -> bool:
        return self.kind == LocationKind.SEAT

    @property
    def is_rostrum(self) -> bool:
        return self.kind == LocationKind.ROSTRUM

    @property
    def is_office(self) -> bool:
        return self.kind == LocationKind.OFFICE

    def belongs_to(self, player_id: int) -> bool:
        """Check if this location is in the given player's domain."""
        return self.player_id is not None and self.player_id == player_id

    def __str__(self) -> str:
        return make_location_id(self.kind, self.player_id, self.index)


def make_location_id(
    kind: LocationKind,
    player_id: Optional[int] = None,
    index: Optional[int] = None,
) -> LocationId:
    """Build the string id for a location.

    Args:
        kind: The kind of location.
        player_id: Domain owner (ignored for community slots).
        index: Seat, rostrum or community number (ignored for offices).

    Returns:
        The location id, e.g. ``"p2_rostrum1"``.
    """
    if kind == LocationKind.COMMUNITY:
        return f"community{index}"
    if kind == LocationKind.OFFICE:
        return f"p{player_id}_office"
    return f"p{player_id}_{kind.value}{index}"


@lru_cache(maxsize=None)
def parse_location_id(location_id: Optional[LocationId]) -> Optional[Location]:
    """Parse a location id into its structured form.

    Args:
        location_id: A string id, or None for off-board pieces.

    Returns:
        The parsed Location, or None if the id is None or malformed.
    """
    if not location_id:
        return None

    match = _COMMUNITY_PATTERN.match(location_id)
    if match:
        return Location(kind=LocationKind.COMMUNITY, index=int(match.group(1)))

    match = _DOMAIN_PATTERN.match(location_id)
    if match is None:
        return None

    player_id = int(match.group(1))
    kind = LocationKind(match.group(2))
    digits = match.group(3)

    if kind == LocationKind.OFFICE:
        if digits:
            return None
        return Location(kind=kind, player_id=player_id)

    if not digits:
        return None
    return Location(kind=kind, player_id=player_id, index=int(digits))


# -----------------------------------------------------------------------------
# Convenience constructors and predicates on raw ids
# -----------------------------------------------------------------------------


def seat_id(player_id: int, seat: int) -> LocationId:
    return make_location_id(LocationKind.SEAT, player_id, seat)


def rostrum_id(player_id: int, rostrum: int) -> LocationId:
    return make_location_id(LocationKind.ROSTRUM, player_id, rostrum)


def office_id(player_id: int) -> LocationId:
    return make_location_id(LocationKind.OFFICE, player_id)


def community_id(index: int) -> LocationId:
    return make_location_id(LocationKind.COMMUNITY, index=index)


def is_community(location_id: Optional[LocationId]) -> bool:
    location = parse_location_id(location_id)
    return location is not None and location.is_community


def is_seat(location_id: Optional[LocationId]) -> bool:
    location = parse_location_id(location_id)
    return location is not None and location.is_seat


def is_rostrum(location_id: Optional[LocationId]) -> bool:
    location = parse_location_id(location_id)
    return location is not None and location.is_rostrum


def is_office(location_id: Optional[LocationId]) -> bool:
    location = parse_location_id(location_id)
    return location is not None and location.is_office


def get_location_owner(location_id: Optional[LocationId]) -> Optional[int]:
    """Get the player whose domain holds this location (None for community)."""
    location = parse_location_id(location_id)
    return location.player_id if location is not None else None
