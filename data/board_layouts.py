"""Bundled board layouts, loaded once per process.

DROP_LOCATIONS_BY_PLAYER_COUNT and BOARD_CENTERS are read-only tables
built from the JSON files in data/layouts at import time.
"""

from __future__ import annotations

from typing import Optional

from core.components import Position
from core.locations import LocationId

from .loader import BoardLayout, DropLocation, load_all_layouts

LAYOUTS: dict[int, BoardLayout] = load_all_layouts()

DROP_LOCATIONS_BY_PLAYER_COUNT: dict[int, tuple[DropLocation, ...]] = {
    count: tuple(layout.locations.values()) for count, layout in LAYOUTS.items()
}

BOARD_CENTERS: dict[int, Position] = {
    count: layout.board_center for count, layout in LAYOUTS.items()
}


def get_layout(player_count: int) -> Optional[BoardLayout]:
    """Get the bundled layout for a player count, None if unsupported."""
    return LAYOUTS.get(player_count)


def get_drop_location(
    player_count: int, location_id: Optional[LocationId]
) -> Optional[DropLocation]:
    """Look up a drop location, None if the id or player count is unknown."""
    layout = LAYOUTS.get(player_count)
    if layout is None or location_id is None:
        return None
    return layout.get(location_id)


def is_valid_location(player_count: int, location_id: Optional[LocationId]) -> bool:
    return get_drop_location(player_count, location_id) is not None


def get_community_location_ids(player_count: int) -> list[LocationId]:
    """Get community slot ids in slot order, empty if unsupported."""
    layout = LAYOUTS.get(player_count)
    return layout.community_ids() if layout is not None else []
