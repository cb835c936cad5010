"""Board layout data and topology for the KRED game engine."""

from .loader import (
    BoardLayout,
    DropLocation,
    LayoutLoader,
    LayoutLoadError,
    load_layout,
    load_all_layouts,
    get_layout_stats,
)

from .board_layouts import (
    LAYOUTS,
    DROP_LOCATIONS_BY_PLAYER_COUNT,
    BOARD_CENTERS,
    get_layout,
    get_drop_location,
    is_valid_location,
    get_community_location_ids,
)

from .topology import (
    BoardTopology,
    get_topology,
    get_next_player_clockwise,
    get_prev_player_clockwise,
    are_seats_adjacent,
    get_adjacent_seats,
    are_rostrums_adjacent,
    get_adjacent_rostrum,
)

__all__ = [
    # Loader
    "BoardLayout",
    "DropLocation",
    "LayoutLoader",
    "LayoutLoadError",
    "load_layout",
    "load_all_layouts",
    "get_layout_stats",
    # Bundled layouts
    "LAYOUTS",
    "DROP_LOCATIONS_BY_PLAYER_COUNT",
    "BOARD_CENTERS",
    "get_layout",
    "get_drop_location",
    "is_valid_location",
    "get_community_location_ids",
    # Topology
    "BoardTopology",
    "get_topology",
    "get_next_player_clockwise",
    "get_prev_player_clockwise",
    "are_seats_adjacent",
    "get_adjacent_seats",
    "are_rostrums_adjacent",
    "get_adjacent_rostrum",
]
