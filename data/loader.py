"""Board layout loader for the KRED game engine.

Loads and validates the drop-location layout for each player count from
JSON files, converting them into BoardLayout instances. A layout lists
every seat, rostrum, office and community slot with its position on the
board, plus the board center used to orient pieces.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from core.components import Position
from core.constants import (
    COMMUNITY_SLOTS_BY_PLAYER_COUNT,
    MAX_SEATS_PER_PLAYER,
    PLAYER_OPTIONS,
    ROSTRUMS_PER_PLAYER,
)
from core.locations import LocationId, LocationKind, parse_location_id

logger = logging.getLogger(__name__)

LAYOUT_FILE_TEMPLATE = "{player_count}_players.json"


def resource_path(relative_path: str) -> Path:
    """
    Get absolute path to a resource, works for dev and PyInstaller exe.
    """
    if hasattr(sys, "_MEIPASS"):
        # PyInstaller bundles resources in a temporary folder
        return Path(sys._MEIPASS) / "data" / relative_path

    # Dev mode: look relative to this file (in the data/ directory)
    return Path(__file__).parent / relative_path


class LayoutLoadError(Exception):
    """Raised when layout loading or validation fails."""
    pass


@dataclass(frozen=True)
class DropLocation:
    """A location a piece can be dropped on, with its board position."""

    id: LocationId
    position: Position


@dataclass
class BoardLayout:
    """All drop locations for one player count.

    Attributes:
        player_count: Number of players the layout is drawn for.
        board_center: Center point used to rotate pieces outward.
        locations: Drop locations keyed by id, in file order.
    """

    player_count: int
    board_center: Position
    locations: dict[LocationId, DropLocation] = field(default_factory=dict)

    def get(self, location_id: LocationId) -> Optional[DropLocation]:
        return self.locations.get(location_id)

    def ids_of_kind(self, kind: LocationKind) -> list[LocationId]:
        """Get location ids of one kind, in file order."""
        return [
            loc_id
            for loc_id in self.locations
            if parse_location_id(loc_id).kind == kind
        ]

    def community_ids(self) -> list[LocationId]:
        """Get community slot ids ordered by slot number."""
        ids = self.ids_of_kind(LocationKind.COMMUNITY)
        return sorted(ids, key=lambda loc_id: parse_location_id(loc_id).index)


class LayoutLoader:
    """Loads and validates board layouts from JSON files."""

    def __init__(self, strict: bool = True):
        """Initialize the loader.

        Args:
            strict: If True, enforce the standard location counts for the
                    player count. Set to False for partial test layouts.
        """
        self.strict = strict

    def load_from_file(self, file_path: str | Path) -> BoardLayout:
        """Load a layout from a JSON file.

        Args:
            file_path: Path to the JSON layout file.

        Returns:
            A BoardLayout with every drop location.

        Raises:
            LayoutLoadError: If the file cannot be read or parsed.
            LayoutLoadError: If validation fails.
        """
        path = Path(file_path)

        if not path.exists():
            raise LayoutLoadError(f"Layout file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise LayoutLoadError(f"Invalid JSON in layout file: {e}")
        except IOError as e:
            raise LayoutLoadError(f"Error reading layout file: {e}")

        layout = self.load_from_dict(data)
        logger.debug(
            "Loaded %d-player layout from %s (%d locations)",
            layout.player_count,
            path,
            len(layout.locations),
        )
        return layout

    def load_from_dict(self, data: dict[str, Any]) -> BoardLayout:
        """Load a layout from a dictionary.

        Args:
            data: Dictionary with 'player_count', 'board_center' and
                  'locations' keys.

        Returns:
            A BoardLayout with every drop location.

        Raises:
            LayoutLoadError: If validation fails.
        """
        self._validate_structure(data)

        player_count = data["player_count"]
        layout = BoardLayout(
            player_count=player_count,
            board_center=self._parse_position(data["board_center"], "board_center"),
        )

        for location_data in data["locations"]:
            location = self._create_location(location_data, player_count)
            if location.id in layout.locations:
                raise LayoutLoadError(f"Duplicate location ID: {location.id}")
            layout.locations[location.id] = location

        self._validate_layout(layout)

        return layout

    def _validate_structure(self, data: dict[str, Any]) -> None:
        """Validate the basic structure of the layout data."""
        if not isinstance(data, dict):
            raise LayoutLoadError("Layout data must be a dictionary")

        for key in ("player_count", "board_center", "locations"):
            if key not in data:
                raise LayoutLoadError(f"Layout data missing '{key}' key")

        if data["player_count"] not in PLAYER_OPTIONS:
            raise LayoutLoadError(
                f"Unsupported player count: {data['player_count']}. "
                f"Valid counts: {list(PLAYER_OPTIONS)}"
            )

        if not isinstance(data["locations"], list):
            raise LayoutLoadError("'locations' must be a list")

        if len(data["locations"]) == 0:
            raise LayoutLoadError("Layout must have at least one location")

    def _parse_position(self, position_data: Any, owner: str) -> Position:
        if (
            not isinstance(position_data, dict)
            or "left" not in position_data
            or "top" not in position_data
        ):
            raise LayoutLoadError(f"Invalid position format for {owner}")
        left, top = position_data["left"], position_data["top"]
        for value in (left, top):
            if not isinstance(value, (int, float)) or not 0 <= value <= 100:
                raise LayoutLoadError(
                    f"Position of {owner} must be percentages in 0-100, got {position_data}"
                )
        return Position(top=float(top), left=float(left))

    def _create_location(
        self, location_data: dict[str, Any], player_count: int
    ) -> DropLocation:
        """Create a DropLocation from a location dictionary."""
        if not isinstance(location_data, dict) or "id" not in location_data:
            raise LayoutLoadError(f"Location missing required field: id")

        location_id = location_data["id"]
        location = parse_location_id(location_id)
        if location is None:
            raise LayoutLoadError(f"Invalid location ID: {location_id}")

        if location.player_id is not None and not 1 <= location.player_id <= player_count:
            raise LayoutLoadError(
                f"Location {location_id} belongs to player {location.player_id}, "
                f"but the layout is for {player_count} players"
            )

        return DropLocation(
            id=location_id,
            position=self._parse_position(location_data, location_id),
        )

    def _validate_layout(self, layout: BoardLayout) -> None:
        """Validate location counts against the player count."""
        if not self.strict:
            return

        player_count = layout.player_count
        expected = {
            LocationKind.SEAT: MAX_SEATS_PER_PLAYER * player_count,
            LocationKind.ROSTRUM: ROSTRUMS_PER_PLAYER * player_count,
            LocationKind.OFFICE: player_count,
            LocationKind.COMMUNITY: COMMUNITY_SLOTS_BY_PLAYER_COUNT[player_count],
        }
        for kind, count in expected.items():
            found = len(layout.ids_of_kind(kind))
            if found != count:
                raise LayoutLoadError(
                    f"Expected {count} {kind.value} locations for "
                    f"{player_count} players, found {found}"
                )

        # Community slots must be numbered 1..N without gaps
        indices = sorted(
            parse_location_id(loc_id).index for loc_id in layout.community_ids()
        )
        if indices != list(range(1, len(indices) + 1)):
            raise LayoutLoadError("Community slots must be numbered 1..N without gaps")


def load_layout(
    player_count: int,
    layout_dir: Optional[str | Path] = None,
    strict: bool = True,
) -> BoardLayout:
    """Load the layout for a player count.

    Args:
        player_count: Number of players (3-5).
        layout_dir: Directory holding layout files. Defaults to the
                    bundled data/layouts directory.
        strict: If True, enforce standard location counts.

    Returns:
        The BoardLayout for that player count.

    Raises:
        LayoutLoadError: If the file is missing or invalid.
    """
    file_name = LAYOUT_FILE_TEMPLATE.format(player_count=player_count)
    if layout_dir is None:
        path = resource_path(f"layouts/{file_name}")
    else:
        path = Path(layout_dir) / file_name

    layout = LayoutLoader(strict=strict).load_from_file(path)
    if layout.player_count != player_count:
        raise LayoutLoadError(
            f"{path} describes a {layout.player_count}-player board, "
            f"expected {player_count}"
        )
    return layout


def load_all_layouts(layout_dir: Optional[str | Path] = None) -> dict[int, BoardLayout]:
    """Load the layouts for every supported player count.

    Raises:
        LayoutLoadError: If any layout is missing or invalid.
    """
    return {count: load_layout(count, layout_dir) for count in PLAYER_OPTIONS}


def get_layout_stats(layout: BoardLayout) -> dict[str, Any]:
    """Get statistics about a layout.

    Args:
        layout: The layout to analyze.

    Returns:
        Dictionary with location counts by kind.
    """
    return {
        "player_count": layout.player_count,
        "num_locations": len(layout.locations),
        "locations_by_kind": {
            kind.value: len(layout.ids_of_kind(kind)) for kind in LocationKind
        },
    }
