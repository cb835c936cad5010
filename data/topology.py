"""Board topology for the KRED game engine using NetworkX.

Builds an undirected graph over every drop location of a layout with
typed edges:
- seat: neighbouring seats, including seat 6 of one domain and seat 1 of
  the next domain clockwise
- support: a seat and the rostrum it supports
- rostrum_pair: the two rostrums of one domain
- rostrum_ring: rostrums of neighbouring domains
- office: an office and its two rostrums

Validators ask this graph adjacency questions instead of re-deriving the
board's shape from location id strings.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

import networkx as nx

from core.board import ROSTRUM_ADJACENCY_BY_PLAYER_COUNT, get_supported_rostrum
from core.constants import CLOCKWISE_ORDER_BY_PLAYER_COUNT, MAX_SEATS_PER_PLAYER
from core.locations import (
    LocationId,
    LocationKind,
    office_id,
    parse_location_id,
    rostrum_id,
    seat_id,
)

from .board_layouts import get_layout
from .loader import BoardLayout

# Edge link types
SEAT_LINK = "seat"
SUPPORT_LINK = "support"
ROSTRUM_PAIR_LINK = "rostrum_pair"
ROSTRUM_RING_LINK = "rostrum_ring"
OFFICE_LINK = "office"


def get_next_player_clockwise(player_id: int, player_count: int) -> Optional[int]:
    """Get the player whose domain follows this one clockwise."""
    order = CLOCKWISE_ORDER_BY_PLAYER_COUNT.get(player_count)
    if order is None or player_id not in order:
        return None
    return order[(order.index(player_id) + 1) % len(order)]


def get_prev_player_clockwise(player_id: int, player_count: int) -> Optional[int]:
    """Get the player whose domain precedes this one clockwise."""
    order = CLOCKWISE_ORDER_BY_PLAYER_COUNT.get(player_count)
    if order is None or player_id not in order:
        return None
    return order[(order.index(player_id) - 1) % len(order)]


class BoardTopology:
    """Adjacency graph over the drop locations of one layout."""

    def __init__(self, layout: BoardLayout):
        """Build the topology graph.

        Args:
            layout: The layout whose locations become graph nodes.
        """
        self.player_count = layout.player_count
        self.graph = self._build_graph(layout)

    def _build_graph(self, layout: BoardLayout) -> nx.Graph:
        G = nx.Graph()

        for loc_id, drop in layout.locations.items():
            location = parse_location_id(loc_id)
            G.add_node(
                loc_id,
                kind=location.kind,
                player_id=location.player_id,
                index=location.index,
                pos=(drop.position.left, drop.position.top),
            )

        def link(a: LocationId, b: LocationId, kind: str) -> None:
            # Partial layouts may omit locations; only link what exists
            if a in G and b in G:
                G.add_edge(a, b, link=kind)

        for player_id in CLOCKWISE_ORDER_BY_PLAYER_COUNT[self.player_count]:
            for seat in range(1, MAX_SEATS_PER_PLAYER):
                link(seat_id(player_id, seat), seat_id(player_id, seat + 1), SEAT_LINK)

            next_player = get_next_player_clockwise(player_id, self.player_count)
            link(
                seat_id(player_id, MAX_SEATS_PER_PLAYER),
                seat_id(next_player, 1),
                SEAT_LINK,
            )

            for seat in range(1, MAX_SEATS_PER_PLAYER + 1):
                sid = seat_id(player_id, seat)
                link(sid, get_supported_rostrum(sid), SUPPORT_LINK)

            link(rostrum_id(player_id, 1), rostrum_id(player_id, 2), ROSTRUM_PAIR_LINK)
            link(office_id(player_id), rostrum_id(player_id, 1), OFFICE_LINK)
            link(office_id(player_id), rostrum_id(player_id, 2), OFFICE_LINK)

        for a, b in ROSTRUM_ADJACENCY_BY_PLAYER_COUNT[self.player_count]:
            link(a, b, ROSTRUM_RING_LINK)

        return G

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def neighbours(self, location_id: LocationId, link_type: str) -> list[LocationId]:
        """Get neighbours of a location joined by one link type, sorted."""
        if location_id not in self.graph:
            return []
        return sorted(
            other
            for other, attrs in self.graph[location_id].items()
            if attrs["link"] == link_type
        )

    def _has_link(self, a: LocationId, b: LocationId, link_type: str) -> bool:
        return self.graph.has_edge(a, b) and self.graph.edges[a, b]["link"] == link_type

    def get_adjacent_seats(self, seat: LocationId) -> list[LocationId]:
        return self.neighbours(seat, SEAT_LINK)

    def are_seats_adjacent(self, a: LocationId, b: LocationId) -> bool:
        return self._has_link(a, b, SEAT_LINK)

    def are_rostrums_adjacent(self, a: LocationId, b: LocationId) -> bool:
        """Check if two rostrums in different domains sit next to each other."""
        return self._has_link(a, b, ROSTRUM_RING_LINK)

    def get_adjacent_rostrum(self, rostrum: LocationId) -> Optional[LocationId]:
        """Get the rostrum in a neighbouring domain next to this one."""
        ring = self.neighbours(rostrum, ROSTRUM_RING_LINK)
        return ring[0] if ring else None

    def get_rostrum_neighbours(self, rostrum: LocationId) -> list[LocationId]:
        """Get every rostrum a piece may shift to: the domain's other
        rostrum and the ring neighbour."""
        return sorted(
            self.neighbours(rostrum, ROSTRUM_PAIR_LINK)
            + self.neighbours(rostrum, ROSTRUM_RING_LINK)
        )

    def get_supporting_seats(self, rostrum: LocationId) -> list[LocationId]:
        return self.neighbours(rostrum, SUPPORT_LINK)

    def locations_of_kind(
        self, kind: LocationKind, player_id: Optional[int] = None
    ) -> list[LocationId]:
        """Get location ids of one kind, optionally limited to one domain."""
        return sorted(
            node
            for node, attrs in self.graph.nodes(data=True)
            if attrs["kind"] == kind
            and (player_id is None or attrs["player_id"] == player_id)
        )

    def is_connected(self) -> bool:
        return self.graph.number_of_nodes() > 0 and nx.is_connected(
            self.graph.subgraph(
                n for n, k in self.graph.nodes(data="kind") if k != LocationKind.COMMUNITY
            )
        )


@lru_cache(maxsize=None)
def get_topology(player_count: int) -> Optional[BoardTopology]:
    """Get the topology of the bundled layout, None for unsupported counts."""
    layout = get_layout(player_count)
    if layout is None:
        return None
    return BoardTopology(layout)


def are_seats_adjacent(a: LocationId, b: LocationId, player_count: int) -> bool:
    topology = get_topology(player_count)
    return topology is not None and topology.are_seats_adjacent(a, b)


def get_adjacent_seats(seat: LocationId, player_count: int) -> list[LocationId]:
    topology = get_topology(player_count)
    return topology.get_adjacent_seats(seat) if topology is not None else []


def are_rostrums_adjacent(a: LocationId, b: LocationId, player_count: int) -> bool:
    topology = get_topology(player_count)
    return topology is not None and topology.are_rostrums_adjacent(a, b)


def get_adjacent_rostrum(rostrum: LocationId, player_count: int) -> Optional[LocationId]:
    topology = get_topology(player_count)
    return topology.get_adjacent_rostrum(rostrum) if topology is not None else None
