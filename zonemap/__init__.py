"""ZoneMap tile generator: area adjacency, graph coloring and addon table export."""

from .adjacency import (
    NeighborGraph,
    add_neighbor,
    build_neighbor_graph,
    find_inter_tile_neighbors,
    find_tile_neighbors,
)
from .coloring import PALETTE, assign_colors, fallback_color, generate_colors_with_graph
from .grid import decode_tile, encode_tile, tile_coords, tile_key
from .hierarchy import find_root_parent, group_by_root
from .tables import AreaInfo, MapToAreaEntry, parse_area_table, parse_map_to_area_csv

__all__ = [
    "AreaInfo",
    "MapToAreaEntry",
    "NeighborGraph",
    "PALETTE",
    "add_neighbor",
    "assign_colors",
    "build_neighbor_graph",
    "decode_tile",
    "encode_tile",
    "fallback_color",
    "find_inter_tile_neighbors",
    "find_root_parent",
    "find_tile_neighbors",
    "generate_colors_with_graph",
    "group_by_root",
    "parse_area_table",
    "parse_map_to_area_csv",
    "run",
    "tile_coords",
    "tile_key",
]


def __getattr__(name: str):
    if name == "run":
        from .pipeline import run

        return run
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
