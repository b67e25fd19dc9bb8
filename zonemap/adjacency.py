from __future__ import annotations

from typing import Dict, Mapping, Set

import numpy as np

from .grid import TILES_PER_SIDE, as_grid, tile_coords, tile_key


NeighborGraph = Dict[int, Set[int]]


def add_neighbor(graph: NeighborGraph, a: int, b: int) -> None:
    """Record a bidirectional edge; sentinel 0 and self-pairs are ignored."""
    a = int(a)
    b = int(b)
    if a == 0 or b == 0 or a == b:
        return
    graph.setdefault(a, set()).add(b)
    graph.setdefault(b, set()).add(a)


def _add_pairs(graph: NeighborGraph, a: np.ndarray, b: np.ndarray) -> None:
    # Same-id and sentinel pairs would be no-ops; drop them before the Python loop.
    m = (a != b) & (a != 0) & (b != 0)
    for i, j in zip(a[m].tolist(), b[m].tolist()):
        add_neighbor(graph, i, j)


def find_tile_neighbors(area_ids: np.ndarray, graph: NeighborGraph) -> None:
    """Add edges between horizontally and vertically adjacent chunks of one tile."""
    grid = as_grid(area_ids)

    # right neighbors
    _add_pairs(graph, grid[:, :-1], grid[:, 1:])

    # down neighbors
    _add_pairs(graph, grid[:-1, :], grid[1:, :])


def find_inter_tile_neighbors(
    tiles: Mapping[int, np.ndarray],
    graph: NeighborGraph,
) -> None:
    """Add edges across tile borders.

    Only the right and bottom neighbors of each tile are visited; the left and
    top borders are covered when the neighboring tile is processed.
    """
    for key, area_ids in tiles.items():
        tile_x, tile_y = tile_coords(key)
        grid = as_grid(area_ids)

        if tile_x < TILES_PER_SIDE - 1:
            right = tiles.get(tile_key(tile_x + 1, tile_y))
            if right is not None:
                _add_pairs(graph, grid[:, -1], as_grid(right)[:, 0])

        if tile_y < TILES_PER_SIDE - 1:
            bottom = tiles.get(tile_key(tile_x, tile_y + 1))
            if bottom is not None:
                _add_pairs(graph, grid[-1, :], as_grid(bottom)[0, :])


def build_neighbor_graph(
    tiles: Mapping[int, np.ndarray],
    graph: NeighborGraph | None = None,
) -> NeighborGraph:
    if graph is None:
        graph = {}
    for area_ids in tiles.values():
        find_tile_neighbors(area_ids, graph)
    find_inter_tile_neighbors(tiles, graph)
    return graph


def neighbor_count(graph: NeighborGraph, area_id: int) -> int:
    return len(graph.get(area_id, ()))


def edge_count(graph: NeighborGraph) -> int:
    return sum(len(v) for v in graph.values()) // 2

