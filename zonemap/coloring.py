from __future__ import annotations

import colorsys
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from .adjacency import NeighborGraph


RGB = Tuple[float, float, float]

GOLDEN_RATIO = 0.618033988749895
FALLBACK_SATURATION = 0.7
FALLBACK_VALUE = 0.9

# Hand-picked, visually distinct. Order matters: lower indices are preferred.
PALETTE: List[RGB] = [
    (0.90, 0.30, 0.30),  # Red
    (0.30, 0.70, 0.30),  # Green
    (0.30, 0.50, 0.90),  # Blue
    (0.90, 0.80, 0.20),  # Yellow
    (0.80, 0.40, 0.80),  # Purple
    (0.20, 0.80, 0.80),  # Cyan
    (0.95, 0.60, 0.30),  # Orange
    (0.60, 0.80, 0.40),  # Lime
    (0.80, 0.50, 0.60),  # Pink
    (0.50, 0.70, 0.80),  # Sky blue
    (0.70, 0.60, 0.40),  # Tan
    (0.60, 0.40, 0.70),  # Violet
    (0.40, 0.60, 0.50),  # Teal
    (0.85, 0.70, 0.70),  # Light pink
    (0.70, 0.85, 0.70),  # Light green
    (0.70, 0.70, 0.85),  # Light blue
]


@dataclass
class ColorAssignment:
    """Colors per area, plus the palette slot each one came from.

    ``palette_index`` is None for areas colored by the procedural fallback.
    """

    colors: Dict[int, RGB] = field(default_factory=dict)
    palette_index: Dict[int, Optional[int]] = field(default_factory=dict)

    def assign(self, area_id: int, index: Optional[int], color: RGB) -> None:
        if area_id in self.colors:
            raise ValueError(f"Area {area_id} is already colored")
        self.colors[area_id] = color
        self.palette_index[area_id] = index

    def used_index(self, area_id: int) -> Optional[int]:
        return self.palette_index.get(area_id)


def fallback_color(area_id: int) -> RGB:
    """Golden-ratio hue spread at fixed saturation and value."""
    hue = (area_id * GOLDEN_RATIO) % 1.0
    return colorsys.hsv_to_rgb(hue, FALLBACK_SATURATION, FALLBACK_VALUE)


def choose_color(area_id: int, excluded: Set[int]) -> Tuple[Optional[int], RGB]:
    """Pick the lowest free palette slot, or a procedural color when none is free.

    The procedural color is best-effort: it is not checked against
    ``excluded`` and may coincide with a neighbor's color.
    """
    for idx, color in enumerate(PALETTE):
        if idx not in excluded:
            return idx, color
    return None, fallback_color(area_id)


def coloring_order(found_areas: Iterable[int], neighbors: NeighborGraph) -> List[int]:
    """Most-constrained first; ties by ascending id."""
    area_list = sorted({a for a in found_areas if a != 0})
    return sorted(area_list, key=lambda a: (-len(neighbors.get(a, ())), a))


def assign_colors(
    found_areas: Iterable[int],
    neighbors: NeighborGraph,
    parents: Mapping[int, int],
) -> ColorAssignment:
    """Greedy single pass over ``coloring_order``; assigned colors never change.

    ``parents`` maps an area to its direct parent id. An area avoids the slot
    of its direct parent and of its direct children, whichever were colored
    first; the root parent plays no part.
    """
    children: Dict[int, List[int]] = {}
    for child, parent in parents.items():
        if parent and parent != child:
            children.setdefault(parent, []).append(child)

    assignment = ColorAssignment()
    for area_id in coloring_order(found_areas, neighbors):
        excluded: Set[int] = set()
        for n in neighbors.get(area_id, ()):
            idx = assignment.used_index(n)
            if idx is not None:
                excluded.add(idx)

        related = children.get(area_id, [])
        parent_id = parents.get(area_id, 0)
        if parent_id:
            related = [parent_id, *related]
        for r in related:
            idx = assignment.used_index(r)
            if idx is not None:
                excluded.add(idx)

        idx, color = choose_color(area_id, excluded)
        assignment.assign(area_id, idx, color)
    return assignment


def generate_colors_with_graph(
    found_areas: Iterable[int],
    neighbors: NeighborGraph,
    parents: Mapping[int, int],
) -> Dict[int, RGB]:
    return assign_colors(found_areas, neighbors, parents).colors
