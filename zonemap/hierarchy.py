from __future__ import annotations

from typing import Dict, Iterable, Mapping

from .tables import AreaInfo


def find_root_parent(area_id: int, areas: Mapping[int, AreaInfo]) -> int:
    """Follow parent links up to the topmost ancestor.

    Unknown ids resolve to the id that was asked for. A cyclic chain stops at
    the first id seen twice.
    """
    current = area_id
    visited: set[int] = set()
    while current in areas:
        area = areas[current]
        if area.parent_id == 0 or current in visited:
            return current
        visited.add(current)
        current = area.parent_id
    return area_id


def area_name(area_id: int, areas: Mapping[int, AreaInfo]) -> str:
    area = areas.get(area_id)
    if area is None:
        return f"Unknown_{area_id}"
    return area.name


def group_by_root(
    found_areas: Iterable[int],
    areas: Mapping[int, AreaInfo],
) -> Dict[int, Dict[int, str]]:
    """Group found areas under their root parent, both levels in ascending id order."""
    grouped: Dict[int, Dict[int, str]] = {}
    for area_id in sorted(set(found_areas)):
        if area_id == 0:
            continue
        root = find_root_parent(area_id, areas)
        grouped.setdefault(root, {})[area_id] = area_name(area_id, areas)
    return {root: grouped[root] for root in sorted(grouped)}
