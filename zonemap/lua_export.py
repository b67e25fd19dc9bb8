from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Mapping, Sequence, Tuple

from .adjacency import NeighborGraph, neighbor_count
from .adt import TileGridExport
from .coloring import RGB
from .grid import CHUNKS_PER_SIDE, TILES_PER_SIDE
from .hierarchy import area_name, find_root_parent, group_by_root
from .tables import AreaInfo, MapToAreaEntry


UNKNOWN_COLOR: RGB = (0.5, 0.5, 0.5)
ADDON_PREAMBLE = ["", "local _, addon = ...", ""]


def lua_string(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def _write_lines(out_path: Path | str, lines: Sequence[str]) -> Path:
    path = Path(out_path)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def render_tile_grid(export: TileGridExport) -> List[str]:
    lines = [
        f"-- Auto-generated AreaID grid for {export.continent_name}",
        "-- Each tile is 16x16 chunks (256 u32 AreaIDs), base64 encoded.",
        *ADDON_PREAMBLE,
        "local tiles = {",
    ]
    for key, blob in export.tiles_b64().items():
        lines.append(f"  [{key}] = [[{blob}]],")
    lines += [
        "}",
        "",
        f"addon:RegisterTileGrid({lua_string(export.continent_name)}, {{",
        f"  name = {lua_string(export.continent_name)},",
        f"  tileSize = {CHUNKS_PER_SIDE},",
        f"  tilesPerSide = {TILES_PER_SIDE},",
        "  tiles = tiles,",
        "})",
    ]
    return lines


def export_tile_grid(export: TileGridExport, out_path: Path | str) -> Path:
    return _write_lines(out_path, render_tile_grid(export))


def render_area_info(
    found_areas: Iterable[int],
    areas: Mapping[int, AreaInfo],
    colors: Mapping[int, RGB],
    neighbors: NeighborGraph,
) -> List[str]:
    lines = [
        "-- Auto-generated Area Info",
        "-- Contains name, parent, level, color, and neighbors for each area",
        *ADDON_PREAMBLE,
        "addon.AreaInfo = {",
    ]
    for area_id in sorted(set(found_areas)):
        if area_id == 0:
            continue
        area = areas.get(area_id)
        if area is not None:
            parent_id = area.parent_id
            root_parent = find_root_parent(area_id, areas)
            level = area.exploration_level
        else:
            parent_id, root_parent, level = 0, area_id, 0
        r, g, b = colors.get(area_id, UNKNOWN_COLOR)
        lines += [
            f"  [{area_id}] = {{",
            f"    name = {lua_string(area_name(area_id, areas))},",
            f"    parentId = {parent_id},",
            f"    rootParentId = {root_parent},",
            f"    explorationLevel = {level},",
            f"    color = {{{r:.3f}, {g:.3f}, {b:.3f}}},",
            f"    neighborCount = {neighbor_count(neighbors, area_id)},",
            "  },",
        ]
    lines.append("}")
    return lines


def export_area_info(
    found_areas: Iterable[int],
    areas: Mapping[int, AreaInfo],
    colors: Mapping[int, RGB],
    neighbors: NeighborGraph,
    out_path: Path | str,
) -> Path:
    return _write_lines(out_path, render_area_info(found_areas, areas, colors, neighbors))


def render_area_hierarchy(
    found_areas: Iterable[int],
    areas: Mapping[int, AreaInfo],
) -> Tuple[List[str], int]:
    hierarchy = group_by_root(found_areas, areas)
    lines = [
        "-- Auto-generated Area Hierarchy",
        "-- Groups areas by their root parent zone",
        *ADDON_PREAMBLE,
        "addon.AreaHierarchy = {",
    ]
    for root_id, children in hierarchy.items():
        root_name = area_name(root_id, areas)
        lines += [
            f"  [{root_id}] = {{  -- {root_name}",
            f"    name = {lua_string(root_name)},",
            "    children = {",
        ]
        for child_id, child_name in children.items():
            lines.append(f"      [{child_id}] = {lua_string(child_name)},")
        lines += ["    },", "  },"]
    lines.append("}")
    return lines, len(hierarchy)


def export_area_hierarchy(
    found_areas: Iterable[int],
    areas: Mapping[int, AreaInfo],
    out_path: Path | str,
) -> int:
    """Write the hierarchy file and return the number of root zones."""
    lines, root_count = render_area_hierarchy(found_areas, areas)
    _write_lines(out_path, lines)
    return root_count


def render_map_to_area(entries: Sequence[MapToAreaEntry]) -> List[str]:
    lines = [
        "-- Auto-generated Map ID to Area ID mapping",
        "-- Maps WoW UI map IDs to parent area IDs",
        *ADDON_PREAMBLE,
        "addon.MapToArea = {",
    ]
    for entry in entries:
        lines.append(
            f"  [{entry.map_id}] = {{ areaId = {entry.area_id}, name = {lua_string(entry.zone_name)} }},"
        )
    lines += ["}", "", "addon.AreaToMap = {"]
    for entry in entries:
        lines.append(f"  [{entry.area_id}] = {entry.map_id},")
    lines.append("}")
    return lines


def export_map_to_area(entries: Sequence[MapToAreaEntry], out_path: Path | str) -> Path:
    return _write_lines(out_path, render_map_to_area(entries))
