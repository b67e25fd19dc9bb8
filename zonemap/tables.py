from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence


U32_MAX = 0xFFFFFFFF


@dataclass(frozen=True)
class AreaInfo:
    id: int
    name: str
    parent_id: int = 0
    exploration_level: int = 0


@dataclass(frozen=True)
class MapToAreaEntry:
    zone_name: str
    map_id: int
    area_id: int


def _safe_int(x: Any, default: int = 0) -> int:
    """Convert to int safely. Non-convertible -> default."""
    try:
        return int(str(x).strip())
    except (TypeError, ValueError):
        return default


def _parse_u32(x: Any) -> int | None:
    """Parse an unsigned 32-bit id; anything else -> None."""
    try:
        value = int(str(x).strip())
    except (TypeError, ValueError):
        return None
    if value < 0 or value > U32_MAX:
        return None
    return value


def _column_indices(header: Sequence[str], names: Sequence[str], *, path: Path) -> List[int]:
    columns = [c.strip() for c in header]
    indices = []
    for name in names:
        if name not in columns:
            raise ValueError(f"No {name} column in {path}")
        indices.append(columns.index(name))
    return indices


def _read_rows(path: Path) -> tuple[List[str], List[List[str]]]:
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        rows = list(csv.reader(f))
    if not rows:
        raise ValueError(f"Empty CSV: {path}")
    return rows[0], rows[1:]


def parse_area_table(csv_path: Path | str) -> Dict[int, AreaInfo]:
    """Load AreaTable rows keyed by area ID.

    Rows whose ID does not parse are skipped; parent and exploration level
    default to 0 when blank or malformed.
    """
    path = Path(csv_path)
    header, rows = _read_rows(path)
    id_idx, name_idx, parent_idx, level_idx = _column_indices(
        header,
        ["ID", "AreaName_lang", "ParentAreaID", "ExplorationLevel"],
        path=path,
    )
    needed = max(id_idx, name_idx, parent_idx, level_idx)

    areas: Dict[int, AreaInfo] = {}
    for fields in rows:
        if len(fields) <= needed:
            continue
        area_id = _parse_u32(fields[id_idx])
        if area_id is None:
            continue
        areas[area_id] = AreaInfo(
            id=area_id,
            name=fields[name_idx].strip('"'),
            parent_id=_parse_u32(fields[parent_idx]) or 0,
            exploration_level=_safe_int(fields[level_idx]),
        )
    return areas


def parse_map_to_area_csv(csv_path: Path | str) -> List[MapToAreaEntry]:
    """Load UI map ID -> area ID rows in file order."""
    path = Path(csv_path)
    header, rows = _read_rows(path)
    zone_idx, map_idx, area_idx = _column_indices(header, ["Zone", "mapId", "AreaId"], path=path)
    needed = max(zone_idx, map_idx, area_idx)

    entries: List[MapToAreaEntry] = []
    for fields in rows:
        if len(fields) <= needed:
            continue
        map_id = _parse_u32(fields[map_idx])
        area_id = _parse_u32(fields[area_idx])
        if map_id is None or area_id is None:
            continue
        entries.append(
            MapToAreaEntry(
                zone_name=fields[zone_idx].strip('"'),
                map_id=map_id,
                area_id=area_id,
            )
        )
    return entries


def parent_lookup(areas: Mapping[int, AreaInfo]) -> Dict[int, int]:
    return {area_id: area.parent_id for area_id, area in areas.items()}
