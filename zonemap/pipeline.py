from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Set, Tuple

from .adjacency import NeighborGraph, build_neighbor_graph, edge_count
from .adt import TileGridExport, build_tile_export
from .coloring import RGB, generate_colors_with_graph
from .lua_export import (
    export_area_hierarchy,
    export_area_info,
    export_map_to_area,
    export_tile_grid,
)
from .preview import save_continent_preview
from .tables import AreaInfo, parent_lookup, parse_area_table, parse_map_to_area_csv


DEFAULT_AREA_TABLE = "AreaTable.1.15.8.64907.csv"
DEFAULT_MAP_TO_AREA = "mapIdToArea.csv"
DEFAULT_OUT_DIR = "Data"
DEFAULT_CONTINENTS: List[Tuple[str, str]] = [
    ("Kalimdor", "kalimdor_adts"),
    ("Azeroth", "azeroth_adts"),
]


def _stderr(msg: str) -> None:
    print(msg, file=sys.stderr)


def _log(log_fn, msg: str) -> None:
    if log_fn is not None:
        log_fn(msg)


@dataclass
class RunConfig:
    area_table: Path = Path(DEFAULT_AREA_TABLE)
    map_to_area: Path = Path(DEFAULT_MAP_TO_AREA)
    out_dir: Path = Path(DEFAULT_OUT_DIR)
    continents: List[Tuple[str, Path]] = field(
        default_factory=lambda: [(name, Path(d)) for name, d in DEFAULT_CONTINENTS]
    )
    render_previews: bool = False


def default_config() -> RunConfig:
    config = RunConfig()
    out_dir = os.environ.get("ZONEMAP_OUT_DIR", "")
    if out_dir:
        config.out_dir = Path(out_dir)
    return config


def config_from_dict(data: Dict[str, Any], *, base: RunConfig | None = None) -> RunConfig:
    config = base or default_config()
    if "area_table" in data:
        config.area_table = Path(data["area_table"])
    if "map_to_area" in data:
        config.map_to_area = Path(data["map_to_area"])
    if "out_dir" in data:
        config.out_dir = Path(data["out_dir"])
    if "continents" in data:
        continents = data["continents"]
        if not isinstance(continents, list):
            raise ValueError("continents must be a list of {name, adt_dir} objects")
        config.continents = []
        for item in continents:
            if not isinstance(item, dict) or "name" not in item or "adt_dir" not in item:
                raise ValueError(f"Invalid continent entry: {item!r}")
            config.continents.append((str(item["name"]), Path(item["adt_dir"])))
    if "render_previews" in data:
        config.render_previews = bool(data["render_previews"])
    return config


def load_config(path: Path | str) -> RunConfig:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Expected top-level object in {path}.")
    return config_from_dict(data)


@dataclass
class RunResult:
    ok: bool = True
    areas: Dict[int, AreaInfo] = field(default_factory=dict)
    found_areas: Set[int] = field(default_factory=set)
    neighbors: NeighborGraph = field(default_factory=dict)
    colors: Dict[int, RGB] = field(default_factory=dict)
    exports: List[TileGridExport] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)


def _load_areas(path: Path, *, log_fn, warn_fn) -> Dict[int, AreaInfo]:
    if not path.exists():
        _log(warn_fn, f"Warning: AreaTable CSV not found: {path}")
        return {}
    try:
        areas = parse_area_table(path)
    except (OSError, ValueError) as exc:
        _log(warn_fn, f"Warning: Failed to parse area table: {exc}")
        return {}
    _log(log_fn, f"Loaded {len(areas)} areas from CSV")
    return areas


def _write_step(result: RunResult, label: str, write, *, log_fn, warn_fn) -> None:
    """Run one export step; an I/O failure is reported and does not stop the others."""
    try:
        path = write()
    except OSError as exc:
        _log(warn_fn, f"Failed to write {label}: {exc}")
        return
    result.written.append(Path(path))
    _log(log_fn, f"  Wrote: {path}")


def run(config: RunConfig, *, log_fn=print, warn_fn=_stderr) -> RunResult:
    _log(log_fn, "ZoneMap Tile Generator")
    result = RunResult()
    result.areas = _load_areas(config.area_table, log_fn=log_fn, warn_fn=warn_fn)

    out_dir = config.out_dir
    if not out_dir.exists():
        try:
            out_dir.mkdir(parents=True)
        except OSError as exc:
            _log(warn_fn, f"Failed to create {out_dir} directory: {exc}")
            result.ok = False
            return result
        _log(log_fn, f"Created {out_dir}/ directory")

    for continent_name, adt_dir in config.continents:
        try:
            export = build_tile_export(adt_dir, continent_name, log_fn=log_fn, error_fn=warn_fn)
        except FileNotFoundError as exc:
            _log(warn_fn, f"Warning: skipping {continent_name}: {exc}")
            continue
        result.found_areas.update(export.found_areas)
        build_neighbor_graph(export.tiles_raw, result.neighbors)
        result.exports.append(export)
        _write_step(
            result,
            f"{continent_name} tiles",
            lambda: export_tile_grid(export, out_dir / f"{continent_name}_tiles.lua"),
            log_fn=log_fn,
            warn_fn=warn_fn,
        )

    _log(log_fn, "Building neighbor graph...")
    _log(
        log_fn,
        f"  Found {len(result.neighbors)} areas with neighbor relationships "
        f"({edge_count(result.neighbors)} edges)",
    )
    result.colors = generate_colors_with_graph(
        result.found_areas, result.neighbors, parent_lookup(result.areas)
    )

    _log(log_fn, "Generating area info...")
    _write_step(
        result,
        "area info",
        lambda: export_area_info(
            result.found_areas,
            result.areas,
            result.colors,
            result.neighbors,
            out_dir / "AreaInfo.lua",
        ),
        log_fn=log_fn,
        warn_fn=warn_fn,
    )

    _log(log_fn, "Generating area hierarchy...")
    hierarchy_path = out_dir / "AreaHierarchy.lua"

    def _write_hierarchy() -> Path:
        roots = export_area_hierarchy(result.found_areas, result.areas, hierarchy_path)
        _log(log_fn, f"  {roots} root zones, {len(result.found_areas)} total areas")
        return hierarchy_path

    _write_step(result, "area hierarchy", _write_hierarchy, log_fn=log_fn, warn_fn=warn_fn)

    if config.map_to_area.exists():
        _log(log_fn, "Generating map to area mapping...")
        try:
            entries = parse_map_to_area_csv(config.map_to_area)
        except (OSError, ValueError) as exc:
            _log(warn_fn, f"Failed to parse {config.map_to_area}: {exc}")
        else:
            _log(log_fn, f"  Loaded {len(entries)} map-to-area entries")
            _write_step(
                result,
                "map to area",
                lambda: export_map_to_area(entries, out_dir / "MapToArea.lua"),
                log_fn=log_fn,
                warn_fn=warn_fn,
            )
    else:
        _log(log_fn, f"Skipping map-to-area ({config.map_to_area} not found)")

    if config.render_previews:
        _log(log_fn, "Rendering previews...")
        for export in result.exports:
            _write_step(
                result,
                f"{export.continent_name} preview",
                lambda: save_continent_preview(
                    export.tiles_raw,
                    result.colors,
                    out_dir / f"{export.continent_name}_preview.png",
                ),
                log_fn=log_fn,
                warn_fn=warn_fn,
            )

    _log(log_fn, "Done!")
    return result
