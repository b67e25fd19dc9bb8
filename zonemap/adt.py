from __future__ import annotations

import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Set, Tuple

import numpy as np

from .grid import TILES_PER_SIDE, encode_tile, pad_area_ids, tile_key


MCNK_TAGS = (b"KNCM", b"MCNK")
MCNK_AREA_ID_OFFSET = 0x34
CHUNK_HEADER_SIZE = 8


class AdtFormatError(ValueError):
    pass


def _log(log_fn, msg: str) -> None:
    if log_fn is not None:
        log_fn(msg)


def parse_root_adt_filename(path: Path | str) -> Tuple[str, int, int] | None:
    """Split ``<Map>_<x>_<y>.adt`` into its parts; split files like ``_obj0`` are rejected."""
    path = Path(path)
    if path.suffix.lower() != ".adt":
        return None
    parts = path.stem.split("_")
    if len(parts) != 3:
        return None
    try:
        x = int(parts[1])
        y = int(parts[2])
    except ValueError:
        return None
    if not (0 <= x < TILES_PER_SIDE and 0 <= y < TILES_PER_SIDE):
        return None
    return parts[0], x, y


def read_mcnk_area_ids(data: bytes) -> List[int]:
    """Return the areaId of every MCNK chunk, in file order."""
    area_ids: List[int] = []
    offset = 0
    total = len(data)
    while offset < total:
        if offset + CHUNK_HEADER_SIZE > total:
            raise AdtFormatError(f"truncated chunk header at offset {offset}")
        tag = data[offset : offset + 4]
        (size,) = struct.unpack_from("<I", data, offset + 4)
        start = offset + CHUNK_HEADER_SIZE
        end = start + size
        if end > total:
            raise AdtFormatError(
                f"chunk {tag!r} at offset {offset} overruns file ({end} > {total})"
            )
        if tag in MCNK_TAGS:
            if size < MCNK_AREA_ID_OFFSET + 4:
                raise AdtFormatError(f"MCNK at offset {offset} too small ({size} bytes)")
            (area_id,) = struct.unpack_from("<I", data, start + MCNK_AREA_ID_OFFSET)
            area_ids.append(area_id)
        offset = end
    return area_ids


def parse_adt_area_ids(path: Path | str) -> np.ndarray | None:
    data = Path(path).read_bytes()
    return pad_area_ids(read_mcnk_area_ids(data))


@dataclass
class TileGridExport:
    continent_name: str
    tiles_raw: Dict[int, np.ndarray] = field(default_factory=dict)
    found_areas: Set[int] = field(default_factory=set)

    def add_tile(self, tile_x: int, tile_y: int, area_ids: np.ndarray) -> None:
        self.tiles_raw[tile_key(tile_x, tile_y)] = area_ids
        self.found_areas.update(int(a) for a in np.unique(area_ids) if a != 0)

    def tiles_b64(self) -> Dict[int, str]:
        return {key: encode_tile(self.tiles_raw[key]) for key in sorted(self.tiles_raw)}


def build_tile_export(adt_dir: Path | str, continent_name: str, *, log_fn=None, error_fn=None) -> TileGridExport:
    """Decode every root ADT in ``adt_dir``.

    Files that fail to decode are reported through ``error_fn`` (falling back
    to ``log_fn``) and left out.
    """
    adt_dir = Path(adt_dir)
    if not adt_dir.is_dir():
        raise FileNotFoundError(f"Directory not found: {adt_dir}")

    export = TileGridExport(continent_name)
    _log(log_fn, f"Scanning: {adt_dir}")

    parsed = 0
    for path in sorted(adt_dir.iterdir()):
        if not path.is_file():
            continue
        coords = parse_root_adt_filename(path)
        if coords is None:
            continue
        _, tx, ty = coords
        try:
            area_ids = parse_adt_area_ids(path)
        except (OSError, AdtFormatError) as exc:
            _log(error_fn or log_fn, f"  ERROR parsing {path}: {exc}")
            continue
        if area_ids is None:
            continue
        export.add_tile(tx, ty, area_ids)
        parsed += 1

    _log(log_fn, f"  Parsed {parsed} tiles, found {len(export.found_areas)} unique areas")
    return export
