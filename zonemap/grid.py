from __future__ import annotations

import base64
from typing import Iterable, Tuple

import numpy as np


CHUNKS_PER_SIDE = 16
CHUNKS_PER_TILE = CHUNKS_PER_SIDE * CHUNKS_PER_SIDE
TILES_PER_SIDE = 64

Coord = Tuple[int, int]


def tile_key(tile_x: int, tile_y: int) -> int:
    return tile_y * TILES_PER_SIDE + tile_x


def tile_coords(key: int) -> Coord:
    return key % TILES_PER_SIDE, key // TILES_PER_SIDE


def chunk_index(row: int, col: int) -> int:
    return row * CHUNKS_PER_SIDE + col


def pad_area_ids(area_ids: Iterable[int]) -> np.ndarray | None:
    """Return a 256-entry uint32 array, or None when the tile has no chunks."""
    values = np.asarray(list(area_ids), dtype=np.uint32)
    if values.size == 0:
        return None
    if values.size >= CHUNKS_PER_TILE:
        return values[:CHUNKS_PER_TILE].copy()
    padded = np.zeros(CHUNKS_PER_TILE, dtype=np.uint32)
    padded[: values.size] = values
    return padded


def as_grid(area_ids: np.ndarray) -> np.ndarray:
    """View a flat tile as a (row, col) 16x16 grid."""
    return np.asarray(area_ids, dtype=np.uint32).reshape(CHUNKS_PER_SIDE, CHUNKS_PER_SIDE)


def encode_tile(area_ids: np.ndarray) -> str:
    values = np.asarray(area_ids)
    if values.size != CHUNKS_PER_TILE:
        raise ValueError(f"expected {CHUNKS_PER_TILE} area IDs, got {values.size}")
    raw = values.astype("<u4").tobytes()
    return base64.b64encode(raw).decode("ascii")


def decode_tile(blob: str) -> np.ndarray:
    raw = base64.b64decode(blob)
    if len(raw) != CHUNKS_PER_TILE * 4:
        raise ValueError(f"expected {CHUNKS_PER_TILE * 4} bytes, got {len(raw)}")
    return np.frombuffer(raw, dtype="<u4").astype(np.uint32)
