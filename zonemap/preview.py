from __future__ import annotations

from pathlib import Path
from typing import Mapping

import numpy as np
from PIL import Image

from .coloring import RGB
from .grid import CHUNKS_PER_SIDE, TILES_PER_SIDE, as_grid, tile_coords


def render_continent(
    tiles: Mapping[int, np.ndarray],
    colors: Mapping[int, RGB],
) -> np.ndarray:
    """Return an RGB image with one pixel per chunk, colored by area.

    Missing tiles and the sentinel area stay black.
    """
    side = TILES_PER_SIDE * CHUNKS_PER_SIDE
    labels = np.zeros((side, side), dtype=np.uint32)
    for key, area_ids in tiles.items():
        tile_x, tile_y = tile_coords(key)
        y0 = tile_y * CHUNKS_PER_SIDE
        x0 = tile_x * CHUNKS_PER_SIDE
        labels[y0 : y0 + CHUNKS_PER_SIDE, x0 : x0 + CHUNKS_PER_SIDE] = as_grid(area_ids)

    rgb = np.zeros((side, side, 3), dtype=np.uint8)
    for area_id in np.unique(labels).tolist():
        if area_id == 0:
            continue
        color = colors.get(area_id)
        if color is None:
            continue
        rgb[labels == area_id] = [int(round(c * 255)) for c in color]
    return rgb


def save_continent_preview(
    tiles: Mapping[int, np.ndarray],
    colors: Mapping[int, RGB],
    out_path: Path | str,
) -> Path:
    path = Path(out_path)
    Image.fromarray(render_continent(tiles, colors)).save(path, optimize=True)
    return path
