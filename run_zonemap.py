from __future__ import annotations

import argparse
import sys
from pathlib import Path

from zonemap.pipeline import default_config, load_config, run


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Build area tile grids, neighbor colors and hierarchy tables for the addon."
    )
    parser.add_argument("--config", type=str, default=None, help="JSON file overriding input/output paths")
    parser.add_argument("--out-dir", type=str, default=None, help="Output directory (default: Data)")
    parser.add_argument("--area-table", type=str, default=None, help="AreaTable CSV path")
    parser.add_argument("--map-to-area", type=str, default=None, help="mapIdToArea CSV path")
    parser.add_argument("--preview", action="store_true", help="Also render a PNG preview per continent")
    args = parser.parse_args()

    if args.config:
        try:
            config = load_config(args.config)
        except (OSError, ValueError) as exc:
            print(f"Failed to load config {args.config}: {exc}", file=sys.stderr)
            return 2
    else:
        config = default_config()

    if args.out_dir:
        config.out_dir = Path(args.out_dir)
    if args.area_table:
        config.area_table = Path(args.area_table)
    if args.map_to_area:
        config.map_to_area = Path(args.map_to_area)
    if args.preview:
        config.render_previews = True

    result = run(config)
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
