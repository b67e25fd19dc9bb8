import tempfile
import unittest
from pathlib import Path

from zonemap.adt import (
    AdtFormatError,
    build_tile_export,
    parse_adt_area_ids,
    parse_root_adt_filename,
    read_mcnk_area_ids,
)
from zonemap.grid import CHUNKS_PER_TILE, decode_tile, tile_key

from adt_fixtures import adt_bytes, chunk, write_adt


class FilenameTests(unittest.TestCase):
    def test_root_tile_names(self) -> None:
        self.assertEqual(parse_root_adt_filename("Kalimdor_32_48.adt"), ("Kalimdor", 32, 48))
        self.assertEqual(parse_root_adt_filename(Path("dir/Azeroth_0_63.ADT")), ("Azeroth", 0, 63))

    def test_rejects_other_files(self) -> None:
        self.assertIsNone(parse_root_adt_filename("Kalimdor_32_48_obj0.adt"))
        self.assertIsNone(parse_root_adt_filename("Kalimdor_32_48.wdt"))
        self.assertIsNone(parse_root_adt_filename("Kalimdor_a_48.adt"))
        self.assertIsNone(parse_root_adt_filename("Kalimdor_64_1.adt"))


class McnkTests(unittest.TestCase):
    def test_reads_area_ids_in_order(self) -> None:
        self.assertEqual(read_mcnk_area_ids(adt_bytes([14, 362, 0, 14])), [14, 362, 0, 14])

    def test_accepts_forward_tag(self) -> None:
        payload = bytearray(0x80)
        payload[0x34:0x38] = (1637).to_bytes(4, "little")
        data = b"MCNK" + len(payload).to_bytes(4, "little") + bytes(payload)
        self.assertEqual(read_mcnk_area_ids(data), [1637])

    def test_no_chunks(self) -> None:
        self.assertEqual(read_mcnk_area_ids(chunk(b"MVER", b"\x12\x00\x00\x00")), [])

    def test_truncated_chunk_raises(self) -> None:
        data = adt_bytes([1, 2])[:-10]
        with self.assertRaises(AdtFormatError):
            read_mcnk_area_ids(data)

    def test_short_mcnk_raises(self) -> None:
        with self.assertRaises(AdtFormatError):
            read_mcnk_area_ids(chunk(b"MCNK", b"\x00" * 16))

    def test_short_tile_is_padded(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = write_adt(Path(tmp_dir), "Kalimdor_1_1.adt", [7] * 10)
            area_ids = parse_adt_area_ids(path)
        self.assertEqual(area_ids.shape, (CHUNKS_PER_TILE,))
        self.assertEqual(area_ids[:10].tolist(), [7] * 10)
        self.assertEqual(int(area_ids[10:].sum()), 0)

    def test_tile_without_chunks_is_none(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = write_adt(Path(tmp_dir), "Kalimdor_1_1.adt", [])
            self.assertIsNone(parse_adt_area_ids(path))


class TileExportTests(unittest.TestCase):
    def test_build_tile_export(self) -> None:
        messages: list[str] = []
        errors: list[str] = []
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            write_adt(root, "Kalimdor_10_20.adt", [14] * 128 + [362] * 128)
            write_adt(root, "Kalimdor_11_20.adt", [0] * 256)
            write_adt(root, "Kalimdor_12_20.adt", [])
            write_adt(root, "Kalimdor_10_20_obj0.adt", [999] * 256)
            (root / "Kalimdor_13_20.adt").write_bytes(b"KNCM\xff\xff\x00\x00")
            (root / "readme.txt").write_text("not a tile", encoding="utf-8")
            (root / "Kalimdor_14_20.adt").mkdir()

            export = build_tile_export(root, "Kalimdor", log_fn=messages.append, error_fn=errors.append)

        self.assertEqual(export.continent_name, "Kalimdor")
        self.assertEqual(sorted(export.tiles_raw), [tile_key(10, 20), tile_key(11, 20)])
        self.assertEqual(export.found_areas, {14, 362})
        self.assertEqual(len(errors), 1)
        self.assertIn("Kalimdor_13_20.adt", errors[0])
        self.assertIn("Parsed 2 tiles, found 2 unique areas", messages[-1])

        blobs = export.tiles_b64()
        self.assertEqual(list(blobs), sorted(blobs))
        decoded = decode_tile(blobs[tile_key(10, 20)])
        self.assertEqual(decoded.tolist(), [14] * 128 + [362] * 128)

    def test_missing_directory_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            with self.assertRaises(FileNotFoundError):
                build_tile_export(Path(tmp_dir) / "nope", "Azeroth")


if __name__ == "__main__":
    unittest.main()
