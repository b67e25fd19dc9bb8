import tempfile
import unittest
from pathlib import Path

from zonemap.hierarchy import find_root_parent
from zonemap.tables import AreaInfo, MapToAreaEntry, parent_lookup, parse_area_table, parse_map_to_area_csv


AREA_CSV = """ID,ZoneName,AreaName_lang,ContinentID,ParentAreaID,AreaBit,ExplorationLevel
14,Durotar,"Durotar",1,0,9,10
362,RazorHill,"Razor Hill",1,14,258,10
367,SenjinVillage,"Sen'jin Village, Durotar",1,14,263,
abc,Broken,"Broken",1,0,0,0
9999,Short,"Short"
215,Mulgore,"Mulgore",1,,15,x
"""

MAP_CSV = """Zone, mapId, AreaId
Durotar,1411,14
"Thunder Bluff, Mulgore",1456,1638
Broken,notanumber,12
Negative,-1411,14
NegativeArea,1412,-14
Orgrimmar,1454,1637
"""


class AreaTableTests(unittest.TestCase):
    def _write(self, tmp_dir: str, name: str, text: str) -> Path:
        path = Path(tmp_dir) / name
        path.write_text(text, encoding="utf-8")
        return path

    def test_parse_area_table(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            areas = parse_area_table(self._write(tmp_dir, "AreaTable.csv", AREA_CSV))
        self.assertEqual(set(areas), {14, 362, 367, 215})
        self.assertEqual(areas[14], AreaInfo(14, "Durotar", 0, 10))
        self.assertEqual(areas[362], AreaInfo(362, "Razor Hill", 14, 10))
        self.assertEqual(areas[367].name, "Sen'jin Village, Durotar")
        self.assertEqual(areas[367].exploration_level, 0)
        self.assertEqual(areas[215].parent_id, 0)
        self.assertEqual(areas[215].exploration_level, 0)
        self.assertEqual(parent_lookup(areas)[362], 14)

    def test_ids_outside_u32_are_rejected(self) -> None:
        text = (
            "ID,AreaName_lang,ParentAreaID,ExplorationLevel\n"
            "1,Child,2,5\n"
            "2,Mid,-1,-3\n"
            "-5,Neg,0,0\n"
            "4294967296,TooBig,0,0\n"
            "4294967295,Max,4294967296,0\n"
        )
        with tempfile.TemporaryDirectory() as tmp_dir:
            areas = parse_area_table(self._write(tmp_dir, "AreaTable.csv", text))
        self.assertEqual(set(areas), {1, 2, 4294967295})
        self.assertEqual(areas[2].parent_id, 0)
        self.assertEqual(areas[2].exploration_level, -3)
        self.assertEqual(areas[4294967295].parent_id, 0)
        self.assertEqual(find_root_parent(1, areas), 2)

    def test_missing_column_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self._write(tmp_dir, "bad.csv", "ID,AreaName_lang\n1,A\n")
            with self.assertRaises(ValueError):
                parse_area_table(path)

    def test_empty_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self._write(tmp_dir, "empty.csv", "")
            with self.assertRaises(ValueError):
                parse_area_table(path)


class MapToAreaTests(unittest.TestCase):
    def test_parse_map_to_area(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "mapIdToArea.csv"
            path.write_text(MAP_CSV, encoding="utf-8")
            entries = parse_map_to_area_csv(path)
        self.assertEqual(
            entries,
            [
                MapToAreaEntry("Durotar", 1411, 14),
                MapToAreaEntry("Thunder Bluff, Mulgore", 1456, 1638),
                MapToAreaEntry("Orgrimmar", 1454, 1637),
            ],
        )


if __name__ == "__main__":
    unittest.main()
