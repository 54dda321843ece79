"""Tests for TrackerNet station code lookup."""

import tempfile
import unittest
import sys
from pathlib import Path

# Add src to path so we can import tubetrack
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tubetrack.station_codes import CodeNotFound, StationCodeTable, default_station_codes


class TestStationCodeTable(unittest.TestCase):
    """Test station code loading and lookup."""

    def test_packaged_table(self):
        """Test the packaged CSV covers central Victoria line stations."""
        table = default_station_codes()
        self.assertEqual(table.legacy_code_for("940GZZLUOXC"), "OXC")
        self.assertEqual(table.legacy_code_for("940GZZLUVIC"), "VIC")
        self.assertGreater(len(table), 50)

    def test_miss_is_typed(self):
        table = StationCodeTable({"940GZZLUOXC": "OXC"})
        self.assertEqual(table.legacy_code_for("940GZZLUXXX"), CodeNotFound("940GZZLUXXX"))
        self.assertNotIn("940GZZLUXXX", table)

    def test_from_csv_text_skips_incomplete_rows(self):
        csv_data = """naptan_id,code,name
940GZZLUOXC,OXC,Oxford Circus
940GZZLUGPK,,Green Park
,VIC,Victoria
940GZZLUOXC,XXX,Oxford Circus again
"""
        table = StationCodeTable.from_csv_text(csv_data)
        self.assertEqual(len(table), 1)
        self.assertEqual(table.legacy_code_for("940GZZLUOXC"), "OXC")

    def test_from_csv_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "codes.csv"
            path.write_text("naptan_id,code\n940GZZLUBXN,BRX\n", encoding="utf-8")
            table = StationCodeTable.from_csv(path)
        self.assertEqual(table.legacy_code_for("940GZZLUBXN"), "BRX")


if __name__ == "__main__":
    unittest.main()
