"""Tests for the line registry and identifier classification."""

import unittest
import sys
from pathlib import Path

# Add src to path so we can import tubetrack
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tubetrack.identifiers import (
    Ambiguous,
    Invalid,
    Resolved,
    Unknown,
    classify,
    is_well_formed,
    matches_line,
)
from tubetrack.lines import DEFAULT_LINES, LineRegistry, default_registry
from tubetrack.models import Line


class TestLineRegistry(unittest.TestCase):
    """Test line lookups."""

    def setUp(self):
        self.registry = default_registry()

    def test_line_by_id(self):
        """Test every declared line can be found by id."""
        for line in DEFAULT_LINES:
            self.assertIs(self.registry.line_by_id(line.id), line)

    def test_line_by_legacy_code(self):
        """Test lookup by TrackerNet code."""
        self.assertEqual(self.registry.line_by_legacy_code("V").id, "victoria")
        self.assertEqual(self.registry.line_by_legacy_code("O").id, "circle")
        self.assertEqual(self.registry.line_by_legacy_code("H").id, "hammersmith-city")

    def test_reliable_lines_keep_declaration_order(self):
        """Test only lines with a working feed are listed, in order."""
        ids = [line.id for line in self.registry.lines_with_reliable_live_feed()]
        self.assertEqual(ids, ["victoria", "jubilee", "northern", "central", "district"])

    def test_subsurface_lines_read_district_feed(self):
        """Test the feed override replaces the display code with District's."""
        circle = self.registry.line_by_id("circle")
        self.assertEqual(circle.display_code, "O")
        self.assertEqual(circle.feed_code, "D")
        for line_id in ["metropolitan", "hammersmith-city", "circle"]:
            with self.subTest(line_id=line_id):
                self.assertEqual(self.registry.line_by_id(line_id).feed_code, "D")
        self.assertEqual(self.registry.line_by_id("district").feed_code, "D")
        self.assertEqual(self.registry.line_by_id("victoria").feed_code, "V")

    def test_empty_prefix_matches_nothing(self):
        """Test lines without a prefix are never returned for an empty prefix."""
        self.assertEqual(self.registry.lines_with_prefix(""), [])

    def test_duplicate_ids_rejected(self):
        """Test a registry cannot hold two records for one id."""
        line = Line("victoria", "V", "Victoria", "#0098D4", True, "11")
        with self.assertRaises(ValueError):
            LineRegistry([line, line])

    def test_contains_and_len(self):
        self.assertIn("jubilee", self.registry)
        self.assertNotIn("elizabeth", self.registry)
        self.assertEqual(len(self.registry), 10)
        self.assertEqual(self.registry.all_lines()[-1].id, "piccadilly")


class TestClassify(unittest.TestCase):
    """Test line inference from leading car numbers."""

    def setUp(self):
        self.registry = default_registry()

    def test_resolved(self):
        self.assertEqual(classify("11054", self.registry), Resolved("victoria"))
        self.assertEqual(classify("96012", self.registry), Resolved("jubilee"))
        self.assertEqual(classify("51700", self.registry), Resolved("northern"))
        self.assertEqual(classify("91234", self.registry), Resolved("central"))

    def test_ambiguous_shared_prefix(self):
        """Test the sub-surface prefix yields all four lines in registry order."""
        result = classify("21999", self.registry)
        self.assertEqual(
            result,
            Ambiguous(("metropolitan", "district", "hammersmith-city", "circle")),
        )

    def test_unknown_prefix(self):
        self.assertEqual(classify("99999", self.registry), Unknown("99"))

    def test_malformed(self):
        """Test anything but exactly five digits is rejected."""
        for value in ["123", "", "123456", "1105a", "11 54", "11054\n", "１１０５４"]:
            with self.subTest(value=value):
                self.assertEqual(classify(value, self.registry), Invalid("malformed"))

    def test_total_and_deterministic(self):
        """Test every 5-digit string classifies the same way twice and never as Invalid."""
        for n in range(0, 100000, 997):
            identifier = f"{n:05d}"
            first = classify(identifier, self.registry)
            self.assertEqual(first, classify(identifier, self.registry))
            self.assertNotIsInstance(first, Invalid)

    def test_depends_only_on_prefix(self):
        self.assertEqual(classify("11000", self.registry), classify("11999", self.registry))


class TestIdentifierHelpers(unittest.TestCase):
    """Test format and line plausibility checks."""

    def test_is_well_formed(self):
        self.assertTrue(is_well_formed("00000"))
        self.assertFalse(is_well_formed("0000"))
        self.assertFalse(is_well_formed(" 11054"))

    def test_matches_line(self):
        registry = default_registry()
        self.assertTrue(matches_line("11054", registry.line_by_id("victoria")))
        self.assertFalse(matches_line("96054", registry.line_by_id("victoria")))
        # Lines without a reliable feed never vouch for a number
        self.assertFalse(matches_line("21054", registry.line_by_id("metropolitan")))
        self.assertFalse(matches_line("12345", registry.line_by_id("bakerloo")))


if __name__ == "__main__":
    unittest.main()
