"""Tests for distance computation and station ranking."""

import unittest
import sys
from pathlib import Path

# Add src to path so we can import tubetrack
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tubetrack.geo import distance_meters, format_distance, nearest_stations
from tubetrack.models import Station

OXFORD_CIRCUS = Station("940GZZLUOXC", "Oxford Circus", 51.515224, -0.141903, frozenset({"victoria"}))
GREEN_PARK = Station("940GZZLUGPK", "Green Park", 51.506947, -0.142787, frozenset({"victoria"}))
VICTORIA = Station("940GZZLUVIC", "Victoria", 51.496424, -0.143921, frozenset({"victoria"}))
WARREN_STREET = Station("940GZZLUWRR", "Warren Street", 51.524951, -0.138321, frozenset({"victoria"}))
BRIXTON = Station("940GZZLUBXN", "Brixton", 51.462618, -0.114888, frozenset({"victoria"}))


class TestDistance(unittest.TestCase):
    """Test haversine distances."""

    def test_same_point_is_zero(self):
        for lat, lng in [(0, 0), (51.5, -0.14), (-33.86, 151.2), (89.9, 179.9)]:
            self.assertEqual(distance_meters(lat, lng, lat, lng), 0)

    def test_known_distance(self):
        """Test Oxford Circus to Green Park is roughly 925m."""
        d = distance_meters(OXFORD_CIRCUS.lat, OXFORD_CIRCUS.lng, GREEN_PARK.lat, GREEN_PARK.lng)
        self.assertAlmostEqual(d, 923, delta=10)

    def test_one_degree_latitude(self):
        self.assertAlmostEqual(distance_meters(0, 0, 1, 0), 111194.9, delta=0.5)

    def test_symmetric(self):
        a = distance_meters(51.5, -0.1, 51.6, -0.2)
        b = distance_meters(51.6, -0.2, 51.5, -0.1)
        self.assertAlmostEqual(a, b, places=6)


class TestNearestStations(unittest.TestCase):
    """Test k-nearest ranking."""

    def setUp(self):
        self.stations = [BRIXTON, VICTORIA, WARREN_STREET, GREEN_PARK, OXFORD_CIRCUS]

    def test_sorted_within_range(self):
        """Test results are nearest first and all within the limit."""
        ranked = nearest_stations(OXFORD_CIRCUS.lat, OXFORD_CIRCUS.lng, self.stations)

        self.assertEqual(ranked[0].station, OXFORD_CIRCUS)
        distances = [r.distance_meters for r in ranked]
        self.assertEqual(distances, sorted(distances))
        self.assertTrue(all(d <= 2000 for d in distances))
        self.assertNotIn(BRIXTON, [r.station for r in ranked])

    def test_limit(self):
        ranked = nearest_stations(OXFORD_CIRCUS.lat, OXFORD_CIRCUS.lng, self.stations, limit=2)
        self.assertEqual([r.station for r in ranked], [OXFORD_CIRCUS, GREEN_PARK])

    def test_max_distance(self):
        ranked = nearest_stations(
            OXFORD_CIRCUS.lat, OXFORD_CIRCUS.lng, self.stations, max_distance_meters=100
        )
        self.assertEqual([r.station for r in ranked], [OXFORD_CIRCUS])

    def test_empty_input(self):
        self.assertEqual(nearest_stations(51.5, -0.14, []), [])

    def test_nothing_in_range(self):
        self.assertEqual(nearest_stations(48.85, 2.35, self.stations), [])

    def test_ties_keep_input_order(self):
        """Test stations sharing a point stay in input order."""
        twin = Station("940GZZLUOXC2", "Oxford Circus (twin)", OXFORD_CIRCUS.lat, OXFORD_CIRCUS.lng)
        ranked = nearest_stations(51.52, -0.14, [twin, OXFORD_CIRCUS])
        self.assertEqual([r.station for r in ranked], [twin, OXFORD_CIRCUS])

        ranked = nearest_stations(51.52, -0.14, [OXFORD_CIRCUS, twin])
        self.assertEqual([r.station for r in ranked], [OXFORD_CIRCUS, twin])


class TestFormatDistance(unittest.TestCase):
    def test_format(self):
        self.assertEqual(format_distance(350.4), "350m")
        self.assertEqual(format_distance(1234), "1.2km")
        self.assertEqual(format_distance(0), "")


if __name__ == "__main__":
    unittest.main()
