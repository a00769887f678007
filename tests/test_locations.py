"""Tests for known race location lookup."""

from racelog.analysis.locations import get_coordinates, map_points
from racelog.normalize import normalize


class TestGetCoordinates:
    """Tests for get_coordinates."""

    def test_known_city(self):
        assert get_coordinates("Columbia, MD") == (39.2037, -76.8610)

    def test_usa_suffix_stripped(self):
        assert get_coordinates("Baltimore, MD, USA") == (39.2904, -76.6122)

    def test_unknown(self):
        assert get_coordinates("Boston, MA") is None
        assert get_coordinates("") is None


class TestMapPoints:
    """Tests for map_points."""

    def test_groups_known_locations(self, raw_races):
        points = map_points(normalize(raw_races))
        assert points[0]["location"] == "Washington, DC"
        assert points[0]["count"] == 2
        # Boston is not in the table
        assert len(points) == 2
