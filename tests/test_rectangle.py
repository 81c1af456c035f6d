"""Tests for rectangle coverage."""

import pytest

from waypoint_planner import ShapeDescriptor, ShapeKind
from waypoint_planner.config import Settings
from waypoint_planner.geometry import haversine_distance, meters_to_latitude_degrees
from waypoint_planner.strategies import RectangleStrategy
from waypoint_planner.strategies.base import samples_along, scan_positions

from conftest import coord


@pytest.fixture
def strategy(settings):
    return RectangleStrategy(settings)


def rectangle(*corners):
    return ShapeDescriptor(kind=ShapeKind.RECTANGLE, boundary=[coord(*c) for c in corners])


class TestEndpointsOnly:
    def test_pairs_alternate(self, strategy, small_rectangle, params):
        wps = strategy.generate(small_rectangle, params.model_copy(update={"use_endpoints_only": True}))
        assert len(wps) % 2 == 0
        assert (wps[0].latitude, wps[0].longitude) == (60.0, 24.0)
        assert (wps[1].latitude, wps[1].longitude) == (60.0, 24.02)
        # Second line flown back west
        assert wps[2].longitude == 24.02
        assert wps[3].longitude == 24.0
        assert wps[2].latitude == wps[3].latitude > 60.0

    def test_east_west_headings(self, strategy, small_rectangle, params):
        wps = strategy.generate(small_rectangle, params.model_copy(update={"use_endpoints_only": True}))
        assert [w.heading for w in wps[:4]] == [90.0, 90.0, 270.0, 270.0]

    def test_north_south_columns(self, strategy, small_rectangle, params):
        wps = strategy.generate(
            small_rectangle,
            params.model_copy(update={"use_endpoints_only": True, "is_north_south": True}),
        )
        assert (wps[0].latitude, wps[0].longitude) == (60.0, 24.0)
        assert (wps[1].latitude, wps[1].longitude) == (60.01, 24.0)
        assert [w.heading for w in wps[:4]] == [0.0, 0.0, 180.0, 180.0]
        assert wps[2].latitude == 60.01
        assert wps[3].latitude == 60.0

    def test_line_count(self, strategy, small_rectangle, params):
        wps = strategy.generate(small_rectangle, params.model_copy(update={"use_endpoints_only": True}))
        lines = list(scan_positions(60.0, 60.01, meters_to_latitude_degrees(100.0)))
        assert len(wps) == 2 * len(lines)

    def test_degenerate_line_keeps_corners(self, strategy, params):
        shape = rectangle((60.0, 24.0), (60.0, 24.02))
        wps = strategy.generate(shape, params.model_copy(update={"use_endpoints_only": True}))
        assert len(wps) == 2
        assert (wps[0].latitude, wps[0].longitude) == (60.0, 24.0)
        assert (wps[-1].latitude, wps[-1].longitude) == (60.0, 24.02)


class TestSampled:
    def test_first_waypoint_at_corner(self, strategy, small_rectangle, params):
        wps = strategy.generate(small_rectangle, params)
        assert wps[0].latitude == pytest.approx(60.0)
        assert wps[0].longitude == pytest.approx(24.0)

    def test_points_per_line(self, strategy, small_rectangle, params):
        wps = strategy.generate(small_rectangle, params)
        first_line = [w for w in wps if w.latitude == 60.0]
        expected = samples_along(haversine_distance(60.0, 24.0, 60.0, 24.02), 30.0)
        assert len(first_line) == expected
        assert first_line[-1].longitude == 24.02

    def test_direction_alternates(self, strategy, small_rectangle, params):
        wps = strategy.generate(small_rectangle, params)
        headings = [w.heading for w in wps]
        assert headings[0] == 90.0
        assert 270.0 in headings
        second_line = [w for w in wps if w.heading == 270.0]
        assert second_line[0].longitude == 24.02

    def test_zero_photo_distance_uses_minimum_spacing(self, strategy, small_rectangle, params, settings):
        wps = strategy.generate(small_rectangle, params.model_copy(update={"photo_interval": 0.0}))
        first_line = [w for w in wps if w.latitude == 60.0]
        length = haversine_distance(60.0, 24.0, 60.0, 24.02)
        assert len(first_line) == samples_along(length, settings.min_sample_spacing)

    def test_longer_interval_never_adds_waypoints(self, strategy, small_rectangle, params):
        counts = [
            len(strategy.generate(small_rectangle, params.model_copy(update={"photo_interval": interval})))
            for interval in (1.0, 2.0, 3.5, 8.0, 30.0)
        ]
        assert counts == sorted(counts, reverse=True)

    def test_altitude_speed_and_indices(self, strategy, small_rectangle, params):
        wps = strategy.generate(small_rectangle, params.model_copy(update={"starting_index": 7}))
        assert [w.index for w in wps] == list(range(7, 7 + len(wps)))
        assert all(w.altitude == 60.0 and w.speed == 10.0 for w in wps)


class TestInputs:
    def test_corner_order_does_not_matter(self, strategy, params):
        a = strategy.generate(rectangle((60.0, 24.0), (60.01, 24.02)), params)
        b = strategy.generate(rectangle((60.01, 24.02), (60.0, 24.0)), params)
        assert a == b

    def test_fewer_than_two_coordinates(self, strategy, params):
        assert strategy.generate(rectangle(), params) == []
        assert strategy.generate(rectangle((60.0, 24.0)), params) == []

    def test_extra_coordinates_are_ignored(self, strategy, params):
        two = strategy.generate(rectangle((60.0, 24.0), (60.01, 24.02)), params)
        three = strategy.generate(rectangle((60.0, 24.0), (60.01, 24.02), (61.0, 25.0)), params)
        assert two == three

    def test_non_positive_line_spacing(self, strategy, small_rectangle, params):
        assert strategy.generate(small_rectangle, params.model_copy(update={"line_spacing": 0.0})) == []

    def test_camera_overrides_line_spacing(self, strategy, small_rectangle, params):
        camera = params.model_copy(
            update={
                "use_endpoints_only": True,
                "focal_length": 10.0,
                "sensor_width": 13.2,
                "sensor_height": 8.8,
                "overlap": 80.0,
                "altitude": 60.0,
            }
        )
        # 79.2 m * 0.2 = 15.84 m between lines instead of 100 m
        assert len(strategy.generate(small_rectangle, camera)) > len(
            strategy.generate(small_rectangle, params.model_copy(update={"use_endpoints_only": True}))
        )

    def test_large_area_is_truncated(self, params):
        strategy = RectangleStrategy(Settings(max_waypoints_per_shape=1000))
        wps = strategy.generate(rectangle((60.0, 24.0), (61.0, 25.0)), params)
        assert len(wps) == 1000
        assert wps[0].latitude == pytest.approx(60.0)
        assert wps[0].longitude == pytest.approx(24.0)
