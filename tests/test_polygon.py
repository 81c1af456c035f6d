"""Tests for polygon coverage."""

import time
from collections import defaultdict

import pytest

from waypoint_planner import ShapeDescriptor, ShapeKind, WaypointActions
from waypoint_planner.geometry import (
    bounding_box,
    is_point_in_polygon,
    meters_to_degrees,
    meters_to_latitude_degrees,
)
from waypoint_planner.strategies import PolygonStrategy
from waypoint_planner.strategies.base import scan_positions
from waypoint_planner.strategies.polygon import SUBSTEPS

from conftest import coord


@pytest.fixture
def strategy(settings):
    return PolygonStrategy(settings)


def full_scan(ring, spacing):
    """Every grid sample of the bounding box that lies inside ``ring``, east-west lines."""
    box = bounding_box(ring)
    lat_step = meters_to_latitude_degrees(spacing)
    lng_step = meters_to_degrees(spacing, box.min_lat) / SUBSTEPS
    points = []
    line_count = 0
    for lat in scan_positions(box.min_lat, box.max_lat, lat_step):
        offsets = scan_positions(0.0, box.max_lng - box.min_lng, lng_step)
        if line_count % 2:
            lngs = [box.max_lng - offset for offset in offsets]
        else:
            lngs = [box.min_lng + offset for offset in offsets]
        line = [(lat, lng) for lng in lngs if is_point_in_polygon(ring, lat, lng)]
        if line:
            line_count += 1
        points.extend(line)
    return points


def by_line(waypoints, key):
    lines = defaultdict(list)
    for w in waypoints:
        lines[key(w)].append(w)
    return list(lines.values())


class TestCoverage:
    def test_all_points_inside(self, strategy, square_polygon, params):
        wps = strategy.generate(square_polygon, params)
        assert wps
        assert all(is_point_in_polygon(square_polygon.boundary, w.latitude, w.longitude) for w in wps)

    def test_concave_points_inside(self, strategy, l_polygon, params):
        wps = strategy.generate(l_polygon, params)
        assert wps
        assert all(is_point_in_polygon(l_polygon.boundary, w.latitude, w.longitude) for w in wps)
        # Rows above the notch stop at its edge
        upper = [w for w in wps if w.latitude > 60.0051]
        assert upper and all(w.longitude <= 24.01 for w in upper)

    def test_north_south_points_inside(self, strategy, l_polygon, params):
        wps = strategy.generate(l_polygon, params.model_copy(update={"is_north_south": True}))
        assert wps
        assert all(is_point_in_polygon(l_polygon.boundary, w.latitude, w.longitude) for w in wps)
        assert {w.heading for w in wps} == {0.0, 180.0}

    def test_east_west_headings_alternate(self, strategy, square_polygon, params):
        wps = strategy.generate(square_polygon, params)
        lines = by_line(wps, lambda w: w.latitude)
        assert len(lines) > 1
        for number, line in enumerate(lines):
            expected = 270.0 if number % 2 else 90.0
            assert {w.heading for w in line} == {expected}
        # Reverse lines run west
        assert lines[1][0].longitude > lines[1][-1].longitude

    def test_closing_vertex_is_optional(self, strategy, square_polygon, square_ring, params):
        closed = ShapeDescriptor(kind=ShapeKind.POLYGON, boundary=[*square_ring, square_ring[0]])
        assert strategy.generate(closed, params) == strategy.generate(square_polygon, params)

    def test_self_intersecting_polygon(self, strategy, params):
        bowtie = ShapeDescriptor(
            kind=ShapeKind.POLYGON,
            boundary=[coord(60.0, 24.0), coord(60.01, 24.02), coord(60.01, 24.0), coord(60.0, 24.02)],
        )
        wps = strategy.generate(bowtie, params)
        assert wps
        assert all(is_point_in_polygon(bowtie.boundary, w.latitude, w.longitude) for w in wps)

    def test_fewer_than_three_vertices(self, strategy, params):
        shape = ShapeDescriptor(kind=ShapeKind.POLYGON, boundary=[coord(60.0, 24.0), coord(60.01, 24.02)])
        assert strategy.generate(shape, params) == []

    def test_non_positive_line_spacing(self, strategy, square_polygon, params):
        assert strategy.generate(square_polygon, params.model_copy(update={"line_spacing": -5.0})) == []


class TestPhotoStride:
    def test_every_third_waypoint_takes_photo(self, strategy, square_polygon, params):
        wps = strategy.generate(square_polygon, params)
        for line in by_line(wps, lambda w: w.latitude):
            for position, w in enumerate(line):
                expected = WaypointActions.TAKE_PHOTO if position % 3 == 0 else WaypointActions.NO_ACTION
                assert w.action == expected

    def test_zero_stride_keeps_base_action(self, strategy, square_polygon, params):
        wps = strategy.generate(
            square_polygon, params.model_copy(update={"photo_interval": 0.0, "action": "startRecord"})
        )
        assert wps
        assert {w.action for w in wps} == {"startRecord"}

    def test_camera_changes_spacing_not_stride(self, strategy, square_polygon, params):
        camera = params.model_copy(
            update={
                "photo_interval": 2.0,
                "focal_length": 10.0,
                "sensor_width": 13.2,
                "sensor_height": 8.8,
                "overlap": 60.0,
            }
        )
        wps = strategy.generate(square_polygon, camera)
        plain = strategy.generate(square_polygon, params)
        assert len(by_line(wps, lambda w: w.latitude)) > len(by_line(plain, lambda w: w.latitude))
        assert all(w.speed == params.speed for w in wps)
        for line in by_line(wps, lambda w: w.latitude):
            assert [w.action == WaypointActions.TAKE_PHOTO for w in line[:4]] == [True, False, True, False][
                : len(line[:4])
            ]

    def test_indices_consecutive(self, strategy, l_polygon, params):
        wps = strategy.generate(l_polygon, params.model_copy(update={"starting_index": 3}))
        assert [w.index for w in wps] == list(range(3, 3 + len(wps)))


class TestScanWork:
    def test_matches_full_bounding_box_scan(self, strategy, l_polygon, params):
        wps = strategy.generate(l_polygon, params)
        assert [(w.latitude, w.longitude) for w in wps] == full_scan(l_polygon.boundary, params.line_spacing)

    def test_self_intersecting_matches_full_scan(self, strategy, params):
        bowtie = [coord(60.0, 24.0), coord(60.01, 24.02), coord(60.01, 24.0), coord(60.0, 24.02)]
        shape = ShapeDescriptor(kind=ShapeKind.POLYGON, boundary=bowtie)
        wps = strategy.generate(shape, params)
        assert [(w.latitude, w.longitude) for w in wps] == full_scan(bowtie, params.line_spacing)

    def test_thin_diagonal_corridor_is_prompt(self, strategy, params):
        # About 11 m wide, running corner to corner across a 0.05 degree box
        corridor = ShapeDescriptor(
            kind=ShapeKind.POLYGON,
            boundary=[coord(60.0, 24.0), coord(60.0, 24.0002), coord(60.05, 24.0502), coord(60.05, 24.05)],
        )
        started = time.perf_counter()
        wps = strategy.generate(corridor, params.model_copy(update={"line_spacing": 5.0}))
        elapsed = time.perf_counter() - started

        assert wps
        assert len(wps) < strategy.settings.max_waypoints_per_shape
        assert all(is_point_in_polygon(corridor.boundary, w.latitude, w.longitude) for w in wps)
        assert elapsed < 5.0
