"""Tests for camera footprint and derived flight parameters."""

import pytest

from waypoint_planner import GenerationParameters
from waypoint_planner.camera import effective_parameters, footprint


@pytest.fixture
def camera_params():
    return GenerationParameters(
        altitude=100.0,
        speed=10.0,
        line_spacing=20.0,
        photo_interval=2.0,
        focal_length=10.0,
        sensor_width=13.2,
        sensor_height=8.8,
        overlap=20.0,
    )


class TestFootprint:
    def test_ground_coverage(self, camera_params):
        fp = footprint(camera_params)
        assert fp is not None
        assert fp.ground_width_m == pytest.approx(132.0)
        assert fp.ground_height_m == pytest.approx(88.0)
        assert fp.line_spacing_m == pytest.approx(105.6)
        assert fp.photo_distance_m == pytest.approx(70.4)

    def test_incomplete_camera(self, params):
        assert footprint(params) is None
        assert footprint(params.model_copy(update={"focal_length": 10.0, "sensor_width": 13.2})) is None


class TestEffectiveParameters:
    def test_without_camera_is_unchanged(self, params):
        assert effective_parameters(params) is params

    def test_speed_derived_from_interval(self, camera_params):
        effective = effective_parameters(camera_params)
        assert effective.line_spacing == pytest.approx(105.6)
        assert effective.speed == pytest.approx(35.2)
        assert effective.photo_interval == 2.0

    def test_manual_speed_keeps_speed(self, camera_params):
        effective = effective_parameters(camera_params.model_copy(update={"manual_speed_set": True}))
        assert effective.speed == 10.0
        assert effective.photo_interval == pytest.approx(7.04)

    def test_photo_distance_is_preserved(self, camera_params):
        for manual in (False, True):
            effective = effective_parameters(camera_params.model_copy(update={"manual_speed_set": manual}))
            assert effective.speed * effective.photo_interval == pytest.approx(70.4)

    def test_input_is_not_mutated(self, camera_params):
        effective_parameters(camera_params)
        assert camera_params.line_spacing == 20.0
        assert camera_params.speed == 10.0
