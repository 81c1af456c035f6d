"""Orbit around a circle's centre, sampled on the sphere."""

from __future__ import annotations

import math
from typing import Iterator

from ..errors import AmbiguousCoordinateError
from ..geometry import destination_point
from ..models import GenerationParameters, ShapeDescriptor, ShapeKind
from .base import PathPoint, ShapeStrategy

# Centres this close to (0, 0) almost always come from a unit or
# serialization bug upstream
ORIGIN_TOLERANCE_DEG = 0.001


def is_near_origin(lat: float, lng: float) -> bool:
    return abs(lat) < ORIGIN_TOLERANCE_DEG and abs(lng) < ORIGIN_TOLERANCE_DEG


class CircleStrategy(ShapeStrategy):
    """Waypoints on the circle's rim, each facing the centre.

    Points are placed with the spherical forward formula rather than a planar
    offset, so they sit where the map client draws the circle at any latitude
    or radius.
    """

    kind = ShapeKind.CIRCLE

    def iter_points(self, shape: ShapeDescriptor, params: GenerationParameters) -> Iterator[PathPoint]:
        if not shape.boundary:
            return
        center = shape.boundary[0]
        radius = shape.radius if shape.radius > 0 else center.radius
        if radius <= 0:
            return

        if is_near_origin(center.latitude, center.longitude):
            raise AmbiguousCoordinateError(center.latitude, center.longitude, context="circle centre")

        count = self.point_count(radius, params)
        step = 360.0 / count
        for i in range(count):
            bearing = i * step
            lat, lng = destination_point(center.latitude, center.longitude, bearing, radius)
            yield PathPoint(lat, lng, heading=(bearing + 180.0) % 360.0)

    def point_count(self, radius: float, params: GenerationParameters) -> int:
        minimum = self.settings.min_circle_points
        photo_distance = params.speed * params.photo_interval
        if photo_distance <= 0:
            return minimum
        circumference = 2 * math.pi * radius
        return max(minimum, math.floor(circumference / photo_distance))
