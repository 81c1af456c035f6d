"""Polyline waypoints: path following for open lines, area coverage for closed ones."""

from __future__ import annotations

import math
from typing import Iterator

from loguru import logger

from ..camera import effective_parameters
from ..geometry import (
    EPSILON,
    bounding_box,
    haversine_distance,
    initial_bearing,
    meters_to_degrees,
    meters_to_latitude_degrees,
    scanline_crossings,
    self_intersections,
)
from ..models import Coordinate, GenerationParameters, ShapeDescriptor, ShapeKind
from .base import PathPoint, ShapeStrategy, fractions, lerp, samples_along, scan_positions

# Crossing intervals are pulled inwards by this many degrees (~0.1 mm) so that
# no waypoint sits exactly on the boundary
INSET_DEG = 1e-9

# Fraction of the line spacing a scan line is moved when it yields an odd
# number of crossings
NUDGE = 1e-6


def is_closed(coordinates: list[Coordinate]) -> bool:
    """First and last vertex coincide and enclose at least three distinct vertices."""
    if len(coordinates) < 4:
        return False
    first, last = coordinates[0], coordinates[-1]
    return (
        math.isclose(first.latitude, last.latitude, rel_tol=0.0, abs_tol=EPSILON)
        and math.isclose(first.longitude, last.longitude, rel_tol=0.0, abs_tol=EPSILON)
    )


class PolylineStrategy(ShapeStrategy):
    kind = ShapeKind.POLYLINE

    def resolve_parameters(self, params: GenerationParameters) -> GenerationParameters:
        update: dict[str, float] = {}
        if params.speed <= 0:
            update["speed"] = self.settings.default_speed
        if params.altitude <= 0:
            update["altitude"] = self.settings.default_altitude
        if params.line_spacing <= 0:
            update["line_spacing"] = self.settings.default_line_spacing
        if update:
            logger.warning(f"Polyline: non-positive parameters replaced with defaults {update}")
            params = params.model_copy(update=update)
        return effective_parameters(params)

    def iter_points(self, shape: ShapeDescriptor, params: GenerationParameters) -> Iterator[PathPoint]:
        coordinates = list(shape.boundary)
        logger.debug(f"Polyline {shape.id}: {len(coordinates)} coordinates")

        if not coordinates:
            return
        if len(coordinates) == 1:
            only = coordinates[0]
            yield PathPoint(only.latitude, only.longitude)
            return

        if is_closed(coordinates):
            yield from self._cover_area(shape.id, coordinates[:-1], params)
        else:
            yield from self._follow_path(coordinates, params)

    def _follow_path(self, coordinates: list[Coordinate], params: GenerationParameters) -> Iterator[PathPoint]:
        heading = 0.0

        if params.use_endpoints_only:
            for i, vertex in enumerate(coordinates):
                if i + 1 < len(coordinates):
                    following = coordinates[i + 1]
                    heading = initial_bearing(
                        vertex.latitude, vertex.longitude, following.latitude, following.longitude
                    )
                yield PathPoint(vertex.latitude, vertex.longitude, heading=heading)
            return

        spacing = self.photo_spacing(params)
        for start, end in zip(coordinates, coordinates[1:]):
            heading = initial_bearing(start.latitude, start.longitude, end.latitude, end.longitude)
            count = samples_along(
                haversine_distance(start.latitude, start.longitude, end.latitude, end.longitude), spacing
            )
            # The segment's end vertex is emitted as the next segment's start
            for t in list(fractions(count))[:-1]:
                yield PathPoint(
                    lerp(start.latitude, end.latitude, t),
                    lerp(start.longitude, end.longitude, t),
                    heading=heading,
                )

        last = coordinates[-1]
        yield PathPoint(last.latitude, last.longitude, heading=heading)

    def _cover_area(
        self, shape_id: str, ring: list[Coordinate], params: GenerationParameters
    ) -> Iterator[PathPoint]:
        if params.line_spacing <= 0:
            logger.warning(f"Polyline {shape_id}: line spacing {params.line_spacing} m is not positive")
            return
        if self_intersections(ring):
            logger.warning(f"Polyline {shape_id} is self-intersecting; covering it with the even-odd rule")

        box = bounding_box(ring)
        along_latitude = not params.is_north_south
        if along_latitude:
            step = meters_to_latitude_degrees(params.line_spacing)
            positions = scan_positions(box.min_lat, box.max_lat, step)
        else:
            step = meters_to_degrees(params.line_spacing, box.min_lat)
            positions = scan_positions(box.min_lng, box.max_lng, step)
        if step <= 0:
            logger.warning(f"Polyline {shape_id}: line spacing collapses to zero degrees at latitude {box.min_lat}")
            return

        spacing = self.photo_spacing(params)
        line_count = 0
        for value in positions:
            value, crossings = self._even_crossings(shape_id, ring, value, step, along_latitude)
            intervals = [
                (lo + INSET_DEG, hi - INSET_DEG)
                for lo, hi in zip(crossings[0::2], crossings[1::2])
                if hi - lo > 2 * INSET_DEG
            ]
            if not intervals:
                continue

            if line_count % 2:
                intervals = [(hi, lo) for lo, hi in reversed(intervals)]

            for a, b in intervals:
                start = (value, a) if along_latitude else (a, value)
                end = (value, b) if along_latitude else (b, value)
                yield from self._interval(start, end, spacing, params.use_endpoints_only)
            line_count += 1

    @staticmethod
    def _even_crossings(
        shape_id: str, ring: list[Coordinate], value: float, step: float, along_latitude: bool
    ) -> tuple[float, list[float]]:
        crossings = scanline_crossings(ring, value, along_latitude=along_latitude)
        if len(crossings) % 2 == 0:
            return value, crossings

        nudged = value + step * NUDGE
        crossings = scanline_crossings(ring, nudged, along_latitude=along_latitude)
        if len(crossings) % 2 == 0:
            return nudged, crossings

        logger.warning(f"Polyline {shape_id}: odd crossing count at scan line {value}, line skipped")
        return value, []

    @staticmethod
    def _interval(
        start: tuple[float, float], end: tuple[float, float], spacing: float, endpoints_only: bool
    ) -> Iterator[PathPoint]:
        heading = initial_bearing(*start, *end)
        if endpoints_only:
            yield PathPoint(*start, heading=heading)
            yield PathPoint(*end, heading=heading)
            return

        count = samples_along(haversine_distance(*start, *end), spacing)
        for t in fractions(count):
            yield PathPoint(lerp(start[0], end[0], t), lerp(start[1], end[1], t), heading=heading)
