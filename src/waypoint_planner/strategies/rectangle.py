"""Boustrophedon coverage of an axis-aligned rectangle."""

from __future__ import annotations

from typing import Iterable, Iterator

from loguru import logger

from ..geometry import haversine_distance, meters_to_degrees, meters_to_latitude_degrees
from ..models import GenerationParameters, ShapeDescriptor, ShapeKind
from .base import PathPoint, ShapeStrategy, fractions, lerp, samples_along, scan_positions

Point = tuple[float, float]
ScanLine = tuple[Point, Point]

NORTH_SOUTH_HEADINGS = (0.0, 180.0)
EAST_WEST_HEADINGS = (90.0, 270.0)


class RectangleStrategy(ShapeStrategy):
    """Zig-zag over the box spanned by the shape's first two coordinates.

    Columns (``is_north_south``) are spaced in longitude and flown north/south;
    rows are spaced in latitude and flown east/west.
    """

    kind = ShapeKind.RECTANGLE

    def iter_points(self, shape: ShapeDescriptor, params: GenerationParameters) -> Iterator[PathPoint]:
        if len(shape.boundary) < 2:
            return
        if params.line_spacing <= 0:
            logger.warning(f"Rectangle {shape.id}: line spacing {params.line_spacing} m is not positive")
            return

        a, b = shape.boundary[0], shape.boundary[1]
        min_lat, max_lat = sorted((a.latitude, b.latitude))
        min_lng, max_lng = sorted((a.longitude, b.longitude))

        if params.is_north_south:
            step = meters_to_degrees(params.line_spacing, min_lat)
            lines: Iterable[ScanLine] = (
                ((min_lat, lng), (max_lat, lng)) for lng in scan_positions(min_lng, max_lng, step)
            )
            headings = NORTH_SOUTH_HEADINGS
        else:
            step = meters_to_latitude_degrees(params.line_spacing)
            lines = (((lat, min_lng), (lat, max_lng)) for lat in scan_positions(min_lat, max_lat, step))
            headings = EAST_WEST_HEADINGS

        if step <= 0:
            logger.warning(f"Rectangle {shape.id}: line spacing collapses to zero degrees at latitude {min_lat}")
            return

        if params.use_endpoints_only:
            yield from self._endpoint_pairs(lines, headings)
        else:
            yield from self._sampled_lines(lines, headings, self.photo_spacing(params))

    @staticmethod
    def _endpoint_pairs(lines: Iterable[ScanLine], headings: tuple[float, float]) -> Iterator[PathPoint]:
        # Lines are taken two at a time: the first flown forward, the second
        # backward, so the turn between them needs no connecting waypoint.
        forward, backward = headings
        lines = iter(lines)
        for start, end in lines:
            yield PathPoint(*start, heading=forward)
            yield PathPoint(*end, heading=forward)

            following = next(lines, None)
            if following is None:
                return
            start, end = following
            yield PathPoint(*end, heading=backward)
            yield PathPoint(*start, heading=backward)

    @staticmethod
    def _sampled_lines(
        lines: Iterable[ScanLine], headings: tuple[float, float], spacing_m: float
    ) -> Iterator[PathPoint]:
        for number, (start, end) in enumerate(lines):
            heading = headings[number % 2]
            if number % 2:
                start, end = end, start

            count = samples_along(haversine_distance(*start, *end), spacing_m)
            for t in fractions(count):
                yield PathPoint(lerp(start[0], end[0], t), lerp(start[1], end[1], t), heading=heading)
