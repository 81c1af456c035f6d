"""Polygon coverage by scan lines and point-in-polygon filtering."""

from __future__ import annotations

import math
from typing import Iterator, Sequence

from loguru import logger

from ..camera import footprint
from ..geometry import (
    bounding_box,
    is_point_in_polygon,
    meters_to_degrees,
    meters_to_latitude_degrees,
    scanline_crossings,
    self_intersections,
)
from ..models import Coordinate, GenerationParameters, ShapeDescriptor, ShapeKind, WaypointActions
from .base import PathPoint, ShapeStrategy, scan_positions

# Samples per line spacing along each scan line
SUBSTEPS = 10


def open_ring(coordinates: list[Coordinate]) -> list[Coordinate]:
    """Drop an explicit closing vertex, if any."""
    if len(coordinates) > 1 and coordinates[0] == coordinates[-1]:
        return coordinates[:-1]
    return coordinates


def crossing_intervals(
    ring: Sequence[Coordinate], value: float, *, along_latitude: bool
) -> list[tuple[float, float]]:
    """Spans of a scan line that lie inside ``ring``, paired from its crossings."""
    crossings = scanline_crossings(ring, value, along_latitude=along_latitude)
    if not crossings:
        return []
    if len(crossings) % 2:
        return [(crossings[0], crossings[-1])]
    return list(zip(crossings[0::2], crossings[1::2]))


def sweep(
    start: float, stop: float, step: float, reverse: bool, intervals: Sequence[tuple[float, float]]
) -> Iterator[float]:
    """Sample positions ``start + i * step`` (``stop - i * step`` when reversed) near ``intervals``.

    Only the samples within one step of an interval are produced, so the cost
    follows the polygon's extent on the line rather than the bounding box.
    Callers still test each sample with :func:`is_point_in_polygon`.
    """
    if step <= 0 or stop < start:
        return
    count = math.floor((stop - start) / step + 1e-9) + 1
    origin, direction = (stop, -1.0) if reverse else (start, 1.0)

    spans = []
    for low, high in intervals:
        first = (low - origin) * direction / step
        last = (high - origin) * direction / step
        if first > last:
            first, last = last, first
        spans.append((max(0, math.floor(first) - 1), min(count - 1, math.ceil(last) + 1)))
    spans.sort()

    next_index = 0
    for first, last in spans:
        for i in range(max(first, next_index), last + 1):
            yield origin + direction * i * step
        next_index = max(next_index, last + 1)


class PolygonStrategy(ShapeStrategy):
    """Scan lines over the bounding box, keeping samples inside the polygon.

    Samples sit on a fixed grid of ``line_spacing / SUBSTEPS`` along each line,
    visited only around the spans where the line crosses the ring.

    Here ``photo_interval`` is a waypoint stride: the first waypoint of each
    line and every ``photo_interval``-th one after it get the ``takePhoto``
    action, the rest keep the request's base action.
    """

    kind = ShapeKind.POLYGON

    def resolve_parameters(self, params: GenerationParameters) -> GenerationParameters:
        # Only the line spacing follows the camera; the stride is the caller's
        fp = footprint(params)
        if fp is None:
            return params
        return params.model_copy(update={"line_spacing": fp.line_spacing_m})

    def iter_points(self, shape: ShapeDescriptor, params: GenerationParameters) -> Iterator[PathPoint]:
        ring = open_ring(list(shape.boundary))
        if len(ring) < 3:
            return
        if params.line_spacing <= 0:
            logger.warning(f"Polygon {shape.id}: line spacing {params.line_spacing} m is not positive")
            return
        if self_intersections(ring):
            logger.warning(f"Polygon {shape.id} is self-intersecting; covering it with the even-odd rule")

        box = bounding_box(ring)
        lat_step = meters_to_latitude_degrees(params.line_spacing)
        lng_step = meters_to_degrees(params.line_spacing, box.min_lat)
        if lat_step <= 0 or lng_step <= 0:
            logger.warning(f"Polygon {shape.id}: line spacing collapses to zero degrees at latitude {box.min_lat}")
            return

        stride = int(params.photo_interval)
        line_count = 0

        if params.is_north_south:
            for lng in scan_positions(box.min_lng, box.max_lng, lng_step):
                reverse = line_count % 2 == 1
                heading = 180.0 if reverse else 0.0
                position = 0
                spans = crossing_intervals(ring, lng, along_latitude=False)
                for lat in sweep(box.min_lat, box.max_lat, lat_step / SUBSTEPS, reverse, spans):
                    if is_point_in_polygon(ring, lat, lng):
                        yield PathPoint(lat, lng, heading=heading, action=self._action(position, stride))
                        position += 1
                # Lines without interior points do not flip the direction
                if position:
                    line_count += 1
        else:
            for lat in scan_positions(box.min_lat, box.max_lat, lat_step):
                reverse = line_count % 2 == 1
                heading = 270.0 if reverse else 90.0
                position = 0
                spans = crossing_intervals(ring, lat, along_latitude=True)
                for lng in sweep(box.min_lng, box.max_lng, lng_step / SUBSTEPS, reverse, spans):
                    if is_point_in_polygon(ring, lat, lng):
                        yield PathPoint(lat, lng, heading=heading, action=self._action(position, stride))
                        position += 1
                if position:
                    line_count += 1

    @staticmethod
    def _action(position: int, stride: int) -> str | None:
        if stride > 0 and position % stride == 0:
            return WaypointActions.TAKE_PHOTO
        return None
