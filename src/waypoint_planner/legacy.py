"""Shape-unaware grid generator kept as the fallback of the compatibility path."""

from __future__ import annotations

import math
from typing import Iterator, Sequence

from loguru import logger

from .config import Settings, settings as default_settings
from .geometry import bounding_box, initial_bearing
from .models import Coordinate, GenerationParameters, ShapeDescriptor, ShapeKind, Waypoint
from .strategies.base import scan_positions

# Meters per degree of latitude used by the old planner
METERS_PER_DEGREE = 111_320.0


class LegacyGenerator:
    """Boustrophedon over the bounding box of the first shape.

    Every scan line contributes its two ends, flown in alternating directions.
    A circle is treated as its bounding square (centre plus or minus radius).
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or default_settings

    def generate(self, shapes: Sequence[ShapeDescriptor], params: GenerationParameters) -> list[Waypoint]:
        if not shapes:
            return []
        corners = self._extent(shapes[0])
        if not corners:
            return []
        if params.line_spacing <= 0:
            logger.warning(f"Legacy grid: line spacing {params.line_spacing} m is not positive")
            return []

        positions = list(self._grid(corners, params))
        if not positions:
            return []
        logger.info(f"Legacy grid generated {len(positions)} waypoints")

        waypoints = []
        heading = 0.0
        for offset, (lat, lng) in enumerate(positions):
            if offset + 1 < len(positions):
                heading = initial_bearing(lat, lng, *positions[offset + 1])
            waypoints.append(
                Waypoint(
                    index=params.starting_index + offset,
                    latitude=lat,
                    longitude=lng,
                    altitude=params.altitude,
                    speed=params.speed,
                    heading=heading,
                    action=params.action,
                )
            )
        return waypoints

    @staticmethod
    def _extent(shape: ShapeDescriptor) -> list[Coordinate]:
        if shape.kind is ShapeKind.CIRCLE:
            if not shape.boundary:
                return []
            center = shape.boundary[0]
            radius = shape.radius if shape.radius > 0 else center.radius
            if radius <= 0:
                return []
            dlat = radius / METERS_PER_DEGREE
            cos_lat = math.cos(math.radians(center.latitude))
            dlng = radius / (METERS_PER_DEGREE * cos_lat) if cos_lat > 0 else 0.0
            # The square is clipped to valid degrees near the poles and the antimeridian
            return [
                Coordinate(
                    latitude=max(-90.0, center.latitude - dlat),
                    longitude=max(-180.0, center.longitude - dlng),
                ),
                Coordinate(
                    latitude=min(90.0, center.latitude + dlat),
                    longitude=min(180.0, center.longitude + dlng),
                ),
            ]
        return list(shape.boundary)

    def _grid(self, corners: list[Coordinate], params: GenerationParameters) -> Iterator[tuple[float, float]]:
        box = bounding_box(corners)
        limit = self.settings.max_waypoints_per_shape

        if params.is_north_south:
            cos_lat = math.cos(math.radians(box.min_lat))
            if cos_lat <= 0:
                return
            step = params.line_spacing / (METERS_PER_DEGREE * cos_lat)
            lines = (
                ((box.min_lat, lng), (box.max_lat, lng))
                for lng in scan_positions(box.min_lng, box.max_lng, step)
            )
        else:
            step = params.line_spacing / METERS_PER_DEGREE
            lines = (
                ((lat, box.min_lng), (lat, box.max_lng))
                for lat in scan_positions(box.min_lat, box.max_lat, step)
            )

        for number, (start, end) in enumerate(lines):
            if 2 * number >= limit:
                logger.warning(f"Legacy grid: waypoint limit {limit} reached, grid truncated")
                return
            if number % 2:
                start, end = end, start
            yield start
            yield end
