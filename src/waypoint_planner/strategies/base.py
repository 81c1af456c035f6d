"""Common machinery for shape strategies: parameter resolution, numbering, limits."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import ClassVar, Iterator, NamedTuple

from loguru import logger

from ..camera import effective_parameters
from ..config import Settings, settings as default_settings
from ..models import GenerationParameters, ShapeDescriptor, ShapeKind, Waypoint


class PathPoint(NamedTuple):
    """A position on the flight path before it is numbered.

    ``action=None`` means the request's base action.
    """

    latitude: float
    longitude: float
    heading: float = 0.0
    action: str | None = None


class ShapeStrategy(ABC):
    """Turns one shape into an ordered waypoint list.

    Subclasses only yield :class:`PathPoint` objects; numbering, altitude,
    speed and the per-shape waypoint cap are handled here so that every shape
    produces consecutive indices starting at ``params.starting_index``.
    """

    kind: ClassVar[ShapeKind]

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or default_settings

    def resolve_parameters(self, params: GenerationParameters) -> GenerationParameters:
        return effective_parameters(params)

    def generate(self, shape: ShapeDescriptor, params: GenerationParameters) -> list[Waypoint]:
        params = self.resolve_parameters(params)
        limit = self.settings.max_waypoints_per_shape

        waypoints: list[Waypoint] = []
        index = params.starting_index
        for point in self.iter_points(shape, params):
            if len(waypoints) >= limit:
                logger.warning(
                    f"{self.kind.value} shape {shape.id}: waypoint limit {limit} reached, "
                    "path truncated (increase line spacing or photo interval)"
                )
                break
            waypoints.append(
                Waypoint(
                    index=index,
                    latitude=point.latitude,
                    longitude=point.longitude,
                    altitude=params.altitude,
                    speed=params.speed,
                    heading=point.heading,
                    action=point.action or params.action,
                )
            )
            index += 1
        return waypoints

    @abstractmethod
    def iter_points(self, shape: ShapeDescriptor, params: GenerationParameters) -> Iterator[PathPoint]:
        """Yield the path for ``shape`` in flight order."""

    def photo_spacing(self, params: GenerationParameters) -> float:
        """Distance flown between photos, or the minimum sample spacing."""
        spacing = params.speed * params.photo_interval
        if spacing > 0:
            return spacing
        return self.settings.min_sample_spacing


def samples_along(length_m: float, spacing_m: float) -> int:
    """Number of evenly spaced points on a line, always including both ends."""
    return max(2, math.floor(length_m / spacing_m) + 1)


def fractions(count: int) -> Iterator[float]:
    """``count`` evenly spaced fractions from 0 to 1 inclusive."""
    if count == 1:
        yield 0.0
        return
    for i in range(count):
        yield i / (count - 1)


def lerp(a: float, b: float, t: float) -> float:
    # Exact at t == 1 so line ends land on the boundary value
    return b if t >= 1.0 else a + t * (b - a)


def scan_positions(start: float, stop: float, step: float) -> Iterator[float]:
    """Scan line positions ``start, start + step, ...`` not beyond ``stop``.

    Positions are computed from an integer line number so long scans do not
    accumulate floating point drift.
    """
    if step <= 0 or stop < start:
        return
    count = math.floor((stop - start) / step + 1e-9) + 1
    for i in range(count):
        yield start + i * step
