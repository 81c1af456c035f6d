"""Backward compatible entry points with a fallback to the legacy generator."""

from __future__ import annotations

from typing import Protocol, Sequence

from loguru import logger

from .config import Settings, settings as default_settings
from .errors import InvalidInputError
from .legacy import LegacyGenerator
from .models import Coordinate, GenerationParameters, ShapeDescriptor, Waypoint
from .orchestrator import WaypointOrchestrator, legacy_parameters, shapes_from_bounds

__all__ = ["CompatibilityAdapter", "FallbackGenerator", "WaypointGenerator", "shapes_from_bounds"]


class WaypointGenerator(Protocol):
    def generate(self, shapes: Sequence[ShapeDescriptor], params: GenerationParameters) -> list[Waypoint]: ...


class FallbackGenerator:
    """Use ``primary`` and, when it fails or returns nothing, ``fallback``.

    Errors from the fallback itself propagate, as do input errors from either
    generator.
    """

    def __init__(self, primary: WaypointGenerator, fallback: WaypointGenerator):
        self.primary = primary
        self.fallback = fallback

    def generate(self, shapes: Sequence[ShapeDescriptor], params: GenerationParameters) -> list[Waypoint]:
        try:
            waypoints = self.primary.generate(shapes, params)
        except InvalidInputError:
            raise
        except Exception:
            logger.exception("Waypoint generation failed, falling back to the legacy generator")
            return self.fallback.generate(shapes, params)

        if waypoints:
            return waypoints
        logger.warning("Waypoint generation produced no waypoints, falling back to the legacy generator")
        return self.fallback.generate(shapes, params)


class CompatibilityAdapter:
    """The interface older callers use.

    Composes the shape-aware orchestrator with the legacy grid as fallback
    unless another generator is injected.
    """

    def __init__(self, generator: WaypointGenerator | None = None, settings: Settings | None = None):
        self.settings = settings or default_settings
        self.generator = generator or FallbackGenerator(
            WaypointOrchestrator(settings=self.settings), LegacyGenerator(self.settings)
        )

    def generate(self, shapes: Sequence[ShapeDescriptor], params: GenerationParameters) -> list[Waypoint]:
        return self.generator.generate(shapes, params)

    def generate_legacy(
        self,
        action: str,
        unit_type: int,
        altitude: float,
        speed: float,
        angle: float,
        line_spacing: float,
        bounds: Sequence[Coordinate],
        bounds_type: str,
        starting_index: int,
        photo_interval: float = 0.0,
        use_endpoints_only: bool = False,
        is_north_south: bool = False,
    ) -> list[Waypoint]:
        # angle (gimbal pitch) is not used by any generator
        params = legacy_parameters(
            action, unit_type, altitude, speed, line_spacing,
            starting_index, photo_interval, use_endpoints_only, is_north_south,
        )
        shapes = shapes_from_bounds(bounds, bounds_type, self.settings)
        logger.info(f"Legacy request: {bounds_type} with {len(bounds)} bound(s)")
        return self.generate(shapes, params)
