"""Dispatch a batch of shapes to their strategies with one continuous index."""

from __future__ import annotations

from typing import Mapping, Sequence

from loguru import logger

from .config import Settings, settings as default_settings
from .errors import InvalidInputError
from .models import Coordinate, GenerationParameters, ShapeDescriptor, ShapeKind, Waypoint
from .strategies import (
    CircleStrategy,
    PolygonStrategy,
    PolylineStrategy,
    RectangleStrategy,
    ShapeStrategy,
)


def default_strategies(settings: Settings | None = None) -> dict[ShapeKind, ShapeStrategy]:
    settings = settings or default_settings
    strategies = (
        RectangleStrategy(settings),
        CircleStrategy(settings),
        PolygonStrategy(settings),
        PolylineStrategy(settings),
    )
    return {strategy.kind: strategy for strategy in strategies}


def shapes_from_bounds(
    bounds: Sequence[Coordinate], bounds_type: str, settings: Settings | None = None
) -> list[ShapeDescriptor]:
    """Build the single-shape list behind the old ``bounds``/``boundsType`` call.

    A circle takes ``bounds[0]`` as its centre and that coordinate's radius,
    falling back to ``settings.default_circle_radius``.
    """
    settings = settings or default_settings
    try:
        kind = ShapeKind(bounds_type.strip().lower())
    except ValueError:
        logger.warning(f"Unknown bounds type '{bounds_type}', no shape generated")
        return []

    if kind is ShapeKind.CIRCLE:
        if not bounds:
            return []
        center = bounds[0]
        radius = center.radius if center.radius > 0 else settings.default_circle_radius
        return [ShapeDescriptor(id="1", kind=kind, boundary=[center], radius=radius)]

    return [ShapeDescriptor(id="1", kind=kind, boundary=list(bounds))]


def legacy_parameters(
    action: str,
    unit_type: int,
    altitude: float,
    speed: float,
    line_spacing: float,
    starting_index: int,
    photo_interval: float,
    use_endpoints_only: bool,
    is_north_south: bool,
) -> GenerationParameters:
    return GenerationParameters(
        altitude=altitude,
        speed=speed,
        line_spacing=line_spacing,
        starting_index=starting_index,
        action=action,
        photo_interval=photo_interval,
        use_endpoints_only=use_endpoints_only,
        is_north_south=is_north_south,
        unit_type=unit_type,
    )


class WaypointOrchestrator:
    """Generates waypoints for a list of shapes.

    Each shape is numbered from where the previous one stopped, so the batch
    carries consecutive indices starting at ``params.starting_index``. A shape
    whose strategy fails contributes nothing and the batch continues; invalid
    caller input is re-raised.
    """

    def __init__(
        self,
        strategies: Mapping[ShapeKind, ShapeStrategy] | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or default_settings
        self.strategies = dict(strategies) if strategies is not None else default_strategies(self.settings)

        missing = [kind.value for kind in ShapeKind if kind not in self.strategies]
        if missing:
            raise ValueError(f"No strategy registered for shape kinds: {', '.join(missing)}")

    def generate(self, shapes: Sequence[ShapeDescriptor], params: GenerationParameters) -> list[Waypoint]:
        if not shapes:
            return []

        logger.info(f"Generating waypoints for {len(shapes)} shape(s)")
        waypoints: list[Waypoint] = []
        cursor = params.starting_index

        for shape in shapes:
            strategy = self.strategies[shape.kind]
            shape_params = params.model_copy(update={"starting_index": cursor})
            try:
                generated = strategy.generate(shape, shape_params)
            except InvalidInputError:
                raise
            except Exception:
                logger.exception(f"Failed to generate waypoints for {shape.kind.value} shape {shape.id}")
                continue

            if generated:
                waypoints.extend(generated)
                cursor = max(waypoint.index for waypoint in generated) + 1
            logger.debug(f"{shape.kind.value} shape {shape.id}: {len(generated)} waypoints")

        logger.info(f"Generated {len(waypoints)} waypoints")
        return waypoints

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
        """Old single-shape call signature. ``angle`` is accepted and ignored."""
        params = legacy_parameters(
            action, unit_type, altitude, speed, line_spacing,
            starting_index, photo_interval, use_endpoints_only, is_north_south,
        )
        return self.generate(shapes_from_bounds(bounds, bounds_type, self.settings), params)
