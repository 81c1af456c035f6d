"""Camera footprint calculations.

Ground footprint follows the usual pinhole relation
``footprint = sensor_mm * altitude_m / focal_length_mm``; line spacing and the
distance between photos are the footprint reduced by the overlap.
"""

from __future__ import annotations

from pydantic import BaseModel
from loguru import logger

from .models import GenerationParameters


class CameraFootprint(BaseModel):
    ground_width_m: float
    ground_height_m: float
    line_spacing_m: float
    photo_distance_m: float


def footprint(params: GenerationParameters) -> CameraFootprint | None:
    """Ground coverage of one photo, or None without complete camera geometry."""
    if not (
        params.focal_length > 0
        and params.sensor_width > 0
        and params.sensor_height > 0
        and params.overlap > 0
    ):
        return None

    ground_width = params.sensor_width * params.altitude / params.focal_length
    ground_height = params.sensor_height * params.altitude / params.focal_length
    keep = 1 - params.overlap / 100.0

    return CameraFootprint(
        ground_width_m=ground_width,
        ground_height_m=ground_height,
        line_spacing_m=ground_width * keep,
        photo_distance_m=ground_height * keep,
    )


def effective_parameters(params: GenerationParameters) -> GenerationParameters:
    """Apply camera geometry to line spacing, speed and photo interval.

    Speed is only recalculated when the user did not set it; otherwise the
    photo interval is adjusted so that ``speed * photo_interval`` matches the
    distance between photos.
    """
    fp = footprint(params)
    if fp is None:
        return params

    update: dict[str, float] = {"line_spacing": fp.line_spacing_m}
    if not params.manual_speed_set and params.photo_interval > 0:
        update["speed"] = fp.photo_distance_m / params.photo_interval
    elif params.speed > 0:
        update["photo_interval"] = fp.photo_distance_m / params.speed

    logger.debug(
        f"Camera footprint {fp.ground_width_m:.1f}x{fp.ground_height_m:.1f} m: "
        f"line spacing {fp.line_spacing_m:.1f} m, photo distance {fp.photo_distance_m:.1f} m"
    )
    return params.model_copy(update=update)
