"""Survey waypoint generation for drawn shapes."""

from .adapter import CompatibilityAdapter, FallbackGenerator, shapes_from_bounds
from .errors import AmbiguousCoordinateError, InvalidInputError, WaypointPlannerError
from .kml_reader import read_kmz
from .legacy import LegacyGenerator
from .models import (
    Coordinate,
    GenerationParameters,
    Leg,
    MissionResult,
    MissionSummary,
    ShapeDescriptor,
    ShapeKind,
    Waypoint,
    WaypointActions,
)
from .orchestrator import WaypointOrchestrator
from .reader import detect_crs, read_shapefile
from .summary import compute_legs, summarize

__all__ = [
    "AmbiguousCoordinateError",
    "CompatibilityAdapter",
    "Coordinate",
    "FallbackGenerator",
    "GenerationParameters",
    "InvalidInputError",
    "LegacyGenerator",
    "Leg",
    "MissionResult",
    "MissionSummary",
    "ShapeDescriptor",
    "ShapeKind",
    "Waypoint",
    "WaypointActions",
    "WaypointOrchestrator",
    "WaypointPlannerError",
    "compute_legs",
    "detect_crs",
    "read_kmz",
    "read_shapefile",
    "shapes_from_bounds",
    "summarize",
]
