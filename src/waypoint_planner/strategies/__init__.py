"""Shape-specific waypoint generation strategies."""

from .base import PathPoint, ShapeStrategy
from .circle import CircleStrategy
from .polygon import PolygonStrategy
from .polyline import PolylineStrategy
from .rectangle import RectangleStrategy

__all__ = [
    "CircleStrategy",
    "PathPoint",
    "PolygonStrategy",
    "PolylineStrategy",
    "RectangleStrategy",
    "ShapeStrategy",
]
