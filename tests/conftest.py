import pytest

from waypoint_planner import (
    Coordinate,
    GenerationParameters,
    ShapeDescriptor,
    ShapeKind,
    WaypointOrchestrator,
)
from waypoint_planner.config import Settings


def coord(lat: float, lng: float, radius: float = 0.0) -> Coordinate:
    return Coordinate(latitude=lat, longitude=lng, radius=radius)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def params():
    return GenerationParameters(
        altitude=60.0,
        speed=10.0,
        line_spacing=100.0,
        photo_interval=3.0,
        starting_index=1,
    )


@pytest.fixture
def small_rectangle():
    # ~1.1 km north-south, ~1.1 km east-west
    return ShapeDescriptor(
        id="rect",
        kind=ShapeKind.RECTANGLE,
        boundary=[coord(60.0, 24.0), coord(60.01, 24.02)],
    )


@pytest.fixture
def square_ring():
    return [coord(60.0, 24.0), coord(60.0, 24.01), coord(60.005, 24.01), coord(60.005, 24.0)]


@pytest.fixture
def square_polygon(square_ring):
    return ShapeDescriptor(id="square", kind=ShapeKind.POLYGON, boundary=square_ring)


@pytest.fixture
def l_polygon():
    # Concave: the north-east quarter is cut away
    return ShapeDescriptor(
        id="ell",
        kind=ShapeKind.POLYGON,
        boundary=[
            coord(60.0, 24.0),
            coord(60.0, 24.02),
            coord(60.005, 24.02),
            coord(60.005, 24.01),
            coord(60.01, 24.01),
            coord(60.01, 24.0),
        ],
    )


@pytest.fixture
def closed_square_polyline(square_ring):
    return ShapeDescriptor(
        id="loop",
        kind=ShapeKind.POLYLINE,
        boundary=[*square_ring, square_ring[0]],
    )


@pytest.fixture
def open_polyline():
    return ShapeDescriptor(
        id="line",
        kind=ShapeKind.POLYLINE,
        boundary=[coord(60.0, 24.0), coord(60.5, 24.5), coord(61.0, 25.0)],
    )


@pytest.fixture
def orchestrator(settings):
    return WaypointOrchestrator(settings=settings)
