"""Pydantic data models for the waypoint planner."""

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class WaypointActions:
    """Action tags understood by the mission-file exporter."""

    NO_ACTION = "noAction"
    TAKE_PHOTO = "takePhoto"
    START_RECORD = "startRecord"
    STOP_RECORD = "stopRecord"


class ShapeKind(str, Enum):
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    POLYGON = "polygon"
    POLYLINE = "polyline"


class Coordinate(BaseModel):
    """A WGS-84 position. ``radius`` is only meaningful for a circle centre."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, allow_inf_nan=False)

    latitude: float = Field(alias="lat", ge=-90.0, le=90.0)
    longitude: float = Field(alias="lng", ge=-180.0, le=180.0)
    radius: float = 0.0


class ShapeDescriptor(BaseModel):
    """A drawn shape as sent by the map client.

    Coordinate requirements per kind:
    - rectangle: 2 opposite corners (only the first two are used)
    - circle: 1 centre point plus ``radius`` in meters
    - polygon: 3+ vertices
    - polyline: 1+ vertices; first == last (4+ points) makes it a closed area
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = "1"
    kind: ShapeKind = Field(alias="type")
    boundary: list[Coordinate] = Field(default_factory=list, alias="coordinates")
    radius: float = 0.0


class GenerationParameters(BaseModel):
    """Flight parameters shared by every shape of a request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    altitude: float = 50.0
    speed: float = 5.0
    line_spacing: float = Field(20.0, alias="lineSpacing")
    starting_index: int = Field(1, alias="startingIndex")
    action: str = WaypointActions.NO_ACTION
    photo_interval: float = Field(3.0, alias="photoInterval")
    use_endpoints_only: bool = Field(False, alias="useEndpointsOnly")
    is_north_south: bool = Field(False, alias="isNorthSouth")
    unit_type: int = Field(0, alias="unitType")

    # Camera geometry; all four must be positive to take effect
    focal_length: float = Field(0.0, alias="focalLength")
    sensor_width: float = Field(0.0, alias="sensorWidth")
    sensor_height: float = Field(0.0, alias="sensorHeight")
    overlap: float = 0.0
    manual_speed_set: bool = Field(False, alias="manualSpeedSet")


class Waypoint(BaseModel):
    """A single generated waypoint. ``heading`` is degrees clockwise from north."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    index: int
    latitude: float = Field(alias="lat")
    longitude: float = Field(alias="lng")
    altitude: float = Field(alias="alt")
    speed: float
    heading: float = 0.0
    action: str = WaypointActions.NO_ACTION


class Leg(BaseModel):
    """The flight leg between two consecutive waypoints."""

    leg: str
    start_index: int
    end_index: int
    heading: float
    length_m: float
    cumulative_km_start: float
    cumulative_km_end: float
    duration_s: float | None = None


class MissionSummary(BaseModel):
    """Aggregate figures for a generated waypoint list."""

    waypoint_count: int
    photo_count: int
    total_distance_m: float
    estimated_duration_s: float | None = None


class MissionResult(BaseModel):
    """Waypoints plus their summary."""

    waypoints: list[Waypoint]
    legs: list[Leg]
    summary: MissionSummary


class ShapesRequest(BaseModel):
    """Request body of the shape-aware endpoints."""

    shapes: list[ShapeDescriptor]
    parameters: GenerationParameters = Field(default_factory=GenerationParameters)


class LegacyWaypointRequest(BaseModel):
    """Flat single-shape request body of older clients."""

    model_config = ConfigDict(populate_by_name=True)

    bounds: list[Coordinate] = Field(default_factory=list)
    bounds_type: str = Field("rectangle", alias="boundsType")
    altitude: float = 50.0
    speed: float = 5.0
    angle: float = 0.0
    line_spacing: float = Field(20.0, validation_alias=AliasChoices("lineSpacing", "distance", "line_spacing"))
    photo_interval: float = Field(0.0, validation_alias=AliasChoices("photoInterval", "interval", "photo_interval"))
    action: str = Field(
        WaypointActions.NO_ACTION, validation_alias=AliasChoices("allPointsAction", "action")
    )
    starting_index: int = Field(1, alias="startingIndex")
    use_endpoints_only: bool = Field(False, alias="useEndpointsOnly")
    is_north_south: bool = Field(False, alias="isNorthSouth")
    unit_type: int = Field(0, alias="unitType")
