"""Exception types raised by the waypoint planner."""


class WaypointPlannerError(Exception):
    """Base class for planner errors."""


class InvalidInputError(WaypointPlannerError, ValueError):
    """Caller input that has to be corrected upstream.

    These are never swallowed by the per-shape error isolation or the legacy
    fallback.
    """


class AmbiguousCoordinateError(InvalidInputError):
    """A coordinate at or suspiciously near (0, 0)."""

    def __init__(self, latitude: float, longitude: float, context: str = "coordinate"):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(
            f"Ambiguous {context} ({latitude}, {longitude}): at or near (0, 0), "
            "likely a unit or serialization error upstream"
        )
