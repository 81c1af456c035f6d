"""Legs between consecutive waypoints and mission totals."""

from .geometry import haversine_distance, initial_bearing
from .models import Leg, MissionResult, MissionSummary, Waypoint, WaypointActions


def compute_legs(waypoints: list[Waypoint]) -> list[Leg]:
    """Compute legs between consecutive waypoints with distances and cumulative km.

    A leg is flown at the speed of the waypoint it starts from; its duration is
    None when that speed is not positive.
    """
    legs: list[Leg] = []
    cumulative_km = 0.0

    for i in range(1, len(waypoints)):
        w1, w2 = waypoints[i - 1], waypoints[i]
        length_m = haversine_distance(w1.latitude, w1.longitude, w2.latitude, w2.longitude)
        length_km = length_m / 1000

        duration_s = None
        if w1.speed > 0:
            duration_s = length_m / w1.speed

        leg = Leg(
            leg=f"{w1.index} -> {w2.index}",
            start_index=w1.index,
            end_index=w2.index,
            heading=initial_bearing(w1.latitude, w1.longitude, w2.latitude, w2.longitude),
            length_m=length_m,
            cumulative_km_start=cumulative_km,
            cumulative_km_end=cumulative_km + length_km,
            duration_s=duration_s,
        )
        legs.append(leg)
        cumulative_km += length_km

    return legs


def summarize(waypoints: list[Waypoint], legs: list[Leg] | None = None) -> MissionSummary:
    if legs is None:
        legs = compute_legs(waypoints)

    durations = [leg.duration_s for leg in legs]
    estimated = None if None in durations else sum(durations)

    return MissionSummary(
        waypoint_count=len(waypoints),
        photo_count=sum(1 for w in waypoints if w.action == WaypointActions.TAKE_PHOTO),
        total_distance_m=sum(leg.length_m for leg in legs),
        estimated_duration_s=estimated,
    )


def build_result(waypoints: list[Waypoint]) -> MissionResult:
    legs = compute_legs(waypoints)
    return MissionResult(waypoints=waypoints, legs=legs, summary=summarize(waypoints, legs))
