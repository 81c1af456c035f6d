"""Geodesic and planar geometry primitives shared by every shape strategy.

Distances and bearings are spherical, using the WGS-84 equatorial radius.
Polygon tests treat latitude/longitude degrees as planar ``y``/``x``, which is
what the map client does when it draws the shapes.
"""

from __future__ import annotations

import math
from typing import NamedTuple, Sequence

from .models import Coordinate

EARTH_RADIUS_M = 6_378_137.0
EPSILON = 1e-10


class BoundingBox(NamedTuple):
    min_lat: float
    min_lng: float
    max_lat: float
    max_lng: float


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in meters."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def _meters_per_degree(at_latitude: float) -> float:
    return EARTH_RADIUS_M * math.cos(math.radians(at_latitude)) * math.pi / 180.0


def degrees_to_meters(degrees: float, at_latitude: float) -> float:
    """Convert a longitude span at ``at_latitude`` to meters."""
    return degrees * _meters_per_degree(at_latitude)


def meters_to_degrees(meters: float, at_latitude: float) -> float:
    """Convert meters to a longitude span at ``at_latitude``.

    Returns 0 near the poles, where a degree of longitude has no length.
    """
    per_degree = _meters_per_degree(at_latitude)
    if per_degree < EPSILON:
        return 0.0
    return meters / per_degree


def meters_to_latitude_degrees(meters: float) -> float:
    """Convert meters to a latitude span (meridian degrees do not shrink)."""
    return meters_to_degrees(meters, 0.0)


def initial_bearing(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Initial great-circle bearing from point 1 to point 2, in [0, 360)."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_lng = math.radians(lng2 - lng1)
    y = math.sin(d_lng) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lng)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def destination_point(lat: float, lng: float, bearing: float, distance: float) -> tuple[float, float]:
    """Point reached by travelling ``distance`` meters along ``bearing`` on the sphere."""
    delta = distance / EARTH_RADIUS_M
    theta = math.radians(bearing)
    phi1 = math.radians(lat)
    lambda1 = math.radians(lng)

    sin_phi2 = math.sin(phi1) * math.cos(delta) + math.cos(phi1) * math.sin(delta) * math.cos(theta)
    phi2 = math.asin(max(-1.0, min(1.0, sin_phi2)))
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * sin_phi2,
    )

    lng2 = (math.degrees(lambda2) + 540.0) % 360.0 - 180.0
    return math.degrees(phi2), lng2


def bounding_box(coordinates: Sequence[Coordinate]) -> BoundingBox:
    lats = [c.latitude for c in coordinates]
    lngs = [c.longitude for c in coordinates]
    return BoundingBox(min(lats), min(lngs), max(lats), max(lngs))


def is_point_in_polygon(polygon: Sequence[Coordinate], lat: float, lng: float) -> bool:
    """Even-odd ray casting. The ring does not need to be explicitly closed."""
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        pi, pj = polygon[i], polygon[j]
        if (pi.latitude > lat) != (pj.latitude > lat) and lng < (
            (pj.longitude - pi.longitude) * (lat - pi.latitude) / (pj.latitude - pi.latitude)
            + pi.longitude
        ):
            inside = not inside
        j = i
    return inside


def orientation(p: Coordinate, q: Coordinate, r: Coordinate) -> int:
    """0 if collinear, 1 if clockwise, 2 if counter-clockwise."""
    val = (q.latitude - p.latitude) * (r.longitude - q.longitude) - (q.longitude - p.longitude) * (
        r.latitude - q.latitude
    )
    if abs(val) < EPSILON:
        return 0
    return 1 if val > 0 else 2


def on_segment(p: Coordinate, q: Coordinate, r: Coordinate) -> bool:
    """Whether ``q`` lies within the bounding box of segment ``pr``."""
    return (
        min(p.longitude, r.longitude) <= q.longitude <= max(p.longitude, r.longitude)
        and min(p.latitude, r.latitude) <= q.latitude <= max(p.latitude, r.latitude)
    )


def segments_intersect(p1: Coordinate, q1: Coordinate, p2: Coordinate, q2: Coordinate) -> bool:
    o1 = orientation(p1, q1, p2)
    o2 = orientation(p1, q1, q2)
    o3 = orientation(p2, q2, p1)
    o4 = orientation(p2, q2, q1)

    if o1 != o2 and o3 != o4:
        return True

    # Collinear special cases
    if o1 == 0 and on_segment(p1, p2, q1):
        return True
    if o2 == 0 and on_segment(p1, q2, q1):
        return True
    if o3 == 0 and on_segment(p2, p1, q2):
        return True
    if o4 == 0 and on_segment(p2, q1, q2):
        return True
    return False


def find_intersection(
    p1: Coordinate, q1: Coordinate, p2: Coordinate, q2: Coordinate
) -> Coordinate | None:
    """Intersection point of segments ``p1q1`` and ``p2q2``.

    None when the segments are parallel (including collinear overlap) or do not
    meet.
    """
    d1x = q1.longitude - p1.longitude
    d1y = q1.latitude - p1.latitude
    d2x = q2.longitude - p2.longitude
    d2y = q2.latitude - p2.latitude

    denom = d1x * d2y - d1y * d2x
    if abs(denom) <= EPSILON * math.hypot(d1x, d1y) * math.hypot(d2x, d2y):
        return None

    ex = p2.longitude - p1.longitude
    ey = p2.latitude - p1.latitude
    t = (ex * d2y - ey * d2x) / denom
    u = (ex * d1y - ey * d1x) / denom
    if not (-EPSILON <= t <= 1 + EPSILON and -EPSILON <= u <= 1 + EPSILON):
        return None

    return Coordinate(latitude=p1.latitude + t * d1y, longitude=p1.longitude + t * d1x)


def _edges(ring: Sequence[Coordinate]):
    n = len(ring)
    for i in range(n):
        yield i, ring[i - 1], ring[i]


def self_intersections(ring: Sequence[Coordinate]) -> list[Coordinate]:
    """Points where non-adjacent edges of a ring cross each other."""
    n = len(ring)
    if n < 4:
        return []

    edges = list(_edges(ring))
    points: list[Coordinate] = []
    for a in range(n):
        for b in range(a + 1, n):
            # Skip edges sharing a vertex (neighbours, and the wrap-around pair)
            if b - a == 1 or (a == 0 and b == n - 1):
                continue
            _, p1, q1 = edges[a]
            _, p2, q2 = edges[b]
            if segments_intersect(p1, q1, p2, q2):
                hit = find_intersection(p1, q1, p2, q2)
                points.append(hit if hit is not None else p2)
    return points


def is_simple_ring(ring: Sequence[Coordinate]) -> bool:
    return not self_intersections(ring)


def scanline_crossings(ring: Sequence[Coordinate], value: float, *, along_latitude: bool) -> list[float]:
    """Sorted positions where a scan line crosses the ring.

    With ``along_latitude`` the scan line is the parallel ``latitude == value``
    and the result holds longitudes; otherwise it is the meridian
    ``longitude == value`` and the result holds latitudes.

    An edge counts when ``min <= value < max`` along the scan axis, the same
    half-open rule as :func:`is_point_in_polygon`, so a closed ring always
    produces an even number of crossings and edges parallel to the scan line
    are ignored.
    """
    crossings: list[float] = []
    n = len(ring)
    if n < 3:
        return crossings

    j = n - 1
    for i in range(n):
        pi, pj = ring[i], ring[j]
        if along_latitude:
            yi, yj, xi, xj = pi.latitude, pj.latitude, pi.longitude, pj.longitude
        else:
            yi, yj, xi, xj = pi.longitude, pj.longitude, pi.latitude, pj.latitude
        if (yi > value) != (yj > value):
            crossings.append((xj - xi) * (value - yi) / (yj - yi) + xi)
        j = i

    crossings.sort()
    return crossings
