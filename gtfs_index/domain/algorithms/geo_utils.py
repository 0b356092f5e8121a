from __future__ import annotations

import math

from gtfs_index.domain.models import GeoPoint

EARTH_RADIUS_M = 6371000.0


def haversine_distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters."""

    lat1 = math.radians(a.lat)
    lon1 = math.radians(a.lon)
    lat2 = math.radians(b.lat)
    lon2 = math.radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    s = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    )
    return 2.0 * EARTH_RADIUS_M * math.asin(math.sqrt(min(1.0, s)))


def haversine_distance_km(a: GeoPoint, b: GeoPoint) -> float:
    return haversine_distance_m(a, b) / 1000.0


def cumulative_distances_km(points: tuple[GeoPoint, ...]) -> tuple[float, ...]:
    """Distance along the polyline from its start to each vertex."""

    if not points:
        return ()
    out: list[float] = [0.0]
    total = 0.0
    for a, b in zip(points, points[1:]):
        total += haversine_distance_km(a, b)
        out.append(total)
    return tuple(out)


def closest_point_on_segment(
    point: GeoPoint, start: GeoPoint, end: GeoPoint
) -> tuple[GeoPoint, float]:
    """Foot of the perpendicular from `point` onto segment start-end.

    Returns the snapped point and its fraction along the segment, clamped to
    [0, 1]. The fraction is found in an equirectangular plane centered on the
    segment, which is accurate at stop-spacing scale.
    """

    if start == end:
        return start, 0.0

    k = math.cos(math.radians((start.lat + end.lat) / 2.0))
    dx = (end.lon - start.lon) * k
    dy = end.lat - start.lat
    px = (point.lon - start.lon) * k
    py = point.lat - start.lat

    t = (px * dx + py * dy) / (dx * dx + dy * dy)
    t = max(0.0, min(1.0, t))
    if t == 0.0:
        return start, 0.0
    if t == 1.0:
        return end, 1.0

    snapped = GeoPoint(
        lat=start.lat + t * (end.lat - start.lat),
        lon=start.lon + t * (end.lon - start.lon),
    )
    return snapped, t
