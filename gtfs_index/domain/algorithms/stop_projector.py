from __future__ import annotations

from typing import Sequence

from gtfs_index.domain.algorithms.geo_utils import (
    closest_point_on_segment,
    cumulative_distances_km,
    haversine_distance_km,
)
from gtfs_index.domain.models import GeoPoint
from gtfs_index.domain.models.spatial import ProjectionTable, StopProjection


def snap_to_polyline(
    point: GeoPoint,
    shape: tuple[GeoPoint, ...],
    cumulative_km: tuple[float, ...],
) -> tuple[GeoPoint, int, float] | None:
    """Nearest point on the polyline, its segment index and distance along.

    Segment k spans vertices k and k+1. On equal distances the earlier
    segment wins. Returns None for a shape with fewer than two vertices.
    """

    if len(shape) < 2:
        return None

    best: tuple[GeoPoint, int, float] | None = None
    best_d = float("inf")
    for k in range(len(shape) - 1):
        snapped, _ = closest_point_on_segment(point, shape[k], shape[k + 1])
        d = haversine_distance_km(point, snapped)
        if d < best_d:
            best_d = d
            along = cumulative_km[k] + haversine_distance_km(shape[k], snapped)
            best = (snapped, k, along)
    return best


def project_stops(
    shape_id: str,
    shape: tuple[GeoPoint, ...],
    stops: Sequence[tuple[str, GeoPoint | None]],
) -> ProjectionTable:
    """Project a trip's ordered stops onto its shape.

    A stop visited more than once keeps its first projection. Stops without
    coordinates, or any stop on a degenerate shape, map to None.
    """

    cumulative_km = cumulative_distances_km(shape)
    projections: dict[str, StopProjection | None] = {}
    previous_stop_id: str | None = None

    for stop_id, location in stops:
        if stop_id not in projections:
            snapped = (
                snap_to_polyline(location, shape, cumulative_km)
                if location is not None
                else None
            )
            projections[stop_id] = (
                StopProjection(
                    snapped_coords=snapped[0],
                    snapped_dist_along_km=snapped[2],
                    segment_num=snapped[1],
                    previous_stop_id=previous_stop_id,
                )
                if snapped is not None
                else None
            )
        previous_stop_id = stop_id

    return ProjectionTable(
        shape_id=shape_id,
        origin_stop_id=stops[0][0] if stops else None,
        destination_stop_id=stops[-1][0] if stops else None,
        projections=projections,
    )
