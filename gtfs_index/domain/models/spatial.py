from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .geo import GeoPoint

SHAPE_ID_KEY = "__shapeID"
ORIGIN_STOP_ID_KEY = "__originStopID"
DESTINATION_STOP_ID_KEY = "__destinationStopID"


@dataclass(frozen=True, slots=True)
class StopProjection:
    """A stop snapped onto its trip's shape."""

    snapped_coords: GeoPoint
    snapped_dist_along_km: float
    segment_num: int
    previous_stop_id: str | None = None


@dataclass(frozen=True, slots=True)
class ProjectionTable:
    """Projections of every stop of a trip pattern onto one shape.

    `projections` preserves trip order. A stop that could not be projected
    (missing coordinates, degenerate shape) maps to None.
    """

    shape_id: str
    origin_stop_id: str | None
    destination_stop_id: str | None
    projections: Mapping[str, StopProjection | None]

    def get(self, stop_id: str) -> StopProjection | None:
        return self.projections.get(stop_id)

    def signature(self) -> tuple[Any, ...]:
        return (
            self.shape_id,
            self.origin_stop_id,
            self.destination_stop_id,
            tuple(self.projections.items()),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            SHAPE_ID_KEY: self.shape_id,
            ORIGIN_STOP_ID_KEY: self.origin_stop_id,
            DESTINATION_STOP_ID_KEY: self.destination_stop_id,
        }
        for stop_id, proj in self.projections.items():
            if proj is None:
                out[stop_id] = None
                continue
            out[stop_id] = {
                "snapped_coords": {
                    "lat": proj.snapped_coords.lat,
                    "lon": proj.snapped_coords.lon,
                },
                "snapped_dist_along_km": proj.snapped_dist_along_km,
                "segmentNum": proj.segment_num,
                "previous_stop_id": proj.previous_stop_id,
            }
        return out


@dataclass(frozen=True, slots=True)
class SpatialIndex:
    shapes: dict[str, tuple[GeoPoint, ...]]
    stop_projections_table: tuple[ProjectionTable, ...]
    trip_key_to_projections_table_index: dict[str, int]

    def trip_has_spatial_data(self, trip_key: str) -> bool:
        return trip_key in self.trip_key_to_projections_table_index

    def projection_table_for_trip(self, trip_key: str) -> ProjectionTable | None:
        i = self.trip_key_to_projections_table_index.get(trip_key)
        if i is None or not (0 <= i < len(self.stop_projections_table)):
            return None
        return self.stop_projections_table[i]

    def _projection(self, trip_key: str, stop_id: str) -> StopProjection | None:
        table = self.projection_table_for_trip(trip_key)
        return table.get(stop_id) if table else None

    def origin_stop_id(self, trip_key: str) -> str | None:
        table = self.projection_table_for_trip(trip_key)
        return table.origin_stop_id if table else None

    def destination_stop_id(self, trip_key: str) -> str | None:
        table = self.projection_table_for_trip(trip_key)
        return table.destination_stop_id if table else None

    def stop_distance_along_route_km(self, trip_key: str, stop_id: str) -> float | None:
        proj = self._projection(trip_key, stop_id)
        return proj.snapped_dist_along_km if proj else None

    def stop_distance_along_route_m(self, trip_key: str, stop_id: str) -> float | None:
        km = self.stop_distance_along_route_km(trip_key, stop_id)
        return km * 1000.0 if km is not None else None

    def shape_segment_number(self, trip_key: str, stop_id: str) -> int | None:
        proj = self._projection(trip_key, stop_id)
        return proj.segment_num if proj else None

    def snapped_coords(self, trip_key: str, stop_id: str) -> GeoPoint | None:
        proj = self._projection(trip_key, stop_id)
        return proj.snapped_coords if proj else None

    def previous_stop_id(self, trip_key: str, stop_id: str) -> str | None:
        proj = self._projection(trip_key, stop_id)
        return proj.previous_stop_id if proj else None

    def slice_shape_for_trip(
        self, trip_key: str, start: int | None = None, end: int | None = None
    ) -> tuple[GeoPoint, ...] | None:
        """Slice of the trip's shape, with Python slice semantics."""

        table = self.projection_table_for_trip(trip_key)
        shape = self.shapes.get(table.shape_id) if table else None
        if shape is None:
            return None
        return shape[start:end]
