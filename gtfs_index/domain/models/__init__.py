from .feed import RawFeed, Row, Rows
from .geo import GeoPoint
from .schedule import (
    AgencyRecord,
    NextStop,
    RouteRecord,
    ScheduleIndex,
    StopRecord,
    StopTimeEntry,
    StopTimeInfo,
    TripRecord,
)
from .spatial import ProjectionTable, SpatialIndex, StopProjection

__all__ = [
    "AgencyRecord",
    "GeoPoint",
    "NextStop",
    "ProjectionTable",
    "RawFeed",
    "RouteRecord",
    "Row",
    "Rows",
    "ScheduleIndex",
    "SpatialIndex",
    "StopProjection",
    "StopRecord",
    "StopTimeEntry",
    "StopTimeInfo",
    "TripRecord",
]
