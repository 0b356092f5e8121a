from __future__ import annotations

from pydantic import BaseModel, Field


class GeoPointSchema(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)


class AgencySchema(BaseModel):
    agency_id: str | None = None
    name: str | None = None
    timezone: str | None = None


class RouteSchema(BaseModel):
    route_id: str
    agency_id: str | None = None
    short_name: str | None = None
    long_name: str | None = None
    color: str | None = None
    text_color: str | None = None


class StopSchema(BaseModel):
    stop_id: str
    name: str | None = None
    location: GeoPointSchema | None = None


class TripSchema(BaseModel):
    trip_key: str
    trip_id: str
    route_id: str | None = None
    agency_id: str | None = None
    direction_id: str | None = None
    shape_id: str | None = None
    block_id: str | None = None
    headsign: str | None = None
    is_scheduled: bool = False
    has_spatial_data: bool = False
    origin_stop_id: str | None = None
    destination_stop_id: str | None = None
    origin_departure_time: str | None = None


class TripStopSchema(BaseModel):
    stop_sequence: int
    canonical_index: int
    stop_id: str
    arrival_time: str | None = None
    departure_time: str | None = None
    next_stop_id: str | None = None
    previous_stop_id: str | None = None
    dist_along_km: float | None = None
    segment_num: int | None = None
    snapped: GeoPointSchema | None = None


class TripShapeSchema(BaseModel):
    trip_key: str
    shape_id: str
    points: list[GeoPointSchema]


class IndexStatusSchema(BaseModel):
    agencies: int
    routes: int
    stops: int
    trips: int
    scheduled_trips: int
    projected_trips: int
    projection_tables: int
    warnings: int
