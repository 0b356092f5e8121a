from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from gtfs_index.adapters.api.dependencies import get_feed_index
from gtfs_index.adapters.api.schemas.index import (
    AgencySchema,
    GeoPointSchema,
    IndexStatusSchema,
    RouteSchema,
    StopSchema,
    TripSchema,
    TripShapeSchema,
    TripStopSchema,
)
from gtfs_index.domain.models import GeoPoint
from gtfs_index.domain.models.index import FeedIndex

router = APIRouter(tags=["index"])


def _point(p: GeoPoint | None) -> GeoPointSchema | None:
    return GeoPointSchema(lat=p.lat, lon=p.lon) if p is not None else None


@router.get("/index", response_model=IndexStatusSchema)
def index_status(index: FeedIndex = Depends(get_feed_index)) -> IndexStatusSchema:
    schedule = index.schedule
    spatial = index.spatial
    return IndexStatusSchema(
        agencies=len(schedule.agency),
        routes=len(schedule.routes),
        stops=len(schedule.stops),
        trips=len(schedule.trips),
        scheduled_trips=len(schedule.stop_times),
        projected_trips=len(spatial.trip_key_to_projections_table_index),
        projection_tables=len(spatial.stop_projections_table),
        warnings=len(index.warnings),
    )


@router.get("/agencies", response_model=list[AgencySchema])
def list_agencies(index: FeedIndex = Depends(get_feed_index)) -> list[AgencySchema]:
    return [
        AgencySchema(
            agency_id=a.agency_id,
            name=a.agency_name,
            timezone=a.agency_timezone,
        )
        for a in index.schedule.agency.values()
    ]


@router.get("/routes/{route_id}", response_model=RouteSchema)
def get_route(route_id: str, index: FeedIndex = Depends(get_feed_index)) -> RouteSchema:
    route = index.schedule.routes.get(route_id)
    if route is None:
        raise HTTPException(status_code=404, detail="Route not found")
    return RouteSchema(
        route_id=route.route_id,
        agency_id=route.agency_id,
        short_name=route.route_short_name,
        long_name=route.route_long_name,
        color=route.route_color,
        text_color=route.route_text_color,
    )


@router.get("/stops/{stop_id}", response_model=StopSchema)
def get_stop(stop_id: str, index: FeedIndex = Depends(get_feed_index)) -> StopSchema:
    stop = index.schedule.stops.get(stop_id)
    if stop is None:
        raise HTTPException(status_code=404, detail="Stop not found")
    return StopSchema(stop_id=stop.stop_id, name=stop.stop_name, location=_point(stop.location))


@router.get("/trips/{trip_key}", response_model=TripSchema)
def get_trip(trip_key: str, index: FeedIndex = Depends(get_feed_index)) -> TripSchema:
    schedule = index.schedule
    spatial = index.spatial
    trip = schedule.trips.get(trip_key)
    if trip is None:
        raise HTTPException(status_code=404, detail="Trip not found")
    return TripSchema(
        trip_key=trip_key,
        trip_id=trip.trip_id,
        route_id=trip.route_id,
        agency_id=schedule.agency_id_for_trip(trip_key),
        direction_id=trip.direction_id,
        shape_id=trip.shape_id,
        block_id=trip.block_id,
        headsign=trip.trip_headsign,
        is_scheduled=trip_key in schedule.stop_times,
        has_spatial_data=spatial.trip_has_spatial_data(trip_key),
        origin_stop_id=spatial.origin_stop_id(trip_key),
        destination_stop_id=spatial.destination_stop_id(trip_key),
        origin_departure_time=index.origin_departure_time(trip_key),
    )


@router.get("/trips/{trip_key}/stops", response_model=list[TripStopSchema])
def list_trip_stops(
    trip_key: str, index: FeedIndex = Depends(get_feed_index)
) -> list[TripStopSchema]:
    if not index.schedule.trip_is_scheduled(trip_key):
        raise HTTPException(status_code=404, detail="Trip not found")

    entry = index.schedule.stop_times.get(trip_key)
    if entry is None:
        # Trip exists but has no stop times.
        return []

    table = index.spatial.projection_table_for_trip(trip_key)
    out: list[TripStopSchema] = []
    for info in entry.stop_infos:
        proj = table.get(info.stop_id) if table else None
        out.append(
            TripStopSchema(
                stop_sequence=info.sequence_number,
                canonical_index=info.canonical_index,
                stop_id=info.stop_id,
                arrival_time=info.arrival_time,
                departure_time=info.departure_time,
                next_stop_id=info.next_stop.stop_id if info.next_stop else None,
                previous_stop_id=proj.previous_stop_id if proj else None,
                dist_along_km=proj.snapped_dist_along_km if proj else None,
                segment_num=proj.segment_num if proj else None,
                snapped=_point(proj.snapped_coords) if proj else None,
            )
        )
    return out


@router.get("/trips/{trip_key}/shape", response_model=TripShapeSchema)
def get_trip_shape(
    trip_key: str,
    start: int | None = Query(default=None),
    end: int | None = Query(default=None),
    index: FeedIndex = Depends(get_feed_index),
) -> TripShapeSchema:
    table = index.spatial.projection_table_for_trip(trip_key)
    points = index.spatial.slice_shape_for_trip(trip_key, start, end)
    if table is None or points is None:
        raise HTTPException(status_code=404, detail="No shape for trip")
    return TripShapeSchema(
        trip_key=trip_key,
        shape_id=table.shape_id,
        points=[GeoPointSchema(lat=p.lat, lon=p.lon) for p in points],
    )
