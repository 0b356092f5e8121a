from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum

from gtfs_index.domain.algorithms.key_resolver import (
    IdentityKeyResolver,
    TripKeyResolver,
)
from gtfs_index.domain.algorithms.projection_interner import ProjectionTableInterner
from gtfs_index.domain.algorithms.quality import DataQualityLog
from gtfs_index.domain.algorithms.schedule_tables import (
    build_agency_table,
    build_routes_table,
    build_stops_table,
    build_trips_table,
)
from gtfs_index.domain.algorithms.shape_store import ShapeGeometryStore
from gtfs_index.domain.algorithms.stop_projector import project_stops
from gtfs_index.domain.algorithms.stop_time_sequencer import (
    group_stop_times,
    sequence_trip,
    trip_start_time,
)
from gtfs_index.domain.exceptions import (
    MissingRequiredTableError,
    UnknownShapeError,
    UnknownStopError,
)
from gtfs_index.domain.models import (
    GeoPoint,
    RawFeed,
    ScheduleIndex,
    SpatialIndex,
    StopTimeEntry,
)
from gtfs_index.domain.models.index import FeedIndex

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("trips", "stops", "stop_times")


class IndexerState(str, Enum):
    IDLE = "idle"
    BUILDING_SCHEDULE = "building_schedule"
    BUILDING_SPATIAL = "building_spatial"
    READY = "ready"
    FAILED = "failed"


@dataclass(slots=True)
class FeedIndexer:
    """Builds the schedule and spatial indices of one feed, once.

    IDLE -> BUILDING_SCHEDULE -> BUILDING_SPATIAL -> READY, or FAILED when a
    required table is missing or a builder raises. Per-record problems are
    recorded as data-quality warnings and never fail the run.
    """

    key_resolver: TripKeyResolver = field(default_factory=IdentityKeyResolver)
    max_workers: int = 4

    state: IndexerState = IndexerState.IDLE
    failure: BaseException | None = None
    log: DataQualityLog = field(default_factory=DataQualityLog)

    def run(self, feed: RawFeed) -> FeedIndex:
        if self.state is not IndexerState.IDLE:
            raise RuntimeError(f"FeedIndexer already ran (state={self.state.value})")

        try:
            for table in REQUIRED_TABLES:
                if getattr(feed, table) is None:
                    raise MissingRequiredTableError(table)

            self.state = IndexerState.BUILDING_SCHEDULE
            schedule = self._build_schedule(feed)

            self.state = IndexerState.BUILDING_SPATIAL
            spatial = self._build_spatial(feed, schedule)
        except Exception as exc:
            self.state = IndexerState.FAILED
            self.failure = exc
            logger.error("Feed indexing failed: %s", exc)
            raise

        self.state = IndexerState.READY
        logger.info(
            "Feed indexed: %d trips, %d scheduled, %d projection tables, %d warnings",
            len(schedule.trips),
            len(schedule.stop_times),
            len(spatial.stop_projections_table),
            len(self.log),
        )
        return FeedIndex(
            schedule=schedule,
            spatial=spatial,
            key_resolver=self.key_resolver,
            warnings=self.log.snapshot(),
        )

    def _build_schedule(self, feed: RawFeed) -> ScheduleIndex:
        log = self.log

        agency = build_agency_table(feed.agency or (), log)
        routes = build_routes_table(feed.routes or (), log)
        stops = build_stops_table(feed.stops or (), log)

        rows_by_trip_id = group_stop_times(feed.stop_times or (), log)
        start_times: dict[str, str] = {}
        for trip_id, rows in rows_by_trip_id.items():
            start = trip_start_time(rows)
            if start is not None:
                start_times[trip_id] = start

        trips = build_trips_table(
            feed.trips or (),
            resolver=self.key_resolver,
            start_times=start_times,
            log=log,
        )

        stop_times: dict[str, StopTimeEntry] = {}
        for trip_key, trip in trips.items():
            entry = sequence_trip(trip_key, rows_by_trip_id.get(trip.trip_id, ()), log)
            if entry is not None:
                stop_times[trip_key] = entry

        logger.info(
            "Schedule index built: %d agencies, %d routes, %d stops, %d trips",
            len(agency),
            len(routes),
            len(stops),
            len(trips),
        )
        return ScheduleIndex(
            agency=agency,
            routes=routes,
            trips=trips,
            stops=stops,
            stop_times=stop_times,
        )

    def _build_spatial(self, feed: RawFeed, schedule: ScheduleIndex) -> SpatialIndex:
        store = ShapeGeometryStore.from_rows(feed.shapes or (), self.log)
        interner = ProjectionTableInterner()

        trip_keys = list(schedule.stop_times)
        with ThreadPoolExecutor(max_workers=max(1, self.max_workers)) as pool:
            results = pool.map(
                lambda key: self._project_trip(key, schedule, store, interner),
                trip_keys,
            )
            table_index_by_trip = {
                key: i for key, i in zip(trip_keys, results) if i is not None
            }

        logger.info(
            "Spatial index built: %d shapes, %d of %d trips projected onto %d tables",
            len(store),
            len(table_index_by_trip),
            len(trip_keys),
            len(interner),
        )
        return SpatialIndex(
            shapes=store.shapes_by_id,
            stop_projections_table=interner.tables(),
            trip_key_to_projections_table_index=table_index_by_trip,
        )

    def _project_trip(
        self,
        trip_key: str,
        schedule: ScheduleIndex,
        store: ShapeGeometryStore,
        interner: ProjectionTableInterner,
    ) -> int | None:
        shape_id = schedule.shape_id_for_trip(trip_key)
        if shape_id is None:
            return None

        try:
            shape = store.get(shape_id)
            stops = self._ordered_stop_locations(schedule.stop_times[trip_key], schedule)
        except (UnknownShapeError, UnknownStopError) as exc:
            self.log.warn("trips", trip_key, f"{exc}; no spatial data for this trip")
            return None

        table = project_stops(shape_id, shape, stops)
        return interner.intern(table)

    @staticmethod
    def _ordered_stop_locations(
        entry: StopTimeEntry, schedule: ScheduleIndex
    ) -> list[tuple[str, GeoPoint | None]]:
        out: list[tuple[str, GeoPoint | None]] = []
        for stop_id in entry.ordered_stop_ids():
            stop = schedule.stops.get(stop_id)
            if stop is None:
                raise UnknownStopError(stop_id)
            out.append((stop_id, stop.location))
        return out
