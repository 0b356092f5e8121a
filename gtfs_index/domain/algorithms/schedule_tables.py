from __future__ import annotations

from typing import Callable, Iterable, Mapping, TypeVar

from gtfs_index.domain.algorithms.key_resolver import TripKeyResolver
from gtfs_index.domain.algorithms.quality import DataQualityLog
from gtfs_index.domain.exceptions import KeyResolutionError
from gtfs_index.domain.models.feed import Row
from gtfs_index.domain.models.schedule import (
    AgencyRecord,
    RouteRecord,
    StopRecord,
    TripRecord,
    clean_row,
)

R = TypeVar("R")


def build_table(
    rows: Iterable[Row],
    *,
    table: str,
    primary_key: str,
    factory: Callable[[Mapping[str, str]], R],
    log: DataQualityLog,
    default_key: str | None = None,
) -> dict[str, R]:
    """Index the rows of one table by their primary key.

    Duplicate keys are last-write-wins and logged. Rows without a key are
    skipped unless `default_key` is given.
    """

    out: dict[str, R] = {}
    for n, raw in enumerate(rows):
        row = clean_row(raw)
        key = row.get(primary_key, default_key)
        if key is None:
            log.warn(table, None, f"row {n} has no {primary_key}; skipped")
            continue
        if key in out:
            log.warn(table, key, f"duplicate {primary_key}; keeping the last row")
        out[key] = factory(row)
    return out


def build_agency_table(rows: Iterable[Row], log: DataQualityLog) -> dict[str, AgencyRecord]:
    # A single-agency feed may omit agency_id.
    return build_table(
        rows,
        table="agency",
        primary_key="agency_id",
        factory=AgencyRecord.from_row,
        log=log,
        default_key="",
    )


def build_routes_table(rows: Iterable[Row], log: DataQualityLog) -> dict[str, RouteRecord]:
    return build_table(
        rows,
        table="routes",
        primary_key="route_id",
        factory=RouteRecord.from_row,
        log=log,
    )


def build_stops_table(rows: Iterable[Row], log: DataQualityLog) -> dict[str, StopRecord]:
    stops = build_table(
        rows,
        table="stops",
        primary_key="stop_id",
        factory=StopRecord.from_row,
        log=log,
    )
    for stop_id, stop in stops.items():
        if stop.location is None:
            log.warn("stops", stop_id, "missing or invalid stop_lat/stop_lon")
    return stops


def build_trips_table(
    rows: Iterable[Row],
    *,
    resolver: TripKeyResolver,
    start_times: Mapping[str, str],
    log: DataQualityLog,
) -> dict[str, TripRecord]:
    """Index trips by the key the resolver derives for each row."""

    out: dict[str, TripRecord] = {}
    for n, raw in enumerate(rows):
        row = clean_row(raw)
        trip_id = row.get("trip_id")
        if trip_id is None:
            log.warn("trips", None, f"row {n} has no trip_id; skipped")
            continue

        trip = TripRecord.from_row(row)
        try:
            key = resolver.resolve(
                trip_id, trip.direction_id, start_times.get(trip_id)
            )
        except KeyResolutionError as exc:
            log.warn("trips", trip_id, f"{exc}; skipped")
            continue

        if key in out:
            log.warn("trips", key, "duplicate trip key; keeping the last row")
        out[key] = trip
    return out
