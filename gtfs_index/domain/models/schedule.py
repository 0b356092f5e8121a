from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from .geo import GeoPoint


def clean_value(value: Any) -> str | None:
    """Normalize a raw cell: strip it, and map empty cells to None."""

    if value is None:
        return None
    text = str(value).strip()
    return text or None


def clean_row(row: Mapping[str, Any]) -> dict[str, str]:
    out: dict[str, str] = {}
    for column, value in row.items():
        if column is None:
            continue
        cleaned = clean_value(value)
        if cleaned is not None:
            out[str(column).strip()] = cleaned
    return out


def _split_known(
    cls: type, row: Mapping[str, str], consumed: frozenset[str] = frozenset()
) -> tuple[dict[str, str], dict[str, str]]:
    names = {f.name for f in fields(cls)} - {"extra"}
    known: dict[str, str] = {}
    extra: dict[str, str] = {}
    for column, value in row.items():
        if column in names:
            known[column] = value
        elif column not in consumed:
            extra[column] = value
    return known, extra


@dataclass(frozen=True, slots=True)
class AgencyRecord:
    agency_id: str | None = None
    agency_name: str | None = None
    agency_url: str | None = None
    agency_timezone: str | None = None
    agency_lang: str | None = None
    extra: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> AgencyRecord:
        known, extra = _split_known(cls, row)
        return cls(**known, extra=extra)


@dataclass(frozen=True, slots=True)
class RouteRecord:
    route_id: str
    agency_id: str | None = None
    route_short_name: str | None = None
    route_long_name: str | None = None
    route_type: str | None = None
    route_color: str | None = None  # hex without '#'
    route_text_color: str | None = None  # hex without '#'
    extra: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> RouteRecord:
        known, extra = _split_known(cls, row)
        return cls(**known, extra=extra)


@dataclass(frozen=True, slots=True)
class TripRecord:
    """A trips.txt row. `trip_id` is always the raw identifier, never the key."""

    trip_id: str
    route_id: str | None = None
    service_id: str | None = None
    direction_id: str | None = None
    shape_id: str | None = None
    block_id: str | None = None
    trip_headsign: str | None = None
    trip_short_name: str | None = None
    extra: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> TripRecord:
        known, extra = _split_known(cls, row)
        return cls(**known, extra=extra)


@dataclass(frozen=True, slots=True)
class StopRecord:
    stop_id: str
    stop_name: str | None = None
    stop_code: str | None = None
    location: GeoPoint | None = None
    parent_station: str | None = None
    extra: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> StopRecord:
        known, extra = _split_known(
            cls, row, consumed=frozenset({"stop_lat", "stop_lon"})
        )
        known.pop("location", None)
        location = None
        if "stop_lat" in row and "stop_lon" in row:
            location = GeoPoint.parse(row["stop_lat"], row["stop_lon"])
        return cls(**known, location=location, extra=extra)


@dataclass(frozen=True, slots=True)
class NextStop:
    stop_id: str
    sequence_number: int
    canonical_index: int | None = None


@dataclass(frozen=True, slots=True)
class StopTimeInfo:
    stop_id: str
    arrival_time: str | None = None
    departure_time: str | None = None
    next_stop: NextStop | None = None
    sequence_number: int | None = None
    canonical_index: int | None = None


@dataclass(frozen=True, slots=True)
class StopTimeEntry:
    """Per-trip stop-time structures.

    Both maps are keyed by the sequence numbers declared in the feed. A stop
    served more than once (loop trips) has several sequence numbers, in
    ascending order. `stop_infos` holds every row in traversal order; a
    row's position there is its canonical index, which tells apart rows
    that share a declared sequence number. Such a shared number keys the
    first of its rows in `stop_info_by_sequence_number`.
    """

    stop_info_by_sequence_number: dict[int, StopTimeInfo]
    stop_id_to_sequence_numbers: dict[str, tuple[int, ...]]
    stop_infos: tuple[StopTimeInfo, ...] = ()

    def ordered_stop_ids(self) -> tuple[str, ...]:
        return tuple(info.stop_id for info in self.stop_infos)

    def stop_info_for(self, stop_id: str, sequence_number: int) -> StopTimeInfo | None:
        info = self.stop_info_by_sequence_number.get(sequence_number)
        if info is None or info.stop_id == stop_id:
            return info
        for row in self.stop_infos:
            if row.sequence_number == sequence_number and row.stop_id == stop_id:
                return row
        return None


@dataclass(frozen=True, slots=True)
class ScheduleIndex:
    agency: dict[str, AgencyRecord]
    routes: dict[str, RouteRecord]
    trips: dict[str, TripRecord]
    stops: dict[str, StopRecord]
    stop_times: dict[str, StopTimeEntry]

    # Agencies

    def agency_ids(self) -> tuple[str, ...]:
        return tuple(self.agency)

    def agency_timezone(self, agency_id: str | None = None) -> str | None:
        if not self.agency:
            return None
        row = self.agency.get(agency_id) if agency_id is not None else None
        if row is None:
            # Single-agency feeds may leave agency_id out everywhere.
            row = next(iter(self.agency.values()))
        return row.agency_timezone

    # Routes

    def route_ids(self) -> tuple[str, ...]:
        return tuple(self.routes)

    def route_exists(self, route_id: str) -> bool:
        return route_id in self.routes

    def route_short_name(self, route_id: str) -> str | None:
        route = self.routes.get(route_id)
        return route.route_short_name if route else None

    def route_long_name(self, route_id: str) -> str | None:
        route = self.routes.get(route_id)
        return route.route_long_name if route else None

    # Stops

    def stop_ids(self) -> tuple[str, ...]:
        return tuple(self.stops)

    def stop_exists(self, stop_id: str) -> bool:
        return stop_id in self.stops

    def stop_name(self, stop_id: str) -> str | None:
        stop = self.stops.get(stop_id)
        return stop.stop_name if stop else None

    # Trips

    def trip_is_scheduled(self, trip_key: str) -> bool:
        return trip_key in self.trips

    def trip_id_for_trip(self, trip_key: str) -> str | None:
        trip = self.trips.get(trip_key)
        return trip.trip_id if trip else None

    def trip_headsign(self, trip_key: str) -> str | None:
        trip = self.trips.get(trip_key)
        return trip.trip_headsign if trip else None

    def shape_id_for_trip(self, trip_key: str) -> str | None:
        trip = self.trips.get(trip_key)
        return trip.shape_id if trip else None

    def route_id_for_trip(self, trip_key: str) -> str | None:
        trip = self.trips.get(trip_key)
        return trip.route_id if trip else None

    def direction_id_for_trip(self, trip_key: str) -> str | None:
        trip = self.trips.get(trip_key)
        return trip.direction_id if trip else None

    def block_id_for_trip(self, trip_key: str) -> str | None:
        trip = self.trips.get(trip_key)
        return trip.block_id if trip else None

    def agency_id_for_trip(self, trip_key: str) -> str | None:
        if trip_key not in self.trips:
            return None
        route_id = self.route_id_for_trip(trip_key)
        route = self.routes.get(route_id) if route_id is not None else None
        if route is not None and route.agency_id is not None:
            return route.agency_id
        if len(self.agency) == 1:
            return next(iter(self.agency.values())).agency_id
        return None

    # Stop times

    def stop_info(self, trip_key: str, stop_sequence: int) -> StopTimeInfo | None:
        entry = self.stop_times.get(trip_key)
        if entry is None:
            return None
        return entry.stop_info_by_sequence_number.get(stop_sequence)

    def sequence_numbers_for_stop(
        self, trip_key: str, stop_id: str
    ) -> tuple[int, ...] | None:
        entry = self.stop_times.get(trip_key)
        if entry is None:
            return None
        return entry.stop_id_to_sequence_numbers.get(stop_id)

    def stop_info_for_stop(
        self, trip_key: str, stop_id: str, stop_sequence: int | None = None
    ) -> StopTimeInfo | None:
        """Stop-time info of a stop on a trip.

        Without a sequence number the stop's first visit is used.
        """

        entry = self.stop_times.get(trip_key)
        if entry is None:
            return None
        if stop_sequence is None:
            seqs = entry.stop_id_to_sequence_numbers.get(stop_id)
            if not seqs:
                return None
            stop_sequence = seqs[0]
        return entry.stop_info_for(stop_id, stop_sequence)

    def scheduled_arrival_time(
        self, trip_key: str, stop_id: str, stop_sequence: int | None = None
    ) -> str | None:
        info = self.stop_info_for_stop(trip_key, stop_id, stop_sequence)
        return info.arrival_time if info else None

    def scheduled_departure_time(
        self, trip_key: str, stop_id: str, stop_sequence: int | None = None
    ) -> str | None:
        info = self.stop_info_for_stop(trip_key, stop_id, stop_sequence)
        return info.departure_time if info else None

    def next_stop_info(self, trip_key: str, stop_sequence: int) -> NextStop | None:
        info = self.stop_info(trip_key, stop_sequence)
        return info.next_stop if info else None

    def next_stop_id(self, trip_key: str, stop_sequence: int) -> str | None:
        nxt = self.next_stop_info(trip_key, stop_sequence)
        return nxt.stop_id if nxt else None
