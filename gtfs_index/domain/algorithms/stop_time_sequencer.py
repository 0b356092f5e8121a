from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from gtfs_index.domain.algorithms.quality import DataQualityLog
from gtfs_index.domain.models.feed import Row
from gtfs_index.domain.models.schedule import (
    NextStop,
    StopTimeEntry,
    StopTimeInfo,
    clean_row,
)


@dataclass(frozen=True, slots=True)
class StopTimeRow:
    sequence_number: int
    stop_id: str
    arrival_time: str | None = None
    departure_time: str | None = None


def _parse_sequence(raw: str) -> int | None:
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        value = float(raw)
    except ValueError:
        return None
    return int(value) if value.is_integer() else None


def group_stop_times(
    rows: Iterable[Row], log: DataQualityLog
) -> dict[str, list[StopTimeRow]]:
    """Group stop_times rows by raw trip_id, in delivery order."""

    out: dict[str, list[StopTimeRow]] = {}
    for n, raw in enumerate(rows):
        row = clean_row(raw)
        trip_id = row.get("trip_id")
        stop_id = row.get("stop_id")
        if trip_id is None or stop_id is None:
            log.warn("stop_times", trip_id, f"row {n} lacks trip_id or stop_id; skipped")
            continue

        seq = _parse_sequence(row.get("stop_sequence", ""))
        if seq is None:
            log.warn(
                "stop_times",
                trip_id,
                f"row {n} has invalid stop_sequence {row.get('stop_sequence')!r}; skipped",
            )
            continue

        out.setdefault(trip_id, []).append(
            StopTimeRow(
                sequence_number=seq,
                stop_id=stop_id,
                arrival_time=row.get("arrival_time"),
                departure_time=row.get("departure_time"),
            )
        )
    return out


def trip_start_time(rows: Sequence[StopTimeRow]) -> str | None:
    """Departure (or arrival) time at the trip's first stop."""

    if not rows:
        return None
    first = min(rows, key=lambda r: r.sequence_number)
    return first.departure_time or first.arrival_time


def sequence_trip(
    trip_key: str, rows: Sequence[StopTimeRow], log: DataQualityLog
) -> StopTimeEntry | None:
    """Build the stop-time structures of one trip.

    Only the relative order of declared sequence numbers is trusted. The
    declared numbers stay the lookup keys. Rows sharing a declared number
    are all kept, in delivery order, and told apart by their canonical
    index. Returns None for a trip without rows, so unscheduled trips are
    absent from the index.
    """

    if not rows:
        return None

    # Stable: rows sharing a sequence number keep their delivery order.
    ordered = sorted(rows, key=lambda r: r.sequence_number)
    if ordered != list(rows):
        log.warn("stop_times", trip_key, "rows not delivered in stop_sequence order")

    infos: list[StopTimeInfo] = []
    stop_info: dict[int, StopTimeInfo] = {}
    seqs_by_stop: dict[str, list[int]] = {}
    for i, row in enumerate(ordered):
        next_stop = None
        if i + 1 < len(ordered):
            nxt = ordered[i + 1]
            next_stop = NextStop(
                stop_id=nxt.stop_id,
                sequence_number=nxt.sequence_number,
                canonical_index=i + 1,
            )

        info = StopTimeInfo(
            stop_id=row.stop_id,
            arrival_time=row.arrival_time,
            departure_time=row.departure_time,
            next_stop=next_stop,
            sequence_number=row.sequence_number,
            canonical_index=i,
        )
        infos.append(info)

        if row.sequence_number in stop_info:
            log.warn(
                "stop_times",
                trip_key,
                f"stop_sequence {row.sequence_number} shared by stops "
                f"{stop_info[row.sequence_number].stop_id!r} and {row.stop_id!r}; "
                "ordered by delivery",
            )
        else:
            stop_info[row.sequence_number] = info

        seqs = seqs_by_stop.setdefault(row.stop_id, [])
        if not seqs or seqs[-1] != row.sequence_number:
            seqs.append(row.sequence_number)

    return StopTimeEntry(
        stop_info_by_sequence_number=stop_info,
        stop_id_to_sequence_numbers={
            stop_id: tuple(s) for stop_id, s in seqs_by_stop.items()
        },
        stop_infos=tuple(infos),
    )
