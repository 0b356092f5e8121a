from __future__ import annotations

from gtfs_index.domain.algorithms.quality import DataQualityLog
from gtfs_index.domain.algorithms.stop_time_sequencer import (
    StopTimeRow,
    group_stop_times,
    sequence_trip,
    trip_start_time,
)
from gtfs_index.domain.models.schedule import NextStop


def _row(seq: int, stop_id: str, t: str | None = None) -> StopTimeRow:
    return StopTimeRow(sequence_number=seq, stop_id=stop_id, arrival_time=t, departure_time=t)


def test_rows_are_ordered_and_chained_by_sequence_number() -> None:
    log = DataQualityLog()
    entry = sequence_trip(
        "T1",
        [_row(20, "C", "08:20:00"), _row(5, "A", "08:00:00"), _row(10, "B", "08:10:00")],
        log,
    )

    assert entry is not None
    assert list(entry.stop_info_by_sequence_number) == [5, 10, 20]
    assert entry.stop_info_by_sequence_number[5].next_stop == NextStop("B", 10, 1)
    assert entry.stop_info_by_sequence_number[10].next_stop == NextStop("C", 20, 2)
    assert entry.stop_info_by_sequence_number[20].next_stop is None
    assert entry.ordered_stop_ids() == ("A", "B", "C")
    # Out-of-order delivery is recorded, not fatal.
    assert len(log) == 1


def test_loop_trip_keeps_every_sequence_number_of_a_stop() -> None:
    log = DataQualityLog()
    entry = sequence_trip(
        "LOOP",
        [_row(1, "HUB"), _row(2, "X"), _row(3, "Y"), _row(4, "HUB")],
        log,
    )

    assert entry is not None
    assert entry.stop_id_to_sequence_numbers == {"HUB": (1, 4), "X": (2,), "Y": (3,)}
    assert entry.stop_info_by_sequence_number[3].next_stop == NextStop("HUB", 4, 3)
    assert len(log) == 0


def test_sequence_lists_are_ascending_subsets_of_the_stop_info_keys() -> None:
    log = DataQualityLog()
    entry = sequence_trip(
        "T",
        [_row(9, "A"), _row(3, "B"), _row(7, "A"), _row(1, "A")],
        log,
    )

    assert entry is not None
    keys = set(entry.stop_info_by_sequence_number)
    for seqs in entry.stop_id_to_sequence_numbers.values():
        assert list(seqs) == sorted(set(seqs))
        assert set(seqs) <= keys


def test_shared_sequence_number_keeps_every_row_in_delivery_order() -> None:
    log = DataQualityLog()
    entry = sequence_trip("T1", [_row(1, "P1"), _row(2, "MID"), _row(2, "P2")], log)

    assert entry is not None
    assert entry.ordered_stop_ids() == ("P1", "MID", "P2")
    assert [i.canonical_index for i in entry.stop_infos] == [0, 1, 2]
    assert entry.stop_id_to_sequence_numbers == {"P1": (1,), "MID": (2,), "P2": (2,)}

    # The shared number keys its first row; the chain still reaches both.
    assert entry.stop_info_by_sequence_number[2].stop_id == "MID"
    assert entry.stop_info_by_sequence_number[1].next_stop == NextStop("MID", 2, 1)
    assert entry.stop_infos[1].next_stop == NextStop("P2", 2, 2)
    assert entry.stop_infos[2].next_stop is None

    assert entry.stop_info_for("P2", 2) is entry.stop_infos[2]
    assert entry.stop_info_for("MID", 2) is entry.stop_infos[1]
    assert entry.stop_info_for("P1", 2) is None
    [warning] = log.warnings
    assert "MID" in warning.message and "P2" in warning.message


def test_trip_without_rows_is_absent() -> None:
    assert sequence_trip("T1", [], DataQualityLog()) is None


def test_group_stop_times_skips_unusable_rows() -> None:
    log = DataQualityLog()
    grouped = group_stop_times(
        [
            {"trip_id": "T1", "stop_id": "A", "stop_sequence": "1", "arrival_time": "08:00:00"},
            {"trip_id": "T1", "stop_id": "B", "stop_sequence": "2.0"},
            {"trip_id": "T1", "stop_id": "C", "stop_sequence": "two"},
            {"trip_id": "T2", "stop_id": "", "stop_sequence": "1"},
        ],
        log,
    )

    assert list(grouped) == ["T1"]
    assert [r.sequence_number for r in grouped["T1"]] == [1, 2]
    assert grouped["T1"][0].arrival_time == "08:00:00"
    assert grouped["T1"][1].arrival_time is None
    assert len(log) == 2


def test_trip_start_time_prefers_departure_at_first_stop() -> None:
    rows = [
        StopTimeRow(2, "B", "08:10:00", "08:11:00"),
        StopTimeRow(1, "A", "07:59:00", "08:00:00"),
    ]
    assert trip_start_time(rows) == "08:00:00"
    assert trip_start_time([StopTimeRow(1, "A", "07:59:00", None)]) == "07:59:00"
    assert trip_start_time([]) is None
