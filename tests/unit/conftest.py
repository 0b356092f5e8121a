from __future__ import annotations

import pytest

from gtfs_index.domain.models import RawFeed


@pytest.fixture
def line_feed() -> RawFeed:
    """One agency, one route, one trip with two stops on a 3-point shape.

    The shape runs along the equator from lon 0 to lon 2; the stops sit on
    it at lon 0.4 and lon 1.9.
    """

    return RawFeed(
        agency=[
            {
                "agency_id": "A1",
                "agency_name": "Guaguas",
                "agency_url": "https://example.org",
                "agency_timezone": "Atlantic/Canary",
            }
        ],
        routes=[
            {
                "route_id": "R1",
                "agency_id": "A1",
                "route_short_name": "1",
                "route_long_name": "Teatro - Puerto",
                "route_type": "3",
            }
        ],
        trips=[
            {
                "route_id": "R1",
                "service_id": "WK",
                "trip_id": "T1",
                "trip_headsign": "Puerto",
                "direction_id": "0",
                "block_id": "B1",
                "shape_id": "S1",
            }
        ],
        stops=[
            {"stop_id": "P1", "stop_name": "Teatro", "stop_lat": "0", "stop_lon": "0.4"},
            {"stop_id": "P2", "stop_name": "Puerto", "stop_lat": "0", "stop_lon": "1.9"},
        ],
        stop_times=[
            {
                "trip_id": "T1",
                "arrival_time": "08:00:00",
                "departure_time": "08:00:30",
                "stop_id": "P1",
                "stop_sequence": "1",
            },
            {
                "trip_id": "T1",
                "arrival_time": "08:30:00",
                "departure_time": "08:30:00",
                "stop_id": "P2",
                "stop_sequence": "2",
            },
        ],
        shapes=[
            {"shape_id": "S1", "shape_pt_lat": "0", "shape_pt_lon": "0", "shape_pt_sequence": "1"},
            {"shape_id": "S1", "shape_pt_lat": "0", "shape_pt_lon": "1", "shape_pt_sequence": "2"},
            {"shape_id": "S1", "shape_pt_lat": "0", "shape_pt_lon": "2", "shape_pt_sequence": "3"},
        ],
    )
