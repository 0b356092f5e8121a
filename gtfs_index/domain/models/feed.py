from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

Row = Mapping[str, Any]
Rows = Sequence[Row]


@dataclass(frozen=True, slots=True)
class RawFeed:
    """Row sequences of a GTFS feed, as delivered by a feed source.

    A table that the source could not find is None. An empty sequence means
    the table exists but has no rows.
    """

    agency: Rows | None = None
    routes: Rows | None = None
    trips: Rows | None = None
    stops: Rows | None = None
    stop_times: Rows | None = None
    shapes: Rows | None = None
