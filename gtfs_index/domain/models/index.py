from __future__ import annotations

from dataclasses import dataclass

from gtfs_index.domain.algorithms.key_resolver import TripKeyResolver
from gtfs_index.domain.exceptions import DataQualityWarning

from .schedule import ScheduleIndex
from .spatial import SpatialIndex


@dataclass(frozen=True, slots=True)
class FeedIndex:
    """Schedule and spatial indices of one feed version.

    Immutable once built. A new feed version produces a new FeedIndex.
    """

    schedule: ScheduleIndex
    spatial: SpatialIndex
    key_resolver: TripKeyResolver
    warnings: tuple[DataQualityWarning, ...] = ()

    def resolve_trip_key(
        self,
        trip_id: str,
        direction_id: str | None = None,
        start_time: str | None = None,
    ) -> str:
        return self.key_resolver.derive(trip_id, direction_id, start_time)

    def invert_trip_key(self, trip_key: str) -> str:
        return self.key_resolver.invert(trip_key)

    def origin_departure_time(self, trip_key: str) -> str | None:
        """Scheduled departure time of the trip at its first stop."""

        entry = self.schedule.stop_times.get(trip_key)
        if entry is None:
            return None

        origin = self.spatial.origin_stop_id(trip_key)
        if origin is not None:
            info = self.schedule.stop_info_for_stop(trip_key, origin)
        else:
            info = entry.stop_infos[0] if entry.stop_infos else None
        return info.departure_time if info else None
