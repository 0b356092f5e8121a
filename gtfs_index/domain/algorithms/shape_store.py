from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from gtfs_index.domain.algorithms.quality import DataQualityLog
from gtfs_index.domain.exceptions import UnknownShapeError
from gtfs_index.domain.models import GeoPoint
from gtfs_index.domain.models.feed import Row
from gtfs_index.domain.models.schedule import clean_row


@dataclass(frozen=True, slots=True)
class ShapeGeometryStore:
    """Route polylines by shape_id, vertices in traversal order."""

    shapes_by_id: dict[str, tuple[GeoPoint, ...]]

    @classmethod
    def from_rows(
        cls, rows: Iterable[Row], log: DataQualityLog | None = None
    ) -> ShapeGeometryStore:
        tmp: dict[str, list[tuple[float, GeoPoint]]] = {}
        for n, raw in enumerate(rows):
            row = clean_row(raw)
            shape_id = row.get("shape_id")
            if shape_id is None:
                if log is not None:
                    log.warn("shapes", None, f"row {n} has no shape_id; skipped")
                continue
            try:
                seq = float(row["shape_pt_sequence"])
                point = GeoPoint(
                    lat=float(row["shape_pt_lat"]), lon=float(row["shape_pt_lon"])
                )
            except (KeyError, ValueError):
                if log is not None:
                    log.warn("shapes", shape_id, f"row {n} is malformed; skipped")
                continue
            tmp.setdefault(shape_id, []).append((seq, point))

        shapes_by_id: dict[str, tuple[GeoPoint, ...]] = {}
        for shape_id, pts in tmp.items():
            pts.sort(key=lambda x: x[0])
            shapes_by_id[shape_id] = tuple(p for _, p in pts)
        return cls(shapes_by_id=shapes_by_id)

    def __contains__(self, shape_id: object) -> bool:
        return shape_id in self.shapes_by_id

    def __len__(self) -> int:
        return len(self.shapes_by_id)

    def get(self, shape_id: str) -> tuple[GeoPoint, ...]:
        try:
            return self.shapes_by_id[shape_id]
        except KeyError:
            raise UnknownShapeError(shape_id) from None

    def slice(
        self, shape_id: str, start: int | None = None, end: int | None = None
    ) -> tuple[GeoPoint, ...]:
        """Half-open range of vertices, with Python slice semantics.

        Negative bounds count from the end; out-of-range bounds are clamped.
        """

        return self.get(shape_id)[start:end]
