from __future__ import annotations

import csv
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from gtfs_index.app.ports.output import IFeedSource
from gtfs_index.domain.models import RawFeed, Row

logger = logging.getLogger(__name__)

TABLES = ("agency", "routes", "trips", "stops", "stop_times", "shapes")


@dataclass(slots=True)
class LocalGtfsFeedSource(IFeedSource):
    """Loads a GTFS feed from a directory of .txt files.

    Env vars:
      - GTFS_PATH: directory containing agency.txt, routes.txt, trips.txt,
        stops.txt, stop_times.txt and shapes.txt

    A missing file yields an absent table; the indexer decides which tables
    it cannot do without.
    """

    base_path: str | Path | None = None

    def _base(self) -> Path:
        value = self.base_path or os.getenv("GTFS_PATH") or "data/gtfs"
        return Path(value)

    def _read_table(self, base: Path, table: str) -> tuple[Row, ...] | None:
        path = base / f"{table}.txt"
        if not path.exists():
            logger.info("GTFS table %s not found in %s", table, base)
            return None

        # utf-8-sig: many feeds are exported with a BOM.
        with path.open("r", encoding="utf-8-sig", newline="") as fp:
            reader = csv.DictReader(fp)
            return tuple(dict(row) for row in reader)

    def load_feed(self) -> RawFeed:
        base = self._base()
        if not base.is_dir():
            raise FileNotFoundError(f"GTFS directory not found: {base}")

        tables = {table: self._read_table(base, table) for table in TABLES}
        logger.info(
            "Loaded GTFS feed from %s (%s)",
            base,
            ", ".join(f"{t}={len(rows)}" for t, rows in tables.items() if rows is not None),
        )
        return RawFeed(**tables)
