from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from gtfs_index.domain.exceptions import DataQualityWarning

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DataQualityLog:
    """Collects the data-quality warnings of one indexing run."""

    warnings: list[DataQualityWarning] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def warn(self, table: str, key: str | None, message: str) -> DataQualityWarning:
        warning = DataQualityWarning(table, key, message)
        with self._lock:
            self.warnings.append(warning)
        logger.warning("Data quality: %s", warning)
        return warning

    def snapshot(self) -> tuple[DataQualityWarning, ...]:
        with self._lock:
            return tuple(self.warnings)

    def __len__(self) -> int:
        return len(self.warnings)
