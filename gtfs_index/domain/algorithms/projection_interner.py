from __future__ import annotations

import hashlib
import threading
from dataclasses import dataclass, field

from gtfs_index.domain.models.spatial import ProjectionTable


def signature_digest(table: ProjectionTable) -> str:
    return hashlib.sha1(repr(table.signature()).encode("utf-8")).hexdigest()


@dataclass(slots=True)
class ProjectionTableInterner:
    """Stores each distinct projection table once.

    Trips sharing a shape and a stop pattern get the same index. `intern`
    is atomic, so concurrent callers with equal tables agree on one slot.
    """

    _tables: list[ProjectionTable] = field(default_factory=list)
    _by_digest: dict[str, list[int]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def intern(self, table: ProjectionTable) -> int:
        signature = table.signature()
        digest = signature_digest(table)
        with self._lock:
            candidates = self._by_digest.setdefault(digest, [])
            for i in candidates:
                # Full comparison guards against digest collisions.
                if self._tables[i].signature() == signature:
                    return i
            self._tables.append(table)
            i = len(self._tables) - 1
            candidates.append(i)
            return i

    def tables(self) -> tuple[ProjectionTable, ...]:
        with self._lock:
            return tuple(self._tables)

    def __len__(self) -> int:
        return len(self._tables)
