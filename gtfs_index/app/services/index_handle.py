from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable

from gtfs_index.app.services.feed_indexer import FeedIndexer
from gtfs_index.domain.models import RawFeed
from gtfs_index.domain.models.index import FeedIndex

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FeedIndexHandle:
    """Owns the published FeedIndex.

    Readers take `current` without locking. Re-indexing builds on a fresh
    FeedIndexer and swaps the reference only when the run succeeds, so a
    failed run leaves the previous index in place.
    """

    indexer_factory: Callable[[], FeedIndexer] = FeedIndexer
    _current: FeedIndex | None = None
    _version: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def current(self) -> FeedIndex | None:
        return self._current

    @property
    def version(self) -> int:
        return self._version

    def publish(self, index: FeedIndex) -> int:
        with self._lock:
            self._current = index
            self._version += 1
            logger.info("Published feed index version %d", self._version)
            return self._version

    def build(self, feed: RawFeed) -> FeedIndex:
        """Index `feed` on a fresh FeedIndexer without publishing it."""

        indexer = self.indexer_factory()
        try:
            return indexer.run(feed)
        except Exception:
            logger.warning(
                "Re-indexing failed; keeping feed index version %d", self._version
            )
            raise

    def reindex(self, feed: RawFeed) -> FeedIndex:
        index = self.build(feed)
        self.publish(index)
        return index
